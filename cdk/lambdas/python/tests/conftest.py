# stdlib
import pytest
import os
import logging
import json
from typing import Generator, List, Dict, Any

# test environment, must be set before the lambda modules read their config
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("BUCKET_NAME_FILES", "image-detection-service-files")
os.environ.setdefault("API_URL_PARAMETER_NAME", "/image-detection-service/api-url")
os.environ.setdefault("API_KEY_SECRET_NAME", "image-detection-service/api-key")

# external libararies
from moto import mock_aws
from mypy_boto3_rekognition.client import RekognitionClient
from mypy_boto3_ssm.client import SSMClient
from mypy_boto3_secretsmanager.client import SecretsManagerClient
from dotenv import load_dotenv

# local modules
from tests.types import ImageRecordPayload
from ids_custom.boto3_helper import aws_client

load_dotenv()

logger = logging.getLogger(__name__)

aws_region = os.getenv("AWS_DEFAULT_REGION", "us-east-2")

TEST_API_URL = "https://api.example.com/images/issues"
TEST_API_KEY = "test-api-key"


@pytest.fixture(scope="session", autouse=True)
def logger_setup():
    # Restrict external library logs to WARNING due to noise
    hide_logs = ["boto3_helper", "boto3", "urllib3", "botocore", "s3transfer"]
    for module in hide_logs:
        logging.getLogger(module).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))


@pytest.fixture(scope="module", autouse=True)
def mocked_aws():
    with mock_aws():
        logger.warning("Starting mock_aws session...")
        # clients cached by earlier modules belong to a previous mock session
        aws_client.reset_all_clients()
        yield
        aws_client.reset_all_clients()


@pytest.fixture(scope="module", autouse=True)
def mocked_ssm(mocked_aws) -> Generator[SSMClient, None, None]:
    parameter_name = os.getenv("API_URL_PARAMETER_NAME", "")
    try:
        ssm: SSMClient = aws_client.get_client("ssm", region=aws_region)
        ssm.put_parameter(
            Name=parameter_name,
            Value=json.dumps({parameter_name: TEST_API_URL}),
            Type="String",
        )
    except Exception as e:
        pytest.fail(f"Failed setting up mock ssm: {e}")
    yield ssm


@pytest.fixture(scope="module", autouse=True)
def mocked_secretsmanager(
    mocked_aws,
) -> Generator[SecretsManagerClient, None, None]:
    secret_name = os.getenv("API_KEY_SECRET_NAME", "")
    try:
        secretsmanager: SecretsManagerClient = aws_client.get_client(
            "secretsmanager", region=aws_region
        )
        secretsmanager.create_secret(
            Name=secret_name,
            SecretString=json.dumps({secret_name: TEST_API_KEY}),
        )
    except Exception as e:
        pytest.fail(f"Failed setting up mock secrets manager: {e}")
    yield secretsmanager


@pytest.fixture(scope="module")
def mocked_rekognition(mocked_aws) -> Generator[RekognitionClient, None, None]:
    # detect_labels is patched per test, the client is the one the helper uses
    rekognition: RekognitionClient = aws_client.get_client(
        "rekognition", region=aws_region
    )
    yield rekognition


@pytest.fixture(scope="module")
def generate_mock_ddb_stream_event():
    def generate_records(records: List[ImageRecordPayload]) -> Dict[str, Any]:
        res = []

        for i, record in enumerate(records):
            new_image: Dict[str, Any] = {
                "id": {"S": record["file_id"]},
                "userId": {"S": record["user_id"]},
                "transformedFileKey": {"S": record["transformed_file_key"]},
                "status": {"S": "completed"},
            }

            res.append(
                {
                    "eventID": f"c4ca4238a0b923820dcc509a6f75849{i}",
                    "eventName": "MODIFY",
                    "eventVersion": "1.1",
                    "eventSource": "aws:dynamodb",
                    "awsRegion": aws_region,
                    "dynamodb": {
                        "ApproximateCreationDateTime": 1700000000,
                        "Keys": {"id": {"S": record["file_id"]}},
                        "NewImage": new_image,
                        "SequenceNumber": record["sequence_number"],
                        "SizeBytes": 256,
                        "StreamViewType": "NEW_IMAGE",
                    },
                    "eventSourceARN": (
                        f"arn:aws:dynamodb:{aws_region}:123456789012:"
                        "table/image-detection-service-files/stream/2024-01-01T00:00:00.000"
                    ),
                }
            )

        return {"Records": res}

    return generate_records


@pytest.fixture(scope="module")
def generate_rekognition_labels_response():
    def generate_response(label_names: List[str]) -> Dict[str, Any]:
        return {
            "Labels": [
                {"Name": name, "Confidence": 98.5, "Instances": [], "Parents": []}
                for name in label_names
            ],
            "LabelModelVersion": "3.0",
        }

    return generate_response
