import logging
import os
import boto3
import boto3.exceptions
import threading
from functools import lru_cache
from botocore.exceptions import ClientError
from typing import Any, List, Optional
from mypy_boto3_rekognition.client import RekognitionClient
from mypy_boto3_rekognition.type_defs import LabelTypeDef
from mypy_boto3_ssm.client import SSMClient
from mypy_boto3_secretsmanager.client import SecretsManagerClient

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

aws_default_region = os.getenv("AWS_DEFAULT_REGION", "us-east-2")


class AWSClients:
    """Lazy instantiation of AWS clients"""

    _instance = None
    _lock = threading.Lock()  # threadlock at initial instantitation

    def __new__(cls):
        if not cls._instance:
            with cls._lock:  # if locked, perform further check
                if not cls._instance:  # double check if instance exists
                    cls._instance = super(AWSClients, cls).__new__(cls)
        return cls._instance

    @lru_cache(maxsize=None)
    def get_client(
        self,
        service: str,
        region: Optional[str] = None,
    ) -> Any:
        region = region or aws_default_region

        client = boto3.client(service, region_name=region)

        logger.info(
            f"Initializing {service.upper()} client for {region}... {id(client)}"
        )

        return client

    def reset_all_clients(self):
        logger.debug("Resetting all AWS clients...")
        self.get_client.cache_clear()


# Rekognition Operations
def detect_s3_image_labels(
    bucket_name: str,
    object_key: str,
    max_labels: int = 10,
    min_confidence: float = 75,
    aws_region: Optional[str] = aws_default_region,
) -> List[LabelTypeDef]:
    try:
        rekognition: RekognitionClient = aws_client.get_client(
            "rekognition", region=aws_region
        )

        res = rekognition.detect_labels(
            Image={"S3Object": {"Bucket": bucket_name, "Name": object_key}},
            MaxLabels=max_labels,
            MinConfidence=min_confidence,
        )

        return res.get("Labels", [])
    except ClientError as e:
        logger.exception(f"Unexpected Boto3 client error: {e}")
        raise
    except boto3.exceptions.Boto3Error as e:
        logger.exception(f"Boto3 library error: {e}")
        raise


# SSM Operations
def get_ssm_parameter_value(
    parameter_name: str,
    with_decryption: bool = True,
    aws_region: Optional[str] = aws_default_region,
) -> Optional[str]:
    try:
        ssm: SSMClient = aws_client.get_client("ssm", region=aws_region)

        res = ssm.get_parameter(Name=parameter_name, WithDecryption=with_decryption)

        return res.get("Parameter", {}).get("Value")
    except ssm.exceptions.ParameterNotFound:
        logger.exception(f"No parameter with name {parameter_name}")
        raise
    except ClientError as e:
        logger.exception(f"Unexpected Boto3 client error: {e}")
        raise
    except boto3.exceptions.Boto3Error as e:
        logger.exception(f"Boto3 library error: {e}")
        raise


# Secrets Manager Operations
def get_secret_string(
    secret_id: str, aws_region: Optional[str] = aws_default_region
) -> Optional[str]:
    try:
        secretsmanager: SecretsManagerClient = aws_client.get_client(
            "secretsmanager", region=aws_region
        )

        res = secretsmanager.get_secret_value(SecretId=secret_id)

        return res.get("SecretString")
    except secretsmanager.exceptions.ResourceNotFoundException:
        logger.exception(f"No secret with id {secret_id}")
        raise
    except ClientError as e:
        logger.exception(f"Unexpected Boto3 client error: {e}")
        raise
    except boto3.exceptions.Boto3Error as e:
        logger.exception(f"Boto3 library error: {e}")
        raise


aws_client = AWSClients()
