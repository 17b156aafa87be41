# stdlib
import logging
from typing import Any, Dict, List

# external libraries
from mypy_boto3_rekognition.type_defs import LabelTypeDef

# custom modules
from ids_custom.boto3_helper import (
    detect_s3_image_labels,
    get_ssm_parameter_value,
    get_secret_string,
)
from ids_custom.errors import (
    ImageDetectionError,
    NoLabelsFoundError,
    NoPersonFoundError,
    REPORTABLE_ERROR_KINDS,
)
from ids_custom.utils import (
    BatchItemFailuresResponse,
    ImageRecordTarget,
    extract_named_value,
    generate_batch_item_failures_response,
    parse_image_record,
    report_image_issue,
)
from detect_image_labels.detect_image_labels_config import config

logger = logging.getLogger(__name__)
logger.setLevel(config.LOG_LEVEL)

PERSON_LABEL_NAMES = ("Person",)


def get_labels(
    bucket_name: str, file_id: str, user_id: str, transformed_file_key: str
) -> List[LabelTypeDef]:
    logger.debug(
        f"detecting labels for {bucket_name}/{transformed_file_key} "
        f"- fileId: {file_id}, userId: {user_id}"
    )

    labels = detect_s3_image_labels(bucket_name, transformed_file_key)

    if not labels:
        raise NoLabelsFoundError()

    if not any(label.get("Name") in PERSON_LABEL_NAMES for label in labels):
        raise NoPersonFoundError()

    logger.info(f"Person found in the image - fileId: {file_id}, userId: {user_id}")

    return labels


def get_parameter(parameter_name: str) -> str:
    parameter = extract_named_value(
        get_ssm_parameter_value(parameter_name), parameter_name
    )
    if not parameter:
        raise ValueError(f"Unable to get parameter {parameter_name}")

    return parameter


def get_secret(secret_name: str) -> str:
    secret = extract_named_value(get_secret_string(secret_name), secret_name)
    if not secret:
        raise ValueError(f"Unable to get secret {secret_name}")

    return secret


def process_image_record(target: ImageRecordTarget) -> None:
    file_id, user_id, transformed_file_key = (
        target["FileId"],
        target["UserId"],
        target["TransformedFileKey"],
    )

    try:
        get_labels(config.BUCKET_NAME_FILES, file_id, user_id, transformed_file_key)
    except ImageDetectionError as e:
        if e.kind not in REPORTABLE_ERROR_KINDS:
            raise

        # report the image to the API for further investigation
        logger.warning(
            f"No person found in the image - fileId: {file_id}, userId: {user_id}, "
            f"kind: {e.kind.value}"
        )

        api_url = get_parameter(config.API_URL_PARAMETER_NAME)
        api_key = get_secret(config.API_KEY_SECRET_NAME)

        report_image_issue(
            file_id, user_id, credentials={"ApiUrl": api_url, "ApiKey": api_key}
        )


def process_stream_records(
    records: List[Dict[str, Any]],
) -> BatchItemFailuresResponse:
    for record in records:
        sequence_number = record.get("dynamodb", {}).get("SequenceNumber", "")

        try:
            target = parse_image_record(record)

            logger.info(
                f"Processing record {sequence_number} - fileId: {target['FileId']}, "
                f"userId: {target['UserId']}"
            )

            process_image_record(target)
        except Exception as e:
            # stop here, the stream retries from the failed record onwards
            logger.exception(f"Error processing record {sequence_number}: {e}")
            return generate_batch_item_failures_response([sequence_number])

    logger.info(f"successfully processed {len(records)} records")

    return generate_batch_item_failures_response()
