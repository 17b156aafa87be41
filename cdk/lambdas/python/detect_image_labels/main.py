# stdlib
import json
import logging
from typing import Optional

# external libraries
from aws_lambda_powertools.utilities.data_classes import DynamoDBStreamEvent
from aws_lambda_powertools.utilities.typing import LambdaContext

# custom modules
from detect_image_labels.detect_image_labels_config import config
from detect_image_labels.detect_image_labels_processor import process_stream_records
from ids_custom.utils import (
    BatchItemFailuresResponse,
    generate_batch_item_failures_response,
)

logger = logging.getLogger(__name__)
logger.setLevel(config.LOG_LEVEL)


def lambda_handler(
    event: DynamoDBStreamEvent, context: Optional[LambdaContext] = None
) -> BatchItemFailuresResponse:
    try:
        if not event or not event.get("Records"):
            raise ValueError("Invalid event: Missing 'Records' key")

        logger.info("event: %s", json.dumps(event, indent=2, default=str))

        return process_stream_records(event["Records"])

    except ValueError as e:
        logger.exception(f"Value Error: {e}")
        return generate_batch_item_failures_response()
