import json
import logging
import os
from typing import (
    Dict,
    List,
    Any,
    Optional,
    TypedDict,
)
import requests
from boto3.dynamodb.types import TypeDeserializer


logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

deserializer = TypeDeserializer()


class ImageRecordTarget(TypedDict):
    SequenceNumber: str
    FileId: str
    UserId: str
    TransformedFileKey: str


class ReportCredentials(TypedDict):
    ApiUrl: str
    ApiKey: str


class BatchItemFailure(TypedDict):
    itemIdentifier: str


class BatchItemFailuresResponse(TypedDict):
    batchItemFailures: List[BatchItemFailure]


def unmarshall_ddb_image(image: Dict[str, Any]) -> Dict[str, Any]:
    # DynamoDB JSON ({"S": "..."}) to plain python values
    return {key: deserializer.deserialize(value) for key, value in image.items()}


def parse_image_record(record: Dict[str, Any]) -> ImageRecordTarget:
    """
    Builds an ImageRecordTarget out of a single DynamoDB stream record.

    The stream is filtered at the source so every record carries a NewImage;
    a record missing any of the required attributes raises ValueError.
    """
    stream_record: Dict[str, Any] = record.get("dynamodb", {})
    sequence_number: str = stream_record.get("SequenceNumber", "")
    data = unmarshall_ddb_image(stream_record.get("NewImage") or {})

    required_fields = {
        "FileId": "id",
        "UserId": "userId",
        "TransformedFileKey": "transformedFileKey",
    }

    missing = [
        attribute
        for attribute in required_fields.values()
        if not isinstance(data.get(attribute), str) or not data.get(attribute)
    ]
    if missing:
        raise ValueError(
            f"Invalid record {sequence_number}: missing required fields {missing}"
        )

    return {
        "SequenceNumber": sequence_number,
        "FileId": data["id"],
        "UserId": data["userId"],
        "TransformedFileKey": data["transformedFileKey"],
    }


def extract_named_value(raw_value: Optional[str], name: str) -> Optional[str]:
    # values are stored either as a plain string or as {"<name>": "<value>"}
    if not raw_value:
        return None

    try:
        parsed = json.loads(raw_value)
    except json.JSONDecodeError:
        return raw_value

    if isinstance(parsed, dict):
        value = parsed.get(name)
        return str(value) if value else None

    return raw_value


def report_image_issue(
    file_id: str, user_id: str, credentials: ReportCredentials
) -> requests.Response:
    api_url, api_key = credentials.get("ApiUrl"), credentials.get("ApiKey")

    if not api_url or not api_key:
        raise ValueError("Missing apiUrl or apiKey")

    logger.debug(f"reporting image issue to {api_url} - fileId: {file_id}")

    response = requests.post(
        api_url,
        headers={"Content-Type": "application/json", "x-api-key": api_key},
        data=json.dumps({"fileId": file_id, "userId": user_id}),
    )
    response.raise_for_status()

    logger.info(f"Image issue reported - fileId: {file_id}, userId: {user_id}")

    return response


def generate_batch_item_failures_response(
    failed_sequence_numbers: Optional[List[str]] = None,
) -> BatchItemFailuresResponse:
    return {
        "batchItemFailures": [
            {"itemIdentifier": sequence_number}
            for sequence_number in failed_sequence_numbers or []
        ]
    }
