from typing import Any
from urllib.parse import unquote_plus

from nhs_letters.database.models import BlobCreatedEvent


class InvalidNotificationError(ValueError):
    """Raised when a storage notification is missing bucket or key information."""


def parse_storage_notification(payload: dict[str, Any]) -> list[BlobCreatedEvent]:
    """Turn an S3-style ObjectCreated notification into BlobCreatedEvents.

    Object keys arrive URL-encoded with '+' for spaces.

    Raises:
        InvalidNotificationError: if the payload does not have the expected shape.
    """
    records = payload.get("Records")
    if not isinstance(records, list):
        raise InvalidNotificationError("Notification must contain a 'Records' list")

    events: list[BlobCreatedEvent] = []
    for index, record in enumerate(records):
        try:
            s3 = record["s3"]
            bucket = s3["bucket"]["name"]
            key = s3["object"]["key"]
        except (KeyError, TypeError) as exc:
            raise InvalidNotificationError(
                f"Record at index {index} is missing s3 bucket/object fields"
            ) from exc
        if not isinstance(bucket, str) or not isinstance(key, str):
            raise InvalidNotificationError(
                f"Record at index {index}: bucket name and object key must be strings"
            )
        events.append(BlobCreatedEvent(container=bucket, key=unquote_plus(key)))
    return events
