from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum
from typing import Any

from nhs_letters.database.exceptions import RecordValidationError


class LetterStatus(StrEnum):
    PENDING = "pending"
    PROCESSED = "processed"


@dataclass(frozen=True)
class LetterRecord:
    """Represents a row from the nhs_letters table."""

    identifier: str
    uploaded_at: str
    file_name: str
    blob_key: str
    file_size: int
    num_pages: int
    upload_date_partition: str
    content_hash: str
    letter_date: str | None = None
    letter_body: str | None = None
    letter_date_partition: str | None = None
    status: LetterStatus = LetterStatus.PENDING
    summary: str | None = None
    processed_at: str | None = None

    @property
    def is_processed(self) -> bool:
        return self.status is LetterStatus.PROCESSED

    def as_processed(self, summary: str | None, processed_at: str) -> "LetterRecord":
        return replace(
            self,
            status=LetterStatus.PROCESSED,
            summary=summary,
            processed_at=processed_at,
        )

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "LetterRecord":
        """Build a record from a dict_row, rejecting rows that break the shape.

        Raises:
            RecordValidationError: if a required column is missing/empty or the
                status is not a known LetterStatus.
        """
        for column in (
            "identifier",
            "uploaded_at",
            "file_name",
            "blob_key",
            "upload_date_partition",
            "content_hash",
        ):
            if not isinstance(row.get(column), str) or not row[column]:
                raise RecordValidationError(f"Letter row has invalid '{column}'")
        for column in ("file_size", "num_pages"):
            if not isinstance(row.get(column), int):
                raise RecordValidationError(f"Letter row has invalid '{column}'")
        try:
            status = LetterStatus(row.get("status"))
        except ValueError as exc:
            raise RecordValidationError(
                f"Letter row has unknown status {row.get('status')!r}"
            ) from exc

        return cls(
            identifier=row["identifier"],
            uploaded_at=row["uploaded_at"],
            file_name=row["file_name"],
            blob_key=row["blob_key"],
            file_size=row["file_size"],
            num_pages=row["num_pages"],
            upload_date_partition=row["upload_date_partition"],
            content_hash=row["content_hash"],
            letter_date=row.get("letter_date"),
            letter_body=row.get("letter_body"),
            letter_date_partition=row.get("letter_date_partition"),
            status=status,
            summary=row.get("summary"),
            processed_at=row.get("processed_at"),
        )


@dataclass(frozen=True)
class BlobCreatedEvent:
    """A blob landed in the store and its letter is ready for enrichment."""

    container: str
    key: str


@dataclass
class EventRecord:
    """Represents a row from the enrichment_events table."""

    id: int
    event: BlobCreatedEvent
    status: str
    attempts: int
    error_message: str | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
