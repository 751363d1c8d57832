from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from nhs_letters.database.exceptions import DuplicateRecordKeyError
from nhs_letters.database.models import BlobCreatedEvent, LetterRecord, LetterStatus
from nhs_letters.storage.base import BaseBlobStore
from nhs_letters.storage.exceptions import BlobNotFoundError

FIXED_NOW = datetime(2025, 1, 29, 10, 0, 0, tzinfo=timezone.utc)


class InMemoryLetterRepository:
    """Dict-backed stand-in for LetterRepository."""

    def __init__(self) -> None:
        self.records: dict[tuple[str, str], LetterRecord] = {}

    def put(self, record: LetterRecord) -> None:
        key = (record.identifier, record.uploaded_at)
        if key in self.records:
            raise DuplicateRecordKeyError(f"{key} exists")
        self.records[key] = record

    def find_by_identifier(
        self, identifier: str, content_hash: str | None = None
    ) -> list[LetterRecord]:
        return [
            r
            for r in self.records.values()
            if r.identifier == identifier
            and (content_hash is None or r.content_hash == content_hash)
        ]

    def find_by_upload_partition(
        self, partition: str, blob_key: str | None = None
    ) -> list[LetterRecord]:
        return [
            r
            for r in self.records.values()
            if r.upload_date_partition == partition
            and (blob_key is None or r.blob_key == blob_key)
        ]

    def find_by_blob_key(
        self, blob_key: str, partitions: Sequence[str]
    ) -> LetterRecord | None:
        matches = [
            r
            for r in self.records.values()
            if r.blob_key == blob_key and r.upload_date_partition in partitions
        ]
        pending = sorted(
            (r for r in matches if r.status is LetterStatus.PENDING), key=lambda r: r.uploaded_at
        )
        if pending:
            return pending[0]
        return max(matches, key=lambda r: r.uploaded_at, default=None)

    def mark_processed(
        self,
        identifier: str,
        uploaded_at: str,
        summary: str | None,
        processed_at: str,
    ) -> bool:
        key = (identifier, uploaded_at)
        record = self.records.get(key)
        if record is None or record.status is not LetterStatus.PENDING:
            return False
        self.records[key] = record.as_processed(summary, processed_at)
        return True


class InMemoryBlobStore(BaseBlobStore):
    def __init__(self, container: str = "nhs-letters") -> None:
        self._container = container
        self.blobs: dict[str, bytes] = {}

    @property
    def container(self) -> str:
        return self._container

    def put(self, key: str, data: bytes, content_type: str) -> None:
        self.blobs[key] = data

    def get(self, key: str) -> bytes:
        if key not in self.blobs:
            raise BlobNotFoundError(key)
        return self.blobs[key]


class RecordingEventQueue:
    def __init__(self) -> None:
        self.events: list[BlobCreatedEvent] = []

    def publish(self, event: BlobCreatedEvent) -> int:
        self.events.append(event)
        return len(self.events)


def make_letter(**overrides: object) -> LetterRecord:
    record = LetterRecord(
        identifier="9434765919",
        uploaded_at="2025-01-29T10:00:00.000Z",
        file_name="letter.pdf",
        blob_key="letter.pdf",
        file_size=2048,
        num_pages=1,
        upload_date_partition="2025-01",
        content_hash="a" * 64,
        letter_date="2025-01-29",
        letter_body="Dear Ms Smith, your appointment is confirmed.",
        letter_date_partition="2025-01",
    )
    return replace(record, **overrides)  # type: ignore[arg-type]


@pytest.fixture
def letter_repo() -> InMemoryLetterRepository:
    return InMemoryLetterRepository()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def event_queue() -> RecordingEventQueue:
    return RecordingEventQueue()


@pytest.fixture
def letter_factory():  # type: ignore[no-untyped-def]
    return make_letter


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW
