import hashlib
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import cast

from nhs_letters.config.settings import Settings
from nhs_letters.database.exceptions import RecordStoreError
from nhs_letters.database.models import BlobCreatedEvent, LetterRecord, LetterStatus
from nhs_letters.database.repositories.event_repository import EventRepository
from nhs_letters.database.repositories.letter_repository import LetterRepository
from nhs_letters.extraction.extractor import (
    date_partition,
    extract_letter_details,
    normalize_identifier,
)
from nhs_letters.ingest.exceptions import (
    DuplicateLetterError,
    ExtractionFailure,
    PersistenceError,
    UploadValidationError,
)
from nhs_letters.ingest.models import IngestResult
from nhs_letters.logging.logger import Log
from nhs_letters.pdf.base import BasePdfExtractor
from nhs_letters.pdf.exceptions import PdfExtractionError
from nhs_letters.pdf.factory import PdfExtractorFactory
from nhs_letters.storage.base import BaseBlobStore
from nhs_letters.storage.exceptions import BlobStoreError
from nhs_letters.storage.factory import BlobStoreFactory
from nhs_letters.utils.time import epoch_millis, iso_timestamp, utc_now
from nhs_letters.validation.validator import PDF_CONTENT_TYPE, validate_upload


def content_hash(raw_bytes: bytes) -> str:
    return hashlib.sha256(raw_bytes).hexdigest()


class IngestCoordinator:
    """Validates, extracts and stores one uploaded letter, then queues it for enrichment.

    Sequence: validate -> extract text -> extract details -> duplicate check ->
    store blob -> store record (pending) -> publish BlobCreatedEvent.
    Validation and duplicate failures happen before anything is written.
    """

    def __init__(
        self,
        pdf_extractor: BasePdfExtractor,
        blob_store: BaseBlobStore,
        letter_repo: LetterRepository,
        event_repo: EventRepository,
        max_upload_bytes: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._blob_store = blob_store
        self._letter_repo = letter_repo
        self._event_repo = event_repo
        self._max_upload_bytes = max_upload_bytes
        self._clock = clock

    def submit(self, raw_bytes: bytes, content_type: str, filename: str) -> IngestResult:
        """Ingest one upload.

        Raises:
            UploadValidationError: bad content type, extension, signature or size.
            ExtractionFailure: the PDF text could not be read.
            DuplicateLetterError: same bytes already stored for this NHS number.
            PersistenceError: blob store, record store or event queue failed.
        """
        filename = filename.strip()
        rejection = validate_upload(
            raw_bytes, content_type, filename, max_bytes=self._max_upload_bytes
        )
        if rejection is not None:
            Log.warning(f"Rejected upload {filename!r}: {rejection.kind}")
            raise UploadValidationError(rejection)

        try:
            pdf_text = self._pdf_extractor.extract(raw_bytes)
        except PdfExtractionError as exc:
            Log.warning(f"Could not read text from {filename!r}: {exc}")
            raise ExtractionFailure(
                "The uploaded PDF could not be read. It may be corrupted."
            ) from exc

        details = extract_letter_details(pdf_text.text)
        nhs_number = normalize_identifier(details.identifier)
        digest = content_hash(raw_bytes)

        if nhs_number is not None:
            self._reject_duplicate(nhs_number, digest)

        now = self._clock()
        uploaded_at = iso_timestamp(now)
        identifier = nhs_number or f"UNKNOWN-{epoch_millis(now)}"

        record = LetterRecord(
            identifier=identifier,
            uploaded_at=uploaded_at,
            file_name=filename,
            blob_key=filename,
            file_size=len(raw_bytes),
            num_pages=pdf_text.page_count,
            upload_date_partition=cast(str, date_partition(uploaded_at)),
            content_hash=digest,
            letter_date=details.letter_date,
            letter_body=details.body,
            letter_date_partition=date_partition(details.letter_date),
            status=LetterStatus.PENDING,
        )
        self._persist(record, raw_bytes)

        Log.info(
            f"Stored letter {record.blob_key} for {record.identifier} "
            f"({record.file_size} bytes, {record.num_pages} pages)"
        )
        return IngestResult(
            container=self._blob_store.container,
            blob_key=record.blob_key,
            size=record.file_size,
            identifier=nhs_number,
            letter_date=details.letter_date,
            letter_body=details.body,
            text=pdf_text.text,
            num_pages=pdf_text.page_count,
        )

    def _reject_duplicate(self, identifier: str, digest: str) -> None:
        try:
            existing = self._letter_repo.find_by_identifier(identifier, content_hash=digest)
        except RecordStoreError as exc:
            raise PersistenceError(str(exc)) from exc
        if existing:
            letter = existing[0]
            Log.info(
                f"Duplicate upload for {identifier}: matches {letter.file_name} "
                f"uploaded at {letter.uploaded_at}"
            )
            raise DuplicateLetterError(letter.file_name, letter.uploaded_at)

    def _persist(self, record: LetterRecord, raw_bytes: bytes) -> None:
        # Record after blob: a failed record write leaves an orphan blob but no event.
        try:
            self._blob_store.put(record.blob_key, raw_bytes, PDF_CONTENT_TYPE)
        except BlobStoreError as exc:
            raise PersistenceError(str(exc)) from exc

        try:
            self._letter_repo.put(record)
        except RecordStoreError as exc:
            Log.error(f"Blob {record.blob_key} stored without a record: {exc}")
            raise PersistenceError(str(exc)) from exc

        try:
            self._event_repo.publish(
                BlobCreatedEvent(container=self._blob_store.container, key=record.blob_key)
            )
        except RecordStoreError as exc:
            Log.error(f"Letter {record.blob_key} stored but not queued: {exc}")
            raise PersistenceError(str(exc)) from exc


def build_coordinator(
    settings: Settings,
    files_root: Path | None = None,
) -> IngestCoordinator:
    """Build an IngestCoordinator with all required adapters."""
    return IngestCoordinator(
        pdf_extractor=PdfExtractorFactory.create(settings),
        blob_store=BlobStoreFactory.create(settings, files_root=files_root),
        letter_repo=LetterRepository(),
        event_repo=EventRepository(
            settings.max_event_attempts, settings.event_lock_timeout_seconds
        ),
        max_upload_bytes=settings.max_upload_bytes,
    )
