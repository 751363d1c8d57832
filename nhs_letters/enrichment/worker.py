from collections.abc import Callable, Iterable
from datetime import datetime

from nhs_letters.config.settings import Settings
from nhs_letters.database.models import BlobCreatedEvent
from nhs_letters.database.repositories.letter_repository import LetterRepository
from nhs_letters.enrichment.models import EnrichmentOutcome, EnrichmentReport
from nhs_letters.logging.logger import Log
from nhs_letters.summarization.base import BaseSummarizer
from nhs_letters.summarization.factory import get_summarizer
from nhs_letters.utils.time import iso_timestamp, utc_now
from nhs_letters.validation.validator import PDF_EXTENSION


def recent_partitions(now: datetime, months: int) -> list[str]:
    """Return YYYY-MM partitions for the current month and the months before it."""
    year, month = now.year, now.month
    partitions: list[str] = []
    for _ in range(max(1, months)):
        partitions.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return partitions


class EnrichmentWorker:
    """Adds an AI summary to the letter stored under each blob key.

    Safe to run more than once per blob: letters that are already processed
    are skipped without calling the summarizer. Events in a batch are handled
    in order and the first failure propagates, so the whole batch is retried.
    """

    def __init__(
        self,
        letter_repo: LetterRepository,
        summarizer_provider: Callable[[], BaseSummarizer],
        lookup_months: int = 2,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._letter_repo = letter_repo
        self._summarizer_provider = summarizer_provider
        self._lookup_months = lookup_months
        self._clock = clock

    def handle(self, events: Iterable[BlobCreatedEvent]) -> EnrichmentReport:
        report = EnrichmentReport()
        for event in events:
            Log.info(f"Processing file: {event.key} from bucket: {event.container}")
            try:
                outcome = self.process(event)
            except Exception:
                Log.exception(f"Error processing file {event.key}")
                raise
            report.outcomes.append((event.key, outcome))
        return report

    def process(self, event: BlobCreatedEvent) -> EnrichmentOutcome:
        key = event.key
        if not key.lower().endswith(PDF_EXTENSION):
            Log.info(f"Skipping non-PDF file: {key}")
            return EnrichmentOutcome.SKIPPED_NOT_PDF

        partitions = recent_partitions(self._clock(), self._lookup_months)
        record = self._letter_repo.find_by_blob_key(key, partitions)
        if record is None:
            Log.warning(f"No letter record found for file: {key} in {partitions}")
            return EnrichmentOutcome.SKIPPED_NO_RECORD

        if record.is_processed:
            Log.info(f"Letter {key} for {record.identifier} already processed")
            return EnrichmentOutcome.SKIPPED_ALREADY_PROCESSED

        Log.info(f"Found letter record for NHS number: {record.identifier}")

        if not record.letter_body:
            Log.warning(f"No letter body found for file: {key}")
            self._mark_processed(record.identifier, record.uploaded_at, None)
            return EnrichmentOutcome.PROCESSED_WITHOUT_BODY

        summary = self._summarizer_provider().summarize(record.letter_body)
        self._mark_processed(record.identifier, record.uploaded_at, summary)
        Log.info(f"Successfully processed file: {key}")
        return EnrichmentOutcome.PROCESSED

    def _mark_processed(self, identifier: str, uploaded_at: str, summary: str | None) -> None:
        updated = self._letter_repo.mark_processed(
            identifier,
            uploaded_at,
            summary=summary,
            processed_at=iso_timestamp(self._clock()),
        )
        if not updated:
            Log.info(f"Letter {identifier} at {uploaded_at} was processed concurrently")


def build_enrichment_worker(settings: Settings) -> EnrichmentWorker:
    """Build an EnrichmentWorker backed by the process-wide summarizer."""
    return EnrichmentWorker(
        letter_repo=LetterRepository(),
        summarizer_provider=lambda: get_summarizer(settings),
        lookup_months=settings.enrichment_lookup_months,
    )
