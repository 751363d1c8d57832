from nhs_letters.config.settings import Settings
from nhs_letters.database.models import EventRecord
from nhs_letters.database.repositories.event_repository import EventRepository
from nhs_letters.enrichment.worker import EnrichmentWorker
from nhs_letters.logging.logger import Log


class BatchRunner:
    """Run one batch of events through enrichment and apply retry logic."""

    def __init__(
        self,
        enrichment_worker: EnrichmentWorker,
        event_repo: EventRepository,
        settings: Settings,
    ) -> None:
        self._enrichment_worker = enrichment_worker
        self._event_repo = event_repo
        self._settings = settings

    def run(self, batch: list[EventRecord]) -> None:
        """Execute a batch; any failure sends the whole batch back for retry."""
        if not batch:
            return
        ids = [record.id for record in batch]
        Log.info(f"Running event batch {ids}")
        try:
            report = self._enrichment_worker.handle(record.event for record in batch)
            self._event_repo.mark_done(ids)
            Log.info(f"Event batch {ids} completed: {report.records_processed} events")
        except Exception as exc:
            self._handle_failure(batch, exc)

    def _handle_failure(self, batch: list[EventRecord], exc: Exception) -> None:
        """Increment attempts; mark failed if at max, otherwise back to pending."""
        Log.error(f"Event batch {[record.id for record in batch]} failed: {exc}")
        exhausted = [
            record.id
            for record in batch
            if record.attempts + 1 >= self._settings.max_event_attempts
        ]
        retry = [record.id for record in batch if record.id not in exhausted]
        if exhausted:
            self._event_repo.mark_failed(exhausted, str(exc))
            Log.error(f"Events {exhausted} permanently failed")
        if retry:
            self._event_repo.increment_attempts(retry)
            Log.warning(f"Events {retry} will be retried")
