import time

from nhs_letters.config.settings import Settings
from nhs_letters.database.connection import get_connection
from nhs_letters.database.models import EventRecord
from nhs_letters.database.repositories.event_repository import EventRepository
from nhs_letters.logging.logger import Log
from nhs_letters.worker.batch_runner import BatchRunner


class Worker:
    """Poll loop: sleep -> claim batch -> dispatch."""

    def __init__(
        self,
        event_repo: EventRepository,
        batch_runner: BatchRunner,
        settings: Settings,
    ) -> None:
        self._event_repo = event_repo
        self._batch_runner = batch_runner
        self._settings = settings

    def run(self, max_batches: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        If max_batches is set, stop after processing that many batches (for testing).
        """
        Log.info("Worker started, polling for blob events")
        batches_done = 0
        try:
            while max_batches is None or batches_done < max_batches:
                batch = self._try_claim_batch()
                if batch:
                    self._batch_runner.run(batch)
                    batches_done += 1
                else:
                    Log.debug("No events available, sleeping")
                    time.sleep(self._settings.event_poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def _try_claim_batch(self) -> list[EventRecord]:
        """Attempt to claim pending events. Gracefully handle DB errors."""
        try:
            with get_connection() as conn:
                return self._event_repo.claim_batch(conn, self._settings.event_batch_size)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return []
