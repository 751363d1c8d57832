import uvicorn

from nhs_letters.api.app import create_app
from nhs_letters.config.settings import Settings
from nhs_letters.database.connection import apply_schema, close_pool, init_pool
from nhs_letters.database.repositories.event_repository import EventRepository
from nhs_letters.enrichment.worker import build_enrichment_worker
from nhs_letters.ingest.coordinator import build_coordinator
from nhs_letters.logging.logger import Log
from nhs_letters.worker.batch_runner import BatchRunner
from nhs_letters.worker.worker import Worker


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> start enrichment worker loop."""
    settings = Settings()
    Log.configure(settings.log_level, settings.app_env)
    init_pool(settings)

    try:
        apply_schema()
        event_repo = EventRepository(
            settings.max_event_attempts, settings.event_lock_timeout_seconds
        )
        batch_runner = BatchRunner(build_enrichment_worker(settings), event_repo, settings)
        worker = Worker(event_repo, batch_runner, settings)
        worker.run()
    finally:
        close_pool()


def serve() -> None:
    """Entry point: initialize pool -> build dependencies -> serve the upload API."""
    settings = Settings()
    Log.configure(settings.log_level, settings.app_env)
    init_pool(settings)

    try:
        apply_schema()
        app = create_app(build_coordinator(settings), build_enrichment_worker(settings))
        uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_config=None)
    finally:
        close_pool()


if __name__ == "__main__":
    main()
