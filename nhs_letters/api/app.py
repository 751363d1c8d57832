from typing import Any

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from nhs_letters.enrichment.events import InvalidNotificationError, parse_storage_notification
from nhs_letters.enrichment.worker import EnrichmentWorker
from nhs_letters.ingest.coordinator import IngestCoordinator
from nhs_letters.ingest.exceptions import IngestError
from nhs_letters.logging.logger import Log
from nhs_letters.utils.time import epoch_millis, utc_now


def create_app(
    coordinator: IngestCoordinator,
    enrichment_worker: EnrichmentWorker,
) -> FastAPI:
    """HTTP entry points for uploads and blob-created notifications."""
    app = FastAPI(title="NHS Letters")

    @app.post("/upload")
    async def upload(request: Request) -> JSONResponse:
        Log.info(f"Received upload request: {request.url.path}")
        filename = (
            request.headers.get("x-filename") or f"upload-{epoch_millis(utc_now())}.pdf"
        ).strip()
        content_type = (
            request.headers.get("content-type") or "application/octet-stream"
        ).strip()
        body = await request.body()

        try:
            result = await run_in_threadpool(
                coordinator.submit, body, content_type, filename
            )
        except IngestError as exc:
            Log.warning(f"Upload of {filename!r} failed with {exc.status_code}: {exc.message}")
            return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
        except Exception as exc:
            Log.exception(f"Error uploading file {filename!r}")
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to upload file", "message": str(exc)},
            )

        Log.info(f"Response from {request.url.path} statusCode: 200")
        return JSONResponse(status_code=200, content=result.to_payload())

    @app.post("/events")
    async def blob_events(payload: dict[str, Any]) -> JSONResponse:
        try:
            events = parse_storage_notification(payload)
        except InvalidNotificationError as exc:
            return JSONResponse(
                status_code=400,
                content={"error": "Invalid notification", "message": str(exc)},
            )

        try:
            report = await run_in_threadpool(enrichment_worker.handle, events)
        except Exception as exc:
            Log.error(f"Failed to process {len(events)} blob events: {exc}")
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to process files", "message": str(exc)},
            )

        return JSONResponse(
            status_code=200,
            content={
                "message": "Files processed successfully",
                "recordsProcessed": report.records_processed,
            },
        )

    return app
