from collections.abc import Sequence
from typing import Any

import psycopg
from psycopg.rows import dict_row

from nhs_letters.database.connection import get_connection, store_errors
from nhs_letters.database.exceptions import RecordStoreError
from nhs_letters.database.models import BlobCreatedEvent, EventRecord
from nhs_letters.logging.logger import Log


class EventRepository:
    """Queue of blob-created events stored in the enrichment_events table."""

    def __init__(self, max_attempts: int, lock_timeout_seconds: int = 600) -> None:
        self._max_attempts = max_attempts
        self._lock_timeout_seconds = lock_timeout_seconds

    def publish(self, event: BlobCreatedEvent) -> int:
        """Enqueue an event and return its queue id.

        Raises:
            RecordStoreError: if the event cannot be written.
        """
        with store_errors(f"enqueue event for {event.key}"):
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO enrichment_events (container, blob_key, status, attempts)
                        VALUES (%s, %s, 'pending', 0)
                        RETURNING id
                        """,
                        (event.container, event.key),
                    )
                    row = cur.fetchone()
                conn.commit()
        if row is None:
            raise RecordStoreError(f"Failed to enqueue event for {event.key}")
        return int(row[0])

    def claim_batch(
        self,
        conn: psycopg.Connection[Any],
        limit: int,
    ) -> list[EventRecord]:
        """Claim up to `limit` events using SELECT FOR UPDATE SKIP LOCKED.

        Pending events are claimed, and so are events still `processing` whose
        lock is older than the lock timeout; their worker is assumed dead and
        the lost run counts as an attempt.
        """
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, container, blob_key, status, attempts
                FROM enrichment_events
                WHERE attempts < %s
                  AND (
                    status = 'pending'
                    OR (
                      status = 'processing'
                      AND locked_at < NOW() - make_interval(secs => %s)
                    )
                  )
                ORDER BY created_at
                LIMIT %s
                FOR UPDATE SKIP LOCKED
                """,
                (self._max_attempts, self._lock_timeout_seconds, limit),
            )
            rows = cur.fetchall()

        if not rows:
            conn.commit()
            return []

        ids = [row["id"] for row in rows]
        stale = [row["id"] for row in rows if row["status"] == "processing"]
        if stale:
            Log.warning(f"Reclaiming events {stale} from an expired lock")
        conn.execute(
            """
            UPDATE enrichment_events
            SET status = 'processing',
                attempts = attempts + CASE WHEN status = 'processing' THEN 1 ELSE 0 END,
                locked_at = NOW(),
                updated_at = NOW()
            WHERE id = ANY(%s)
            """,
            (ids,),
        )
        conn.commit()

        return [
            EventRecord(
                id=row["id"],
                event=BlobCreatedEvent(container=row["container"], key=row["blob_key"]),
                status="processing",
                attempts=row["attempts"] + (1 if row["id"] in stale else 0),
            )
            for row in rows
        ]

    def mark_done(self, event_ids: Sequence[int]) -> None:
        """Mark events as done."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE enrichment_events
                SET status = 'done', updated_at = NOW()
                WHERE id = ANY(%s)
                """,
                (list(event_ids),),
            )
            conn.commit()

    def mark_failed(self, event_ids: Sequence[int], error: str) -> None:
        """Mark events as permanently failed."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE enrichment_events
                SET status = 'failed', error_message = %s, updated_at = NOW()
                WHERE id = ANY(%s)
                """,
                (error, list(event_ids)),
            )
            conn.commit()

    def increment_attempts(self, event_ids: Sequence[int]) -> None:
        """Increment attempt count and return events to pending."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE enrichment_events
                SET attempts = attempts + 1, status = 'pending',
                    locked_at = NULL, updated_at = NOW()
                WHERE id = ANY(%s)
                """,
                (list(event_ids),),
            )
            conn.commit()

    def find_by_id(self, event_id: int) -> EventRecord | None:
        """Find an event by ID. Useful for tests."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, container, blob_key, status, attempts,
                           error_message, locked_at, created_at, updated_at
                    FROM enrichment_events
                    WHERE id = %s
                    """,
                    (event_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return EventRecord(
            id=row["id"],
            event=BlobCreatedEvent(container=row["container"], key=row["blob_key"]),
            status=row["status"],
            attempts=row["attempts"],
            error_message=row["error_message"],
            locked_at=row["locked_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
