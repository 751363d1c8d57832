from collections.abc import Sequence
from typing import Any

import psycopg
from psycopg.rows import dict_row

from nhs_letters.database.connection import get_connection, store_errors
from nhs_letters.database.exceptions import DuplicateRecordKeyError
from nhs_letters.database.models import LetterRecord, LetterStatus

_COLUMNS = """
    identifier, uploaded_at, file_name, blob_key, letter_date, letter_body,
    file_size, num_pages, upload_date_partition, letter_date_partition,
    content_hash, status, summary, processed_at
"""

_PENDING_FIRST = """
    (status = 'pending') DESC,
    CASE WHEN status = 'pending' THEN uploaded_at END ASC,
    uploaded_at DESC
"""


class LetterRepository:
    """Database operations for the nhs_letters table."""

    def put(self, record: LetterRecord) -> None:
        """Insert a new letter record.

        Raises:
            DuplicateRecordKeyError: if (identifier, uploaded_at) already exists.
            RecordStoreError: on any other database failure.
        """
        with store_errors("store letter record"):
            with get_connection() as conn:
                try:
                    conn.execute(
                        f"""
                        INSERT INTO nhs_letters ({_COLUMNS})
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        """,
                        (
                            record.identifier,
                            record.uploaded_at,
                            record.file_name,
                            record.blob_key,
                            record.letter_date,
                            record.letter_body,
                            record.file_size,
                            record.num_pages,
                            record.upload_date_partition,
                            record.letter_date_partition,
                            record.content_hash,
                            record.status.value,
                            record.summary,
                            record.processed_at,
                        ),
                    )
                except psycopg.errors.UniqueViolation as exc:
                    conn.rollback()
                    raise DuplicateRecordKeyError(
                        f"Letter {record.identifier} at {record.uploaded_at} already exists"
                    ) from exc
                conn.commit()

    def find_by_identifier(
        self,
        identifier: str,
        content_hash: str | None = None,
    ) -> list[LetterRecord]:
        """Return letters for a patient, optionally only those with a given hash."""
        return self._select(
            "identifier = %s AND (%s::text IS NULL OR content_hash = %s)",
            (identifier, content_hash, content_hash),
            action=f"query letters for {identifier}",
        )

    def find_by_upload_partition(
        self,
        partition: str,
        blob_key: str | None = None,
    ) -> list[LetterRecord]:
        """Return letters uploaded in a YYYY-MM partition, optionally for one blob."""
        return self._select(
            "upload_date_partition = %s AND (%s::text IS NULL OR blob_key = %s)",
            (partition, blob_key, blob_key),
            action=f"query upload partition {partition}",
        )

    def find_by_letter_partition(self, partition: str) -> list[LetterRecord]:
        """Return letters whose letter date falls in a YYYY-MM partition."""
        return self._select(
            "letter_date_partition = %s",
            (partition,),
            action=f"query letter partition {partition}",
        )

    def find_by_blob_key(
        self,
        blob_key: str,
        partitions: Sequence[str],
    ) -> LetterRecord | None:
        """Return the letter stored under blob_key within the given partitions.

        Pending letters come first, oldest first, so each event for a shared
        key picks up a different letter. Otherwise the newest processed letter.
        """
        records = self._select(
            "blob_key = %s AND upload_date_partition = ANY(%s)",
            (blob_key, list(partitions)),
            action=f"look up blob {blob_key}",
            order_by=_PENDING_FIRST,
        )
        return records[0] if records else None

    def mark_processed(
        self,
        identifier: str,
        uploaded_at: str,
        summary: str | None,
        processed_at: str,
    ) -> bool:
        """Transition a pending letter to processed.

        Returns:
            False if the letter was already processed or does not exist.
        """
        with store_errors(f"update letter {identifier}"):
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        UPDATE nhs_letters
                        SET status = %s, summary = %s, processed_at = %s
                        WHERE identifier = %s
                          AND uploaded_at = %s
                          AND status = %s
                        """,
                        (
                            LetterStatus.PROCESSED.value,
                            summary,
                            processed_at,
                            identifier,
                            uploaded_at,
                            LetterStatus.PENDING.value,
                        ),
                    )
                    updated = cur.rowcount > 0
                conn.commit()
        return updated

    def _select(
        self,
        where: str,
        params: tuple[Any, ...],
        *,
        action: str,
        order_by: str = "uploaded_at DESC",
    ) -> list[LetterRecord]:
        with store_errors(action):
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        SELECT {_COLUMNS}
                        FROM nhs_letters
                        WHERE {where}
                        ORDER BY {order_by}
                        """,
                        params,
                    )
                    rows = cur.fetchall()
        return [LetterRecord.from_row(row) for row in rows]
