from unittest.mock import MagicMock, patch

import psycopg
import pytest

from nhs_letters.database.exceptions import DuplicateRecordKeyError, RecordStoreError
from nhs_letters.database.models import LetterRecord, LetterStatus
from nhs_letters.database.repositories.letter_repository import LetterRepository

_GET_CONN = "nhs_letters.database.repositories.letter_repository.get_connection"


def _make_row(**overrides: object) -> dict:
    row = {
        "identifier": "9434765919",
        "uploaded_at": "2025-01-29T10:00:00.000Z",
        "file_name": "letter.pdf",
        "blob_key": "letter.pdf",
        "letter_date": "2025-01-29",
        "letter_body": "Dear Ms Smith,",
        "file_size": 2048,
        "num_pages": 1,
        "upload_date_partition": "2025-01",
        "letter_date_partition": "2025-01",
        "content_hash": "a" * 64,
        "status": "pending",
        "summary": None,
        "processed_at": None,
    }
    row.update(overrides)
    return row


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestPut:
    @patch(_GET_CONN)
    def test_inserts_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        record = LetterRecord.from_row(_make_row())

        LetterRepository().put(record)

        sql, params = mock_conn.execute.call_args.args
        assert "INSERT INTO nhs_letters" in sql
        assert params[0] == "9434765919"
        assert params[11] == "pending"
        mock_conn.commit.assert_called_once()

    @patch(_GET_CONN)
    def test_duplicate_key_raises(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.side_effect = psycopg.errors.UniqueViolation("duplicate key")

        with pytest.raises(DuplicateRecordKeyError, match="already exists"):
            LetterRepository().put(LetterRecord.from_row(_make_row()))
        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()

    @patch(_GET_CONN)
    def test_database_error_raises_record_store_error(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.side_effect = psycopg.OperationalError("connection lost")

        with pytest.raises(RecordStoreError, match="connection lost"):
            LetterRepository().put(LetterRecord.from_row(_make_row()))


class TestFindByIdentifier:
    @patch(_GET_CONN)
    def test_returns_records(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [_make_row()]

        records = LetterRepository().find_by_identifier("9434765919")

        assert len(records) == 1
        assert records[0].status is LetterStatus.PENDING

    @patch(_GET_CONN)
    def test_passes_content_hash_filter(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = []

        LetterRepository().find_by_identifier("9434765919", content_hash="b" * 64)

        sql, params = mock_cursor.execute.call_args.args
        assert "content_hash" in sql
        assert params == ("9434765919", "b" * 64, "b" * 64)

    @patch(_GET_CONN)
    def test_invalid_row_raises(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [_make_row(status="weird")]

        with pytest.raises(RecordStoreError):
            LetterRepository().find_by_identifier("9434765919")


class TestPartitionQueries:
    @patch(_GET_CONN)
    def test_upload_partition_query(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [_make_row()]

        records = LetterRepository().find_by_upload_partition("2025-01", blob_key="letter.pdf")

        sql, params = mock_cursor.execute.call_args.args
        assert "upload_date_partition" in sql
        assert params == ("2025-01", "letter.pdf", "letter.pdf")
        assert records[0].blob_key == "letter.pdf"

    @patch(_GET_CONN)
    def test_letter_partition_query(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = []

        assert LetterRepository().find_by_letter_partition("2024-12") == []
        sql, params = mock_cursor.execute.call_args.args
        assert "letter_date_partition" in sql
        assert params == ("2024-12",)


class TestFindByBlobKey:
    @patch(_GET_CONN)
    def test_returns_newest_match(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [
            _make_row(uploaded_at="2025-01-29T11:00:00.000Z"),
            _make_row(uploaded_at="2025-01-29T10:00:00.000Z"),
        ]

        record = LetterRepository().find_by_blob_key("letter.pdf", ["2025-01", "2024-12"])

        assert record is not None
        assert record.uploaded_at == "2025-01-29T11:00:00.000Z"
        _sql, params = mock_cursor.execute.call_args.args
        assert params == ("letter.pdf", ["2025-01", "2024-12"])

    @patch(_GET_CONN)
    def test_orders_pending_letters_first(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = []

        LetterRepository().find_by_blob_key("letter.pdf", ["2025-01"])

        sql, _params = mock_cursor.execute.call_args.args
        order_by = sql.split("ORDER BY", 1)[1]
        assert order_by.index("status = 'pending'") < order_by.index("uploaded_at DESC")

    @patch(_GET_CONN)
    def test_returns_none_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = []

        assert LetterRepository().find_by_blob_key("letter.pdf", ["2025-01"]) is None


class TestMarkProcessed:
    @patch(_GET_CONN)
    def test_updates_pending_record(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1

        updated = LetterRepository().mark_processed(
            "9434765919", "2025-01-29T10:00:00.000Z", "summary", "2025-01-29T10:05:00.000Z"
        )

        assert updated is True
        sql, params = mock_cursor.execute.call_args.args
        assert "UPDATE nhs_letters" in sql
        assert params == (
            "processed",
            "summary",
            "2025-01-29T10:05:00.000Z",
            "9434765919",
            "2025-01-29T10:00:00.000Z",
            "pending",
        )
        mock_conn.commit.assert_called_once()

    @patch(_GET_CONN)
    def test_returns_false_when_already_processed(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        assert (
            LetterRepository().mark_processed("x", "2025-01-29T10:00:00.000Z", None, "t")
            is False
        )
