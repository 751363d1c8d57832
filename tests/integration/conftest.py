import os
import uuid
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from nhs_letters.config.settings import Settings
from nhs_letters.database.connection import apply_schema, close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "nhs_letters_test")
    return Settings(summarization_provider="example", enrichment_lookup_months=2)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        apply_schema()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def unique_key() -> str:
    return f"it-{uuid.uuid4().hex}.pdf"


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[str], None, None]:
    """Collect blob keys; their letters and events are deleted after the test."""
    keys: list[str] = []
    yield keys
    if not keys:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM enrichment_events WHERE blob_key = ANY(%s)", (keys,))
            cur.execute("DELETE FROM nhs_letters WHERE blob_key = ANY(%s)", (keys,))
        conn.commit()


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path
