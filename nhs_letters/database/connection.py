from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool, PoolTimeout

from nhs_letters.config.settings import Settings
from nhs_letters.database.exceptions import RecordStoreError

_SCHEMA_PATH = Path(__file__).parent / "schema.sql"

_pool: ConnectionPool | None = None


def init_pool(settings: Settings) -> None:
    """Open the global connection pool and wait until it holds a connection.

    Raises:
        RecordStoreError: if no connection is available within
            db_connect_timeout_seconds.
    """
    global _pool  # noqa: PLW0603
    conninfo = make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
        application_name=f"nhs-letters-{settings.app_env}",
    )
    pool = ConnectionPool(
        conninfo,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        open=True,
    )
    try:
        pool.wait(timeout=settings.db_connect_timeout_seconds)
    except PoolTimeout as exc:
        pool.close()
        raise RecordStoreError(
            f"Database {settings.db_database} at {settings.db_host}:{settings.db_port} "
            f"not reachable: {exc}"
        ) from exc
    _pool = pool


def close_pool() -> None:
    """Close the global connection pool."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a connection from the pool. Caller manages commit/rollback."""
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    with _pool.connection() as conn:
        yield conn


def apply_schema(schema_path: Path | None = None) -> None:
    """Create the letters and event queue tables if they do not exist yet."""
    sql = (schema_path or _SCHEMA_PATH).read_text(encoding="utf-8")
    with get_connection() as conn:
        conn.execute(sql)
        conn.commit()


@contextmanager
def store_errors(action: str) -> Generator[None, None, None]:
    """Re-raise driver and pool failures as RecordStoreError."""
    try:
        yield
    except RecordStoreError:
        raise
    except (psycopg.Error, PoolTimeout) as exc:
        raise RecordStoreError(f"Failed to {action}: {exc}") from exc
