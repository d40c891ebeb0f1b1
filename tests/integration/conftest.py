import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from bookgen.config.settings import Settings
from bookgen.database.connection import apply_schema, close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "bookgen_test")
    return Settings()


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
            "Set DB_* env to point at a scratch database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture(autouse=True)
def _requires_database(integration_pool: None) -> None:
    """Skip every integration test when the database cannot be reached."""


@pytest.fixture
def db_conn() -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup() -> Generator[list[str], None, None]:
    """Collect book IDs created by a test; their rows (and questions) are deleted afterwards."""
    cleanup: list[str] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM questions WHERE book_id::text = ANY(%s)", (cleanup,))
            cur.execute("DELETE FROM books WHERE id::text = ANY(%s)", (cleanup,))
        conn.commit()
