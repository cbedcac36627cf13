import os
import uuid
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from docintake.config.settings import Settings
from docintake.database.connection import apply_schema, close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docintake_test")
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
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to point at it")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def owner_id(integration_pool: None) -> Generator[str, None, None]:
    """A fresh owner whose rows are removed after the test."""
    owner = f"it-{uuid.uuid4().hex[:12]}"
    yield owner
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM activities WHERE owner_id = %s", (owner,))
            cur.execute("DELETE FROM documents WHERE owner_id = %s", (owner,))
        conn.commit()
