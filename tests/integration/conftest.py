import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from driftguard.config.settings import Settings
from driftguard.database.connection import close_pool, get_connection, init_pool

_ML_MODELS_DDL = """
CREATE TABLE IF NOT EXISTS ml_models (
    id UUID PRIMARY KEY,
    name TEXT NOT NULL,
    version TEXT NOT NULL,
    framework TEXT NOT NULL DEFAULT '',
    input_features JSONB NOT NULL,
    output_labels JSONB NOT NULL,
    is_active BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "driftguard_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        psycopg.connect(
            host=test_settings.db_host,
            port=test_settings.db_port,
            dbname=test_settings.db_database,
            user=test_settings.db_username,
            password=test_settings.db_password,
            connect_timeout=3,
        ).close()
        init_pool(test_settings)
    except Exception as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run integration tests")
    try:
        with get_connection() as conn:
            conn.execute(_ML_MODELS_DDL)
            conn.commit()
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def clean_models(db_conn: psycopg.Connection[Any]) -> Generator[list[str], None, None]:
    """Collects inserted model ids and deletes them afterwards."""
    created: list[str] = []
    yield created
    if not created:
        return
    with db_conn.cursor() as cur:
        for model_id in created:
            cur.execute("DELETE FROM ml_models WHERE id = %s::uuid", (model_id,))
    db_conn.commit()
