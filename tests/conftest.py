"""
Pytest configuration for the tracker store.

Provides fixtures for:
- Settings override for integration tests
- Database connection and pool management
- Schema creation and per-test table cleanup
- A PgSqlClient wired to the test database
"""

from __future__ import annotations

import os
from typing import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from tracker_store.config import Settings
from tracker_store.domain.models import EligibilityPolicy
from tracker_store.gateway.postgres import PgSqlClient
from tracker_store.infrastructure.schema import TABLES, apply_schema


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "tracker_test"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.OperationalError:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for setup and cleanup.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the store tables exist.
    """
    apply_schema(db_connection)
    return True


@pytest.fixture(scope="session")
def db_pool(test_dsn: str, db_schema_initialized: bool) -> Generator[ConnectionPool, None, None]:
    """
    Session-scoped pool shared by gateway instances under test.
    """
    pool = ConnectionPool(conninfo=test_dsn, min_size=1, max_size=4, open=True)
    try:
        yield pool
    finally:
        pool.close()


@pytest.fixture(scope="function")
def clean_tables(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty every store table before and after each test function.
    """
    truncate = f"TRUNCATE TABLE {', '.join(TABLES)};"
    with db_connection.cursor() as cur:
        cur.execute(truncate)
    db_connection.commit()
    yield
    with db_connection.cursor() as cur:
        cur.execute(truncate)
    db_connection.commit()


@pytest.fixture(scope="function")
def client(db_pool: ConnectionPool, clean_tables) -> PgSqlClient:
    """
    Gateway over an empty store with the default eligibility policy.
    """
    return PgSqlClient(db_pool, policy=EligibilityPolicy(), batch_size=100)
