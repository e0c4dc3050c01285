"""
Fixtures for tests against a real PostgreSQL database.

Requires PostgreSQL to be running (via docker-compose); tests that use
the pool are skipped when the database cannot be reached.
"""

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from bank_onboarding.adapters.repository.postgres import run_migrations
from bank_onboarding.config.settings import get_settings


@pytest.fixture(scope="session")
def pool() -> ConnectionPool:
    """Create connection pool for integration tests and apply migrations."""
    settings = get_settings()
    try:
        psycopg.connect(settings.database_url, connect_timeout=2).close()
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")

    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> None:
    """Empty all registration tables before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM accounts")
        conn.execute("DELETE FROM profiles")
        conn.execute("DELETE FROM ephemeral_state")
        conn.commit()
    yield
