"""
PostgreSQL repository adapters - Implement ProfileRecordStore and EphemeralStore.

This module provides the PostgreSQL implementations of the domain's
record store and ephemeral store ports using psycopg3 with raw SQL.

Merge Semantics:
----------------
Profile records are stored as a single JSONB document per identity.
create_or_merge() uses INSERT ... ON CONFLICT DO UPDATE with the JSONB
concatenation operator, so keys absent from the new fields keep their
stored values and keys present overwrite them.

Ephemeral State:
----------------
Ephemeral payloads are namespaced by a client scope id. Writes are upserts
(last write wins), and nothing expires: rows are only removed by an
explicit remove() or by the flow clearing its keys. Database errors are
raised as StateStoreUnavailable.
"""

import logging
from pathlib import Path
from typing import Any

import psycopg
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from bank_onboarding.domain.exceptions import RecordStoreUnavailable, StateStoreUnavailable

logger = logging.getLogger(__name__)

_STATE_SAVE_FAILED = "Failed to save your registration progress. Please try again."
_STATE_LOAD_FAILED = "Failed to load your registration progress. Please try again."


class PostgresProfileRecordStore:
    """
    Implements ProfileRecordStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize record store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def create_or_merge(self, identity_id: str, fields: dict[str, Any]) -> None:
        """
        Create the profile record or merge fields into the existing one.

        Args:
            identity_id: Unique id of the authenticated identity
            fields: JSON-serializable fields to set

        Raises:
            RecordStoreUnavailable: If the database write fails
        """
        sql = """
            INSERT INTO profiles (uid, data, created_at, updated_at)
            VALUES (%s, %s, NOW(), NOW())
            ON CONFLICT (uid) DO UPDATE
            SET data = profiles.data || EXCLUDED.data,
                updated_at = NOW()
        """

        try:
            with self._pool.connection() as conn:
                conn.execute(sql, (identity_id, Jsonb(fields)))
                conn.commit()
        except psycopg.Error as e:
            logger.error(f"Profile record write failed for {identity_id}: {e}")
            raise RecordStoreUnavailable("Failed to save your bank profile. Please try again.") from e

    def get(self, identity_id: str) -> dict[str, Any] | None:
        """Return the stored profile document, or None if absent."""
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT data FROM profiles WHERE uid = %s", (identity_id,))
            row = cursor.fetchone()
        return row[0] if row is not None else None


class PostgresEphemeralStore:
    """
    Implements EphemeralStore protocol via psycopg3.

    Each instance is bound to one client scope id; keys of other scopes are
    never visible through it.
    """

    def __init__(self, pool: ConnectionPool, scope: str) -> None:
        self._pool = pool
        self._scope = scope

    def put(self, key: str, value: str) -> None:
        sql = """
            INSERT INTO ephemeral_state (scope, key, value, updated_at)
            VALUES (%s, %s, %s, NOW())
            ON CONFLICT (scope, key) DO UPDATE
            SET value = EXCLUDED.value,
                updated_at = NOW()
        """
        try:
            with self._pool.connection() as conn:
                conn.execute(sql, (self._scope, key, value))
                conn.commit()
        except psycopg.Error as e:
            logger.error(f"Ephemeral state write failed for {key}: {e}")
            raise StateStoreUnavailable(_STATE_SAVE_FAILED) from e

    def get(self, key: str) -> str | None:
        sql = "SELECT value FROM ephemeral_state WHERE scope = %s AND key = %s"
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (self._scope, key))
                row = cursor.fetchone()
        except psycopg.Error as e:
            logger.error(f"Ephemeral state read failed for {key}: {e}")
            raise StateStoreUnavailable(_STATE_LOAD_FAILED) from e
        return row[0] if row is not None else None

    def remove(self, key: str) -> None:
        sql = "DELETE FROM ephemeral_state WHERE scope = %s AND key = %s"
        try:
            with self._pool.connection() as conn:
                conn.execute(sql, (self._scope, key))
                conn.commit()
        except psycopg.Error as e:
            logger.error(f"Ephemeral state delete failed for {key}: {e}")
            raise StateStoreUnavailable(_STATE_SAVE_FAILED) from e


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: bank_onboarding/adapters/repository/postgres.py -> bank_onboarding/migrations/
    migrations_dir = Path(__file__).parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
