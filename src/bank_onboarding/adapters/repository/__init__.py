"""Repository adapters - Database and in-memory store implementations."""

from .memory import InMemoryEphemeralStore
from .postgres import PostgresEphemeralStore, PostgresProfileRecordStore, run_migrations

__all__ = [
    "InMemoryEphemeralStore",
    "PostgresEphemeralStore",
    "PostgresProfileRecordStore",
    "run_migrations",
]
