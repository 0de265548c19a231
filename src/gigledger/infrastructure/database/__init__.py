"""Database engine and schema via SQLAlchemy Core."""

from gigledger.infrastructure.database.engine import begin_write, create_db_engine, init_database
from gigledger.infrastructure.database.schema import (
    Money,
    contracts,
    event_wal,
    jobs,
    metadata,
    profiles,
)

__all__ = [
    "Money",
    "begin_write",
    "contracts",
    "create_db_engine",
    "event_wal",
    "init_database",
    "jobs",
    "metadata",
    "profiles",
]
