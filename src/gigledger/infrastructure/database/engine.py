"""Database engine setup.

SQLite (the default) runs in WAL mode with foreign keys on. Write
transactions opened through :func:`begin_write` start with
``BEGIN IMMEDIATE`` so the write lock is taken up front: two payments
touching the same rows serialize at BEGIN instead of deadlocking on lock
upgrade at their first UPDATE. ``busy_timeout`` bounds how long a
transaction waits for that lock. Every other connection begins a plain
deferred transaction and reads its WAL snapshot without blocking writers.

Any other SQLAlchemy URL (e.g. PostgreSQL) is used as-is; row locks come
from ``SELECT ... FOR UPDATE`` in the repositories and ``lock_timeout`` is
set per transaction by the ledger.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from gigledger.infrastructure.database.schema import metadata

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection

DB_FILENAME = "gigledger.db"

# Connection execution option marking a write transaction.
WRITE_OPTION = "gigledger_write"


def create_db_engine(url: str, *, lock_timeout: float = 5.0, echo: bool = False) -> Engine:
    """Create an engine for *url* with locking configured for payments."""
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_pre_ping=True)

    engine = create_engine(
        url,
        echo=echo,
        connect_args={"timeout": lock_timeout, "check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Hand transaction control to SQLAlchemy's "begin" event below.
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={int(lock_timeout * 1000)}")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn: Any) -> None:
        if conn.get_execution_options().get(WRITE_OPTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")

    return engine


@contextmanager
def begin_write(engine: Engine) -> Iterator[Connection]:
    """Open a write transaction; commits on exit, rolls back on error."""
    with engine.connect() as conn:
        conn.execution_options(**{WRITE_OPTION: True})
        with conn.begin():
            yield conn


def sqlite_url(data_dir: Path) -> str:
    return f"sqlite:///{data_dir / DB_FILENAME}"


def init_database(data_dir: Path, *, url: str | None = None, **engine_kwargs: Any) -> Engine:
    """Initialize the gigledger database and return a ready engine.

    Without an explicit *url* the database lives at
    ``{data_dir}/gigledger.db``; *data_dir* is created if missing.

    Idempotent: safe to call on an existing database.
    """
    if url is None:
        data_dir.mkdir(parents=True, exist_ok=True)
        url = sqlite_url(data_dir)

    engine = create_db_engine(url, **engine_kwargs)
    metadata.create_all(engine)
    return engine
