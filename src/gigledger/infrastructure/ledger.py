"""Ledger: owner of the database engine and transaction boundaries.

The Ledger is the single dependency injected into every service. Services
own their transaction boundaries via ``ledger.transaction()``; the yielded
:class:`LedgerTransaction` is the ``txn`` handle the account store and the
contract repository take for every write.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import text

from gigledger.infrastructure.database.engine import begin_write, init_database

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from gigledger.config.settings import GigSettings
    from gigledger.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


@dataclass
class LedgerTransaction:
    """Active transaction context.

    Everything executed on :attr:`conn` commits together when the
    ``with`` block exits normally and rolls back if it raises.
    """

    conn: Connection

    @property
    def supports_row_locks(self) -> bool:
        """Whether ``SELECT ... FOR UPDATE`` takes real row locks here."""
        return self.conn.dialect.name != "sqlite"


class Ledger:
    """Repository root wrapping the SQLAlchemy engine.

    Constructed once from :class:`GigSettings` and shared by all services
    for the lifetime of the process.
    """

    def __init__(self, settings: GigSettings) -> None:
        self._settings = settings
        db = settings.database
        self._engine: Engine = init_database(
            settings.data_dir,
            url=db.url,
            lock_timeout=db.lock_timeout,
            echo=db.echo,
        )
        self._event_bus: EventBus | None = None

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> GigSettings:
        return self._settings

    @property
    def event_bus(self) -> EventBus | None:
        """The plugin event bus (None if not initialized)."""
        return self._event_bus

    def init_event_bus(self, *, sync: bool = False) -> None:
        """Create the plugin manager, discover plugins, and wire the event bus."""
        from gigledger.plugins.event_bus import EventBus
        from gigledger.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover()
        self._event_bus = EventBus(self._engine, pm, sync=sync)

    @contextmanager
    def transaction(self) -> Iterator[LedgerTransaction]:
        """Run a block atomically.

        On SQLite the transaction begins with ``BEGIN IMMEDIATE`` (see
        :func:`~gigledger.infrastructure.database.engine.begin_write`), while
        reads outside a transaction never take the write lock. On PostgreSQL
        the configured lock timeout is applied with ``SET LOCAL`` so a
        blocked row lock surfaces as an error instead of waiting forever.

        Usage::

            with ledger.transaction() as txn:
                accounts.apply_delta(client_id, -price, txn)
                accounts.apply_delta(contractor_id, price, txn)
                # Both commit on success, both roll back on failure.
        """
        with begin_write(self._engine) as conn:
            if conn.dialect.name == "postgresql":
                timeout_ms = int(self._settings.database.lock_timeout * 1000)
                conn.execute(text(f"SET LOCAL lock_timeout = {timeout_ms}"))
            yield LedgerTransaction(conn=conn)

    def close(self) -> None:
        """Flush the event bus and release pooled connections."""
        if self._event_bus is not None:
            self._event_bus.shutdown()
            self._event_bus = None
        self._engine.dispose()
