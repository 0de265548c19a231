"""Shared connection handling for repositories."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from gigledger.infrastructure.ledger import LedgerTransaction


class SqlRepository:
    """Base for repositories that read either inside or outside a transaction."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def _conn(self, txn: LedgerTransaction | None) -> Iterator[Connection]:
        """Use the caller's transaction if given, else a short-lived connection."""
        if txn is not None:
            yield txn.conn
            return
        with self._engine.connect() as conn:
            yield conn
