"""Post-payment notification outbox.

Every hook call is first recorded in ``event_wal`` together with the job
and amount it concerns, then delivered to plugins inline (``--sync``) or
on a small thread pool. A failed delivery stays in the outbox as
``failed`` until :meth:`EventBus.redeliver` gets it through or
``max_retries`` attempts have been spent, after which it is parked as
``dead_letter`` for ``gigledger events list``.

INVARIANT: Plugin failures are warnings, never errors. A payment that has
committed stays committed whatever its plugins do.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import case, insert, select, update

from gigledger.infrastructure.database.engine import begin_write
from gigledger.infrastructure.database.schema import event_wal
from gigledger.services._helpers import now_iso

if TYPE_CHECKING:
    from decimal import Decimal

    from sqlalchemy.engine import Engine

    from gigledger.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class EventStatus(StrEnum):
    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"
    DEAD_LETTER = "dead_letter"


_RETRYABLE = (EventStatus.PENDING.value, EventStatus.FAILED.value)


@dataclass(frozen=True)
class OutboxEvent:
    """One row of the outbox."""

    id: int
    hook_name: str
    status: EventStatus
    retries: int
    job_id: int | None
    amount: Decimal | None
    error: str | None
    created_at: str
    settled_at: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "hook_name": self.hook_name,
            "status": self.status.value,
            "retries": self.retries,
            "job_id": self.job_id,
            "amount": None if self.amount is None else str(self.amount),
            "error": self.error,
            "created_at": self.created_at,
            "settled_at": self.settled_at,
        }


def _row_to_event(row: Any) -> OutboxEvent:
    return OutboxEvent(
        id=row.id,
        hook_name=row.hook_name,
        status=EventStatus(row.status),
        retries=row.retries,
        job_id=row.job_id,
        amount=row.amount,
        error=row.error,
        created_at=row.created_at,
        settled_at=row.settled_at,
    )


class EventBus:
    """Record-then-deliver dispatch of plugin hooks.

    Parameters:
        engine: Engine holding the ``event_wal`` table.
        plugin_manager: Manager whose hooks receive the events.
        sync: Deliver inline instead of on the thread pool.
        max_retries: Failed attempts before an event is dead-lettered.
        max_workers: Delivery thread count.
    """

    def __init__(
        self,
        engine: Engine,
        plugin_manager: PluginManager,
        *,
        sync: bool = False,
        max_retries: int = 3,
        max_workers: int = 2,
    ) -> None:
        self._engine = engine
        self._pm = plugin_manager
        self._max_retries = max_retries
        self._pool: ThreadPoolExecutor | None = (
            None
            if sync
            else ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="gigledger-events")
        )
        self._in_flight: list[Future[None]] = []

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> int:
        """Record the event, then deliver it. Returns the outbox row id."""
        event_id = self._record(hook_name, payload)
        if self._pool is None:
            self._deliver(event_id, hook_name, payload)
        else:
            self._in_flight.append(
                self._pool.submit(self._deliver, event_id, hook_name, payload)
            )
        return event_id

    def events(self, status: EventStatus | None = None) -> list[OutboxEvent]:
        """Outbox rows in id order, optionally only those in *status*."""
        stmt = select(event_wal).order_by(event_wal.c.id)
        if status is not None:
            stmt = stmt.where(event_wal.c.status == status.value)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).all()
        return [_row_to_event(r) for r in rows]

    def redeliver(self) -> list[OutboxEvent]:
        """Retry every pending or failed event inline and return their new state."""
        self._wait_in_flight()
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(event_wal.c.id, event_wal.c.hook_name, event_wal.c.payload)
                .where(event_wal.c.status.in_(_RETRYABLE))
                .order_by(event_wal.c.id)
            ).all()
        for row in rows:
            self._deliver(row.id, row.hook_name, json.loads(row.payload))

        retried = {row.id for row in rows}
        return [e for e in self.events() if e.id in retried]

    def shutdown(self) -> None:
        """Finish in-flight deliveries and stop the thread pool."""
        self._wait_in_flight()
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def _record(self, hook_name: str, payload: dict[str, Any]) -> int:
        with begin_write(self._engine) as conn:
            result = conn.execute(
                insert(event_wal).values(
                    hook_name=hook_name,
                    job_id=payload.get("job_id"),
                    amount=payload.get("amount"),
                    payload=json.dumps(payload),
                    status=EventStatus.PENDING.value,
                    created_at=now_iso(),
                )
            )
        return int(result.inserted_primary_key[0])

    def _deliver(self, event_id: int, hook_name: str, payload: dict[str, Any]) -> None:
        hook = getattr(self._pm.hook, hook_name, None)
        error: str | None = None
        if hook is not None:
            try:
                hook(**payload)
            except Exception as exc:
                logger.warning("Hook %s failed for event %d: %s", hook_name, event_id, exc)
                error = str(exc) or type(exc).__name__
        self._settle(event_id, error)

    def _settle(self, event_id: int, error: str | None) -> None:
        """Mark an attempt's outcome in a single UPDATE."""
        stmt = update(event_wal).where(event_wal.c.id == event_id)
        if error is None:
            stmt = stmt.values(
                status=EventStatus.DELIVERED.value, error=None, settled_at=now_iso()
            )
        else:
            exhausted = event_wal.c.retries + 1 >= self._max_retries
            stmt = stmt.values(
                retries=event_wal.c.retries + 1,
                error=error,
                status=case(
                    (exhausted, EventStatus.DEAD_LETTER.value),
                    else_=EventStatus.FAILED.value,
                ),
                settled_at=case((exhausted, now_iso()), else_=None),
            )
        with begin_write(self._engine) as conn:
            conn.execute(stmt)

    def _wait_in_flight(self) -> None:
        done, _ = wait(self._in_flight, timeout=30)
        for future in done:
            exc = future.exception()
            if exc is not None:
                logger.warning("Event delivery task crashed: %s", exc)
        self._in_flight.clear()
