"""Tests for the post-payment outbox."""

from __future__ import annotations

import json
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.engine import Engine

from gigledger.infrastructure.database.schema import event_wal
from gigledger.plugins import EventBus, EventStatus, OutboxEvent, PluginManager, hookimpl

PAYLOAD = {
    "job_id": 1,
    "contract_id": 1,
    "client_id": 1,
    "contractor_id": 2,
    "amount": "200.00",
    "payment_date": "2024-01-01T00:00:00+00:00",
}


class _Recorder:
    def __init__(self) -> None:
        self.amounts: list[str] = []

    @hookimpl
    def post_pay_job(self, amount: str) -> None:
        self.amounts.append(amount)


class _Flaky:
    def __init__(self, failures: int) -> None:
        self.failures = failures

    @hookimpl
    def post_pay_job(self, job_id: int) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("endpoint unavailable")


def _bus(engine: Engine, plugin: object, **kwargs: object) -> EventBus:
    pm = PluginManager()
    pm.register(plugin)
    return EventBus(engine, pm, **kwargs)  # type: ignore[arg-type]


def _only(bus: EventBus) -> OutboxEvent:
    (event,) = bus.events()
    return event


class TestDispatch:
    def test_sync_dispatch_delivers(self, db_engine: Engine) -> None:
        recorder = _Recorder()
        bus = _bus(db_engine, recorder, sync=True)

        event_id = bus.dispatch("post_pay_job", PAYLOAD)

        assert recorder.amounts == ["200.00"]
        event = _only(bus)
        assert event.id == event_id
        assert event.status is EventStatus.DELIVERED
        assert event.retries == 0
        assert event.settled_at is not None

    def test_job_and_amount_are_recorded(self, db_engine: Engine) -> None:
        bus = _bus(db_engine, _Recorder(), sync=True)
        event_id = bus.dispatch("post_pay_job", PAYLOAD)

        event = _only(bus)
        assert event.job_id == 1
        assert event.amount == Decimal("200.00")
        assert event.to_dict()["amount"] == "200.00"
        with db_engine.connect() as conn:
            raw = conn.execute(
                select(event_wal.c.payload).where(event_wal.c.id == event_id)
            ).scalar_one()
        assert json.loads(raw) == PAYLOAD

    def test_async_dispatch_delivers_by_shutdown(self, db_engine: Engine) -> None:
        recorder = _Recorder()
        bus = _bus(db_engine, recorder)

        bus.dispatch("post_pay_job", PAYLOAD)
        bus.shutdown()

        assert recorder.amounts == ["200.00"]
        assert _only(bus).status is EventStatus.DELIVERED

    def test_unknown_hook_is_delivered(self, db_engine: Engine) -> None:
        bus = _bus(db_engine, _Recorder(), sync=True)
        bus.dispatch("no_such_hook", {})

        event = _only(bus)
        assert event.status is EventStatus.DELIVERED
        assert event.job_id is None
        assert event.amount is None


class TestFailures:
    def test_failure_marks_failed(self, db_engine: Engine) -> None:
        bus = _bus(db_engine, _Flaky(failures=1), sync=True)
        bus.dispatch("post_pay_job", PAYLOAD)

        event = _only(bus)
        assert event.status is EventStatus.FAILED
        assert event.retries == 1
        assert event.error == "endpoint unavailable"
        assert event.settled_at is None
        assert bus.events(EventStatus.DELIVERED) == []

    def test_redeliver_retries_failed_events(self, db_engine: Engine) -> None:
        bus = _bus(db_engine, _Flaky(failures=1), sync=True)
        event_id = bus.dispatch("post_pay_job", PAYLOAD)

        retried = bus.redeliver()

        assert [(e.id, e.status) for e in retried] == [(event_id, EventStatus.DELIVERED)]
        assert retried[0].error is None

    def test_dead_letter_after_max_retries(self, db_engine: Engine) -> None:
        bus = _bus(db_engine, _Flaky(failures=10), sync=True, max_retries=2)
        bus.dispatch("post_pay_job", PAYLOAD)
        bus.redeliver()

        event = _only(bus)
        assert event.status is EventStatus.DEAD_LETTER
        assert event.retries == 2
        assert event.settled_at is not None
        assert bus.redeliver() == []

    def test_delivered_events_are_not_redelivered(self, db_engine: Engine) -> None:
        recorder = _Recorder()
        bus = _bus(db_engine, recorder, sync=True)
        bus.dispatch("post_pay_job", PAYLOAD)

        assert bus.redeliver() == []
        assert recorder.amounts == ["200.00"]
