"""EventService: inspect and redeliver post-payment plugin events."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from gigledger.plugins.event_bus import EventStatus
from gigledger.services.base import BaseService
from gigledger.services.result import ErrorCode, ServiceResult


class EventService(BaseService):
    """Operator view of the plugin outbox."""

    def list_events(self, status: str | None = None) -> ServiceResult:
        op = "list_events"
        bus = self._ledger.event_bus
        if bus is None:
            return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, "Plugins are disabled")
        try:
            wanted = EventStatus(status) if status else None
        except ValueError:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_INPUT, f"Unknown event status: {status}"
            )
        try:
            events = bus.events(wanted)
        except SQLAlchemyError:
            return ServiceResult.failure(op, ErrorCode.STORAGE_ERROR, "Event listing failed")
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": [e.to_dict() for e in events], "count": len(events)},
        )

    def redeliver(self) -> ServiceResult:
        """Retry pending and failed events. Dead letters come back as warnings."""
        op = "redeliver_events"
        bus = self._ledger.event_bus
        if bus is None:
            return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, "Plugins are disabled")
        try:
            events = bus.redeliver()
        except SQLAlchemyError:
            return ServiceResult.failure(op, ErrorCode.STORAGE_ERROR, "Event redelivery failed")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "items": [e.to_dict() for e in events],
                "count": len(events),
                "delivered": sum(e.status is EventStatus.DELIVERED for e in events),
            },
            warnings=[
                f"Event {e.id} (job {e.job_id}) dead-lettered: {e.error}"
                for e in events
                if e.status is EventStatus.DEAD_LETTER
            ],
        )
