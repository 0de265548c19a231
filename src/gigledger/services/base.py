"""BaseService: abstract foundation for all gigledger services.

Every service receives a :class:`Ledger` at construction time. Services
own their transaction boundaries via ``self._ledger.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from gigledger.infrastructure.repositories import AccountStore, ContractRepository

if TYPE_CHECKING:
    from gigledger.infrastructure.ledger import Ledger

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class PaymentService(BaseService):
            def pay_job(self, caller: Profile, job_id: int) -> ServiceResult:
                with self._ledger.transaction() as txn:
                    ...
    """

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger
        self._accounts = AccountStore(ledger.engine)
        self._contracts = ContractRepository(ledger.engine)

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle event. No-op if event bus not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        bus = self._ledger.event_bus
        if bus is None:
            return
        try:
            bus.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
