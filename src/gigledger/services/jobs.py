"""JobService: unpaid job listing for the caller."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from gigledger.domain.money import ZERO
from gigledger.services.base import BaseService
from gigledger.services.result import ErrorCode, ServiceResult
from gigledger.services.telemetry import traced

if TYPE_CHECKING:
    from gigledger.domain.types import Profile


class JobService(BaseService):
    """Read-side job operations."""

    @traced
    def list_unpaid(self, caller: Profile) -> ServiceResult:
        """Unpaid jobs under the caller's non-terminated contracts."""
        op = "list_unpaid_jobs"
        try:
            items = self._contracts.list_unpaid_jobs_for(caller.id)
        except SQLAlchemyError:
            return ServiceResult.failure(op, ErrorCode.STORAGE_ERROR, "Job listing failed")
        total: Decimal = sum((j.price for j in items), ZERO)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "items": [j.model_dump(mode="json") for j in items],
                "count": len(items),
                "total": str(total),
            },
        )
