"""ContractService: contract lookup and listings scoped to the caller."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from gigledger.domain.guard import can_access_contract
from gigledger.services.base import BaseService
from gigledger.services.result import ErrorCode, ServiceResult
from gigledger.services.telemetry import traced

if TYPE_CHECKING:
    from gigledger.domain.types import Profile


class ContractService(BaseService):
    """Read-side contract operations."""

    @traced
    def get_contract(self, caller: Profile, contract_id: int) -> ServiceResult:
        """Return a contract the caller is a party to."""
        op = "get_contract"
        try:
            contract = self._contracts.get_contract(contract_id)
        except SQLAlchemyError:
            return ServiceResult.failure(op, ErrorCode.STORAGE_ERROR, "Contract lookup failed")

        if contract is None:
            return ServiceResult.failure(
                op, ErrorCode.NOT_FOUND, f"No contract found with ID: {contract_id}"
            )
        if not can_access_contract(caller.id, contract):
            return ServiceResult.failure(
                op,
                ErrorCode.FORBIDDEN,
                "Forbidden: contract does not belong to the calling profile",
                contract_id=contract_id,
            )
        return ServiceResult(ok=True, op=op, data=contract.model_dump(mode="json"))

    @traced
    def list_contracts(self, caller: Profile) -> ServiceResult:
        """Non-terminated contracts where the caller is client or contractor."""
        op = "list_contracts"
        try:
            items = self._contracts.list_active_contracts_for(caller.id)
        except SQLAlchemyError:
            return ServiceResult.failure(op, ErrorCode.STORAGE_ERROR, "Contract listing failed")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "items": [c.model_dump(mode="json") for c in items],
                "count": len(items),
            },
        )
