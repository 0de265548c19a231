"""PaymentService: pay a job by moving its price from client to contractor.

Everything happens inside one ledger transaction:

1. job exists                      → else NOT_FOUND
2. caller is a client              → else FORBIDDEN
3. caller is the contract's client → else FORBIDDEN
4. job is unpaid                   → else ALREADY_PAID
5. client balance covers the price → else INSUFFICIENT_FUNDS

then debit client, credit contractor, mark the job paid. Checks 4 and 5
are made against rows read under lock (profiles by ascending id, then the
job), and every write is itself conditional, so a payment that loses a race
rolls back and reports ALREADY_PAID or INSUFFICIENT_FUNDS instead of moving
money twice.

There is no retry loop here. STORAGE_ERROR results are retryable by the
caller; re-running a payment that already committed returns ALREADY_PAID.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy.exc import SQLAlchemyError

from gigledger.domain.guard import is_contract_client, require_role
from gigledger.domain.types import Role
from gigledger.services._helpers import utcnow
from gigledger.services.base import BaseService
from gigledger.services.result import ErrorCode, ServiceResult
from gigledger.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from gigledger.domain.types import Profile

log = structlog.get_logger(__name__)

_OP = "pay_job"


class _PaymentAborted(Exception):
    """Raised inside the transaction block so the ledger rolls back."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class PaymentService(BaseService):
    """The payment engine."""

    @traced
    def pay_job(self, caller: Profile, job_id: int) -> ServiceResult:
        """Pay job *job_id* on behalf of *caller*.

        On success ``data`` holds the paid job plus both post-transfer
        balances.
        """
        bound = log.bind(job_id=job_id, caller_id=caller.id)
        try:
            with self._ledger.transaction() as txn:
                found = self._contracts.get_job_with_contract(job_id, txn)
                if found is None:
                    raise _PaymentAborted(ErrorCode.NOT_FOUND, f"No job found with ID: {job_id}")
                job, contract = found

                if not require_role(caller, Role.CLIENT):
                    raise _PaymentAborted(ErrorCode.FORBIDDEN, "Forbidden: not a client")
                if not is_contract_client(caller.id, contract):
                    raise _PaymentAborted(ErrorCode.FORBIDDEN, "Forbidden: not owner")

                with trace_span("lock_rows"):
                    parties = self._accounts.lock_profiles(
                        [contract.client_id, contract.contractor_id], txn
                    )
                    locked_job = self._contracts.lock_job(job_id, txn)
                if locked_job is None:
                    raise _PaymentAborted(ErrorCode.NOT_FOUND, f"No job found with ID: {job_id}")
                if locked_job.paid:
                    raise _PaymentAborted(ErrorCode.ALREADY_PAID, f"Job {job_id} is already paid")

                client = parties.get(contract.client_id)
                contractor = parties.get(contract.contractor_id)
                if client is None or contractor is None:
                    raise _PaymentAborted(
                        ErrorCode.NOT_FOUND, f"Contract {contract.id} references a missing profile"
                    )
                price = locked_job.price
                if client.balance < price:
                    raise _PaymentAborted(
                        ErrorCode.INSUFFICIENT_FUNDS,
                        f"Insufficient funds: balance {client.balance} < price {price}",
                    )

                with trace_span("transfer"):
                    if not self._accounts.apply_delta(client.id, -price, txn):
                        raise _PaymentAborted(
                            ErrorCode.INSUFFICIENT_FUNDS, "Insufficient funds at debit"
                        )
                    if not self._accounts.apply_delta(contractor.id, price, txn):
                        raise _PaymentAborted(
                            ErrorCode.NOT_FOUND, f"Contractor {contractor.id} not found at credit"
                        )
                    if not self._contracts.mark_paid(job_id, utcnow(), txn):
                        raise _PaymentAborted(
                            ErrorCode.ALREADY_PAID, f"Job {job_id} is already paid"
                        )

                paid_job = self._contracts.get_job(job_id, txn)
                if paid_job is None:
                    raise _PaymentAborted(
                        ErrorCode.NOT_FOUND, f"Job {job_id} vanished before commit"
                    )
                client_balance = self._accounts.get_balance(client.id, txn)
                contractor_balance = self._accounts.get_balance(contractor.id, txn)
        except _PaymentAborted as exc:
            bound.info("payment.rejected", code=exc.code.value, reason=exc.message)
            return ServiceResult.failure(_OP, exc.code, exc.message, job_id=job_id)
        except SQLAlchemyError as exc:
            bound.warning("payment.storage_error", error=str(exc))
            return ServiceResult.failure(
                _OP,
                ErrorCode.STORAGE_ERROR,
                "Payment could not be committed; no changes were made",
                job_id=job_id,
            )

        bound.info(
            "payment.committed",
            contract_id=contract.id,
            contractor_id=contractor.id,
            amount=str(price),
        )

        warnings: list[str] = []
        self._dispatch_event(
            "post_pay_job",
            {
                "job_id": job_id,
                "contract_id": contract.id,
                "client_id": client.id,
                "contractor_id": contractor.id,
                "amount": str(price),
                "payment_date": paid_job.payment_date.isoformat() if paid_job.payment_date else "",
            },
            warnings,
        )

        return ServiceResult(
            ok=True,
            op=_OP,
            data={
                **paid_job.model_dump(mode="json"),
                "client_balance": str(client_balance),
                "contractor_balance": str(contractor_balance),
            },
            warnings=warnings,
        )
