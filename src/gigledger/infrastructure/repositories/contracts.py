"""Contract and job repository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import false, insert, or_, select, update

from gigledger.domain.money import to_amount
from gigledger.domain.types import Contract, ContractStatus, Job
from gigledger.infrastructure.database.schema import contracts, jobs
from gigledger.infrastructure.repositories._base import SqlRepository

if TYPE_CHECKING:
    from gigledger.infrastructure.ledger import LedgerTransaction


def _row_to_contract(row: Any) -> Contract:
    return Contract(
        id=row.id,
        terms=row.terms,
        client_id=row.client_id,
        contractor_id=row.contractor_id,
        status=ContractStatus(row.status),
    )


def _row_to_job(row: Any) -> Job:
    payment_date = datetime.fromisoformat(row.payment_date) if row.payment_date else None
    return Job(
        id=row.id,
        contract_id=row.contract_id,
        description=row.description,
        price=row.price,
        paid=bool(row.paid),
        payment_date=payment_date,
    )


class ContractRepository(SqlRepository):
    """Lookups, status filtering, and the paid transition for jobs."""

    def get_contract(
        self, contract_id: int, txn: LedgerTransaction | None = None
    ) -> Contract | None:
        with self._conn(txn) as conn:
            row = conn.execute(select(contracts).where(contracts.c.id == contract_id)).first()
        return _row_to_contract(row) if row is not None else None

    def get_job(self, job_id: int, txn: LedgerTransaction | None = None) -> Job | None:
        with self._conn(txn) as conn:
            row = conn.execute(select(jobs).where(jobs.c.id == job_id)).first()
        return _row_to_job(row) if row is not None else None

    def get_job_with_contract(
        self, job_id: int, txn: LedgerTransaction | None = None
    ) -> tuple[Job, Contract] | None:
        """Fetch a job together with its parent contract in one query."""
        stmt = (
            select(
                jobs,
                contracts.c.terms,
                contracts.c.client_id,
                contracts.c.contractor_id,
                contracts.c.status,
            )
            .join(contracts, jobs.c.contract_id == contracts.c.id)
            .where(jobs.c.id == job_id)
        )
        with self._conn(txn) as conn:
            row = conn.execute(stmt).first()
        if row is None:
            return None
        contract = Contract(
            id=row.contract_id,
            terms=row.terms,
            client_id=row.client_id,
            contractor_id=row.contractor_id,
            status=ContractStatus(row.status),
        )
        return _row_to_job(row), contract

    def lock_job(self, job_id: int, txn: LedgerTransaction) -> Job | None:
        """Re-read a job under a row lock (``FOR UPDATE`` where supported)."""
        stmt = select(jobs).where(jobs.c.id == job_id)
        if txn.supports_row_locks:
            stmt = stmt.with_for_update()
        row = txn.conn.execute(stmt).first()
        return _row_to_job(row) if row is not None else None

    def mark_paid(self, job_id: int, payment_date: datetime, txn: LedgerTransaction) -> bool:
        """Flip ``paid`` to true and stamp *payment_date*.

        Returns False if the job was already paid (or does not exist);
        the guard in the WHERE clause makes the transition happen once.
        """
        result = txn.conn.execute(
            update(jobs)
            .where(jobs.c.id == job_id, jobs.c.paid == false())
            .values(paid=True, payment_date=payment_date.isoformat())
        )
        return result.rowcount == 1

    def list_active_contracts_for(self, profile_id: int) -> list[Contract]:
        """Non-terminated contracts where *profile_id* is client or contractor."""
        stmt = (
            select(contracts)
            .where(
                or_(contracts.c.client_id == profile_id, contracts.c.contractor_id == profile_id),
                contracts.c.status != ContractStatus.TERMINATED.value,
            )
            .order_by(contracts.c.id)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).all()
        return [_row_to_contract(r) for r in rows]

    def list_unpaid_jobs_for(self, profile_id: int) -> list[Job]:
        """Unpaid jobs under the profile's non-terminated contracts."""
        stmt = (
            select(jobs)
            .join(contracts, jobs.c.contract_id == contracts.c.id)
            .where(
                or_(contracts.c.client_id == profile_id, contracts.c.contractor_id == profile_id),
                contracts.c.status != ContractStatus.TERMINATED.value,
                jobs.c.paid == false(),
            )
            .order_by(jobs.c.id)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).all()
        return [_row_to_job(r) for r in rows]

    def add_contract(
        self,
        txn: LedgerTransaction,
        *,
        client_id: int,
        contractor_id: int,
        terms: str = "",
        status: ContractStatus | str = ContractStatus.NEW,
        contract_id: int | None = None,
    ) -> Contract:
        values: dict[str, Any] = {
            "client_id": client_id,
            "contractor_id": contractor_id,
            "terms": terms,
            "status": ContractStatus(status).value,
        }
        if contract_id is not None:
            values["id"] = contract_id
        result = txn.conn.execute(insert(contracts).values(**values))
        new_id = contract_id if contract_id is not None else result.inserted_primary_key[0]
        contract = self.get_contract(int(new_id), txn)
        assert contract is not None
        return contract

    def add_job(
        self,
        txn: LedgerTransaction,
        *,
        contract_id: int,
        price: Decimal | int | str,
        description: str = "",
        paid: bool = False,
        payment_date: datetime | None = None,
        job_id: int | None = None,
    ) -> Job:
        values: dict[str, Any] = {
            "contract_id": contract_id,
            "price": to_amount(price),
            "description": description,
            "paid": paid,
            "payment_date": payment_date.isoformat() if payment_date else None,
        }
        if job_id is not None:
            values["id"] = job_id
        result = txn.conn.execute(insert(jobs).values(**values))
        new_id = job_id if job_id is not None else result.inserted_primary_key[0]
        job = self.get_job(int(new_id), txn)
        assert job is not None
        return job
