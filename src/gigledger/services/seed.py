"""SeedService: load profiles, contracts, and jobs from a TOML file.

Seed files look like::

    [[profiles]]
    id = 1
    first_name = "Harry"
    last_name = "Potter"
    profession = "Wizard"
    role = "client"
    balance = "1150.00"

    [[contracts]]
    id = 1
    client_id = 1
    contractor_id = 5
    status = "in_progress"

    [[jobs]]
    contract_id = 1
    description = "work"
    price = "200.00"

Amounts are strings or integers; TOML floats are rejected. The file is
validated as a whole before anything is written, then loaded in one
transaction, so a bad row leaves the database untouched.
"""

from __future__ import annotations

import tomllib
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, BeforeValidator, ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from gigledger.domain.money import to_amount
from gigledger.domain.types import ContractStatus, Role
from gigledger.services.base import BaseService
from gigledger.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

Amount = Annotated[Decimal, BeforeValidator(to_amount)]


class _Row(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}


class _ProfileRow(_Row):
    id: int | None = None
    first_name: str
    last_name: str
    profession: str = ""
    role: Role
    balance: Amount = Decimal("0.00")


class _ContractRow(_Row):
    id: int | None = None
    client_id: int
    contractor_id: int
    terms: str = ""
    status: ContractStatus = ContractStatus.NEW


class _JobRow(_Row):
    id: int | None = None
    contract_id: int
    description: str = ""
    price: Amount
    paid: bool = False
    payment_date: datetime | None = None


class SeedFile(BaseModel):
    """Shape of a seed file: three optional arrays of tables."""

    model_config = {"extra": "forbid", "frozen": True}

    profiles: list[_ProfileRow] = []
    contracts: list[_ContractRow] = []
    jobs: list[_JobRow] = []


class SeedService(BaseService):
    """Bulk-load marketplace records."""

    def load(self, path: Path) -> ServiceResult:
        op = "seed"
        try:
            raw = tomllib.loads(path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_INPUT, f"Cannot read seed file: {exc}"
            )
        try:
            seed = SeedFile.model_validate(raw)
        except ValidationError as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, f"Invalid seed data: {exc}")

        try:
            with self._ledger.transaction() as txn:
                for p in seed.profiles:
                    self._accounts.add_profile(
                        txn,
                        profile_id=p.id,
                        first_name=p.first_name,
                        last_name=p.last_name,
                        profession=p.profession,
                        role=p.role,
                        balance=p.balance,
                    )
                for c in seed.contracts:
                    self._contracts.add_contract(
                        txn,
                        contract_id=c.id,
                        client_id=c.client_id,
                        contractor_id=c.contractor_id,
                        terms=c.terms,
                        status=c.status,
                    )
                for j in seed.jobs:
                    self._contracts.add_job(
                        txn,
                        job_id=j.id,
                        contract_id=j.contract_id,
                        description=j.description,
                        price=j.price,
                        paid=j.paid,
                        payment_date=j.payment_date,
                    )
        except (ValueError, IntegrityError) as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, f"Invalid seed data: {exc}")
        except SQLAlchemyError as exc:
            return ServiceResult.failure(op, ErrorCode.STORAGE_ERROR, f"Seeding failed: {exc}")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(path),
                "profiles": len(seed.profiles),
                "contracts": len(seed.contracts),
                "jobs": len(seed.jobs),
            },
        )
