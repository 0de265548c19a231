"""Value types for profiles, contracts, and jobs.

Repositories return these frozen models; nothing in the domain holds a
database handle or loads related records lazily. Relationships are plain
foreign-key fields.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, field_validator, model_validator

from gigledger.domain.money import ZERO, to_amount


class Role(StrEnum):
    """Which side of a contract a profile takes."""

    CLIENT = "client"
    CONTRACTOR = "contractor"


class ContractStatus(StrEnum):
    """Contract lifecycle status. Terminated contracts stay readable."""

    NEW = "new"
    IN_PROGRESS = "in_progress"
    TERMINATED = "terminated"


class Profile(BaseModel):
    """A marketplace participant holding a balance."""

    model_config = {"frozen": True}

    id: int
    first_name: str
    last_name: str
    profession: str = ""
    role: Role
    balance: Decimal = ZERO

    @field_validator("balance", mode="before")
    @classmethod
    def _exact_balance(cls, value: Any) -> Decimal:
        amount = to_amount(value)
        if amount < 0:
            msg = f"Balance must not be negative: {amount}"
            raise ValueError(msg)
        return amount

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Contract(BaseModel):
    """An agreement between one client and one contractor."""

    model_config = {"frozen": True}

    id: int
    terms: str = ""
    client_id: int
    contractor_id: int
    status: ContractStatus = ContractStatus.NEW

    @model_validator(mode="after")
    def _distinct_parties(self) -> Contract:
        if self.client_id == self.contractor_id:
            msg = f"Contract {self.id} binds profile {self.client_id} to itself"
            raise ValueError(msg)
        return self

    @property
    def is_active(self) -> bool:
        return self.status != ContractStatus.TERMINATED


class Job(BaseModel):
    """A priced unit of work under a contract, payable at most once."""

    model_config = {"frozen": True}

    id: int
    contract_id: int
    description: str = ""
    price: Decimal
    paid: bool = False
    payment_date: datetime | None = None

    @field_validator("price", mode="before")
    @classmethod
    def _exact_price(cls, value: Any) -> Decimal:
        amount = to_amount(value)
        if amount <= 0:
            msg = f"Price must be positive: {amount}"
            raise ValueError(msg)
        return amount

    @model_validator(mode="after")
    def _payment_date_matches_paid(self) -> Job:
        # payment_date is null iff the job is unpaid
        if self.paid != (self.payment_date is not None):
            msg = f"Job {self.id}: paid={self.paid} with payment_date={self.payment_date}"
            raise ValueError(msg)
        return self
