"""SQLAlchemy Core table definitions for the gigledger database.

Monetary columns use :class:`Money`, which stores integer cents so that
arithmetic done inside SQL (``balance + :delta``) stays exact on every
backend, including SQLite whose NUMERIC affinity would fall back to REAL.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)
from sqlalchemy.types import TypeDecorator

from gigledger.domain.money import from_cents, to_cents


class Money(TypeDecorator[Decimal]):
    """Decimal amount persisted as integer minor units."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> int | None:
        if value is None:
            return None
        return to_cents(value)

    def process_result_value(self, value: Any, dialect: Any) -> Decimal | None:
        if value is None:
            return None
        return from_cents(int(value))


metadata = MetaData()

profiles = Table(
    "profiles",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("first_name", Text, nullable=False),
    Column("last_name", Text, nullable=False),
    Column("profession", Text, nullable=False, default="", server_default=""),
    Column("role", Text, nullable=False),
    Column("balance", Money, nullable=False, default=Decimal("0"), server_default="0"),
    CheckConstraint("balance >= 0", name="ck_profiles_balance_non_negative"),
    CheckConstraint("role IN ('client', 'contractor')", name="ck_profiles_role"),
)

contracts = Table(
    "contracts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("terms", Text, nullable=False, default="", server_default=""),
    Column("client_id", Integer, ForeignKey("profiles.id"), nullable=False),
    Column("contractor_id", Integer, ForeignKey("profiles.id"), nullable=False),
    Column("status", Text, nullable=False, default="new", server_default="new"),
    CheckConstraint("client_id != contractor_id", name="ck_contracts_distinct_parties"),
    CheckConstraint(
        "status IN ('new', 'in_progress', 'terminated')", name="ck_contracts_status"
    ),
)

jobs = Table(
    "jobs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("contract_id", Integer, ForeignKey("contracts.id"), nullable=False),
    Column("description", Text, nullable=False, default="", server_default=""),
    Column("price", Money, nullable=False),
    Column("paid", Boolean, nullable=False, default=False, server_default="0"),
    Column("payment_date", Text),  # ISO 8601 UTC, set once when paid flips
    CheckConstraint("price > 0", name="ck_jobs_price_positive"),
    CheckConstraint(
        "(paid AND payment_date IS NOT NULL) OR (NOT paid AND payment_date IS NULL)",
        name="ck_jobs_payment_date_iff_paid",
    ),
)

Index("ix_contracts_client", contracts.c.client_id)
Index("ix_contracts_contractor", contracts.c.contractor_id)
Index("ix_contracts_status", contracts.c.status)
Index("ix_jobs_contract", jobs.c.contract_id)
Index("ix_jobs_paid", jobs.c.paid)

event_wal = Table(
    "event_wal",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("hook_name", Text, nullable=False),
    Column("job_id", Integer),
    Column("amount", Money),
    Column("payload", Text, nullable=False),  # JSON hook kwargs
    Column("status", Text, nullable=False),
    Column("retries", Integer, nullable=False, default=0, server_default="0"),
    Column("error", Text),
    Column("created_at", Text, nullable=False),
    Column("settled_at", Text),  # set once delivered or dead-lettered
)

Index("ix_event_wal_status", event_wal.c.status)
Index("ix_event_wal_job", event_wal.c.job_id)
