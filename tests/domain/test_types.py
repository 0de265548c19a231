"""Tests for profile, contract, and job value types."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from gigledger.domain.types import Contract, ContractStatus, Job, Profile, Role


class TestProfile:
    def test_construction(self) -> None:
        p = Profile(id=1, first_name="Harry", last_name="Potter", role=Role.CLIENT, balance="10")
        assert p.balance == Decimal("10.00")
        assert p.full_name == "Harry Potter"

    def test_negative_balance_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Profile(id=1, first_name="a", last_name="b", role=Role.CLIENT, balance="-1")

    def test_float_balance_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Profile(id=1, first_name="a", last_name="b", role=Role.CLIENT, balance=1.5)

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Profile(id=1, first_name="a", last_name="b", role="admin")

    def test_frozen(self) -> None:
        p = Profile(id=1, first_name="a", last_name="b", role=Role.CLIENT)
        with pytest.raises(ValidationError):
            p.balance = Decimal("100")  # type: ignore[misc]

    def test_json_dump_keeps_exact_amount(self) -> None:
        p = Profile(id=1, first_name="a", last_name="b", role=Role.CONTRACTOR, balance="0.30")
        assert p.model_dump(mode="json")["balance"] == "0.30"


class TestContract:
    def test_same_party_rejected(self) -> None:
        with pytest.raises(ValidationError, match="itself"):
            Contract(id=1, client_id=3, contractor_id=3)

    def test_is_active(self) -> None:
        assert Contract(id=1, client_id=1, contractor_id=2).is_active
        terminated = Contract(id=1, client_id=1, contractor_id=2, status=ContractStatus.TERMINATED)
        assert not terminated.is_active


class TestJob:
    def test_unpaid_job(self) -> None:
        job = Job(id=1, contract_id=1, price="200")
        assert job.price == Decimal("200.00")
        assert job.paid is False
        assert job.payment_date is None

    def test_paid_requires_payment_date(self) -> None:
        with pytest.raises(ValidationError):
            Job(id=1, contract_id=1, price="1", paid=True)

    def test_payment_date_requires_paid(self) -> None:
        with pytest.raises(ValidationError):
            Job(id=1, contract_id=1, price="1", payment_date=datetime.now(UTC))

    @pytest.mark.parametrize("price", ["0", "-5"])
    def test_price_must_be_positive(self, price: str) -> None:
        with pytest.raises(ValidationError):
            Job(id=1, contract_id=1, price=price)
