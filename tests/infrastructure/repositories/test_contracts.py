"""Tests for the contract and job repository."""

from datetime import UTC, datetime

from gigledger.domain.types import ContractStatus
from gigledger.infrastructure.ledger import Ledger
from gigledger.infrastructure.repositories import ContractRepository
from tests.conftest import Marketplace


class TestLookups:
    def test_get_contract(self, ledger: Ledger, market: Marketplace) -> None:
        contract = ContractRepository(ledger.engine).get_contract(market.contract)
        assert contract is not None
        assert contract.client_id == market.client
        assert contract.contractor_id == market.contractor
        assert contract.status == ContractStatus.IN_PROGRESS

    def test_terminated_contract_still_readable(self, ledger: Ledger, market: Marketplace) -> None:
        contract = ContractRepository(ledger.engine).get_contract(market.terminated_contract)
        assert contract is not None
        assert contract.status == ContractStatus.TERMINATED

    def test_get_job_with_contract(self, ledger: Ledger, market: Marketplace) -> None:
        found = ContractRepository(ledger.engine).get_job_with_contract(market.job)
        assert found is not None
        job, contract = found
        assert job.id == market.job
        assert contract.id == job.contract_id == market.contract

    def test_get_job_with_contract_missing(self, ledger: Ledger, market: Marketplace) -> None:
        assert ContractRepository(ledger.engine).get_job_with_contract(999) is None

    def test_paid_job_round_trips_payment_date(self, ledger: Ledger, market: Marketplace) -> None:
        job = ContractRepository(ledger.engine).get_job(market.paid_job)
        assert job is not None
        assert job.paid is True
        assert job.payment_date == datetime(2020, 8, 15, 19, 11, 26, tzinfo=UTC)


class TestListings:
    def test_active_contracts_exclude_terminated(
        self, ledger: Ledger, market: Marketplace
    ) -> None:
        items = ContractRepository(ledger.engine).list_active_contracts_for(market.client)
        assert [c.id for c in items] == [market.contract]

    def test_active_contracts_for_contractor(self, ledger: Ledger, market: Marketplace) -> None:
        items = ContractRepository(ledger.engine).list_active_contracts_for(
            market.other_contractor
        )
        assert [c.id for c in items] == [market.poor_contract]

    def test_unpaid_jobs(self, ledger: Ledger, market: Marketplace) -> None:
        repo = ContractRepository(ledger.engine)
        assert [j.id for j in repo.list_unpaid_jobs_for(market.client)] == [market.job]
        assert [j.id for j in repo.list_unpaid_jobs_for(market.poor_client)] == [
            market.poor_job,
            market.cheap_job,
        ]

    def test_unknown_profile_gets_nothing(self, ledger: Ledger, market: Marketplace) -> None:
        repo = ContractRepository(ledger.engine)
        assert repo.list_active_contracts_for(999) == []
        assert repo.list_unpaid_jobs_for(999) == []


class TestMarkPaid:
    def test_flips_once(self, ledger: Ledger, market: Marketplace) -> None:
        repo = ContractRepository(ledger.engine)
        when = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        with ledger.transaction() as txn:
            assert repo.mark_paid(market.job, when, txn)
        with ledger.transaction() as txn:
            assert not repo.mark_paid(market.job, datetime.now(UTC), txn)

        job = repo.get_job(market.job)
        assert job is not None
        assert job.paid is True
        assert job.payment_date == when
