"""Shared pytest fixtures and test helpers for gigledger tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from gigledger.config.settings import GigSettings
from gigledger.domain.types import ContractStatus, Role
from gigledger.infrastructure.database.engine import init_database
from gigledger.infrastructure.ledger import Ledger
from gigledger.infrastructure.repositories import AccountStore, ContractRepository
from gigledger.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host GIGLEDGER_* variables out of the tests."""
    for var in ("GIGLEDGER_CONFIG", "GIGLEDGER_PROFILE_ID"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo logging and telemetry setup done by the CLI or logging tests."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("gigledger").setLevel(logging.NOTSET)
    disable_telemetry()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / ".gigledger")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path) -> GigSettings:
    return GigSettings.from_cli(root=tmp_path)


@pytest.fixture
def ledger(settings: GigSettings) -> Ledger:
    """Ledger on a temporary file-backed SQLite database."""
    led = Ledger(settings)
    try:
        yield led
    finally:
        led.close()


@dataclass(frozen=True)
class Marketplace:
    """Ids of the records created by :func:`seed_marketplace`."""

    client: int = 1  # balance 500
    contractor: int = 2  # balance 100
    poor_client: int = 3  # balance 50
    other_contractor: int = 4  # balance 0
    contract: int = 1  # client ↔ contractor, in progress
    poor_contract: int = 2  # poor_client ↔ other_contractor, new
    terminated_contract: int = 3  # client ↔ other_contractor, terminated
    job: int = 1  # 200 on contract, unpaid
    poor_job: int = 2  # 200 on poor_contract, unpaid
    paid_job: int = 3  # 100 on contract, paid
    terminated_job: int = 4  # 50 on terminated_contract, unpaid
    cheap_job: int = 5  # 25 on poor_contract, unpaid


def seed_marketplace(ledger: Ledger) -> Marketplace:
    """Create a small marketplace matching :class:`Marketplace`."""
    from datetime import UTC, datetime

    m = Marketplace()
    accounts = AccountStore(ledger.engine)
    repo = ContractRepository(ledger.engine)
    with ledger.transaction() as txn:
        accounts.add_profile(
            txn, profile_id=m.client, first_name="Harry", last_name="Potter",
            profession="Wizard", role=Role.CLIENT, balance="500.00",
        )
        accounts.add_profile(
            txn, profile_id=m.contractor, first_name="Linus", last_name="Torvalds",
            profession="Programmer", role=Role.CONTRACTOR, balance="100.00",
        )
        accounts.add_profile(
            txn, profile_id=m.poor_client, first_name="John", last_name="Snow",
            profession="Knows nothing", role=Role.CLIENT, balance="50.00",
        )
        accounts.add_profile(
            txn, profile_id=m.other_contractor, first_name="Alan", last_name="Turing",
            profession="Programmer", role=Role.CONTRACTOR, balance=0,
        )
        repo.add_contract(
            txn, contract_id=m.contract, client_id=m.client, contractor_id=m.contractor,
            terms="bla bla bla", status=ContractStatus.IN_PROGRESS,
        )
        repo.add_contract(
            txn, contract_id=m.poor_contract, client_id=m.poor_client,
            contractor_id=m.other_contractor, terms="bla bla bla", status=ContractStatus.NEW,
        )
        repo.add_contract(
            txn, contract_id=m.terminated_contract, client_id=m.client,
            contractor_id=m.other_contractor, terms="bla bla bla",
            status=ContractStatus.TERMINATED,
        )
        repo.add_job(txn, job_id=m.job, contract_id=m.contract, price="200.00", description="work")
        repo.add_job(
            txn, job_id=m.poor_job, contract_id=m.poor_contract, price="200.00", description="work"
        )
        repo.add_job(
            txn, job_id=m.paid_job, contract_id=m.contract, price="100.00", description="work",
            paid=True, payment_date=datetime(2020, 8, 15, 19, 11, 26, tzinfo=UTC),
        )
        repo.add_job(
            txn, job_id=m.terminated_job, contract_id=m.terminated_contract, price="50.00",
            description="work",
        )
        repo.add_job(
            txn, job_id=m.cheap_job, contract_id=m.poor_contract, price="25.00", description="work"
        )
    return m


@pytest.fixture
def market(ledger: Ledger) -> Marketplace:
    """Ledger pre-populated with the standard marketplace."""
    return seed_marketplace(ledger)


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change CWD to a temp root so the CLI creates an isolated database."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_market(_isolated_root: Path) -> Marketplace:
    """Seed the database the CLI will open from the isolated CWD."""
    led = Ledger(GigSettings.from_cli(root=_isolated_root))
    try:
        return seed_marketplace(led)
    finally:
        led.close()
