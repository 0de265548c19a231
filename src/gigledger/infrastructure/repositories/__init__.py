"""Repositories: SQL for profiles (the account store), contracts, and jobs."""

from gigledger.infrastructure.repositories.accounts import AccountStore
from gigledger.infrastructure.repositories.contracts import ContractRepository

__all__ = ["AccountStore", "ContractRepository"]
