"""Authorization rules for contracts and jobs.

Pure predicates evaluated on every call. A ``False`` answer is turned into
a FORBIDDEN result by the calling service; nothing here raises.
"""

from __future__ import annotations

from gigledger.domain.types import Contract, Job, Profile, Role


def can_access_contract(caller_id: int, contract: Contract) -> bool:
    """True iff the caller is a party to *contract*."""
    return caller_id in (contract.client_id, contract.contractor_id)


def can_access_job(caller_id: int, job: Job, contract: Contract) -> bool:
    """True iff the caller is a party to the job's parent contract."""
    if job.contract_id != contract.id:
        return False
    return can_access_contract(caller_id, contract)


def require_role(caller: Profile, role: Role) -> bool:
    return caller.role == role


def is_contract_client(caller_id: int, contract: Contract) -> bool:
    """True iff the caller is the paying side of *contract*."""
    return caller_id == contract.client_id
