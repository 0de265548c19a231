"""Pluggy hook specifications for gigledger lifecycle events.

Events fire after the ledger transaction has committed, so a plugin never
sees a payment that could still roll back.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "gigledger"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class GigledgerHookSpec:
    """Hook specifications for the gigledger plugin system."""

    @hookspec
    def post_pay_job(
        self,
        job_id: int,
        contract_id: int,
        client_id: int,
        contractor_id: int,
        amount: str,
        payment_date: str,
    ) -> None:
        """Called after a job payment commits. *amount* is a decimal string."""
