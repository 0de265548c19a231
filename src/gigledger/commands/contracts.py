"""Command group: contracts visible to the calling profile."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gigledger.commands._base import GigGroup
from gigledger.services.contracts import ContractService

if TYPE_CHECKING:
    from gigledger.commands._context import AppContext


@click.group(
    cls=GigGroup,
    examples="""\
  gigledger --profile 1 contracts list
  gigledger --profile 1 contracts get 2""",
)
def contracts() -> None:
    """Look up contracts you are a party to."""


@contracts.command(
    examples="""\
  gigledger --profile 1 contracts get 1
  gigledger --json --profile 5 contracts get 1"""
)
@click.argument("contract_id", type=int)
@click.pass_obj
def get(app: AppContext, contract_id: int) -> None:
    """Show one contract (only if you are its client or contractor)."""
    caller = app.caller()
    app.emit(ContractService(app.ledger).get_contract(caller, contract_id))


@contracts.command(
    name="list",
    examples="""\
  gigledger --profile 1 contracts list
  gigledger --quiet --profile 6 contracts list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List your non-terminated contracts."""
    caller = app.caller()
    app.emit(ContractService(app.ledger).list_contracts(caller))
