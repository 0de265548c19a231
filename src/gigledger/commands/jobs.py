"""Command group: unpaid jobs and job payment."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gigledger.commands._base import GigGroup

if TYPE_CHECKING:
    from gigledger.commands._context import AppContext


@click.group(
    cls=GigGroup,
    examples="""\
  gigledger --profile 1 jobs unpaid
  gigledger --profile 1 jobs pay 2""",
)
def jobs() -> None:
    """List and pay jobs."""


@jobs.command(
    examples="""\
  gigledger --profile 1 jobs unpaid
  gigledger --json --profile 7 jobs unpaid"""
)
@click.pass_obj
def unpaid(app: AppContext) -> None:
    """List unpaid jobs under your active contracts."""
    from gigledger.services.jobs import JobService

    caller = app.caller()
    app.emit(JobService(app.ledger).list_unpaid(caller))


@jobs.command(
    examples="""\
  gigledger --profile 1 jobs pay 2
  gigledger --json --profile 1 jobs pay 2"""
)
@click.argument("job_id", type=int)
@click.pass_obj
def pay(app: AppContext, job_id: int) -> None:
    """Pay for a job: move its price from your balance to the contractor's."""
    from gigledger.services.payment import PaymentService

    caller = app.caller()
    app.emit(PaymentService(app.ledger).pay_job(caller, job_id))
