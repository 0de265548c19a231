"""Command group: the post-payment plugin outbox."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gigledger.commands._base import GigGroup
from gigledger.plugins.event_bus import EventStatus

if TYPE_CHECKING:
    from gigledger.commands._context import AppContext


@click.group(
    cls=GigGroup,
    examples="""\
  gigledger events list --status dead_letter
  gigledger events drain""",
)
def events() -> None:
    """Inspect and redeliver plugin notifications for paid jobs."""


@events.command(
    name="list",
    examples="""\
  gigledger events list
  gigledger --json events list --status failed""",
)
@click.option(
    "--status",
    type=click.Choice([s.value for s in EventStatus]),
    default=None,
    help="Only events in this state.",
)
@click.pass_obj
def list_cmd(app: AppContext, status: str | None) -> None:
    """List recorded plugin events."""
    from gigledger.services.events import EventService

    app.emit(EventService(app.ledger).list_events(status))


@events.command(
    examples="""\
  gigledger events drain
  gigledger --sync events drain""",
)
@click.pass_obj
def drain(app: AppContext) -> None:
    """Retry pending and failed events now."""
    from gigledger.services.events import EventService

    app.emit(EventService(app.ledger).redeliver())
