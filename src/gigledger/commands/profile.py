"""Command: show the calling profile."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gigledger.commands._base import GigCommand

if TYPE_CHECKING:
    from gigledger.commands._context import AppContext


@click.command(
    cls=GigCommand,
    examples="""\
  gigledger --profile 1 profile
  GIGLEDGER_PROFILE_ID=1 gigledger --json profile""",
)
@click.pass_obj
def profile(app: AppContext) -> None:
    """Show your profile and current balance."""
    from gigledger.services.profiles import ProfileService

    app.emit(ProfileService(app.ledger).get_profile(app.settings.profile_id))
