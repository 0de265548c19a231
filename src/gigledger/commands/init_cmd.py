"""Command: create the database, optionally loading a seed file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from gigledger.commands._base import GigCommand
from gigledger.services.result import ServiceResult

if TYPE_CHECKING:
    from gigledger.commands._context import AppContext


@click.command(
    name="init",
    cls=GigCommand,
    examples="""\
  gigledger init
  gigledger init --seed marketplace.toml""",
)
@click.option(
    "--seed",
    "seed_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML file with profiles, contracts, and jobs to load.",
)
@click.pass_obj
def init_cmd(app: AppContext, seed_path: Path | None) -> None:
    """Initialize the ledger database in the current directory."""
    ledger = app.ledger
    if seed_path is None:
        app.emit(
            ServiceResult(ok=True, op="init", data={"database": str(ledger.engine.url)})
        )
        return

    from gigledger.services.seed import SeedService

    app.emit(SeedService(ledger).load(seed_path))
