"""Subcommand modules for gigledger.

Provides register_commands() which uses deferred imports to keep
``gigledger --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    from gigledger.commands.contracts import contracts
    from gigledger.commands.events import events
    from gigledger.commands.init_cmd import init_cmd
    from gigledger.commands.jobs import jobs
    from gigledger.commands.profile import profile

    cli.add_command(contracts)
    cli.add_command(jobs)
    cli.add_command(profile)
    cli.add_command(events)
    cli.add_command(init_cmd)
