"""Root CLI group for gigledger with global flags and command registration."""

from __future__ import annotations

import click

from gigledger import __version__
from gigledger.commands import register_commands
from gigledger.commands._context import AppContext
from gigledger.config.settings import GigSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="gigledger")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and timings.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "-p",
    "--profile",
    "profile_id",
    type=int,
    default=None,
    help="Authenticated profile id of the caller.",
)
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--sync", is_flag=True, help="Dispatch plugin events synchronously.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    profile_id: int | None,
    config_path: str | None,
    sync: bool,
) -> None:
    """gigledger: marketplace ledger for clients, contractors, and jobs."""
    settings = GigSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        profile_id=profile_id,
        sync=sync,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
