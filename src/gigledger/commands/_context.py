"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Ledger initialization, caller
resolution, and centralized result emission (stdout/stderr routing +
exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gigledger.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from gigledger.config.settings import GigSettings
    from gigledger.domain.types import Profile
    from gigledger.infrastructure.ledger import Ledger
    from gigledger.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The ledger is created on first use so ``--help`` and ``--version``
    never touch the database.
    """

    def __init__(self, settings: GigSettings) -> None:
        self.settings = settings
        self._ledger: Ledger | None = None

        from gigledger.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from gigledger.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def ledger(self) -> Ledger:
        """The ledger instance (created lazily on first access)."""
        if self._ledger is None:
            from gigledger.infrastructure.ledger import Ledger

            self._ledger = Ledger(self.settings)
            if self.settings.plugins.enabled:
                self._ledger.init_event_bus(sync=self.settings.sync)
        return self._ledger

    def caller(self) -> Profile:
        """Resolve ``--profile`` to the calling profile or fail with UNAUTHORIZED."""
        from gigledger.config.logging import bind_caller
        from gigledger.domain.types import Profile
        from gigledger.services.profiles import ProfileService

        result = ProfileService(self.ledger).get_profile(self.settings.profile_id)
        if not result.ok:
            self.emit(result)
        profile = Profile.model_validate(result.data)
        bind_caller(profile.id)
        return profile

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr outside JSON mode.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            currency=self.settings.payments.currency,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        if self._ledger is not None:
            self._ledger.close()
            self._ledger = None
