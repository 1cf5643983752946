"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Opens the store lazily and routes result output
(stdout on success, stderr plus exit code 1 on failure).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from legionctl.config.logging import configure_logging
from legionctl.output.formatters import OutputSettings, format_result, format_validation

if TYPE_CHECKING:
    from legionctl.config.settings import LegionSettings
    from legionctl.infrastructure.store import Store
    from legionctl.services.result import ServiceResult, ValidationResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is created on first access so ``--help``, ``--version`` and
    ``validate`` never open the database.
    """

    def __init__(self, settings: LegionSettings) -> None:
        self.settings = settings
        self._store: Store | None = None
        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
            sql_echo=settings.database.echo,
        )

    @property
    def store(self) -> Store:
        """The store instance (created lazily on first access)."""
        if self._store is None:
            from legionctl.infrastructure.store import Store

            self._store = Store(self.settings)
        return self._store

    def close(self) -> None:
        """Dispose of the store's engine if a command opened it."""
        if self._store is not None:
            self._store.close()
            self._store = None

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            no_color=self.settings.no_color,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def emit_validation(self, result: ValidationResult) -> None:
        """Output a ValidationResult; an invalid payload exits with code 1."""
        output = format_validation(result, settings=self.output_settings)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
