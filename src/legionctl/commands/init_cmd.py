"""Command: database initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from legionctl.commands._base import LegionCommand

if TYPE_CHECKING:
    from legionctl.commands._context import AppContext


@click.command(
    "init",
    cls=LegionCommand,
    examples="""\
  legionctl init
  legionctl -c ./legionctl.toml init
  LEGIONCTL_SEED__ENABLED=false legionctl init""",
)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the database, seed quest definitions, and stamp the schema version.

    Safe to re-run: existing tables and quest rows are left in place.
    """
    from legionctl.services.upgrade import UpgradeService

    app.emit(UpgradeService(app.store).initialize())
