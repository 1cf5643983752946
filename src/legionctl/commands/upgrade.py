"""Command: bring the database schema to the latest Alembic revision."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from legionctl.commands._base import LegionCommand

if TYPE_CHECKING:
    from legionctl.commands._context import AppContext


@click.command(
    cls=LegionCommand,
    examples="""\
  legionctl upgrade
  legionctl upgrade --check
  legionctl --db postgresql://localhost/legion upgrade --stamp
  legionctl --json upgrade --check""",
)
@click.option("--check", "check_only", is_flag=True, help="List pending revisions and exit.")
@click.option(
    "--stamp",
    is_flag=True,
    help="Record the latest revision without running migrations "
    "(for databases created outside legionctl).",
)
@click.pass_obj
def upgrade(app: AppContext, check_only: bool, stamp: bool) -> None:
    """Run pending migrations on the configured database.

    A database whose tables already exist is stamped instead of migrated.
    """
    if check_only and stamp:
        raise click.UsageError("--check and --stamp cannot be combined.")

    from legionctl.services.upgrade import UpgradeService

    svc = UpgradeService(app.store)
    if check_only:
        app.emit(svc.check_pending())
    elif stamp:
        app.emit(svc.stamp_current())
    else:
        app.emit(svc.apply())
