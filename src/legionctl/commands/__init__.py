"""Subcommand modules for legionctl.

Provides register_commands() which uses deferred imports so that
``legionctl --help`` does not load SQLAlchemy or Alembic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from legionctl.commands.init_cmd import init_cmd
    from legionctl.commands.quests import quests
    from legionctl.commands.upgrade import upgrade
    from legionctl.commands.validate import validate

    cli.add_command(init_cmd)
    cli.add_command(upgrade)
    cli.add_command(validate)
    cli.add_command(quests)
