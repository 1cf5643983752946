"""Command: list quest definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from legionctl.commands._base import LegionCommand
from legionctl.domain.types import QuestFaction, QuestTier

if TYPE_CHECKING:
    from legionctl.commands._context import AppContext


@click.command(
    cls=LegionCommand,
    examples="""\
  legionctl quests
  legionctl quests --tier greater
  legionctl --json quests --faction elyos""",
)
@click.option(
    "--tier",
    type=click.Choice([t.value for t in QuestTier]),
    default=None,
    help="Only quests of this tier.",
)
@click.option(
    "--faction",
    type=click.Choice([f.value for f in QuestFaction]),
    default=None,
    help="Quests available to this faction (includes 'both').",
)
@click.pass_obj
def quests(app: AppContext, tier: str | None, faction: str | None) -> None:
    """List the seeded quest definitions."""
    from legionctl.services.quests import QuestService

    app.emit(
        QuestService(app.store).list_quests(
            tier=QuestTier(tier) if tier else None,
            faction=QuestFaction(faction) if faction else None,
        )
    )
