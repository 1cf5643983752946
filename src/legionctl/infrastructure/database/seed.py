"""Seed data for the static ``quest_definitions`` table.

Quest definitions are reference data: created here, never by users.
IDs are assigned sequentially; replace them with in-game quest IDs when
those are known, keeping each ID stable once published.

The caller owns the transaction — pass a ``Connection`` obtained from
``engine.begin()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from sqlalchemy import insert, select

from legionctl.domain.types import DEFAULT_ZONE, QuestFaction, QuestTier
from legionctl.infrastructure.database.schema import quest_definitions

if TYPE_CHECKING:
    from sqlalchemy import Connection


class QuestSeed(NamedTuple):
    id: int
    name: str
    tier: QuestTier
    faction: QuestFaction = QuestFaction.BOTH
    zone: str = DEFAULT_ZONE


SEED_QUESTS: tuple[QuestSeed, ...] = (
    QuestSeed(1, "Drakenspire Supply Raid", QuestTier.LESSER),
    QuestSeed(2, "Balaur Outpost Sweep", QuestTier.LESSER),
    QuestSeed(3, "Relic Recovery", QuestTier.MEDIUM),
    QuestSeed(4, "Siel's Relic Escort", QuestTier.MEDIUM, QuestFaction.ELYOS),
    QuestSeed(5, "Tiamat's Vanguard", QuestTier.MEDIUM, QuestFaction.ASMODIAN),
    QuestSeed(6, "Fortress Gate Assault", QuestTier.GREATER),
    QuestSeed(7, "Dragon Lord's Refuge Scouting", QuestTier.GREATER, QuestFaction.ELYOS),
    QuestSeed(8, "Dragon Lord's Refuge Recon", QuestTier.GREATER, QuestFaction.ASMODIAN),
    QuestSeed(9, "Tiamat's Fall", QuestTier.MAJOR),
)


def seed_quest_definitions(conn: Connection, quests: tuple[QuestSeed, ...] = SEED_QUESTS) -> int:
    """Insert quest definitions whose IDs are not yet present.

    Existing rows are left untouched so re-seeding never rewrites
    reference data that other rows point at.

    Returns:
        The number of rows inserted.
    """
    existing = set(conn.execute(select(quest_definitions.c.id)).scalars())
    missing = [q for q in quests if q.id not in existing]
    if not missing:
        return 0
    conn.execute(
        insert(quest_definitions),
        [
            {
                "id": q.id,
                "name": q.name,
                "zone": q.zone,
                "tier": q.tier,
                "faction": q.faction,
            }
            for q in missing
        ],
    )
    return len(missing)
