"""QuestService — read access to the seeded quest definitions."""

from __future__ import annotations

from sqlalchemy import select

from legionctl.domain.models import QuestDefinition
from legionctl.domain.types import QuestFaction, QuestTier
from legionctl.infrastructure.database.schema import quest_definitions
from legionctl.services.base import BaseService
from legionctl.services.result import ServiceResult


class QuestService(BaseService):
    """Lists quest reference data. Definitions are never written here."""

    def list_quests(
        self,
        *,
        tier: QuestTier | None = None,
        faction: QuestFaction | None = None,
    ) -> ServiceResult:
        """List quest definitions ordered by ID.

        Filtering by ``elyos`` or ``asmodian`` also returns quests open to
        ``both`` factions, since those are available to either side.
        """
        op = "list_quests"
        stmt = select(quest_definitions).order_by(quest_definitions.c.id)
        if tier is not None:
            stmt = stmt.where(quest_definitions.c.tier == tier)
        if faction is not None:
            allowed = {faction, QuestFaction.BOTH}
            stmt = stmt.where(quest_definitions.c.faction.in_(allowed))

        with self._store.connect() as conn:
            rows = conn.execute(stmt).all()

        items = [QuestDefinition.from_row(r).model_dump(mode="json") for r in rows]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})
