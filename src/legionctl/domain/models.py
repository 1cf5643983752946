"""Typed read-models, one per table.

Frozen pydantic models describing a stored row as downstream code sees it.
Attribute names follow the storage columns, except ``Character.game_class``
which reads the ``class`` column.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from legionctl.domain.types import (
    GameClass,
    GearTier,
    InviteStatus,
    QuestFaction,
    QuestTier,
    Visibility,
)


class _ReadModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @classmethod
    def from_row(cls, row: Any) -> Self:
        """Build from a SQLAlchemy ``Row`` or any column-name mapping."""
        mapping: Mapping[str, Any] = row._mapping if hasattr(row, "_mapping") else row
        return cls.model_validate(dict(mapping))


class User(_ReadModel):
    id: UUID
    discord_id: str
    username: str
    avatar_url: str | None = None
    visibility: Visibility = Visibility.LEGION
    created_at: datetime


class FriendGroup(_ReadModel):
    id: UUID
    owner_id: UUID
    name: str


class FriendGroupMember(_ReadModel):
    group_id: UUID
    user_id: UUID


class Character(_ReadModel):
    id: UUID
    user_id: UUID
    name: str
    game_class: GameClass = Field(alias="class")
    gear_tier: GearTier = GearTier.MID
    clearing_score: int = 0


class QuestDefinition(_ReadModel):
    id: int
    name: str
    zone: str
    tier: QuestTier
    faction: QuestFaction


class DailyQuestLog(_ReadModel):
    id: UUID
    character_id: UUID
    date: str
    quest_ids: list[int]
    is_completed: bool = False
    notes: str | None = None


class AvailabilitySlot(_ReadModel):
    id: UUID
    user_id: UUID
    start_time: datetime
    end_time: datetime
    is_recurring: bool = False


class Party(_ReadModel):
    """A scheduled group session; ``disbanded_at`` is the soft-delete marker."""

    id: UUID
    created_by: UUID
    shared_quest_ids: list[int]
    scheduled_start: datetime
    scheduled_end: datetime
    estimated_clear_time: int | None = None
    created_at: datetime
    disbanded_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.disbanded_at is None


class PartyMember(_ReadModel):
    party_id: UUID
    user_id: UUID
    character_id: UUID
    joined_at: datetime


class PartyInvite(_ReadModel):
    id: UUID
    party_id: UUID
    sender_id: UUID
    recipient_id: UUID
    status: InviteStatus = InviteStatus.PENDING
    sent_at: datetime
    expires_at: datetime
    responded_at: datetime | None = None
