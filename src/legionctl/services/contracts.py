"""Typed insert contracts for the validation boundary.

Each model describes the payload accepted when creating one entity.
Payload keys are camelCase (``discordId``, ``gearTier``, ``questIds``);
snake_case attribute names are also accepted. Server-assigned columns
with defaults are optional here and filled in by the database. They may
be omitted but never sent as ``null``.

Rule messages that callers show to users are raised as
``PydanticCustomError`` so the message survives verbatim.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Any, ClassVar, TypeVar
from uuid import UUID, uuid4

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from legionctl.domain.days import DAY_PATTERN_MESSAGE, is_day_key
from legionctl.domain.lifecycle import as_utc, utc_now
from legionctl.domain.types import (
    GameClass,
    GearTier,
    InviteStatus,
    Visibility,
)

NAME_PATTERN = re.compile(r"[a-zA-Z]+")
NAME_PATTERN_MESSAGE = "Name must be letters only"
QUEST_IDS_MESSAGE = "Must select at least one quest"

NonEmptyStr = Annotated[str, Field(min_length=1)]
QuestIds = list[StrictInt]
Minutes = Annotated[StrictInt, Field(ge=0)]

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict.

    Only keys present in *data* are returned, under their camelCase alias,
    with JSON-compatible values.
    """
    model = model_cls.model_validate(data)
    return model.model_dump(mode="json", by_alias=True, exclude_unset=True)


def _require_quests(value: list[int]) -> list[int]:
    if not value:
        raise PydanticCustomError("too_short", QUEST_IDS_MESSAGE)
    return value


class InsertContract(BaseModel):
    """Base for insert payloads: camelCase aliases, unknown keys stripped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    # Attribute name -> storage column, where they differ.
    column_names: ClassVar[dict[str, str]] = {}

    def to_row(self) -> dict[str, Any]:
        """Column values for an INSERT, limited to the fields the caller set.

        Timestamps are written as UTC.
        """
        values = self.model_dump(exclude_unset=True)
        return {
            self.column_names.get(k, k): as_utc(v) if isinstance(v, datetime) else v
            for k, v in values.items()
        }


class UserInsert(InsertContract):
    id: UUID = Field(default_factory=uuid4)
    discord_id: NonEmptyStr
    username: str = Field(min_length=3, max_length=30)
    avatar_url: str | None = None
    visibility: Visibility = Visibility.LEGION
    created_at: datetime = Field(default_factory=utc_now)


class CharacterInsert(InsertContract):
    column_names: ClassVar[dict[str, str]] = {"game_class": "class"}

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    name: str = Field(min_length=2, max_length=20)
    game_class: GameClass = Field(
        validation_alias=AliasChoices("class", "gameClass", "game_class"),
        serialization_alias="class",
    )
    gear_tier: GearTier = GearTier.MID
    clearing_score: StrictInt = 0

    @field_validator("name")
    @classmethod
    def _letters_only(cls, value: str) -> str:
        if NAME_PATTERN.fullmatch(value) is None:
            raise PydanticCustomError("pattern_mismatch", NAME_PATTERN_MESSAGE)
        return value


class DailyQuestLogInsert(InsertContract):
    """Daily quest submission.

    ``id`` and ``isCompleted`` are server-owned: a payload carrying either
    is rejected outright, as is any other unknown key.
    """

    model_config = ConfigDict(extra="forbid")

    character_id: UUID
    date: str
    quest_ids: QuestIds
    notes: str | None = None

    @field_validator("date")
    @classmethod
    def _day_key(cls, value: str) -> str:
        if not is_day_key(value):
            raise PydanticCustomError("pattern_mismatch", DAY_PATTERN_MESSAGE)
        return value

    @field_validator("quest_ids")
    @classmethod
    def _non_empty(cls, value: list[int]) -> list[int]:
        return _require_quests(value)


# ---------------------------------------------------------------------------
# Contracts used by the service layer
# ---------------------------------------------------------------------------


class FriendGroupInsert(InsertContract):
    id: UUID = Field(default_factory=uuid4)
    owner_id: UUID
    name: NonEmptyStr


class AvailabilitySlotInsert(InsertContract):
    """Shape-only: ``startTime < endTime`` is deliberately not checked."""

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    start_time: datetime
    end_time: datetime
    is_recurring: StrictBool = False


class PartyInsert(InsertContract):
    id: UUID = Field(default_factory=uuid4)
    created_by: UUID
    shared_quest_ids: QuestIds
    scheduled_start: datetime
    scheduled_end: datetime
    estimated_clear_time: Minutes | None = None

    @field_validator("shared_quest_ids")
    @classmethod
    def _non_empty(cls, value: list[int]) -> list[int]:
        return _require_quests(value)


class PartyInviteInsert(InsertContract):
    """New invites always start ``pending``; status is not caller-settable."""

    model_config = ConfigDict(extra="forbid")

    party_id: UUID
    sender_id: UUID
    recipient_id: UUID
    expires_at: datetime


class PartyInviteResponse(BaseModel):
    """Answer to a pending invite."""

    model_config = ConfigDict(frozen=True)

    status: InviteStatus

    @field_validator("status")
    @classmethod
    def _not_pending(cls, value: InviteStatus) -> InviteStatus:
        if value == InviteStatus.PENDING:
            raise PydanticCustomError(
                "invalid_transition", "Response must be 'accepted' or 'declined'"
            )
        return value
