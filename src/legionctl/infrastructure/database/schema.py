"""SQLAlchemy Core table definitions for the legionctl database.

Nine tables covering users, friend groups, characters, quest reference data,
daily quest logs, availability, and parties. Enums are bound to the closed
``StrEnum`` types in :mod:`legionctl.domain.types` and emitted with a CHECK
constraint, so out-of-set values are rejected by the database itself.

Integer arrays use the portable ``JSON`` type, with native
``ARRAY(INTEGER)`` on PostgreSQL.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    Table,
    Text,
    Uuid,
    false,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY

from legionctl.domain.lifecycle import utc_now
from legionctl.domain.types import (
    DEFAULT_ZONE,
    ENUM_NAMES,
    GameClass,
    GearTier,
    InviteStatus,
    QuestFaction,
    QuestTier,
    Visibility,
)

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)

IntArray = JSON().with_variant(ARRAY(Integer), "postgresql")


def _enum(enum_cls: type[StrEnum]) -> Enum:
    """Named DB enum storing member values (not names), CHECK-constrained."""
    return Enum(
        enum_cls,
        name=ENUM_NAMES[enum_cls],
        values_callable=lambda members: [m.value for m in members],
        create_constraint=True,
        validate_strings=False,
    )


def _id_column() -> Column[uuid.UUID]:
    return Column("id", Uuid, primary_key=True, default=uuid.uuid4)


def _timestamp(name: str, *, now: bool = False, nullable: bool = False) -> Column:
    if now:
        return Column(
            name,
            DateTime(timezone=True),
            nullable=nullable,
            default=utc_now,
            server_default=func.now(),
        )
    return Column(name, DateTime(timezone=True), nullable=nullable)


users = Table(
    "users",
    metadata,
    _id_column(),
    Column("discord_id", Text, nullable=False, unique=True),
    Column("username", Text, nullable=False),
    Column("avatar_url", Text),
    Column(
        "visibility",
        _enum(Visibility),
        nullable=False,
        default=Visibility.LEGION,
        server_default=Visibility.LEGION.value,
    ),
    _timestamp("created_at", now=True),
)

friend_groups = Table(
    "friend_groups",
    metadata,
    _id_column(),
    Column("owner_id", Uuid, ForeignKey("users.id"), nullable=False),
    Column("name", Text, nullable=False),
)

friend_group_members = Table(
    "friend_group_members",
    metadata,
    Column("group_id", Uuid, ForeignKey("friend_groups.id"), nullable=False),
    Column("user_id", Uuid, ForeignKey("users.id"), nullable=False),
    PrimaryKeyConstraint("group_id", "user_id"),
)

characters = Table(
    "characters",
    metadata,
    _id_column(),
    Column("user_id", Uuid, ForeignKey("users.id"), nullable=False),
    Column("name", Text, nullable=False),
    Column("class", _enum(GameClass), nullable=False),
    Column(
        "gear_tier",
        _enum(GearTier),
        nullable=False,
        default=GearTier.MID,
        server_default=GearTier.MID.value,
    ),
    # Pre-calculated ranking, recomputed outside this package
    Column("clearing_score", Integer, nullable=False, default=0, server_default="0"),
)

# Static reference data, seeded. IDs match in-game quest IDs where known.
quest_definitions = Table(
    "quest_definitions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", Text, nullable=False),
    Column("zone", Text, nullable=False, default=DEFAULT_ZONE, server_default=DEFAULT_ZONE),
    Column("tier", _enum(QuestTier), nullable=False),
    Column(
        "faction",
        _enum(QuestFaction),
        nullable=False,
        default=QuestFaction.BOTH,
        server_default=QuestFaction.BOTH.value,
    ),
)

daily_quest_logs = Table(
    "daily_quest_logs",
    metadata,
    _id_column(),
    Column("character_id", Uuid, ForeignKey("characters.id"), nullable=False),
    Column("date", Text, nullable=False),  # YYYY-MM-DD, never a timestamp
    Column("quest_ids", IntArray, nullable=False),  # quest_definitions.id values
    Column("is_completed", Boolean, nullable=False, default=False, server_default=false()),
    Column("notes", Text),
)

availability_slots = Table(
    "availability_slots",
    metadata,
    _id_column(),
    Column("user_id", Uuid, ForeignKey("users.id"), nullable=False),
    _timestamp("start_time"),
    _timestamp("end_time"),
    Column("is_recurring", Boolean, nullable=False, default=False, server_default=false()),
)

parties = Table(
    "parties",
    metadata,
    _id_column(),
    # Audit only: the creator has no extra privileges over other members.
    Column("created_by", Uuid, ForeignKey("users.id"), nullable=False),
    Column("shared_quest_ids", IntArray, nullable=False),
    _timestamp("scheduled_start"),
    _timestamp("scheduled_end"),
    Column("estimated_clear_time", Integer),  # minutes
    _timestamp("created_at", now=True),
    _timestamp("disbanded_at", nullable=True),  # NULL = active
)

party_members = Table(
    "party_members",
    metadata,
    Column("party_id", Uuid, ForeignKey("parties.id"), nullable=False),
    Column("user_id", Uuid, ForeignKey("users.id"), nullable=False),
    Column("character_id", Uuid, ForeignKey("characters.id"), nullable=False),
    _timestamp("joined_at", now=True),
    # No role column. All members are equal.
    PrimaryKeyConstraint("party_id", "user_id"),
)

party_invites = Table(
    "party_invites",
    metadata,
    _id_column(),
    Column("party_id", Uuid, ForeignKey("parties.id"), nullable=False),
    Column("sender_id", Uuid, ForeignKey("users.id"), nullable=False),
    Column("recipient_id", Uuid, ForeignKey("users.id"), nullable=False),
    Column(
        "status",
        _enum(InviteStatus),
        nullable=False,
        default=InviteStatus.PENDING,
        server_default=InviteStatus.PENDING.value,
    ),
    _timestamp("sent_at", now=True),
    _timestamp("expires_at"),
    _timestamp("responded_at", nullable=True),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_characters_user_id", characters.c.user_id)
Index("ix_friend_groups_owner_id", friend_groups.c.owner_id)
Index(
    "ix_daily_quest_logs_character_date",
    daily_quest_logs.c.character_id,
    daily_quest_logs.c.date,
)
Index("ix_availability_slots_user_id", availability_slots.c.user_id)
Index("ix_parties_disbanded_at", parties.c.disbanded_at)
Index("ix_party_invites_recipient_status", party_invites.c.recipient_id, party_invites.c.status)

# ---------------------------------------------------------------------------
# Relationship metadata
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Relation:
    """Declarative link from one table to another.

    ``fields``/``references`` are set on the owning (``one``) side only;
    a ``many`` relation is the inverse of a ``one`` declared on *target*.
    """

    kind: Literal["one", "many"]
    target: str
    fields: tuple[str, ...] = ()
    references: tuple[str, ...] = ()


RELATIONS: dict[str, dict[str, Relation]] = {
    "users": {
        "characters": Relation("many", "characters"),
        "ownedGroups": Relation("many", "friend_groups"),
    },
    "characters": {
        "owner": Relation("one", "users", ("user_id",), ("id",)),
        "questLogs": Relation("many", "daily_quest_logs"),
    },
    "daily_quest_logs": {
        "character": Relation("one", "characters", ("character_id",), ("id",)),
    },
}
