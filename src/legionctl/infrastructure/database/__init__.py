"""Database engine, schema, and quest seed data via SQLAlchemy Core."""

from legionctl.infrastructure.database.engine import create_db_engine, init_database
from legionctl.infrastructure.database.schema import (
    RELATIONS,
    availability_slots,
    characters,
    daily_quest_logs,
    friend_group_members,
    friend_groups,
    metadata,
    parties,
    party_invites,
    party_members,
    quest_definitions,
    users,
)
from legionctl.infrastructure.database.seed import SEED_QUESTS, seed_quest_definitions

__all__ = [
    "RELATIONS",
    "SEED_QUESTS",
    "availability_slots",
    "characters",
    "create_db_engine",
    "daily_quest_logs",
    "friend_group_members",
    "friend_groups",
    "init_database",
    "metadata",
    "parties",
    "party_invites",
    "party_members",
    "quest_definitions",
    "seed_quest_definitions",
    "users",
]
