"""Closed enumerations for the legion data model.

Each enum mirrors one named database enum. Values are the exact storage
literals; anything outside these sets is rejected at the storage boundary.
"""

from __future__ import annotations

from enum import StrEnum


class Visibility(StrEnum):
    """Who may see a user's roster and availability."""

    PUBLIC = "public"
    LEGION = "legion"
    FRIENDS = "friends"
    PRIVATE = "private"


class GameClass(StrEnum):
    """The eleven playable classes."""

    GLADIATOR = "gladiator"
    TEMPLAR = "templar"
    RANGER = "ranger"
    ASSASSIN = "assassin"
    SPIRITMASTER = "spiritmaster"
    SORCERER = "sorcerer"
    CLERIC = "cleric"
    CHANTER = "chanter"
    GUNNER = "gunner"
    AETHERTECH = "aethertech"
    SONGWEAVER = "songweaver"


class GearTier(StrEnum):
    """Coarse bucket of a character's equipment progression."""

    EARLY = "early"
    MID = "mid"
    END = "end"


class QuestTier(StrEnum):
    LESSER = "lesser"
    MEDIUM = "medium"
    GREATER = "greater"
    MAJOR = "major"


class QuestFaction(StrEnum):
    ELYOS = "elyos"
    ASMODIAN = "asmodian"
    BOTH = "both"


class InviteStatus(StrEnum):
    """Lifecycle status of a party invite."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


# Database enum type names, keyed by the Python enum they back.
ENUM_NAMES: dict[type[StrEnum], str] = {
    Visibility: "visibility",
    GameClass: "class",
    GearTier: "gear_tier",
    QuestTier: "quest_tier",
    QuestFaction: "quest_faction",
    InviteStatus: "invite_status",
}

DEFAULT_ZONE = "Tiamaranta"
