"""Validation entry points for insert payloads.

Each ``validate_*`` function is pure: it never touches storage and never
raises for bad input. Every field is checked before the outcome is
decided, so a failing :class:`ValidationResult` lists all violations.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from legionctl.services.contracts import (
    AvailabilitySlotInsert,
    CharacterInsert,
    DailyQuestLogInsert,
    FriendGroupInsert,
    PartyInsert,
    PartyInviteInsert,
    UserInsert,
    dump_validated,
)
from legionctl.services.result import FieldViolation, ValidationResult

logger = logging.getLogger(__name__)

ROOT_FIELD = "__root__"


def violations_from_error(exc: ValidationError) -> list[FieldViolation]:
    """Flatten a pydantic error into (field, rule, message) triples.

    Nested locations are joined with dots, e.g. ``questIds.1``.
    """
    return [
        FieldViolation(
            field=".".join(str(part) for part in err["loc"]) or ROOT_FIELD,
            rule=err["type"],
            message=err["msg"],
        )
        for err in exc.errors(include_url=False)
    ]


def _validate(entity: str, model_cls: type[BaseModel], payload: Any) -> ValidationResult:
    try:
        data = dump_validated(model_cls, payload)
    except ValidationError as exc:
        errors = violations_from_error(exc)
        logger.debug(
            "Rejected %s payload: %s",
            entity,
            ", ".join(f"{e.field}[{e.rule}]" for e in errors),
        )
        return ValidationResult(ok=False, entity=entity, errors=errors)
    return ValidationResult(ok=True, entity=entity, data=data)


def validate_user_insert(payload: Any) -> ValidationResult:
    """Validate a user registration payload (username 3–30 chars)."""
    return _validate("user", UserInsert, payload)


def validate_character_insert(payload: Any) -> ValidationResult:
    """Validate a character payload (letters-only name, 2–20 chars)."""
    return _validate("character", CharacterInsert, payload)


def validate_daily_log_insert(payload: Any) -> ValidationResult:
    """Validate a daily quest submission.

    Rejects ``id`` and ``isCompleted`` keys; ``date`` must look like
    ``YYYY-MM-DD``; ``questIds`` needs at least one integer.
    """
    return _validate("daily-log", DailyQuestLogInsert, payload)


def validate_friend_group_insert(payload: Any) -> ValidationResult:
    return _validate("friend-group", FriendGroupInsert, payload)


def validate_availability_slot_insert(payload: Any) -> ValidationResult:
    return _validate("availability-slot", AvailabilitySlotInsert, payload)


def validate_party_insert(payload: Any) -> ValidationResult:
    """Validate a party payload (``sharedQuestIds`` must be non-empty)."""
    return _validate("party", PartyInsert, payload)


def validate_party_invite_insert(payload: Any) -> ValidationResult:
    return _validate("party-invite", PartyInviteInsert, payload)


VALIDATORS: dict[str, Callable[[Any], ValidationResult]] = {
    "user": validate_user_insert,
    "character": validate_character_insert,
    "daily-log": validate_daily_log_insert,
    "friend-group": validate_friend_group_insert,
    "availability-slot": validate_availability_slot_insert,
    "party": validate_party_insert,
    "party-invite": validate_party_invite_insert,
}


def get_validator(entity: str) -> Callable[[Any], ValidationResult]:
    """Look up the validator for *entity*.

    Raises:
        ValueError: If *entity* has no registered validator.
    """
    try:
        return VALIDATORS[entity]
    except KeyError:
        msg = f"Unknown entity: {entity!r}. Expected one of {sorted(VALIDATORS)}"
        raise ValueError(msg) from None
