"""RosterService — users, characters, friend groups, logs, availability.

Every create path validates its payload first and writes only when the
payload is clean. Foreign references are looked up before the insert so
callers get a NOT_FOUND naming the missing row instead of a driver error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from legionctl.domain.models import (
    AvailabilitySlot,
    Character,
    DailyQuestLog,
    FriendGroup,
    FriendGroupMember,
    User,
)
from legionctl.infrastructure.database.schema import (
    availability_slots,
    characters,
    daily_quest_logs,
    friend_group_members,
    friend_groups,
    quest_definitions,
    users,
)
from legionctl.services.base import BaseService, as_uuid
from legionctl.services.contracts import (
    AvailabilitySlotInsert,
    CharacterInsert,
    DailyQuestLogInsert,
    FriendGroupInsert,
    UserInsert,
)
from legionctl.services.result import ServiceResult
from legionctl.services.validation import (
    validate_availability_slot_insert,
    validate_character_insert,
    validate_daily_log_insert,
    validate_friend_group_insert,
    validate_user_insert,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from sqlalchemy import Connection

logger = logging.getLogger(__name__)


def unknown_quest_ids(conn: Connection, quest_ids: Iterable[int]) -> list[int]:
    """Return the IDs in *quest_ids* with no quest definition, sorted."""
    wanted = set(quest_ids)
    if not wanted:
        return []
    known = set(
        conn.execute(
            select(quest_definitions.c.id).where(quest_definitions.c.id.in_(wanted))
        ).scalars()
    )
    return sorted(wanted - known)


class RosterService(BaseService):
    """Creates and updates the per-user roster entities."""

    def register_user(self, payload: dict[str, Any]) -> ServiceResult:
        op = "register_user"
        validation = validate_user_insert(payload)
        if not validation.ok:
            return self._invalid(op, validation)
        values = UserInsert.model_validate(validation.data).to_row()

        try:
            with self._store.transaction() as conn:
                existing = self._fetch(conn, users, values["discord_id"], "discord_id")
                if existing is not None:
                    return self._fail(
                        op,
                        "DUPLICATE_USER",
                        f"Discord account {values['discord_id']} is already registered",
                        id=str(existing.id),
                    )
                user_id = conn.execute(insert(users).values(**values)).inserted_primary_key[0]
                row = self._fetch(conn, users, user_id)
        except IntegrityError as exc:
            return self._fail(op, "INTEGRITY_ERROR", str(exc.orig))

        user = User.from_row(row)
        logger.info("Registered user %s (%s)", user.id, user.username)
        return ServiceResult(ok=True, op=op, data=user.model_dump(mode="json"))

    def add_character(self, payload: dict[str, Any]) -> ServiceResult:
        op = "add_character"
        validation = validate_character_insert(payload)
        if not validation.ok:
            return self._invalid(op, validation)
        values = CharacterInsert.model_validate(validation.data).to_row()

        with self._store.transaction() as conn:
            if self._fetch(conn, users, values["user_id"]) is None:
                return self._not_found(op, "user", values["user_id"])
            char_id = conn.execute(insert(characters).values(**values)).inserted_primary_key[0]
            row = self._fetch(conn, characters, char_id)

        character = Character.from_row(row)
        return ServiceResult(
            ok=True, op=op, data=character.model_dump(mode="json", by_alias=True)
        )

    def submit_daily_log(self, payload: dict[str, Any]) -> ServiceResult:
        """Record the quests a character attempted on one day.

        Multiple logs for the same character and day are accepted; nothing
        makes (character, date) unique.
        """
        op = "submit_daily_log"
        validation = validate_daily_log_insert(payload)
        if not validation.ok:
            return self._invalid(op, validation)
        values = DailyQuestLogInsert.model_validate(validation.data).to_row()

        with self._store.transaction() as conn:
            if self._fetch(conn, characters, values["character_id"]) is None:
                return self._not_found(op, "character", values["character_id"])
            missing = unknown_quest_ids(conn, values["quest_ids"])
            if missing:
                return self._fail(
                    op,
                    "UNKNOWN_QUESTS",
                    f"Unknown quest ids: {missing}",
                    quest_ids=missing,
                )
            result = conn.execute(insert(daily_quest_logs).values(**values))
            log_id = result.inserted_primary_key[0]
            row = self._fetch(conn, daily_quest_logs, log_id)

        log = DailyQuestLog.from_row(row)
        return ServiceResult(ok=True, op=op, data=log.model_dump(mode="json"))

    def complete_daily_log(self, log_id: UUID | str) -> ServiceResult:
        """Mark a daily log as completed. Completing twice is a no-op."""
        op = "complete_daily_log"
        failure = self._check_ids(op, daily_quest_log=log_id)
        if failure is not None:
            return failure
        log_id = as_uuid(log_id)
        warnings: list[str] = []
        with self._store.transaction() as conn:
            row = self._fetch(conn, daily_quest_logs, log_id)
            if row is None:
                return self._not_found(op, "daily quest log", log_id)
            if row.is_completed:
                warnings.append("Log was already completed")
            else:
                conn.execute(
                    update(daily_quest_logs)
                    .where(daily_quest_logs.c.id == log_id)
                    .values(is_completed=True)
                )
                row = self._fetch(conn, daily_quest_logs, log_id)

        return ServiceResult(
            ok=True,
            op=op,
            data=DailyQuestLog.from_row(row).model_dump(mode="json"),
            warnings=warnings,
        )

    def create_friend_group(self, payload: dict[str, Any]) -> ServiceResult:
        op = "create_friend_group"
        validation = validate_friend_group_insert(payload)
        if not validation.ok:
            return self._invalid(op, validation)
        values = FriendGroupInsert.model_validate(validation.data).to_row()

        with self._store.transaction() as conn:
            if self._fetch(conn, users, values["owner_id"]) is None:
                return self._not_found(op, "user", values["owner_id"])
            group_id = conn.execute(insert(friend_groups).values(**values)).inserted_primary_key[0]
            row = self._fetch(conn, friend_groups, group_id)

        group = FriendGroup.from_row(row)
        return ServiceResult(ok=True, op=op, data=group.model_dump(mode="json"))

    def add_group_member(self, group_id: UUID | str, user_id: UUID | str) -> ServiceResult:
        """Add *user_id* to a friend group; each user joins a group once."""
        op = "add_group_member"
        failure = self._check_ids(op, friend_group=group_id, user=user_id)
        if failure is not None:
            return failure
        group_id, user_id = as_uuid(group_id), as_uuid(user_id)
        try:
            with self._store.transaction() as conn:
                if self._fetch(conn, friend_groups, group_id) is None:
                    return self._not_found(op, "friend group", group_id)
                if self._fetch(conn, users, user_id) is None:
                    return self._not_found(op, "user", user_id)
                conn.execute(
                    insert(friend_group_members).values(group_id=group_id, user_id=user_id)
                )
        except IntegrityError:
            return self._fail(
                op,
                "DUPLICATE_MEMBER",
                f"User {user_id} is already in group {group_id}",
                group_id=str(group_id),
                user_id=str(user_id),
            )

        member = FriendGroupMember(group_id=group_id, user_id=user_id)
        return ServiceResult(ok=True, op=op, data=member.model_dump(mode="json"))

    def add_availability(self, payload: dict[str, Any]) -> ServiceResult:
        op = "add_availability"
        validation = validate_availability_slot_insert(payload)
        if not validation.ok:
            return self._invalid(op, validation)
        values = AvailabilitySlotInsert.model_validate(validation.data).to_row()

        with self._store.transaction() as conn:
            if self._fetch(conn, users, values["user_id"]) is None:
                return self._not_found(op, "user", values["user_id"])
            slot_id = conn.execute(
                insert(availability_slots).values(**values)
            ).inserted_primary_key[0]
            row = self._fetch(conn, availability_slots, slot_id)

        return ServiceResult(
            ok=True, op=op, data=AvailabilitySlot.from_row(row).model_dump(mode="json")
        )
