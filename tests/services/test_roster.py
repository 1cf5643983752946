"""Tests for RosterService — users, characters, groups, logs, availability."""

from __future__ import annotations

from uuid import uuid4

from legionctl.infrastructure.store import Store
from legionctl.services.roster import RosterService
from tests.conftest import add_character, register_user


class TestRegisterUser:
    def test_register(self, store: Store) -> None:
        result = RosterService(store).register_user({"discordId": "42", "username": "Kaelis"})
        assert result.ok
        assert result.op == "register_user"
        assert result.data["discord_id"] == "42"
        assert result.data["visibility"] == "legion"
        assert result.data["created_at"]

    def test_keeps_supplied_id(self, store: Store) -> None:
        uid = str(uuid4())
        result = RosterService(store).register_user(
            {"id": uid, "discordId": "42", "username": "Kaelis"}
        )
        assert result.data["id"] == uid

    def test_invalid_payload(self, store: Store) -> None:
        result = RosterService(store).register_user({"discordId": "42", "username": "Ka"})
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
        assert result.error.detail["violations"][0]["field"] == "username"

    def test_null_created_at_is_a_violation(self, store: Store) -> None:
        result = RosterService(store).register_user(
            {"discordId": "42", "username": "Kaelis", "createdAt": None, "id": None}
        )
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
        fields = {v["field"] for v in result.error.detail["violations"]}
        assert fields == {"id", "createdAt"}

    def test_offset_created_at_stored_as_utc(self, store: Store) -> None:
        result = RosterService(store).register_user(
            {"discordId": "42", "username": "Kaelis", "createdAt": "2024-03-01T20:00:00+02:00"}
        )
        assert result.ok, result.error
        assert result.data["created_at"].startswith("2024-03-01T18:00:00")

    def test_duplicate_discord_id(self, store: Store) -> None:
        register_user(store, "Kaelis")
        result = RosterService(store).register_user(
            {"discordId": "discord-kaelis", "username": "Another"}
        )
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "DUPLICATE_USER"


class TestAddCharacter:
    def test_add(self, store: Store) -> None:
        user = register_user(store)
        char = add_character(store, user["id"], "Aerin")
        assert char["class"] == "cleric"
        assert char["gear_tier"] == "mid"
        assert char["clearing_score"] == 0
        assert char["user_id"] == user["id"]

    def test_unknown_user(self, store: Store) -> None:
        result = RosterService(store).add_character(
            {"userId": str(uuid4()), "name": "Aerin", "class": "cleric"}
        )
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail["kind"] == "user"

    def test_invalid_name_not_written(self, store: Store) -> None:
        user = register_user(store)
        result = RosterService(store).add_character(
            {"userId": user["id"], "name": "Ab3", "class": "cleric"}
        )
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"


class TestDailyLogs:
    def test_submit(self, store: Store) -> None:
        user = register_user(store)
        char = add_character(store, user["id"])
        result = RosterService(store).submit_daily_log(
            {"characterId": char["id"], "date": "2024-03-01", "questIds": [1, 6]}
        )
        assert result.ok
        assert result.data["is_completed"] is False
        assert result.data["quest_ids"] == [1, 6]
        assert result.data["date"] == "2024-03-01"

    def test_unknown_quests(self, store: Store) -> None:
        user = register_user(store)
        char = add_character(store, user["id"])
        result = RosterService(store).submit_daily_log(
            {"characterId": char["id"], "date": "2024-03-01", "questIds": [1, 99, 77]}
        )
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNKNOWN_QUESTS"
        assert result.error.detail["quest_ids"] == [77, 99]

    def test_rejects_completion_flag(self, store: Store) -> None:
        user = register_user(store)
        char = add_character(store, user["id"])
        result = RosterService(store).submit_daily_log(
            {
                "characterId": char["id"],
                "date": "2024-03-01",
                "questIds": [1],
                "isCompleted": True,
            }
        )
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"

    def test_unknown_character(self, store: Store) -> None:
        result = RosterService(store).submit_daily_log(
            {"characterId": str(uuid4()), "date": "2024-03-01", "questIds": [1]}
        )
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_same_day_twice_accepted(self, store: Store) -> None:
        user = register_user(store)
        char = add_character(store, user["id"])
        svc = RosterService(store)
        payload = {"characterId": char["id"], "date": "2024-03-01", "questIds": [1]}
        first = svc.submit_daily_log(payload)
        second = svc.submit_daily_log(payload)
        assert first.ok and second.ok
        assert first.data["id"] != second.data["id"]

    def test_complete(self, store: Store) -> None:
        user = register_user(store)
        char = add_character(store, user["id"])
        svc = RosterService(store)
        log = svc.submit_daily_log(
            {"characterId": char["id"], "date": "2024-03-01", "questIds": [1]}
        )
        result = svc.complete_daily_log(log.data["id"])
        assert result.ok
        assert result.data["is_completed"] is True
        assert result.warnings == []

    def test_complete_twice_warns(self, store: Store) -> None:
        user = register_user(store)
        char = add_character(store, user["id"])
        svc = RosterService(store)
        log = svc.submit_daily_log(
            {"characterId": char["id"], "date": "2024-03-01", "questIds": [1]}
        )
        svc.complete_daily_log(log.data["id"])
        again = svc.complete_daily_log(log.data["id"])
        assert again.ok
        assert again.data["is_completed"] is True
        assert again.warnings == ["Log was already completed"]

    def test_complete_unknown(self, store: Store) -> None:
        result = RosterService(store).complete_daily_log(uuid4())
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_complete_malformed_id(self, store: Store) -> None:
        result = RosterService(store).complete_daily_log("not-a-uuid")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"kind": "daily quest log", "id": "not-a-uuid"}


class TestFriendGroups:
    def test_create_and_add_member(self, store: Store) -> None:
        owner = register_user(store, "Owner")
        friend = register_user(store, "Friend")
        svc = RosterService(store)
        group = svc.create_friend_group({"ownerId": owner["id"], "name": "Static"})
        assert group.ok
        added = svc.add_group_member(group.data["id"], friend["id"])
        assert added.ok
        assert added.data == {"group_id": group.data["id"], "user_id": friend["id"]}

    def test_duplicate_member(self, store: Store) -> None:
        owner = register_user(store, "Owner")
        svc = RosterService(store)
        group = svc.create_friend_group({"ownerId": owner["id"], "name": "Static"})
        svc.add_group_member(group.data["id"], owner["id"])
        result = svc.add_group_member(group.data["id"], owner["id"])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "DUPLICATE_MEMBER"

    def test_unknown_group(self, store: Store) -> None:
        user = register_user(store)
        result = RosterService(store).add_group_member(uuid4(), user["id"])
        assert result.error is not None
        assert result.error.detail["kind"] == "friend group"

    def test_malformed_user_id(self, store: Store) -> None:
        owner = register_user(store, "Owner")
        svc = RosterService(store)
        group = svc.create_friend_group({"ownerId": owner["id"], "name": "Static"})
        result = svc.add_group_member(group.data["id"], "42")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail["kind"] == "user"


class TestAvailability:
    def test_add_slot(self, store: Store) -> None:
        user = register_user(store)
        result = RosterService(store).add_availability(
            {
                "userId": user["id"],
                "startTime": "2024-03-01T18:00:00Z",
                "endTime": "2024-03-01T22:00:00Z",
                "isRecurring": True,
            }
        )
        assert result.ok
        assert result.data["is_recurring"] is True

    def test_inverted_range_stored(self, store: Store) -> None:
        user = register_user(store)
        result = RosterService(store).add_availability(
            {
                "userId": user["id"],
                "startTime": "2024-03-01T22:00:00Z",
                "endTime": "2024-03-01T18:00:00Z",
            }
        )
        assert result.ok
        assert result.data["is_recurring"] is False
