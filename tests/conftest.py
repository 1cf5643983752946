"""Shared pytest fixtures and test helpers for legionctl tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from legionctl.config.settings import LegionSettings
from legionctl.infrastructure.database.engine import init_database
from legionctl.infrastructure.store import Store

NOW = datetime(2024, 3, 1, 18, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's LEGIONCTL_* environment out of the tests."""
    monkeypatch.delenv("LEGIONCTL_CONFIG", raising=False)
    monkeypatch.delenv("LEGIONCTL_DATABASE__URL", raising=False)
    monkeypatch.delenv("LEGIONCTL_SEED__ENABLED", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'legionctl.db'}"


@pytest.fixture
def db_engine(db_url: str) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created and quests seeded."""
    engine = init_database(db_url)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path) -> LegionSettings:
    return LegionSettings.from_cli(root=tmp_path)


@pytest.fixture
def store(settings: LegionSettings) -> Iterator[Store]:
    """Store on a fresh database under ``tmp_path``."""
    s = Store(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def register_user(store: Store, username: str = "Kaelis", **kwargs: Any) -> dict[str, Any]:
    """Register a user via RosterService, asserting success."""
    from legionctl.services.roster import RosterService

    payload = {"discordId": f"discord-{username.lower()}", "username": username, **kwargs}
    result = RosterService(store).register_user(payload)
    assert result.ok, result.error
    return result.data


def add_character(
    store: Store, user_id: str, name: str = "Aerin", **kwargs: Any
) -> dict[str, Any]:
    """Add a character via RosterService, asserting success."""
    from legionctl.services.roster import RosterService

    payload = {"userId": user_id, "name": name, "class": "cleric", **kwargs}
    result = RosterService(store).add_character(payload)
    assert result.ok, result.error
    return result.data


def create_party(store: Store, creator_id: str, **kwargs: Any) -> dict[str, Any]:
    """Create a party via PartyService, asserting success."""
    from legionctl.services.party import PartyService

    payload = {
        "createdBy": creator_id,
        "sharedQuestIds": [1, 3],
        "scheduledStart": NOW.isoformat(),
        "scheduledEnd": (NOW + timedelta(hours=2)).isoformat(),
        **kwargs,
    }
    result = PartyService(store).create_party(payload)
    assert result.ok, result.error
    return result.data


def party_with_member(store: Store) -> tuple[dict[str, Any], dict[str, Any], dict[str, Any]]:
    """Create a user with a character, a party, and join them to it.

    Returns ``(party, user, character)``.
    """
    from legionctl.services.party import PartyService

    user = register_user(store, "Leader")
    character = add_character(store, user["id"], "Leadchar")
    party = create_party(store, user["id"])
    joined = PartyService(store).join_party(party["id"], user["id"], character["id"])
    assert joined.ok, joined.error
    return party, user, character
