"""Tests for the upgrade CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from legionctl.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestUpgradeCommand:
    def test_upgrade_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["upgrade", "--help"])
        assert result.exit_code == 0
        assert "--check" in result.output
        assert "--stamp" in result.output

    def test_upgrade_check_after_init(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["init"])
        result = cli_runner.invoke(cli, ["--json", "upgrade", "--check"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["data"]["pending_count"] == 0

    def test_upgrade_apply_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "upgrade"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["current"] == "001_baseline"

    def test_upgrade_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["upgrade"])
        assert result.exit_code == 0
        assert "upgrade" in result.output

    def test_stamp(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "upgrade", "--stamp"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["op"] == "stamp"
        assert data["data"]["current"] == "001_baseline"

    def test_check_and_stamp_conflict(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["upgrade", "--check", "--stamp"])
        assert result.exit_code == 2
        assert "cannot be combined" in result.output

    def test_db_option_selects_database(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere.db"
        result = cli_runner.invoke(cli, ["--db", f"sqlite:///{target}", "upgrade"])
        assert result.exit_code == 0, result.output
        assert target.exists()
        assert not (tmp_path / "legionctl.db").exists()
