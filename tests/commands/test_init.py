"""Tests for the init CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from legionctl.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestInitCommand:
    def test_init_creates_database(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0, result.output
        assert "init" in result.output
        assert (tmp_path / "legionctl.db").is_file()

    def test_init_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "init"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["revision"] == "001_baseline"
        assert data["data"]["quest_count"] == 9

    def test_init_twice(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["init"])
        result = cli_runner.invoke(cli, ["--json", "init"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["data"]["quest_count"] == 9

    def test_init_without_seed(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "init"], env={"LEGIONCTL_SEED__ENABLED": "false"}
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["data"]["quest_count"] == 0

    def test_init_uses_config_database(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "legionctl.toml").write_text(
            f'[database]\nurl = "sqlite:///{tmp_path / "custom.db"}"\n'
        )
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "custom.db").is_file()
        assert not (tmp_path / "legionctl.db").exists()
