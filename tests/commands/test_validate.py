"""Tests for the validate CLI command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from legionctl.cli import cli

CHARACTER = {
    "userId": "3f2b8c1e-5d4a-4b6e-9a7c-1e2d3f4a5b6c",
    "name": "Aerin",
    "class": "cleric",
}


class TestValidateCommand:
    def test_valid_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        payload = tmp_path / "character.json"
        payload.write_text(json.dumps(CHARACTER))
        result = cli_runner.invoke(cli, ["validate", "character", str(payload)])
        assert result.exit_code == 0, result.output
        assert "VALID" in result.output

    def test_valid_stdin_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "validate", "character"], input=json.dumps(CHARACTER)
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"] == CHARACTER

    def test_invalid_exits_1(self, cli_runner: CliRunner) -> None:
        bad = {**CHARACTER, "name": "Ab3", "class": "wizard"}
        result = cli_runner.invoke(cli, ["validate", "character"], input=json.dumps(bad))
        assert result.exit_code == 1
        assert "INVALID" in result.output
        assert "Name must be letters only" in result.output

    def test_invalid_json_output(self, cli_runner: CliRunner) -> None:
        payload = {"characterId": CHARACTER["userId"], "date": "2024-2-5", "questIds": []}
        result = cli_runner.invoke(
            cli, ["--json", "validate", "daily-log"], input=json.dumps(payload)
        )
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert {e["field"] for e in data["errors"]} == {"date", "questIds"}

    def test_malformed_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["validate", "user"], input="{not json")
        assert result.exit_code == 1
        assert "json_invalid" in result.output

    def test_undecodable_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        payload = tmp_path / "user.json"
        payload.write_bytes(b"\xff\xfe{\"discordId\": 1}")
        result = cli_runner.invoke(cli, ["--json", "validate", "user", str(payload)])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert [(e["field"], e["rule"]) for e in data["errors"]] == [("__root__", "json_invalid")]

    def test_unknown_entity(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["validate", "guild"], input="{}")
        assert result.exit_code == 2

    def test_does_not_create_database(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        with cli_runner.isolated_filesystem(temp_dir=tmp_path) as cwd:
            cli_runner.invoke(cli, ["validate", "character"], input=json.dumps(CHARACTER))
            assert not (Path(cwd) / "legionctl.db").exists()
