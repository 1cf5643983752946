"""Tests for format_result, format_validation, and OutputSettings."""

import json

from legionctl.output.formatters import OutputSettings, format_result, format_validation
from legionctl.services.result import (
    FieldViolation,
    ServiceError,
    ServiceResult,
    ValidationResult,
)

PLAIN = OutputSettings(no_color=True)


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail", **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="ERR", message=msg, detail=dict(detail)),
    )


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        as_json = OutputSettings(json_output=True)
        output = format_result(_ok("join_party", id="p1"), settings=as_json)
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "join_party"
        assert data["data"]["id"] == "p1"

    def test_json_mode_error(self) -> None:
        as_json = OutputSettings(json_output=True)
        output = format_result(_err("join_party", "Bad"), settings=as_json)
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["message"] == "Bad"


class TestFormatResultHuman:
    def test_success_lists_data(self) -> None:
        output = format_result(_ok("stamp", current="001_baseline"), settings=PLAIN)
        assert "OK" in output
        assert "stamp" in output
        assert "current: 001_baseline" in output

    def test_quiet_hides_data(self) -> None:
        quiet = OutputSettings(quiet=True, no_color=True)
        output = format_result(_ok("stamp", current="001_baseline"), settings=quiet)
        assert "001_baseline" not in output

    def test_items_rendered_as_table(self) -> None:
        items = [
            {"id": 1, "name": "Relic Recovery", "tier": "medium"},
            {"id": 6, "name": "Fortress Gate Assault", "tier": "greater"},
        ]
        output = format_result(_ok("list_quests", count=2, items=items), settings=PLAIN)
        assert "count: 2" in output
        assert "Relic Recovery" in output
        assert "Fortress Gate Assault" in output

    def test_empty_items(self) -> None:
        output = format_result(_ok("list_active_parties", count=0, items=[]), settings=PLAIN)
        assert "(none)" in output

    def test_error_with_violations(self) -> None:
        violations = [{"field": "name", "rule": "pattern_mismatch", "message": "Letters"}]
        result = _err("add_character", "Invalid", violations=violations)
        output = format_result(result, settings=PLAIN)
        assert "ERROR" in output
        assert "add_character" in output
        assert "name pattern_mismatch: Letters" in output

    def test_markup_in_values_escaped(self) -> None:
        output = format_result(_ok("x", note="[bold]raw[/bold]"), settings=PLAIN)
        assert "[bold]raw[/bold]" in output


class TestFormatValidation:
    def test_valid(self) -> None:
        result = ValidationResult(ok=True, entity="user", data={"username": "Kaelis"})
        output = format_validation(result, settings=PLAIN)
        assert "VALID" in output
        assert "username: Kaelis" in output

    def test_invalid_lists_every_violation(self) -> None:
        result = ValidationResult(
            ok=False,
            entity="daily-log",
            errors=[
                FieldViolation(
                    field="date", rule="pattern_mismatch", message="Date must be YYYY-MM-DD"
                ),
                FieldViolation(
                    field="questIds", rule="too_short", message="Must select at least one quest"
                ),
            ],
        )
        output = format_validation(result, settings=PLAIN)
        assert "INVALID" in output
        assert "2 violation" in output
        assert "date pattern_mismatch: Date must be YYYY-MM-DD" in output
        assert "questIds too_short: Must select at least one quest" in output

    def test_json(self) -> None:
        result = ValidationResult(ok=True, entity="user", data={"username": "Kaelis"})
        data = json.loads(format_validation(result, settings=OutputSettings(json_output=True)))
        assert data == {"ok": True, "entity": "user", "data": {"username": "Kaelis"}, "errors": []}
