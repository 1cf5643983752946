"""Command: validate an insert payload without writing it."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TextIO

import click

from legionctl.commands._base import LegionCommand
from legionctl.services.result import FieldViolation, ValidationResult
from legionctl.services.validation import ROOT_FIELD, VALIDATORS, get_validator

if TYPE_CHECKING:
    from legionctl.commands._context import AppContext


@click.command(
    cls=LegionCommand,
    examples="""\
  legionctl validate character payload.json
  echo '{"characterId": "...", "date": "2024-03-01", "questIds": [1]}' \\
      | legionctl validate daily-log
  legionctl --json validate user user.json""",
)
@click.argument("entity", type=click.Choice(sorted(VALIDATORS)))
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_obj
def validate(app: AppContext, entity: str, source: TextIO) -> None:
    """Validate a JSON payload for ENTITY read from SOURCE (default: stdin).

    Prints the normalized payload, or every violation with exit code 1.
    """
    try:
        payload = json.load(source)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        result = ValidationResult(
            ok=False,
            entity=entity,
            errors=[
                FieldViolation(
                    field=ROOT_FIELD, rule="json_invalid", message=f"Invalid JSON: {exc}"
                )
            ],
        )
    else:
        result = get_validator(entity)(payload)
    app.emit_validation(result)
