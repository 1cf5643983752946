"""Rich/JSON output helpers.

The CLI renders results for humans (Rich tables and colors) or machines
(``--json``). Both ServiceResult and ValidationResult go through here.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table

from legionctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from legionctl.services.result import ServiceResult, ValidationResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    no_color: bool = False


def _render_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _render_items(console: Console, items: list[dict[str, Any]]) -> None:
    if not items:
        console.print("  (none)", style="legion.key")
        return
    table = Table(show_header=True, header_style="legion.key", box=None, pad_edge=False)
    columns = list(items[0])
    for column in columns:
        table.add_column(column)
    for item in items:
        table.add_row(*(escape(_render_value(item.get(c, ""))) for c in columns))
    console.print(table)


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    console = create_console(no_color=settings.no_color)
    if not result.ok:
        error = result.error
        message = error.message if error else "Unknown error"
        code = error.code if error else "ERROR"
        console.print(f"[legion.error]ERROR[/]: {result.op} ({code}) {escape(message)}")
        violations = error.detail.get("violations", []) if error else []
        for v in violations:
            console.print(
                f"  [legion.field]{escape(v['field'])}[/] "
                f"[legion.rule]{escape(v['rule'])}[/]: {escape(v['message'])}"
            )
        return get_output(console).rstrip("\n")

    console.print(f"[legion.ok]OK[/]: [legion.op]{result.op}[/]")
    if settings.quiet:
        return get_output(console).rstrip("\n")

    data = dict(result.data)
    items = data.pop("items", None)
    for key, value in data.items():
        console.print(f"  [legion.key]{key}[/]: {escape(_render_value(value))}")
    if isinstance(items, list):
        _render_items(console, items)
    if settings.verbose and result.meta:
        for key, value in result.meta.items():
            console.print(f"  [legion.key]meta.{key}[/]: {escape(_render_value(value))}")
    return get_output(console).rstrip("\n")


def format_validation(
    result: ValidationResult, *, settings: OutputSettings | None = None
) -> str:
    """Format a ValidationResult: the normalized payload or every violation."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    console = create_console(no_color=settings.no_color)
    if result.ok:
        console.print(f"[legion.ok]VALID[/]: {result.entity}")
        if not settings.quiet:
            for key, value in result.data.items():
                console.print(f"  [legion.key]{key}[/]: {escape(_render_value(value))}")
        return get_output(console).rstrip("\n")

    console.print(
        f"[legion.error]INVALID[/]: {result.entity} ({len(result.errors)} violation(s))"
    )
    for e in result.errors:
        console.print(
            f"  [legion.field]{escape(e.field)}[/] "
            f"[legion.rule]{escape(e.rule)}[/]: {escape(e.message)}"
        )
    return get_output(console).rstrip("\n")
