"""Root CLI group: global flags, settings, and the shared AppContext."""

from __future__ import annotations

import click

from legionctl import __version__
from legionctl.commands import register_commands
from legionctl.commands._context import AppContext
from legionctl.config.settings import LegionSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="legionctl")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the outcome; log errors only.")
@click.option("-v", "--verbose", is_flag=True, help="Show result metadata and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.option(
    "--db",
    "database_url",
    metavar="URL",
    default=None,
    help="Database URL, overriding [database] url (default: ./legionctl.db).",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    metavar="PATH",
    default=None,
    help="Config file to use instead of the discovered legionctl.toml.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_color: bool,
    database_url: str | None,
    config_path: str | None,
) -> None:
    """legionctl: legion roster, daily quest, and party data tooling."""
    settings = LegionSettings.from_cli(
        config_path=config_path,
        database_url=database_url,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        no_color=no_color,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
