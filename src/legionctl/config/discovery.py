"""Locating and reading ``legionctl.toml``.

Resolution order for the config file:
  1. ``--config PATH`` on the command line
  2. ``LEGIONCTL_CONFIG`` in the environment
  3. walk up from the working directory, the way git finds ``.git/``

An explicit path that does not exist means "no config file", never a
fallback to the next step.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "legionctl.toml"
CONFIG_ENV_VAR = "LEGIONCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file from ``LEGIONCTL_CONFIG`` or a walk-up from *start*."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return _existing(Path(env_path))

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config(config_path: str | None = None, start: Path | None = None) -> Path | None:
    """Apply the full resolution order, starting with an explicit *config_path*."""
    if config_path:
        return _existing(Path(config_path))
    return find_config(start)


def read_config(path: Path | None) -> dict[str, Any]:
    """Parse *path* into raw section dicts; ``{}`` when there is no file.

    Raises:
        click.ClickException: The file is not valid TOML.
    """
    if path is None or not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


def _existing(path: Path) -> Path | None:
    return path if path.is_file() else None
