"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, legionctl.toml only contains
overrides. A fresh project needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    # None means ``{root}/legionctl.db`` (SQLite).
    url: str | None = None
    # Log every statement through legionctl logging (see config.logging).
    echo: bool = False


class SeedConfig(BaseModel):
    """[seed] section."""

    model_config = {"frozen": True}

    enabled: bool = True


class InvitesConfig(BaseModel):
    """[invites] section."""

    model_config = {"frozen": True}

    default_ttl_hours: int = Field(default=72, gt=0)

