"""Alembic migrations for the legionctl schema.

Configuration is built in code, so there is no alembic.ini. Callers that
already hold a connection (the Store) pass it through
``Config.attributes["connection"]``; migrations then run inside that
connection's transaction instead of on a second engine. That matters for
``sqlite://``, where a second engine would see a different, empty database.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from alembic import command
from alembic.config import Config

if TYPE_CHECKING:
    from sqlalchemy import Connection


def build_config(db_url: str, connection: Connection | None = None) -> Config:
    """Alembic Config for the scripts in this package, bound to *db_url*."""
    cfg = Config()
    cfg.set_main_option("script_location", str(Path(__file__).parent))
    # ConfigParser interpolation would choke on '%' in passwords.
    cfg.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))
    if connection is not None:
        cfg.attributes["connection"] = connection
    return cfg


def stamp_head(db_url: str, connection: Connection | None = None) -> None:
    """Record the head revision without running any migration.

    ``legionctl init`` creates tables straight from the schema metadata and
    stamps them here, so later upgrades start from the baseline.
    """
    command.stamp(build_config(db_url, connection), "head")
