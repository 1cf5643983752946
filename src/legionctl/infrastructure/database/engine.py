"""Database engine setup.

SQLite is the default persistence layer (foreign keys enforced via PRAGMA,
WAL mode for file databases). Any SQLAlchemy URL works; PostgreSQL gets
native enums and integer arrays from the schema's type variants.

SQLAlchemy Core (not ORM) is used: the package declares tables and runs
short, explicit transactions, so sessions and identity maps buy nothing.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from legionctl.infrastructure.database.schema import metadata
from legionctl.infrastructure.database.seed import seed_quest_definitions

logger = logging.getLogger(__name__)


def create_db_engine(url: str) -> Engine:
    """Create an engine; on SQLite, enable foreign keys (and WAL for files)."""
    engine = create_engine(url)

    if engine.dialect.name == "sqlite":
        in_memory = engine.url.database in (None, "", ":memory:")

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def init_database(url: str, *, seed: bool = True) -> Engine:
    """Create all tables and (optionally) seed the quest reference data.

    Idempotent — safe to call on an existing database: ``create_all``
    skips existing tables and seeding skips existing quest IDs.

    Returns the engine ready for use.
    """
    engine = create_db_engine(url)
    metadata.create_all(engine)
    logger.debug("Schema ready on %s", engine.url.render_as_string(hide_password=True))

    if seed:
        with engine.begin() as conn:
            inserted = seed_quest_definitions(conn)
        logger.debug("Seeded %d quest definitions", inserted)
    return engine
