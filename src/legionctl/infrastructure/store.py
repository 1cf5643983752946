"""Store — the single dependency injected into every service.

Owns the database engine and hands out transactional connections.
:meth:`Store.transaction` wraps ``engine.begin()``: the block commits on
success and rolls back on any exception, so a service's writes land
together or not at all.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from legionctl.infrastructure.database.engine import init_database

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from legionctl.config.settings import LegionSettings

logger = logging.getLogger(__name__)


class Store:
    """Database access point shared by all services."""

    def __init__(self, settings: LegionSettings, *, engine: Engine | None = None) -> None:
        self.settings = settings
        if engine is None:
            engine = init_database(
                settings.db_url,
                seed=settings.seed.enabled,
            )
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Yield a connection inside a transaction (commit or rollback)."""
        with self._engine.begin() as conn:
            yield conn

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Yield a plain connection for reads."""
        with self._engine.connect() as conn:
            yield conn

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()
        logger.debug("Store closed")
