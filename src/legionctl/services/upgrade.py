"""UpgradeService — database migration with Alembic.

Pipeline: CHECK → MIGRATE (or STAMP) → REPORT
"""

from __future__ import annotations

import logging
from typing import Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import func, inspect, select

from legionctl.infrastructure.database.migrations import build_config, stamp_head
from legionctl.infrastructure.database.schema import quest_definitions
from legionctl.services.base import BaseService
from legionctl.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


class UpgradeService(BaseService):
    """Handles database schema migrations via Alembic."""

    def _db_url(self) -> str:
        return self._store.engine.url.render_as_string(hide_password=False)

    def _tables_exist(self) -> bool:
        """Check if core tables exist (database created without Alembic)."""
        return "users" in inspect(self._store.engine).get_table_names()

    def check_pending(self) -> ServiceResult:
        """List pending migrations without applying."""
        op = "upgrade"

        try:
            cfg = build_config(self._db_url())
            script = ScriptDirectory.from_config(cfg)
            head = script.get_current_head()

            with self._store.connect() as conn:
                current = MigrationContext.configure(conn).get_current_revision()

            # Walk from head down to current
            pending: list[dict[str, Any]] = []
            if current != head and head is not None:
                rev_obj = script.get_revision(head)
                while rev_obj is not None and rev_obj.revision != current:
                    pending.append(
                        {
                            "revision": rev_obj.revision,
                            "description": rev_obj.doc or "",
                        }
                    )
                    down = rev_obj.down_revision
                    if down is None:
                        break
                    rev_obj = script.get_revision(str(down))

            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "pending_count": len(pending),
                    "pending": pending,
                    "current": current,
                    "head": head,
                },
            )
        except Exception as exc:
            logger.debug("Migration check failed", exc_info=True)
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="CHECK_FAILED",
                    message=f"Failed to check migrations: {exc}",
                ),
            )

    def apply(self) -> ServiceResult:
        """Bring the database to head.

        A database whose tables were created directly from the schema but
        never stamped is stamped at head instead of migrated.
        """
        op = "upgrade"

        check_result = self.check_pending()
        if not check_result.ok:
            return check_result

        pending_count = check_result.data["pending_count"]
        if pending_count == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": check_result.data["head"],
                    "message": "Database is already up to date",
                },
            )

        stamped = check_result.data["current"] is None and self._tables_exist()
        try:
            with self._store.transaction() as conn:
                cfg = build_config(self._db_url(), conn)
                if stamped:
                    command.stamp(cfg, "head")
                else:
                    command.upgrade(cfg, "head")
        except Exception as exc:
            logger.debug("Migration failed", exc_info=True)
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="MIGRATION_FAILED",
                    message=f"Migration failed: {exc}",
                ),
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "applied_count": 0 if stamped else pending_count,
                "stamped": stamped,
                "current": check_result.data["head"],
            },
        )

    def stamp_current(self) -> ServiceResult:
        """Record the head revision on the store's database without migrating."""
        op = "stamp"

        try:
            with self._store.transaction() as conn:
                stamp_head(self._db_url(), conn)
            head = ScriptDirectory.from_config(build_config(self._db_url())).get_current_head()
            return ServiceResult(ok=True, op=op, data={"stamped": True, "current": head})
        except Exception as exc:
            logger.debug("Stamp failed", exc_info=True)
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="STAMP_FAILED",
                    message=f"Failed to stamp database: {exc}",
                ),
            )

    def initialize(self) -> ServiceResult:
        """Report on a freshly opened store and stamp it at head.

        Opening the store already created the tables and seeded quest
        definitions; this records the schema revision so later
        ``upgrade`` runs start from the baseline.
        """
        op = "init"

        stamp = self.stamp_current()
        if not stamp.ok:
            return stamp

        with self._store.connect() as conn:
            quest_count = conn.execute(
                select(func.count()).select_from(quest_definitions)
            ).scalar_one()

        url = self._store.engine.url.render_as_string(hide_password=True)
        logger.info("Initialized %s at revision %s", url, stamp.data["current"])
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "database": url,
                "revision": stamp.data["current"],
                "quest_count": quest_count,
            },
        )
