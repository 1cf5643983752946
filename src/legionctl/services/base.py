"""BaseService — foundation for all legionctl services.

Every service receives a :class:`Store` at construction time and owns its
transaction boundaries via ``self._store.transaction()``. Failures are
reported as :class:`ServiceResult` values, never raised.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import select

from legionctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from sqlalchemy import Connection, Row, Table

    from legionctl.infrastructure.store import Store
    from legionctl.services.result import ValidationResult

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class PartyService(BaseService):
            def disband_party(self, party_id) -> ServiceResult:
                with self._store.transaction() as conn:
                    ...
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    @staticmethod
    def _fetch(conn: Connection, table: Table, key: Any, column: str = "id") -> Row[Any] | None:
        """Return the row of *table* whose *column* equals *key*, if any."""
        return conn.execute(select(table).where(table.c[column] == key)).first()

    @staticmethod
    def _fail(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        logger.debug("%s failed: %s (%s)", op, code, message)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )

    @classmethod
    def _not_found(cls, op: str, kind: str, key: Any) -> ServiceResult:
        return cls._fail(op, "NOT_FOUND", f"No {kind} with id {key}", kind=kind, id=str(key))

    @classmethod
    def _check_ids(cls, op: str, **ids: Any) -> ServiceResult | None:
        """NOT_FOUND for the first value that is not a UUID, else None.

        Keyword names are the row kinds, e.g. ``friend_group=group_id``.
        """
        for kind, value in ids.items():
            try:
                as_uuid(value)
            except ValueError:
                return cls._not_found(op, kind.replace("_", " "), value)
        return None

    @staticmethod
    def _invalid(op: str, validation: ValidationResult) -> ServiceResult:
        return ServiceResult(ok=False, op=op, error=validation.to_service_error())


def as_uuid(value: UUID | str) -> UUID:
    """Accept a UUID or its string form (as found in JSON payloads)."""
    return value if isinstance(value, UUID) else UUID(str(value))
