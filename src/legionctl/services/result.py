"""ServiceResult, ServiceError, and ValidationResult — the result contracts.

INVARIANT: All service-layer methods return ServiceResult, and all
validation entry points return ValidationResult. Neither is raised;
both are terminal values handed back to the caller.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"join_party"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


class FieldViolation(BaseModel):
    """One broken rule: which field, which rule, and a readable message."""

    model_config = {"frozen": True}

    field: str
    rule: str
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating one insert payload.

    On success ``data`` holds the normalized payload and ``errors`` is
    empty. On failure ``data`` is empty and ``errors`` lists every
    violation found, not just the first.
    """

    model_config = {"frozen": True}

    ok: bool
    entity: str
    data: dict[str, Any] = Field(default_factory=dict)
    errors: list[FieldViolation] = Field(default_factory=list)

    @property
    def fields(self) -> set[str]:
        """Field paths that have at least one violation."""
        return {e.field for e in self.errors}

    def to_service_error(self) -> ServiceError:
        return ServiceError(
            code="VALIDATION_FAILED",
            message=f"Invalid {self.entity} payload ({len(self.errors)} violation(s))",
            detail={"violations": [e.model_dump() for e in self.errors]},
        )
