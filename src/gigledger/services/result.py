"""ServiceResult and ServiceError: the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
Forbidden, not-found, and business-rule outcomes are values here, never
exceptions; the CLI (or any other front end) inspects ``ok`` and
``error.code``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Error taxonomy shared by every service."""

    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    ALREADY_PAID = "ALREADY_PAID"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    STORAGE_ERROR = "STORAGE_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_INPUT = "INVALID_INPUT"


# HTTP status each code maps to at the API edge.
HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.ALREADY_PAID: 401,
    ErrorCode.INSUFFICIENT_FUNDS: 401,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.STORAGE_ERROR: 500,
}

RETRYABLE: frozenset[ErrorCode] = frozenset({ErrorCode.STORAGE_ERROR})


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def of(cls, code: ErrorCode, message: str, **detail: Any) -> ServiceError:
        """Build an error stamped with its HTTP status and retryability."""
        return cls(
            code=code.value,
            message=message,
            detail={
                "status": HTTP_STATUS[code],
                "retryable": code in RETRYABLE,
                **detail,
            },
        )

    @property
    def retryable(self) -> bool:
        return bool(self.detail.get("retryable", False))


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"pay_job"``).
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

    @classmethod
    def failure(cls, op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError.of(code, message, **detail))

    @property
    def code(self) -> str | None:
        """The error code, or None on success."""
        return self.error.code if self.error else None
