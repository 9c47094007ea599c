"""Domain-level exception primitives with stable machine-readable codes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

VALIDATION_ERROR = "VALIDATION_ERROR"
FORBIDDEN = "FORBIDDEN"
NOT_FOUND = "NOT_FOUND"
INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(eq=False)
class DomainError(Exception):
    """Use-case level error with stable code and HTTP mapping."""

    code: str
    http_status: int
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    """Malformed or incomplete input, detected before any write."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(code=VALIDATION_ERROR, http_status=400, message=message, details=details)


class InvalidStateTransition(ValidationError):
    """Workflow rejection carrying the state validator's reason."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.code = INVALID_STATE_TRANSITION


class IncompleteConfigurationError(ValidationError):
    """Target exists but lacks the configuration needed to accept requests."""


class Forbidden(DomainError):
    def __init__(self, message: str = "Access denied", details: dict[str, Any] | None = None) -> None:
        super().__init__(code=FORBIDDEN, http_status=403, message=message, details=details)


class NotFound(DomainError):
    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(code=NOT_FOUND, http_status=404, message=message, details=details)


class InternalError(DomainError):
    """Storage or downstream failure. The message is never shown to callers."""

    def __init__(self, message: str = "Internal server error", details: dict[str, Any] | None = None) -> None:
        super().__init__(code=INTERNAL_ERROR, http_status=500, message=message, details=details)
