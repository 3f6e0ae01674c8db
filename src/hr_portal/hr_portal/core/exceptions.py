from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Carries optional structured context so the transport layer can report
    which resource, id or field was involved.
    """

    code = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str,
        *,
        resource: Optional[str] = None,
        id: Optional[Any] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.resource = resource
        self.id = id
        self.field = field

    def to_dict(self) -> dict:
        detail = {k: v for k, v in (("resource", self.resource), ("id", self.id), ("field", self.field)) if v is not None}
        out: dict = {"message": self.message, "code": self.code}
        if detail:
            out["detail"] = detail
        return out


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Raised when a referenced id does not resolve."""

    code = "NOT_FOUND"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "AUTHENTICATION_ERROR"


class AuthorizationError(DomainError):
    """Raised when a principal lacks permission for an action."""

    code = "FORBIDDEN"


class ConflictError(DomainError):
    """Raised on uniqueness or state-precondition violations."""

    code = "CONFLICT"
