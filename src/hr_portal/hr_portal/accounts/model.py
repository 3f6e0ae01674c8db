from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AccountStatus, Role


@dataclass(frozen=True)
class Account:
    """Domain entity: login identity of a person using the portal."""

    account_id: int
    first_name: str
    last_name: str
    email: str
    password_hash: str
    role: Role
    status: AccountStatus
    is_verified: bool
    created: datetime
    title: Optional[str] = None
    verification_token: Optional[str] = None
    verified: Optional[datetime] = None
    reset_token: Optional[str] = None
    reset_token_expires: Optional[datetime] = None
    last_login: Optional[datetime] = None
    updated: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# Columns an account update may touch; shared by both repository implementations.
UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "first_name",
        "last_name",
        "email",
        "password_hash",
        "role",
        "status",
        "is_verified",
        "verification_token",
        "verified",
        "reset_token",
        "reset_token_expires",
        "last_login",
        "updated",
    }
)
