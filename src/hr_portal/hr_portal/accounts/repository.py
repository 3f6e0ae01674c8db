from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import AccountStatus, Role
from .model import Account


class AccountRepository(Protocol):
    """Repository interface for Account.

    Services depend on this interface, never on a concrete store.
    """

    def get_by_id(self, account_id: int) -> Optional[Account]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def get_by_verification_token(self, token: str) -> Optional[Account]:
        raise NotImplementedError

    def get_by_reset_token(self, token: str) -> Optional[Account]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Account]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        title: Optional[str],
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        role: Role,
        status: AccountStatus,
        is_verified: bool,
        verification_token: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, account_id: int, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, account_id: int) -> bool:
        """Delete the account; an employee linked to it is removed with it."""

        raise NotImplementedError
