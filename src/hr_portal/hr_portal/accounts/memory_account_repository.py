from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import AccountStatus, Role
from ..core.exceptions import ConflictError
from ..database.memory import MemoryStore, delete_employee_rows
from .model import UPDATABLE_FIELDS, Account
from .repository import AccountRepository


class MemoryAccountRepository(AccountRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict:
        return self._store.table("accounts")

    def get_by_id(self, account_id: int) -> Optional[Account]:
        return self._rows.get(int(account_id))

    def _find(self, **criteria) -> Optional[Account]:
        for acc in self._rows.values():
            if all(getattr(acc, k) == v for k, v in criteria.items()):
                return acc
        return None

    def get_by_email(self, email: str) -> Optional[Account]:
        return self._find(email=email)

    def _ensure_email_free(self, email: str) -> None:
        # mirrors uq_accounts_email
        if self._find(email=email):
            raise ConflictError("Duplicate value violates a unique constraint", resource="Account", field="email")

    def get_by_verification_token(self, token: str) -> Optional[Account]:
        return self._find(verification_token=token) if token else None

    def get_by_reset_token(self, token: str) -> Optional[Account]:
        return self._find(reset_token=token) if token else None

    def list_all(self) -> Sequence[Account]:
        return sorted(self._rows.values(), key=lambda a: a.account_id)

    def count(self) -> int:
        return len(self._rows)

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
        with self._store.transaction():
            self._ensure_email_free(email)
            account_id = self._store.next_id("accounts")
            now = now_local()
            self._rows[account_id] = Account(
                account_id=account_id,
                title=title,
                first_name=first_name,
                last_name=last_name,
                email=email,
                password_hash=password_hash,
                role=role,
                status=status,
                is_verified=is_verified,
                verification_token=verification_token,
                verified=now if is_verified else None,
                created=now,
            )
            return account_id

    def update(self, account_id: int, changes: Mapping[str, Any]) -> bool:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported account fields: {sorted(unknown)}")
        with self._store.transaction():
            acc = self._rows.get(int(account_id))
            if not acc:
                return False
            if "email" in changes and changes["email"] != acc.email:
                self._ensure_email_free(changes["email"])
            self._rows[acc.account_id] = replace(acc, **changes)
            return True

    def delete_by_id(self, account_id: int) -> bool:
        with self._store.transaction():
            if int(account_id) not in self._rows:
                return False
            for emp in list(self._store.table("employees").values()):
                if emp.account_id == int(account_id):
                    delete_employee_rows(self._store, emp.employee_id)
            del self._rows[int(account_id)]
            return True
