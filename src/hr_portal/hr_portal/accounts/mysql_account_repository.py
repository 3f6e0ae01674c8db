from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import AccountStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import UPDATABLE_FIELDS, Account
from .repository import AccountRepository

_COLUMNS = """
    id, title, first_name, last_name, email, password_hash, role, status, is_verified,
    verification_token, verified, reset_token, reset_token_expires, last_login, created, updated
"""


def _to_account(row: dict) -> Account:
    return Account(
        account_id=int(row["id"]),
        title=row.get("title"),
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        status=AccountStatus(row["status"]),
        is_verified=bool(row.get("is_verified")),
        verification_token=row.get("verification_token"),
        verified=row.get("verified"),
        reset_token=row.get("reset_token"),
        reset_token_expires=row.get("reset_token_expires"),
        last_login=row.get("last_login"),
        created=row["created"],
        updated=row.get("updated"),
    )


def _db_value(value: Any) -> Any:
    if isinstance(value, (Role, AccountStatus)):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value: Any) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def get_by_id(self, account_id: int) -> Optional[Account]:
        return self._get_one("id", int(account_id))

    def get_by_email(self, email: str) -> Optional[Account]:
        return self._get_one("email", email)

    def get_by_verification_token(self, token: str) -> Optional[Account]:
        return self._get_one("verification_token", token) if token else None

    def get_by_reset_token(self, token: str) -> Optional[Account]:
        return self._get_one("reset_token", token) if token else None

    def list_all(self) -> Sequence[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts ORDER BY id")
            return [_to_account(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM accounts")
            return int(fetchone(cur)["n"])

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO accounts(
                    title, first_name, last_name, email, password_hash, role, status,
                    is_verified, verification_token, verified
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s, IF(%s, NOW(), NULL))
                """,
                (
                    title,
                    first_name,
                    last_name,
                    email,
                    password_hash,
                    role.value,
                    status.value,
                    int(is_verified),
                    verification_token,
                    int(is_verified),
                ),
            )
            return int(cur.lastrowid)

    def update(self, account_id: int, changes: Mapping[str, Any]) -> bool:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported account fields: {sorted(unknown)}")
        if not changes:
            return self.get_by_id(account_id) is not None

        columns = sorted(changes)
        assignments = ", ".join(f"{c}=%s" for c in columns)
        params = [_db_value(changes[c]) for c in columns] + [int(account_id)]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE accounts SET {assignments} WHERE id=%s", tuple(params))
            cur.execute("SELECT 1 FROM accounts WHERE id=%s", (int(account_id),))
            return fetchone(cur) is not None

    def delete_by_id(self, account_id: int) -> bool:
        # employees.account_id cascades to employees, requests, items, leaves and workflows
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM accounts WHERE id=%s", (int(account_id),))
            return cur.rowcount > 0
