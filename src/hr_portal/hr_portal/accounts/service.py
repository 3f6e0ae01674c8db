from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..access.policy import AccessPolicy, Principal
from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH, RESET_TOKEN_TTL_HOURS
from ..core.enums import AccountStatus, Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import Account
from .repository import AccountRepository

log = logging.getLogger(__name__)

DELETE_POLICIES = ("block", "cascade")


def _random_token() -> str:
    return secrets.token_hex(20)


def _normalize_email(email: Optional[str]) -> str:
    value = require_non_empty(email, "Email").lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValidationError("Email is invalid", field="email")
    return value


def _parse_role(value: Any) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(f"Unknown role: {value}", field="role")


def _parse_status(value: Any) -> AccountStatus:
    try:
        return AccountStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown account status: {value}", field="status")


@dataclass(frozen=True)
class Registration:
    """Outcome of a self-registration; the token is what the e-mail would carry."""

    account_id: int
    verification_token: Optional[str]


class AccountService:
    """Use cases: registration, login, password recovery and account admin."""

    def __init__(
        self,
        accounts: AccountRepository,
        employees: EmployeeRepository,
        policy: AccessPolicy,
        *,
        delete_policy: str = "block",
        reset_token_ttl_hours: int = RESET_TOKEN_TTL_HOURS,
    ):
        if delete_policy not in DELETE_POLICIES:
            raise ValueError(f"delete_policy must be one of {DELETE_POLICIES}")
        self._accounts = accounts
        self._employees = employees
        self._policy = policy
        self._delete_policy = delete_policy
        self._reset_ttl = timedelta(hours=int(reset_token_ttl_hours))

    @staticmethod
    def _check_passwords(password: Optional[str], confirm_password: Optional[str]) -> str:
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        if confirm_password is not None and password != confirm_password:
            raise ValidationError("Passwords do not match", field="confirmPassword")
        return password

    def _require(self, account_id: int) -> Account:
        acc = self._accounts.get_by_id(int(account_id))
        if not acc:
            raise NotFoundError("Account not found", resource="Account", id=account_id)
        return acc

    def _ensure_email_free(self, email: str) -> None:
        if self._accounts.get_by_email(email):
            raise ConflictError(f"Email {email} is already registered", resource="Account", field="email")

    # ---- self service ----
    def register(
        self,
        *,
        title: Optional[str],
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        confirm_password: Optional[str] = None,
    ) -> Registration:
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        email = _normalize_email(email)
        self._check_passwords(password, confirm_password)
        self._ensure_email_free(email)

        # The very first account bootstraps the portal as its administrator.
        first = self._accounts.count() == 0
        token = None if first else _random_token()
        account_id = self._accounts.create(
            title=optional_text(title, "title"),
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.ADMIN if first else Role.USER,
            status=AccountStatus.ACTIVE if first else AccountStatus.INACTIVE,
            is_verified=first,
            verification_token=token,
        )
        log.info("Registered account %s (%s)", account_id, email)
        if token:
            log.info("Verification token issued for %s", email)
        return Registration(account_id=account_id, verification_token=token)

    def verify_email(self, token: str) -> None:
        acc = self._accounts.get_by_verification_token(optional_text(token, "token") or "")
        if not acc:
            raise ValidationError("Verification failed", field="token")
        self._accounts.update(
            acc.account_id,
            {
                "is_verified": True,
                "verified": now_local(),
                "status": AccountStatus.ACTIVE,
                "verification_token": None,
            },
        )
        log.info("Verified account %s", acc.account_id)

    def authenticate(self, email: str, password: str) -> Account:
        acc = self._accounts.get_by_email((optional_text(email, "email") or "").lower())
        try:
            ok = bool(acc) and isinstance(password, str) and check_password_hash(acc.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes seeded by hand
            ok = False
        if not ok or not acc.is_verified:
            log.warning("Failed login for %s", email)
            raise AuthenticationError("Email or password is incorrect")

        self._accounts.update(acc.account_id, {"last_login": now_local()})
        return self._require(acc.account_id)

    def forgot_password(self, email: str) -> Optional[str]:
        """Issue a reset token; unknown e-mails are ignored to avoid enumeration."""
        acc = self._accounts.get_by_email((optional_text(email, "email") or "").lower())
        if not acc:
            return None
        token = _random_token()
        self._accounts.update(
            acc.account_id,
            {"reset_token": token, "reset_token_expires": now_local() + self._reset_ttl},
        )
        log.info("Password reset token issued for account %s", acc.account_id)
        return token

    def validate_reset_token(self, token: str) -> Account:
        acc = self._accounts.get_by_reset_token(optional_text(token, "token") or "")
        if not acc or not acc.reset_token_expires or acc.reset_token_expires <= now_local():
            raise ValidationError("Invalid token", field="token")
        return acc

    def reset_password(self, token: str, password: str, confirm_password: Optional[str]) -> None:
        if password != confirm_password:
            raise ValidationError("Passwords do not match", field="confirmPassword")
        acc = self.validate_reset_token(token)
        self._check_passwords(password, confirm_password)
        self._accounts.update(
            acc.account_id,
            {
                "password_hash": generate_password_hash(password),
                "reset_token": None,
                "reset_token_expires": None,
                "updated": now_local(),
            },
        )
        log.info("Password reset for account %s", acc.account_id)

    def email_exists(self, email: str) -> bool:
        return self._accounts.get_by_email((optional_text(email, "email") or "").lower()) is not None

    def is_email_verified(self, email: str) -> bool:
        acc = self._accounts.get_by_email((optional_text(email, "email") or "").lower())
        if not acc:
            raise NotFoundError("Email not found", resource="Account", field="email")
        return acc.is_verified

    # ---- administration ----
    def list_accounts(self, principal: Principal) -> Sequence[Account]:
        self._policy.ensure_admin(principal, "list accounts")
        return self._accounts.list_all()

    def get_account(self, principal: Principal, account_id: int) -> Account:
        acc = self._require(account_id)
        self._policy.ensure_account_access(principal, acc.account_id)
        return acc

    def create_account(
        self,
        principal: Principal,
        *,
        title: Optional[str],
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        confirm_password: Optional[str] = None,
        role: Any = Role.USER,
        status: Any = AccountStatus.ACTIVE,
    ) -> int:
        self._policy.ensure_admin(principal, "create accounts")
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        email = _normalize_email(email)
        self._check_passwords(password, confirm_password)
        self._ensure_email_free(email)

        account_id = self._accounts.create(
            title=optional_text(title, "title"),
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=_parse_role(role),
            status=_parse_status(status),
            is_verified=True,
        )
        log.info("Account %s created by admin %s", account_id, principal.account_id)
        return account_id

    def update_account(self, principal: Principal, account_id: int, patch: Dict[str, Any]) -> Account:
        acc = self._require(account_id)
        self._policy.ensure_account_access(principal, acc.account_id)

        changes: Dict[str, Any] = {}
        for key, field_name, label in (
            ("title", "title", None),
            ("firstName", "first_name", "First name"),
            ("lastName", "last_name", "Last name"),
        ):
            if key in patch:
                changes[field_name] = (
                    require_non_empty(patch[key], label) if label else optional_text(patch[key], key)
                )

        if patch.get("email"):
            email = _normalize_email(patch["email"])
            if email != acc.email:
                self._ensure_email_free(email)
                changes["email"] = email

        if patch.get("password"):
            self._check_passwords(patch["password"], patch.get("confirmPassword"))
            changes["password_hash"] = generate_password_hash(patch["password"])

        for key, parse in (("role", _parse_role), ("status", _parse_status)):
            if key in patch and patch[key] is not None:
                value = parse(patch[key])
                if value != getattr(acc, key):
                    self._policy.ensure_admin(principal, f"change account {key}")
                    changes[key] = value

        changes["updated"] = now_local()
        self._accounts.update(acc.account_id, changes)
        log.info("Account %s updated by %s", acc.account_id, principal.account_id)
        return self._require(acc.account_id)

    def delete_account(self, principal: Principal, account_id: int) -> None:
        acc = self._require(account_id)
        self._policy.ensure_account_access(principal, acc.account_id)

        employee = self._employees.get_by_account_id(acc.account_id)
        if employee and self._delete_policy == "block":
            raise ConflictError(
                "Account cannot be deleted while an employee record references it",
                resource="Account",
                id=acc.account_id,
            )

        self._accounts.delete_by_id(acc.account_id)
        log.info(
            "Account %s deleted by %s%s",
            acc.account_id,
            principal.account_id,
            f" (cascaded employee {employee.employee_id})" if employee else "",
        )
