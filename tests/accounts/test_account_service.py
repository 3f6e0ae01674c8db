from __future__ import annotations

from datetime import timedelta

import pytest

from hr_portal.access.policy import Principal
from hr_portal.common.datetime_utils import now_local
from hr_portal.container import build_container
from hr_portal.core.enums import AccountStatus, Role
from hr_portal.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def _register(svc, email, password="secret123", confirm="secret123"):
    return svc.register(
        title="Ms",
        first_name="Jane",
        last_name="Doe",
        email=email,
        password=password,
        confirm_password=confirm,
    )


def test_first_registration_becomes_verified_admin(container):
    svc = container.account_service
    first = _register(svc, "first@example.com")
    second = _register(svc, "second@example.com")

    admin = container.accounts_repo.get_by_id(first.account_id)
    user = container.accounts_repo.get_by_id(second.account_id)
    assert (admin.role, admin.status, admin.is_verified) == (Role.ADMIN, AccountStatus.ACTIVE, True)
    assert first.verification_token is None
    assert (user.role, user.status, user.is_verified) == (Role.USER, AccountStatus.INACTIVE, False)
    assert second.verification_token


def test_register_rejects_duplicates_and_mismatched_passwords(container):
    svc = container.account_service
    _register(svc, "jane@example.com")
    with pytest.raises(ConflictError):
        _register(svc, "JANE@example.com")
    with pytest.raises(ValidationError):
        _register(svc, "other@example.com", confirm="different")
    with pytest.raises(ValidationError):
        _register(svc, "short@example.com", password="abc", confirm="abc")


def test_login_requires_verified_email(container):
    svc = container.account_service
    _register(svc, "admin@example.com")
    reg = _register(svc, "jane@example.com")

    with pytest.raises(AuthenticationError):
        svc.authenticate("jane@example.com", "secret123")
    assert svc.is_email_verified("jane@example.com") is False

    svc.verify_email(reg.verification_token)

    acc = svc.authenticate("jane@example.com", "secret123")
    assert acc.status == AccountStatus.ACTIVE
    assert acc.last_login is not None
    assert svc.is_email_verified("jane@example.com") is True
    with pytest.raises(ValidationError):
        svc.verify_email(reg.verification_token)


def test_login_with_wrong_password(container):
    svc = container.account_service
    _register(svc, "admin@example.com")
    with pytest.raises(AuthenticationError):
        svc.authenticate("admin@example.com", "nope")
    with pytest.raises(AuthenticationError):
        svc.authenticate("ghost@example.com", "secret123")


def test_password_reset_flow(container):
    svc = container.account_service
    _register(svc, "admin@example.com")

    assert svc.forgot_password("ghost@example.com") is None
    token = svc.forgot_password("admin@example.com")
    assert svc.validate_reset_token(token).email == "admin@example.com"

    with pytest.raises(ValidationError):
        svc.reset_password(token, "newpass1", "newpass2")
    svc.reset_password(token, "newpass1", "newpass1")

    assert svc.authenticate("admin@example.com", "newpass1")
    with pytest.raises(ValidationError):
        svc.validate_reset_token(token)


def test_expired_reset_token_is_invalid(container, monkeypatch):
    import hr_portal.accounts.service as account_service

    svc = container.account_service
    _register(svc, "admin@example.com")
    token = svc.forgot_password("admin@example.com")

    later = now_local() + timedelta(hours=25)
    monkeypatch.setattr(account_service, "now_local", lambda: later)
    with pytest.raises(ValidationError):
        svc.validate_reset_token(token)


def test_email_lookups(container):
    svc = container.account_service
    _register(svc, "admin@example.com")
    assert svc.email_exists("admin@example.com")
    assert not svc.email_exists("ghost@example.com")
    with pytest.raises(NotFoundError):
        svc.is_email_verified("ghost@example.com")


def test_accounts_are_private_to_owner_and_admin(container, cast):
    svc = container.account_service
    assert svc.get_account(cast.alice, cast.alice.account_id).email == "alice@example.com"
    assert svc.get_account(cast.admin, cast.alice.account_id).email == "alice@example.com"
    with pytest.raises(AuthorizationError):
        svc.get_account(cast.bob, cast.alice.account_id)
    with pytest.raises(AuthorizationError):
        svc.list_accounts(cast.alice)
    assert len(svc.list_accounts(cast.admin)) == 4


def test_user_cannot_promote_themselves(container, cast):
    svc = container.account_service
    updated = svc.update_account(cast.alice, cast.alice.account_id, {"firstName": "Alicia", "role": "User"})
    assert updated.first_name == "Alicia"
    with pytest.raises(AuthorizationError):
        svc.update_account(cast.alice, cast.alice.account_id, {"role": "Admin"})
    assert svc.update_account(cast.admin, cast.alice.account_id, {"role": "Admin"}).role == Role.ADMIN


def test_admin_create_account(container, cast):
    svc = container.account_service
    account_id = svc.create_account(
        cast.admin,
        title=None,
        first_name="New",
        last_name="Hire",
        email="new@example.com",
        password="secret123",
        confirm_password="secret123",
    )
    acc = svc.get_account(cast.admin, account_id)
    assert (acc.role, acc.status, acc.is_verified) == (Role.USER, AccountStatus.ACTIVE, True)
    with pytest.raises(AuthorizationError):
        svc.create_account(
            cast.alice, title=None, first_name="X", last_name="Y", email="x@example.com", password="secret123"
        )


def test_delete_blocked_while_employee_exists(container, cast):
    svc = container.account_service
    with pytest.raises(ConflictError):
        svc.delete_account(cast.admin, cast.alice.account_id)
    svc.delete_account(cast.outsider, cast.outsider.account_id)
    with pytest.raises(NotFoundError):
        svc.get_account(cast.admin, cast.outsider.account_id)


def test_cascade_policy_removes_employee_records():
    container = build_container(store_backend="memory", account_delete_policy="cascade", auto_record_workflows=True)
    admin_reg = container.account_service.register(
        title=None, first_name="Ada", last_name="Admin", email="ada@example.com", password="secret123"
    )
    admin = Principal(admin_reg.account_id, Role.ADMIN)
    dept = container.department_service.create_department(admin, name="Ops")
    emp = container.employee_service.create_employee(
        admin, account_id=admin.account_id, department_id=dept, position="Lead", hire_date="2024-01-01", status="Active"
    )

    assert container.store.table("workflows")
    container.account_service.delete_account(admin, admin.account_id)

    assert container.employees_repo.get_by_id(emp) is None
    assert container.store.table("workflows") == {}
    assert container.department_service.get_department(dept).employee_count == 0


def test_login_with_non_text_credentials(container):
    svc = container.account_service
    _register(svc, "admin@example.com")
    with pytest.raises(AuthenticationError):
        svc.authenticate("admin@example.com", 12345678)
    with pytest.raises(ValidationError):
        svc.authenticate(["admin@example.com"], "secret123")
    with pytest.raises(ValidationError):
        svc.email_exists(42)
