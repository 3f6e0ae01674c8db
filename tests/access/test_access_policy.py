from __future__ import annotations

import pytest

from hr_portal.core.enums import RequestStatus
from hr_portal.core.exceptions import AuthorizationError


def test_admin_passes_every_check(container, cast):
    policy = container.policy
    policy.ensure_admin(cast.admin)
    policy.ensure_read_owned(cast.admin, cast.alice_employee_id, resource="Request")
    policy.ensure_write_request(cast.admin, employee_id=cast.alice_employee_id, status=RequestStatus.APPROVED)
    policy.ensure_account_access(cast.admin, cast.bob.account_id)


def test_ownership_is_resolved_through_the_employee_record(container, cast):
    policy = container.policy
    assert policy.employee_id_of(cast.alice) == cast.alice_employee_id
    assert policy.employee_id_of(cast.outsider) is None
    assert policy.can_read_owned(cast.alice, cast.alice_employee_id)
    assert not policy.can_read_owned(cast.alice, cast.bob_employee_id)
    assert not policy.can_read_owned(cast.outsider, cast.alice_employee_id)


@pytest.mark.parametrize("status", [RequestStatus.APPROVED, RequestStatus.REJECTED, RequestStatus.CANCELLED])
def test_owner_write_denied_once_decided(container, cast, status):
    with pytest.raises(AuthorizationError):
        container.policy.ensure_write_request(cast.alice, employee_id=cast.alice_employee_id, status=status)


def test_owner_write_allowed_while_pending(container, cast):
    container.policy.ensure_write_request(cast.alice, employee_id=cast.alice_employee_id, status=RequestStatus.PENDING)


def test_account_access(container, cast):
    container.policy.ensure_account_access(cast.bob, cast.bob.account_id)
    with pytest.raises(AuthorizationError):
        container.policy.ensure_account_access(cast.bob, cast.alice.account_id)
    with pytest.raises(AuthorizationError):
        container.policy.ensure_admin(cast.bob, "list accounts")


@pytest.mark.parametrize("status", [RequestStatus.APPROVED, RequestStatus.REJECTED])
def test_only_admin_sets_decision_status(container, cast, status):
    container.policy.ensure_request_status(cast.admin, status)
    with pytest.raises(AuthorizationError):
        container.policy.ensure_request_status(cast.alice, status, request_id=1)


@pytest.mark.parametrize("status", [RequestStatus.PENDING, RequestStatus.CANCELLED])
def test_owner_statuses_allowed(container, cast, status):
    container.policy.ensure_request_status(cast.alice, status)
