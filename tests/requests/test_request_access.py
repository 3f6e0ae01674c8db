from __future__ import annotations

import pytest

from hr_portal.core.enums import RequestStatus
from hr_portal.core.exceptions import AuthorizationError


def _laptop_request(container, principal, employee_id):
    return container.request_service.create(
        principal, employee_id=employee_id, type="Equipment", items=[{"name": "Laptop", "quantity": 1}]
    )


def test_owner_and_admin_can_read_others_cannot(container, cast):
    rid = _laptop_request(container, cast.alice, cast.alice_employee_id)

    assert container.request_service.get_by_id(cast.alice, rid).request_id == rid
    assert container.request_service.get_by_id(cast.admin, rid).request_id == rid
    with pytest.raises(AuthorizationError):
        container.request_service.get_by_id(cast.bob, rid)
    with pytest.raises(AuthorizationError):
        container.request_service.list_by_employee(cast.bob, cast.alice_employee_id)


def test_cannot_file_request_for_someone_else(container, cast):
    with pytest.raises(AuthorizationError):
        _laptop_request(container, cast.bob, cast.alice_employee_id)
    assert container.store.table("requests") == {}


def test_list_all_is_scoped_to_own_requests(container, cast):
    mine = _laptop_request(container, cast.alice, cast.alice_employee_id)
    theirs = _laptop_request(container, cast.bob, cast.bob_employee_id)

    assert [r.request_id for r in container.request_service.list_all(cast.alice)] == [mine]
    assert [r.request_id for r in container.request_service.list_all(cast.admin)] == [mine, theirs]
    assert container.request_service.list_all(cast.outsider) == []


def test_owner_may_edit_only_while_pending(container, cast):
    svc = container.request_service
    rid = _laptop_request(container, cast.alice, cast.alice_employee_id)

    svc.update(cast.alice, rid, {"items": [{"name": "Laptop", "quantity": 2}]})
    svc.update(cast.admin, rid, {"status": "Approved"})

    with pytest.raises(AuthorizationError):
        svc.update(cast.alice, rid, {"items": [{"name": "Laptop", "quantity": 5}]})
    with pytest.raises(AuthorizationError):
        svc.delete(cast.alice, rid)

    req = svc.get_by_id(cast.admin, rid)
    assert req.status == RequestStatus.APPROVED
    assert req.items[0].quantity == 2


def test_other_user_cannot_modify_pending_request(container, cast):
    rid = _laptop_request(container, cast.alice, cast.alice_employee_id)
    with pytest.raises(AuthorizationError):
        container.request_service.update(cast.bob, rid, {"status": "Cancelled"})
    with pytest.raises(AuthorizationError):
        container.request_service.delete(cast.bob, rid)


def test_admin_can_edit_decided_request(container, cast):
    svc = container.request_service
    rid = _laptop_request(container, cast.alice, cast.alice_employee_id)
    svc.update(cast.admin, rid, {"status": "Rejected"})
    svc.update(cast.admin, rid, {"status": "Approved"})
    svc.delete(cast.admin, rid)
    assert svc.list_all(cast.admin) == []


@pytest.mark.parametrize("status", ["Approved", "Rejected"])
def test_owner_cannot_decide_own_request(container, cast, status):
    svc = container.request_service
    rid = _laptop_request(container, cast.alice, cast.alice_employee_id)

    with pytest.raises(AuthorizationError):
        svc.update(cast.alice, rid, {"status": status, "items": [{"name": "Laptop", "quantity": 3}]})

    req = svc.get_by_id(cast.alice, rid)
    assert req.status == RequestStatus.PENDING
    assert req.items[0].quantity == 1


def test_owner_may_cancel_pending_request(container, cast):
    svc = container.request_service
    rid = _laptop_request(container, cast.alice, cast.alice_employee_id)

    assert svc.update(cast.alice, rid, {"status": "Cancelled"}).status == RequestStatus.CANCELLED
    with pytest.raises(AuthorizationError):
        svc.update(cast.alice, rid, {"status": "Pending"})
