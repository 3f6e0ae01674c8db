from __future__ import annotations

import pytest

from hr_portal.core.enums import WorkflowStatus, WorkflowType
from hr_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hr_portal.requests.model import NewItem
from hr_portal.workflows.service import summarize_items


def test_summary_single_item():
    assert summarize_items([NewItem("Laptop", 1)]) == "1 Laptop"


def test_summary_pluralizes_and_joins_with_and():
    assert summarize_items([NewItem("Laptop", 2), NewItem("Mouse", 1)]) == "2 Laptops, and 1 Mouse"
    assert (
        summarize_items([NewItem("Laptop", 2), NewItem("Mouse", 1), NewItem("Badge", 3)])
        == "2 Laptops, 1 Mouse, and 3 Badges"
    )


def test_summary_requires_items():
    with pytest.raises(ValidationError):
        summarize_items([])


def test_creating_employee_records_onboarding(container, cast):
    flows = container.workflow_service.list_by_employee(cast.admin, cast.alice_employee_id)
    assert [(w.type, w.details, w.status) for w in flows] == [
        (WorkflowType.ONBOARDING.value, "Setting up workstation", WorkflowStatus.PENDING)
    ]


def test_leave_and_resource_recorders(container, cast):
    svc = container.workflow_service
    leave_id = svc.leave_requested(cast.bob_employee_id, "2025-07-01", "2025-07-03")
    res_id = svc.resources_requested(cast.bob_employee_id, [{"name": "Headset", "quantity": 1}])

    assert svc.get_workflow(cast.bob, leave_id).details == "Bob Tran requested leave from 2025-07-01 to 2025-07-03"
    assert svc.get_workflow(cast.bob, res_id).details == "Bob Tran requested 1 Headset"
    assert svc.get_workflow(cast.bob, res_id).type == WorkflowType.REQUEST_APPROVAL.value


def test_recorders_reject_unknown_employee(container, cast):
    with pytest.raises(NotFoundError):
        container.workflow_service.onboarding(999)
    with pytest.raises(ValidationError):
        container.workflow_service.resources_requested(cast.bob_employee_id, [])


def test_workflows_are_visible_to_owner_and_admin_only(container, cast):
    svc = container.workflow_service
    assert svc.list_by_employee(cast.alice, cast.alice_employee_id)
    with pytest.raises(AuthorizationError):
        svc.list_by_employee(cast.bob, cast.alice_employee_id)


def test_update_moves_status_but_keeps_details(container, cast):
    svc = container.workflow_service
    wf = svc.list_by_employee(cast.admin, cast.alice_employee_id)[0]

    updated = svc.update(
        cast.admin,
        wf.workflow_id,
        {"status": "Completed", "comments": "Desk ready", "handledBy": cast.admin.account_id, "details": "hacked"},
    )

    assert updated.status == WorkflowStatus.COMPLETED
    assert updated.comments == "Desk ready"
    assert updated.handled_by == cast.admin.account_id
    assert updated.details == "Setting up workstation"


def test_update_is_admin_only_and_validates_status(container, cast):
    svc = container.workflow_service
    wf = svc.list_by_employee(cast.admin, cast.alice_employee_id)[0]
    with pytest.raises(AuthorizationError):
        svc.update(cast.alice, wf.workflow_id, {"status": "Completed"})
    with pytest.raises(ValidationError):
        svc.update(cast.admin, wf.workflow_id, {"status": "Done"})
    with pytest.raises(ValidationError):
        svc.update(cast.admin, wf.workflow_id, {})


def test_generic_create_and_delete(container, cast):
    svc = container.workflow_service
    wid = svc.create(cast.admin, employee_id=cast.bob_employee_id, type="Offboarding", details="Return laptop")
    assert svc.get_workflow(cast.admin, wid).status == WorkflowStatus.PENDING

    with pytest.raises(AuthorizationError):
        svc.delete(cast.bob, wid)
    svc.delete(cast.admin, wid)
    with pytest.raises(NotFoundError):
        svc.get_workflow(cast.admin, wid)


def test_update_rejects_non_text_comments(container, cast):
    svc = container.workflow_service
    wf = svc.list_by_employee(cast.admin, cast.alice_employee_id)[0]
    with pytest.raises(ValidationError):
        svc.update(cast.admin, wf.workflow_id, {"comments": 5})
    assert svc.update(cast.admin, wf.workflow_id, {"comments": "   "}).comments is None
