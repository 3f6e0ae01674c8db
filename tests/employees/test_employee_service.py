from __future__ import annotations

from datetime import date

import pytest

from hr_portal.core.enums import WorkflowType
from hr_portal.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


def test_views_join_account_and_department(container, cast):
    view = container.employee_service.get_employee(cast.alice_employee_id)
    assert view.account.full_name == "Alice Nguyen"
    assert view.department.name == "Engineering"
    assert view.employee.hire_date == date(2024, 1, 15)


def test_transfer_moves_employee_and_records_workflow(container, cast):
    container.employee_service.transfer_department(cast.admin, cast.alice_employee_id, cast.finance_id)

    assert container.employee_service.get_employee(cast.alice_employee_id).department.name == "Finance"
    counts = {s.department.name: s.employee_count for s in container.department_service.list_departments()}
    assert counts == {"Engineering": 1, "Finance": 1}

    last = container.workflow_service.list_by_employee(cast.admin, cast.alice_employee_id)[-1]
    assert last.type == WorkflowType.DEPARTMENT_TRANSFER.value
    assert last.details == "Alice Nguyen transferred from Engineering to Finance"


def test_transfer_to_same_department_conflicts(container, cast):
    container.employee_service.transfer_department(cast.admin, cast.alice_employee_id, cast.finance_id)
    with pytest.raises(ConflictError) as exc:
        container.employee_service.transfer_department(cast.admin, cast.alice_employee_id, cast.finance_id)
    assert exc.value.message == "Employee already in this department"


def test_transfer_to_unknown_department(container, cast):
    with pytest.raises(NotFoundError):
        container.employee_service.transfer_department(cast.admin, cast.alice_employee_id, 999)


def test_account_can_back_only_one_employee(container, cast):
    with pytest.raises(ConflictError):
        container.employee_service.create_employee(
            cast.admin,
            account_id=cast.alice.account_id,
            department_id=cast.finance_id,
            position="Analyst",
            hire_date="2025-01-01",
            status="Active",
        )


def test_create_validates_references(container, cast):
    svc = container.employee_service
    with pytest.raises(NotFoundError):
        svc.create_employee(
            cast.admin, account_id=cast.outsider.account_id, department_id=999, position="X", hire_date="2025-01-01", status="Active"
        )
    with pytest.raises(ValidationError):
        svc.create_employee(
            cast.admin, account_id=cast.outsider.account_id, department_id=cast.finance_id, position="", hire_date="2025-01-01", status="Active"
        )


def test_update_leaves_account_and_department_alone(container, cast):
    svc = container.employee_service
    svc.update_employee(
        cast.admin, cast.bob_employee_id, {"position": "QA Lead", "departmentId": cast.finance_id, "accountId": 1}
    )
    emp = svc.get_employee(cast.bob_employee_id).employee
    assert emp.position == "QA Lead"
    assert emp.department_id == cast.engineering_id
    assert emp.account_id == cast.bob.account_id


def test_employee_mutations_are_admin_only(container, cast):
    with pytest.raises(AuthorizationError):
        container.employee_service.transfer_department(cast.alice, cast.alice_employee_id, cast.finance_id)
    with pytest.raises(AuthorizationError):
        container.employee_service.delete_employee(cast.bob, cast.bob_employee_id)
