from __future__ import annotations

import pytest

from hr_portal.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


def test_list_reports_employee_counts(container, cast):
    counts = {s.department.name: s.employee_count for s in container.department_service.list_departments()}
    assert counts == {"Engineering": 2, "Finance": 0}


def test_delete_blocked_while_employees_assigned(container, cast):
    svc = container.department_service
    with pytest.raises(ConflictError) as exc:
        svc.delete_department(cast.admin, cast.engineering_id)
    assert "2 employees" in exc.value.message
    assert svc.get_department(cast.engineering_id).employee_count == 2


def test_delete_empty_department(container, cast):
    svc = container.department_service
    svc.delete_department(cast.admin, cast.finance_id)
    with pytest.raises(NotFoundError):
        svc.get_department(cast.finance_id)


def test_mutations_are_admin_only(container, cast):
    svc = container.department_service
    with pytest.raises(AuthorizationError):
        svc.create_department(cast.alice, name="Legal")
    with pytest.raises(AuthorizationError):
        svc.update_department(cast.alice, cast.finance_id, {"name": "Money"})
    with pytest.raises(AuthorizationError):
        svc.delete_department(cast.alice, cast.finance_id)


def test_update_validates_name(container, cast):
    svc = container.department_service
    with pytest.raises(ValidationError):
        svc.update_department(cast.admin, cast.finance_id, {"name": "  "})
    svc.update_department(cast.admin, cast.finance_id, {"description": "Accounting"})
    dept = svc.get_department(cast.finance_id).department
    assert (dept.name, dept.description) == ("Finance", "Accounting")


@pytest.mark.parametrize("patch", [{"name": 123}, {"name": None}, {"description": 5}, {"description": ["x"]}])
def test_update_rejects_non_text_fields(container, cast, patch):
    svc = container.department_service
    with pytest.raises(ValidationError):
        svc.update_department(cast.admin, cast.finance_id, patch)
    assert svc.get_department(cast.finance_id).department.name == "Finance"


def test_create_rejects_non_text_description(container, cast):
    with pytest.raises(ValidationError):
        container.department_service.create_department(cast.admin, name="Legal", description=7)
