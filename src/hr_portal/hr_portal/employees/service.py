from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from ..access.policy import AccessPolicy, Principal
from ..accounts.repository import AccountRepository
from ..common.validators import require_date, require_id, require_non_empty
from ..core.exceptions import ConflictError, NotFoundError
from ..departments.repository import DepartmentRepository
from .model import EmployeeView
from .repository import EmployeeRepository

if TYPE_CHECKING:
    from ..workflows.service import WorkflowService

log = logging.getLogger(__name__)


class EmployeeService:
    """Use cases: employee records and department transfers (admin)."""

    def __init__(
        self,
        employees: EmployeeRepository,
        accounts: AccountRepository,
        departments: DepartmentRepository,
        policy: AccessPolicy,
        workflows: Optional["WorkflowService"] = None,
    ):
        self._employees = employees
        self._accounts = accounts
        self._departments = departments
        self._policy = policy
        # When set, onboarding and transfers are recorded as workflows.
        self._workflows = workflows

    def list_employees(self) -> Sequence[EmployeeView]:
        return self._employees.list_views()

    def get_employee(self, employee_id: int) -> EmployeeView:
        view = self._employees.get_view(int(employee_id))
        if not view:
            raise NotFoundError("Employee not found", resource="Employee", id=employee_id)
        return view

    def _require_department(self, department_id: int):
        department = self._departments.get_by_id(department_id)
        if not department:
            raise NotFoundError("Department not found", resource="Department", id=department_id)
        return department

    def create_employee(
        self,
        principal: Principal,
        *,
        account_id,
        department_id,
        position: str,
        hire_date,
        status: str,
    ) -> int:
        self._policy.ensure_admin(principal, "create employees")
        account_id = require_id(account_id, "accountId")
        department_id = require_id(department_id, "departmentId")
        position = require_non_empty(position, "Position")
        hire = require_date(hire_date, "hireDate")
        status = require_non_empty(status, "Status")

        if not self._accounts.get_by_id(account_id):
            raise NotFoundError("Account not found", resource="Account", id=account_id)
        self._require_department(department_id)
        if self._employees.get_by_account_id(account_id):
            raise ConflictError("Account already has an employee record", resource="Employee", field="accountId")

        employee_id = self._employees.create(
            account_id=account_id,
            department_id=department_id,
            position=position,
            hire_date=hire,
            status=status,
        )
        log.info("Employee %s created for account %s", employee_id, account_id)

        if self._workflows:
            self._workflows.onboarding(employee_id)
        return employee_id

    def update_employee(self, principal: Principal, employee_id: int, patch: dict) -> None:
        """Update position, hire date and status; account and department are not touched here."""
        self._policy.ensure_admin(principal, "update employees")
        current = self.get_employee(employee_id).employee

        position = require_non_empty(patch["position"], "Position") if "position" in patch else current.position
        hire = require_date(patch["hireDate"], "hireDate") if "hireDate" in patch else current.hire_date
        status = require_non_empty(patch["status"], "Status") if "status" in patch else current.status

        self._employees.update(current.employee_id, position=position, hire_date=hire, status=status)
        log.info("Employee %s updated", current.employee_id)

    def delete_employee(self, principal: Principal, employee_id: int) -> None:
        self._policy.ensure_admin(principal, "delete employees")
        current = self.get_employee(employee_id).employee
        self._employees.delete_by_id(current.employee_id)
        log.info("Employee %s deleted", current.employee_id)

    def transfer_department(self, principal: Principal, employee_id: int, department_id) -> None:
        self._policy.ensure_admin(principal, "transfer employees")
        department_id = require_id(department_id, "departmentId")
        view = self.get_employee(employee_id)
        current = view.employee

        if current.department_id == department_id:
            raise ConflictError("Employee already in this department", resource="Employee", id=current.employee_id)
        new_department = self._require_department(department_id)

        self._employees.set_department(current.employee_id, department_id)
        log.info(
            "Employee %s transferred from department %s to %s",
            current.employee_id,
            current.department_id,
            department_id,
        )

        if self._workflows:
            old_name = view.department.name if view.department else f"Department #{current.department_id}"
            self._workflows.department_transfer(current.employee_id, old_name, new_department.name)
