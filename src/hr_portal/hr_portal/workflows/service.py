from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from ..access.policy import AccessPolicy, Principal
from ..accounts.repository import AccountRepository
from ..common.validators import optional_text, require_date, require_id, require_non_empty
from ..core.constants import ONBOARDING_DETAILS
from ..core.enums import WorkflowStatus, WorkflowType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..requests.model import NewItem, parse_items
from .model import Workflow
from .repository import WorkflowRepository

log = logging.getLogger(__name__)


def describe_item(item: NewItem) -> str:
    return f"{item.quantity} {item.name}{'s' if item.quantity > 1 else ''}"


def summarize_items(items: Iterable[NewItem]) -> str:
    """`2 Laptops, 1 Mouse, and 3 Badges`: comma-joined, `and` before the last entry."""
    parts = [describe_item(i) for i in items]
    if not parts:
        raise ValidationError("At least one item is required", field="items")
    if len(parts) == 1:
        return parts[0]
    return ", ".join(parts[:-1]) + ", and " + parts[-1]


def _parse_status(value: Any) -> WorkflowStatus:
    try:
        return WorkflowStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in WorkflowStatus)
        raise ValidationError(f"Status must be one of: {allowed}", field="status")


class WorkflowService:
    """Appends workflow entries for HR events and manages their review status.

    The event recorders (`onboarding`, `department_transfer`,
    `leave_requested`, `resources_requested`) generate the human-readable
    details text; later updates only move status and reviewer fields.
    """

    def __init__(
        self,
        workflows: WorkflowRepository,
        employees: EmployeeRepository,
        accounts: AccountRepository,
        policy: AccessPolicy,
    ):
        self._workflows = workflows
        self._employees = employees
        self._accounts = accounts
        self._policy = policy

    def _require_employee(self, employee_id) -> Employee:
        employee_id = require_id(employee_id, "employeeId")
        emp = self._employees.get_by_id(employee_id)
        if not emp:
            raise NotFoundError("Employee not found", resource="Employee", id=employee_id)
        return emp

    def _label(self, emp: Employee) -> str:
        acc = self._accounts.get_by_id(emp.account_id)
        if acc and acc.full_name:
            return acc.full_name
        return f"Employee #{emp.employee_id}"

    def _require(self, workflow_id: int) -> Workflow:
        wf = self._workflows.get_by_id(int(workflow_id))
        if not wf:
            raise NotFoundError("Workflow not found", resource="Workflow", id=workflow_id)
        return wf

    def _record(self, emp: Employee, type: str, details: str) -> int:
        workflow_id = self._workflows.create(
            employee_id=emp.employee_id,
            type=type,
            details=details,
            status=WorkflowStatus.PENDING,
        )
        log.info("Workflow %s (%s) recorded for employee %s", workflow_id, type, emp.employee_id)
        return workflow_id

    # ---- event recorders ----
    def onboarding(self, employee_id) -> int:
        emp = self._require_employee(employee_id)
        return self._record(emp, WorkflowType.ONBOARDING.value, ONBOARDING_DETAILS)

    def department_transfer(self, employee_id, old_department_name: str, new_department_name: str) -> int:
        emp = self._require_employee(employee_id)
        old_name = require_non_empty(old_department_name, "Old department")
        new_name = require_non_empty(new_department_name, "New department")
        return self._record(
            emp,
            WorkflowType.DEPARTMENT_TRANSFER.value,
            f"{self._label(emp)} transferred from {old_name} to {new_name}",
        )

    def leave_requested(self, employee_id, start_date, end_date) -> int:
        emp = self._require_employee(employee_id)
        start: date = require_date(start_date, "startDate")
        end: date = require_date(end_date, "endDate")
        return self._record(
            emp,
            WorkflowType.REQUEST_APPROVAL.value,
            f"{self._label(emp)} requested leave from {start.isoformat()} to {end.isoformat()}",
        )

    def resources_requested(self, employee_id, items) -> int:
        emp = self._require_employee(employee_id)
        summary = summarize_items(parse_items(items))
        return self._record(emp, WorkflowType.REQUEST_APPROVAL.value, f"{self._label(emp)} requested {summary}")

    # ---- generic CRUD ----
    def create(self, principal: Principal, *, employee_id, type: str, details: str, status: Any = None) -> int:
        self._policy.ensure_admin(principal, "create workflows")
        emp = self._require_employee(employee_id)
        workflow_id = self._workflows.create(
            employee_id=emp.employee_id,
            type=require_non_empty(type, "Type"),
            details=require_non_empty(details, "Details"),
            status=_parse_status(status) if status else WorkflowStatus.PENDING,
        )
        log.info("Workflow %s created by %s", workflow_id, principal.account_id)
        return workflow_id

    def get_workflow(self, principal: Principal, workflow_id: int) -> Workflow:
        wf = self._require(workflow_id)
        self._policy.ensure_read_owned(principal, wf.employee_id, resource="Workflow", id=wf.workflow_id)
        return wf

    def list_by_employee(self, principal: Principal, employee_id) -> Sequence[Workflow]:
        emp = self._require_employee(employee_id)
        self._policy.ensure_read_owned(principal, emp.employee_id, resource="Workflow")
        return self._workflows.list_by_employee(emp.employee_id)

    def update(self, principal: Principal, workflow_id: int, patch: dict) -> Workflow:
        """Move status / reviewer fields. `details` and `type` are never rewritten."""
        self._policy.ensure_admin(principal, "update workflows")
        wf = self._require(workflow_id)
        if not any(k in patch for k in ("status", "comments", "handledBy")):
            raise ValidationError("Nothing to update: provide status, comments or handledBy")

        status = _parse_status(patch["status"]) if patch.get("status") is not None else wf.status
        comments = optional_text(patch["comments"], "comments") if "comments" in patch else wf.comments
        handled_by: Optional[int] = wf.handled_by
        if "handledBy" in patch:
            handled_by = require_id(patch["handledBy"], "handledBy") if patch["handledBy"] is not None else None

        self._workflows.update(wf.workflow_id, status=status, comments=comments, handled_by=handled_by)
        log.info("Workflow %s updated to %s", wf.workflow_id, status.value)
        return self._require(wf.workflow_id)

    def delete(self, principal: Principal, workflow_id: int) -> None:
        self._policy.ensure_admin(principal, "delete workflows")
        wf = self._require(workflow_id)
        self._workflows.delete_by_id(wf.workflow_id)
        log.info("Workflow %s deleted", wf.workflow_id)
