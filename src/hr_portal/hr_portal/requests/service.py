from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence

from ..access.policy import AccessPolicy, Principal
from ..common.datetime_utils import today_local
from ..common.validators import optional_date, require_date, require_id, require_non_empty
from ..core.enums import RequestStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import (
    ItemsDetail,
    LeaveDetail,
    Request,
    RequestDetail,
    check_leave_range,
    is_leave_type,
    parse_items,
    parse_status,
)
from .repository import RequestRepository

if TYPE_CHECKING:
    from ..workflows.service import WorkflowService

log = logging.getLogger(__name__)


def build_detail(type: str, *, start_date: Any = None, end_date: Any = None, items: Any = None) -> RequestDetail:
    """Validate the child payload for a new request of the given type."""
    if is_leave_type(type):
        if not start_date or not end_date:
            raise ValidationError("Start date and end date are required for leave requests", field="startDate")
        return check_leave_range(require_date(start_date, "startDate"), require_date(end_date, "endDate"))
    return ItemsDetail(items=parse_items(items))


class RequestService:
    """Use cases: leave and resource requests with their child rows."""

    def __init__(
        self,
        requests: RequestRepository,
        employees: EmployeeRepository,
        policy: AccessPolicy,
        workflows: Optional["WorkflowService"] = None,
    ):
        self._requests = requests
        self._employees = employees
        self._policy = policy
        # When set, every new request is also recorded as an approval workflow.
        self._workflows = workflows

    def _require(self, request_id: int) -> Request:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Request not found", resource="Request", id=request_id)
        return req

    def _require_employee(self, employee_id: Any) -> Employee:
        employee_id = require_id(employee_id, "employeeId")
        emp = self._employees.get_by_id(employee_id)
        if not emp:
            raise NotFoundError("Employee not found", resource="Employee", id=employee_id)
        return emp

    def create(
        self,
        principal: Principal,
        *,
        employee_id: Any,
        type: str,
        status: Any = None,
        request_date: Any = None,
        start_date: Any = None,
        end_date: Any = None,
        items: Any = None,
    ) -> int:
        employee_id = require_id(employee_id, "employeeId")
        type = require_non_empty(type, "Type")
        detail = build_detail(type, start_date=start_date, end_date=end_date, items=items)
        req_date = optional_date(request_date, "requestDate") or today_local()
        # Non-admins always file Pending requests.
        initial = parse_status(status) if status and principal.is_admin else RequestStatus.PENDING

        emp = self._require_employee(employee_id)
        self._policy.ensure_create_request(principal, emp.employee_id)

        request_id = self._requests.create(
            employee_id=emp.employee_id,
            type=type,
            status=initial,
            request_date=req_date,
            detail=detail,
        )
        log.info("Request %s (%s) created for employee %s", request_id, type, emp.employee_id)

        if self._workflows:
            if isinstance(detail, LeaveDetail):
                self._workflows.leave_requested(emp.employee_id, detail.start_date, detail.end_date)
            else:
                self._workflows.resources_requested(emp.employee_id, detail.items)
        return request_id

    def get_by_id(self, principal: Principal, request_id: int) -> Request:
        req = self._require(request_id)
        self._policy.ensure_read_owned(principal, req.employee_id, resource="Request", id=req.request_id)
        return req

    def list_all(self, principal: Principal) -> Sequence[Request]:
        """Administrators see every request; other accounts only their own."""
        if principal.is_admin:
            return self._requests.list_all()
        employee_id = self._policy.employee_id_of(principal)
        if employee_id is None:
            return []
        return self._requests.list_by_employee(employee_id)

    def list_by_employee(self, principal: Principal, employee_id: Any) -> Sequence[Request]:
        emp = self._require_employee(employee_id)
        self._policy.ensure_read_owned(principal, emp.employee_id, resource="Request")
        return self._requests.list_by_employee(emp.employee_id)

    def _updated_detail(self, req: Request, patch: dict) -> Optional[RequestDetail]:
        if is_leave_type(req.type):
            if "startDate" not in patch and "endDate" not in patch:
                return None
            start = optional_date(patch.get("startDate"), "startDate") or (req.leave.start_date if req.leave else None)
            end = optional_date(patch.get("endDate"), "endDate") or (req.leave.end_date if req.leave else None)
            if start is None or end is None:
                raise ValidationError("Start date and end date are required for leave requests", field="startDate")
            return check_leave_range(start, end)
        if "items" not in patch:
            return None
        return ItemsDetail(items=parse_items(patch["items"]))

    def update(self, principal: Principal, request_id: int, patch: dict) -> Request:
        """Change status and/or the detail of a request; its type is fixed."""
        req = self._require(request_id)
        self._policy.ensure_write_request(
            principal, employee_id=req.employee_id, status=req.status, request_id=req.request_id
        )

        status = parse_status(patch["status"]) if patch.get("status") is not None else req.status
        if status != req.status:
            self._policy.ensure_request_status(principal, status, request_id=req.request_id)
        detail = self._updated_detail(req, patch)

        self._requests.update(req.request_id, status=status, detail=detail)
        if status != req.status:
            log.info("Request %s moved from %s to %s", req.request_id, req.status.value, status.value)
        else:
            log.info("Request %s updated", req.request_id)
        return self._require(req.request_id)

    def delete(self, principal: Principal, request_id: int) -> None:
        req = self._require(request_id)
        self._policy.ensure_write_request(
            principal, employee_id=req.employee_id, status=req.status, request_id=req.request_id
        )
        self._requests.delete_by_id(req.request_id)
        log.info("Request %s deleted", req.request_id)
