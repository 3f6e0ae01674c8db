from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthorizationError
from ..employees.repository import EmployeeRepository

log = logging.getLogger(__name__)

# Statuses a request owner may set on their own Pending request.
OWNER_STATUSES = frozenset({RequestStatus.PENDING, RequestStatus.CANCELLED})


@dataclass(frozen=True)
class Principal:
    """The authenticated actor, as stored in the Flask session after login."""

    account_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class AccessPolicy:
    """Read/write eligibility of a principal for portal resources.

    Rules, in order of precedence:
      1. Administrators may read and write everything.
      2. Requests and workflows filed against employee E are visible to the
         account linked to E.
      3. The owner may write a request only while it is Pending.
      4. Department and employee mutations are administrator-only.
      5. Account A may be read/updated/deleted by A itself or an administrator.
    """

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def _deny(self, principal: Principal, message: str, *, resource: Optional[str] = None, id=None):
        log.warning("Access denied for account %s: %s", principal.account_id, message)
        raise AuthorizationError(message, resource=resource, id=id)

    def employee_id_of(self, principal: Principal) -> Optional[int]:
        emp = self._employees.get_by_account_id(principal.account_id)
        return emp.employee_id if emp else None

    def owns_employee(self, principal: Principal, employee_id: int) -> bool:
        emp = self._employees.get_by_id(int(employee_id))
        return emp is not None and emp.account_id == principal.account_id

    def can_read_owned(self, principal: Principal, employee_id: int) -> bool:
        return principal.is_admin or self.owns_employee(principal, employee_id)

    def ensure_admin(self, principal: Principal, action: str = "perform this action") -> None:
        if not principal.is_admin:
            self._deny(principal, f"Only administrators may {action}")

    def ensure_read_owned(self, principal: Principal, employee_id: int, *, resource: str, id=None) -> None:
        if not self.can_read_owned(principal, employee_id):
            self._deny(principal, f"Not allowed to access this {resource.lower()}", resource=resource, id=id)

    def ensure_create_request(self, principal: Principal, employee_id: int) -> None:
        if not self.can_read_owned(principal, employee_id):
            self._deny(principal, "Requests can only be filed for your own employee record", resource="Request")

    def ensure_write_request(self, principal: Principal, *, employee_id: int, status: RequestStatus, request_id=None) -> None:
        if principal.is_admin:
            return
        if not self.owns_employee(principal, employee_id):
            self._deny(principal, "Not allowed to modify this request", resource="Request", id=request_id)
        if status != RequestStatus.PENDING:
            self._deny(
                principal,
                f"Request is {status.value}; only an administrator may change it",
                resource="Request",
                id=request_id,
            )

    def ensure_request_status(self, principal: Principal, status: RequestStatus, *, request_id=None) -> None:
        if principal.is_admin or status in OWNER_STATUSES:
            return
        self._deny(
            principal,
            f"Only administrators may mark a request {status.value}",
            resource="Request",
            id=request_id,
        )

    def ensure_account_access(self, principal: Principal, account_id: int) -> None:
        if principal.is_admin or principal.account_id == int(account_id):
            return
        self._deny(principal, "Not allowed to access this account", resource="Account", id=account_id)
