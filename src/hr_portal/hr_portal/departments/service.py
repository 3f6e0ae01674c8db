from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..access.policy import AccessPolicy, Principal
from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import DepartmentSummary
from .repository import DepartmentRepository

log = logging.getLogger(__name__)


class DepartmentService:
    def __init__(self, departments: DepartmentRepository, policy: AccessPolicy):
        self._departments = departments
        self._policy = policy

    def list_departments(self) -> Sequence[DepartmentSummary]:
        return self._departments.list_summaries()

    def get_department(self, department_id: int) -> DepartmentSummary:
        summary = self._departments.get_summary(int(department_id))
        if not summary:
            raise NotFoundError("Department not found", resource="Department", id=department_id)
        return summary

    def create_department(self, principal: Principal, *, name: str, description: Optional[str] = None) -> int:
        self._policy.ensure_admin(principal, "create departments")
        department_id = self._departments.create(
            name=require_non_empty(name, "Name"),
            description=optional_text(description, "description"),
        )
        log.info("Department %s created", department_id)
        return department_id

    def update_department(self, principal: Principal, department_id: int, patch: dict) -> None:
        self._policy.ensure_admin(principal, "update departments")
        current = self.get_department(department_id).department

        name = current.name
        if "name" in patch:
            name = optional_text(patch["name"], "name")
            if not name:
                raise ValidationError("Name cannot be empty", field="name")
        description = optional_text(patch["description"], "description") if "description" in patch else current.description

        self._departments.update(current.department_id, name=name, description=description)
        log.info("Department %s updated", current.department_id)

    def delete_department(self, principal: Principal, department_id: int) -> None:
        self._policy.ensure_admin(principal, "delete departments")
        summary = self.get_department(department_id)
        if summary.employee_count > 0 or not self._departments.delete_if_empty(summary.department.department_id):
            count = self._departments.count_employees(summary.department.department_id)
            raise ConflictError(
                f"Department cannot be deleted because it has {count} employees assigned",
                resource="Department",
                id=department_id,
            )
        log.info("Department %s deleted", department_id)
