from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department, DepartmentSummary


class DepartmentRepository(Protocol):
    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def list_summaries(self) -> Sequence[DepartmentSummary]:
        raise NotImplementedError

    def get_summary(self, department_id: int) -> Optional[DepartmentSummary]:
        raise NotImplementedError

    def count_employees(self, department_id: int) -> int:
        raise NotImplementedError

    def create(self, *, name: str, description: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, department_id: int, *, name: str, description: Optional[str]) -> bool:
        raise NotImplementedError

    def delete_if_empty(self, department_id: int) -> bool:
        """Delete only while no employee references the department.

        Returns False when employees are still assigned.
        """

        raise NotImplementedError
