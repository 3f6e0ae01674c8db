from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.memory import MemoryStore
from .model import Department, DepartmentSummary
from .repository import DepartmentRepository


class MemoryDepartmentRepository(DepartmentRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict:
        return self._store.table("departments")

    def get_by_id(self, department_id: int) -> Optional[Department]:
        return self._rows.get(int(department_id))

    def count_employees(self, department_id: int) -> int:
        return sum(1 for e in self._store.table("employees").values() if e.department_id == int(department_id))

    def list_summaries(self) -> Sequence[DepartmentSummary]:
        return [
            DepartmentSummary(department=d, employee_count=self.count_employees(d.department_id))
            for d in sorted(self._rows.values(), key=lambda d: d.name.lower())
        ]

    def get_summary(self, department_id: int) -> Optional[DepartmentSummary]:
        d = self.get_by_id(department_id)
        if not d:
            return None
        return DepartmentSummary(department=d, employee_count=self.count_employees(d.department_id))

    def create(self, *, name: str, description: Optional[str]) -> int:
        with self._store.transaction():
            department_id = self._store.next_id("departments")
            self._rows[department_id] = Department(
                department_id=department_id,
                name=name,
                description=description,
                created=now_local(),
            )
            return department_id

    def update(self, department_id: int, *, name: str, description: Optional[str]) -> bool:
        with self._store.transaction():
            d = self._rows.get(int(department_id))
            if not d:
                return False
            self._rows[d.department_id] = replace(d, name=name, description=description, updated=now_local())
            return True

    def delete_if_empty(self, department_id: int) -> bool:
        with self._store.transaction():
            if self.count_employees(department_id) > 0:
                return False
            return self._rows.pop(int(department_id), None) is not None
