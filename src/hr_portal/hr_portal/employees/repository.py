from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Employee, EmployeeView


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_account_id(self, account_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_view(self, employee_id: int) -> Optional[EmployeeView]:
        raise NotImplementedError

    def list_views(self) -> Sequence[EmployeeView]:
        raise NotImplementedError

    def create(
        self,
        *,
        account_id: int,
        department_id: int,
        position: str,
        hire_date: date,
        status: str,
    ) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, *, position: str, hire_date: date, status: str) -> bool:
        raise NotImplementedError

    def set_department(self, employee_id: int, department_id: int) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        """Delete the employee; its requests and workflows go with it."""

        raise NotImplementedError
