from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import ConflictError
from ..database.memory import MemoryStore, delete_employee_rows
from .model import AccountBrief, Employee, EmployeeView
from .repository import EmployeeRepository


class MemoryEmployeeRepository(EmployeeRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict:
        return self._store.table("employees")

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._rows.get(int(employee_id))

    def get_by_account_id(self, account_id: int) -> Optional[Employee]:
        for emp in self._rows.values():
            if emp.account_id == int(account_id):
                return emp
        return None

    def _view(self, emp: Employee) -> EmployeeView:
        acc = self._store.table("accounts").get(emp.account_id)
        brief = (
            AccountBrief(email=acc.email, first_name=acc.first_name, last_name=acc.last_name, title=acc.title)
            if acc
            else None
        )
        return EmployeeView(
            employee=emp,
            account=brief,
            department=self._store.table("departments").get(emp.department_id),
        )

    def get_view(self, employee_id: int) -> Optional[EmployeeView]:
        emp = self.get_by_id(employee_id)
        return self._view(emp) if emp else None

    def list_views(self) -> Sequence[EmployeeView]:
        return [self._view(e) for e in sorted(self._rows.values(), key=lambda e: e.employee_id)]

    def create(
        self,
        *,
        account_id: int,
        department_id: int,
        position: str,
        hire_date: date,
        status: str,
    ) -> int:
        with self._store.transaction():
            if self.get_by_account_id(account_id):
                raise ConflictError("Account already has an employee record", resource="Employee", field="accountId")
            employee_id = self._store.next_id("employees")
            self._rows[employee_id] = Employee(
                employee_id=employee_id,
                account_id=int(account_id),
                department_id=int(department_id),
                position=position,
                hire_date=hire_date,
                status=status,
                created=now_local(),
            )
            return employee_id

    def update(self, employee_id: int, *, position: str, hire_date: date, status: str) -> bool:
        with self._store.transaction():
            emp = self._rows.get(int(employee_id))
            if not emp:
                return False
            self._rows[emp.employee_id] = replace(
                emp, position=position, hire_date=hire_date, status=status, updated=now_local()
            )
            return True

    def set_department(self, employee_id: int, department_id: int) -> bool:
        with self._store.transaction():
            emp = self._rows.get(int(employee_id))
            if not emp:
                return False
            self._rows[emp.employee_id] = replace(emp, department_id=int(department_id), updated=now_local())
            return True

    def delete_by_id(self, employee_id: int) -> bool:
        with self._store.transaction():
            if int(employee_id) not in self._rows:
                return False
            delete_employee_rows(self._store, int(employee_id))
            return True
