from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..departments.model import Department


@dataclass(frozen=True)
class Employee:
    """Domain entity: HR record owned by exactly one account."""

    employee_id: int
    account_id: int
    department_id: int
    position: str
    hire_date: date
    status: str
    created: datetime
    updated: Optional[datetime] = None


@dataclass(frozen=True)
class AccountBrief:
    email: str
    first_name: str
    last_name: str
    title: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class EmployeeView:
    """Read model: employee joined with its account and department."""

    employee: Employee
    account: Optional[AccountBrief]
    department: Optional[Department]
