from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Department:
    department_id: int
    name: str
    description: Optional[str]
    created: datetime
    updated: Optional[datetime] = None


@dataclass(frozen=True)
class DepartmentSummary:
    """Read model: department with the number of employees assigned to it."""

    department: Department
    employee_count: int
