from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..departments.model import Department
from .model import AccountBrief, Employee, EmployeeView
from .repository import EmployeeRepository

_EMPLOYEE_COLUMNS = "id, account_id, department_id, position, hire_date, status, created, updated"

_VIEW_SQL = """
    SELECT e.id, e.account_id, e.department_id, e.position, e.hire_date, e.status, e.created, e.updated,
           a.email AS a_email, a.first_name AS a_first_name, a.last_name AS a_last_name, a.title AS a_title,
           d.name AS d_name, d.description AS d_description, d.created AS d_created, d.updated AS d_updated
    FROM employees e
    LEFT JOIN accounts a ON a.id = e.account_id
    LEFT JOIN departments d ON d.id = e.department_id
"""


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["id"]),
        account_id=int(row["account_id"]),
        department_id=int(row["department_id"]),
        position=row["position"],
        hire_date=row["hire_date"],
        status=row["status"],
        created=row["created"],
        updated=row.get("updated"),
    )


def _to_view(row: dict) -> EmployeeView:
    account = None
    if row.get("a_email"):
        account = AccountBrief(
            email=row["a_email"],
            first_name=row["a_first_name"],
            last_name=row["a_last_name"],
            title=row.get("a_title"),
        )
    department = None
    if row.get("d_name"):
        department = Department(
            department_id=int(row["department_id"]),
            name=row["d_name"],
            description=row.get("d_description"),
            created=row["d_created"],
            updated=row.get("d_updated"),
        )
    return EmployeeView(employee=_to_employee(row), account=account, department=department)


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_account_id(self, account_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE account_id=%s", (int(account_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_view(self, employee_id: int) -> Optional[EmployeeView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_VIEW_SQL + " WHERE e.id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_view(row) if row else None

    def list_views(self) -> Sequence[EmployeeView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_VIEW_SQL + " ORDER BY e.id")
            return [_to_view(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        account_id: int,
        department_id: int,
        position: str,
        hire_date: date,
        status: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(account_id, department_id, position, hire_date, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(account_id), int(department_id), position, hire_date, status),
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, *, position: str, hire_date: date, status: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET position=%s, hire_date=%s, status=%s, updated=NOW() WHERE id=%s",
                (position, hire_date, status, int(employee_id)),
            )
            return cur.rowcount > 0

    def set_department(self, employee_id: int, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET department_id=%s, updated=NOW() WHERE id=%s",
                (int(department_id), int(employee_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, employee_id: int) -> bool:
        # requests, items, leaves and workflows cascade through their foreign keys
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE id=%s", (int(employee_id),))
            return cur.rowcount > 0
