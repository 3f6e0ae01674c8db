from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Department, DepartmentSummary
from .repository import DepartmentRepository

_SUMMARY_SQL = """
    SELECT d.id, d.name, d.description, d.created, d.updated, COUNT(e.id) AS employee_count
    FROM departments d
    LEFT JOIN employees e ON e.department_id = d.id
"""


def _to_department(row: dict) -> Department:
    return Department(
        department_id=int(row["id"]),
        name=row["name"],
        description=row.get("description"),
        created=row["created"],
        updated=row.get("updated"),
    )


def _to_summary(row: dict) -> DepartmentSummary:
    return DepartmentSummary(department=_to_department(row), employee_count=int(row.get("employee_count") or 0))


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, description, created, updated FROM departments WHERE id=%s",
                (int(department_id),),
            )
            row = fetchone(cur)
            return _to_department(row) if row else None

    def list_summaries(self) -> Sequence[DepartmentSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SUMMARY_SQL + " GROUP BY d.id ORDER BY d.name")
            return [_to_summary(r) for r in fetchall(cur)]

    def get_summary(self, department_id: int) -> Optional[DepartmentSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SUMMARY_SQL + " WHERE d.id=%s GROUP BY d.id", (int(department_id),))
            row = fetchone(cur)
            return _to_summary(row) if row else None

    def count_employees(self, department_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees WHERE department_id=%s", (int(department_id),))
            return int(fetchone(cur)["n"])

    def create(self, *, name: str, description: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO departments(name, description) VALUES(%s,%s)", (name, description))
            return int(cur.lastrowid)

    def update(self, department_id: int, *, name: str, description: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE departments SET name=%s, description=%s, updated=NOW() WHERE id=%s",
                (name, description, int(department_id)),
            )
            return cur.rowcount > 0

    def delete_if_empty(self, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # lock the department's employee rows so a concurrent assignment cannot slip in
            cur.execute(
                "SELECT COUNT(*) AS n FROM employees WHERE department_id=%s FOR UPDATE",
                (int(department_id),),
            )
            if int(fetchone(cur)["n"]) > 0:
                return False
            cur.execute("DELETE FROM departments WHERE id=%s", (int(department_id),))
            return cur.rowcount > 0
