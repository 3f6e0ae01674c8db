from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import WorkflowStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Workflow
from .repository import WorkflowRepository

_COLUMNS = "id, employee_id, type, details, status, comments, handled_by, created, updated"


def _to_workflow(row: dict) -> Workflow:
    return Workflow(
        workflow_id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        type=row["type"],
        details=row["details"],
        status=WorkflowStatus(row["status"]),
        comments=row.get("comments"),
        handled_by=row.get("handled_by"),
        created=row["created"],
        updated=row.get("updated"),
    )


class MySQLWorkflowRepository(WorkflowRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, workflow_id: int) -> Optional[Workflow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workflows WHERE id=%s", (int(workflow_id),))
            row = fetchone(cur)
            return _to_workflow(row) if row else None

    def list_by_employee(self, employee_id: int) -> Sequence[Workflow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM workflows WHERE employee_id=%s ORDER BY id",
                (int(employee_id),),
            )
            return [_to_workflow(r) for r in fetchall(cur)]

    def create(self, *, employee_id: int, type: str, details: str, status: WorkflowStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO workflows(employee_id, type, details, status) VALUES(%s,%s,%s,%s)",
                (int(employee_id), type, details, status.value),
            )
            return int(cur.lastrowid)

    def update(
        self,
        workflow_id: int,
        *,
        status: WorkflowStatus,
        comments: Optional[str],
        handled_by: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE workflows SET status=%s, comments=%s, handled_by=%s, updated=NOW() WHERE id=%s",
                (status.value, comments, handled_by, int(workflow_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, workflow_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM workflows WHERE id=%s", (int(workflow_id),))
            return cur.rowcount > 0
