from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import WorkflowStatus
from ..database.memory import MemoryStore
from .model import Workflow
from .repository import WorkflowRepository


class MemoryWorkflowRepository(WorkflowRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict:
        return self._store.table("workflows")

    def get_by_id(self, workflow_id: int) -> Optional[Workflow]:
        return self._rows.get(int(workflow_id))

    def list_by_employee(self, employee_id: int) -> Sequence[Workflow]:
        return sorted(
            (w for w in self._rows.values() if w.employee_id == int(employee_id)),
            key=lambda w: w.workflow_id,
        )

    def create(self, *, employee_id: int, type: str, details: str, status: WorkflowStatus) -> int:
        with self._store.transaction():
            workflow_id = self._store.next_id("workflows")
            self._rows[workflow_id] = Workflow(
                workflow_id=workflow_id,
                employee_id=int(employee_id),
                type=type,
                details=details,
                status=status,
                created=now_local(),
            )
            return workflow_id

    def update(
        self,
        workflow_id: int,
        *,
        status: WorkflowStatus,
        comments: Optional[str],
        handled_by: Optional[int],
    ) -> bool:
        with self._store.transaction():
            wf = self._rows.get(int(workflow_id))
            if not wf:
                return False
            self._rows[wf.workflow_id] = replace(
                wf, status=status, comments=comments, handled_by=handled_by, updated=now_local()
            )
            return True

    def delete_by_id(self, workflow_id: int) -> bool:
        with self._store.transaction():
            return self._rows.pop(int(workflow_id), None) is not None
