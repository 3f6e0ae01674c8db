from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import WorkflowStatus
from .model import Workflow


class WorkflowRepository(Protocol):
    def get_by_id(self, workflow_id: int) -> Optional[Workflow]:
        raise NotImplementedError

    def list_by_employee(self, employee_id: int) -> Sequence[Workflow]:
        raise NotImplementedError

    def create(self, *, employee_id: int, type: str, details: str, status: WorkflowStatus) -> int:
        raise NotImplementedError

    def update(
        self,
        workflow_id: int,
        *,
        status: WorkflowStatus,
        comments: Optional[str],
        handled_by: Optional[int],
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, workflow_id: int) -> bool:
        raise NotImplementedError
