from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import WorkflowStatus


@dataclass(frozen=True)
class Workflow:
    """Audit/approval trail entry describing an HR event for an employee."""

    workflow_id: int
    employee_id: int
    type: str
    details: str
    status: WorkflowStatus
    created: datetime
    comments: Optional[str] = None
    handled_by: Optional[int] = None
    updated: Optional[datetime] = None
