from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import Request, RequestDetail


class RequestRepository(Protocol):
    """Requests are always read and written together with their child rows.

    Each write method is one unit of work: the request row and its
    leave/item rows are committed together or not at all.
    """

    def get_by_id(self, request_id: int) -> Optional[Request]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Request]:
        raise NotImplementedError

    def list_by_employee(self, employee_id: int) -> Sequence[Request]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        type: str,
        status: RequestStatus,
        request_date: date,
        detail: RequestDetail,
    ) -> int:
        raise NotImplementedError

    def update(self, request_id: int, *, status: RequestStatus, detail: Optional[RequestDetail]) -> bool:
        """Set status and, when given, the detail matching the request type.

        Child rows of the other kind are always removed: a Leave request
        loses any items, an item request loses any leave row.
        """

        raise NotImplementedError

    def delete_by_id(self, request_id: int) -> bool:
        raise NotImplementedError
