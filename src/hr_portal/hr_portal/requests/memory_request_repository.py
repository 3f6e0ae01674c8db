from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import RequestStatus
from ..database.memory import MemoryStore, delete_request_rows
from .model import (
    ItemsDetail,
    LeaveDetail,
    NewItem,
    Request,
    RequestDetail,
    RequestItem,
    RequestLeave,
    detail_matches,
    is_leave_type,
)
from .repository import RequestRepository


class MemoryRequestRepository(RequestRepository):
    """Keeps request, item and leave rows in separate tables like the SQL schema."""

    def __init__(self, store: MemoryStore):
        self._store = store

    def _assemble(self, row: Request) -> Request:
        items = tuple(
            sorted(
                (i for i in self._store.table("request_items").values() if i.request_id == row.request_id),
                key=lambda i: i.item_id,
            )
        )
        leave = next(
            (l for l in self._store.table("request_leaves").values() if l.request_id == row.request_id),
            None,
        )
        return replace(row, items=items, leave=leave)

    def get_by_id(self, request_id: int) -> Optional[Request]:
        row = self._store.table("requests").get(int(request_id))
        return self._assemble(row) if row else None

    def list_all(self) -> Sequence[Request]:
        rows = sorted(self._store.table("requests").values(), key=lambda r: r.request_id)
        return [self._assemble(r) for r in rows]

    def list_by_employee(self, employee_id: int) -> Sequence[Request]:
        return [r for r in self.list_all() if r.employee_id == int(employee_id)]

    def _insert_items(self, request_id: int, items: Iterable[NewItem]) -> None:
        table = self._store.table("request_items")
        for item in items:
            item_id = self._store.next_id("request_items")
            table[item_id] = RequestItem(item_id=item_id, request_id=request_id, name=item.name, quantity=item.quantity)

    def _delete_children(self, table_name: str, request_id: int) -> None:
        table = self._store.table(table_name)
        for key in [k for k, row in table.items() if row.request_id == request_id]:
            del table[key]

    def _save_leave(self, request_id: int, leave: LeaveDetail) -> None:
        table = self._store.table("request_leaves")
        current = next((l for l in table.values() if l.request_id == request_id), None)
        leave_id = current.leave_id if current else self._store.next_id("request_leaves")
        table[leave_id] = RequestLeave(
            leave_id=leave_id,
            request_id=request_id,
            start_date=leave.start_date,
            end_date=leave.end_date,
        )

    def create(
        self,
        *,
        employee_id: int,
        type: str,
        status: RequestStatus,
        request_date: date,
        detail: RequestDetail,
    ) -> int:
        if not detail_matches(type, detail):
            raise ValueError(f"{type} request cannot carry {detail.__class__.__name__}")
        with self._store.transaction():
            if int(employee_id) not in self._store.table("employees"):
                raise ValueError(f"Unknown employee {employee_id}")
            request_id = self._store.next_id("requests")
            self._store.table("requests")[request_id] = Request(
                request_id=request_id,
                employee_id=int(employee_id),
                type=type,
                status=status,
                request_date=request_date,
                created=now_local(),
            )
            if isinstance(detail, LeaveDetail):
                self._save_leave(request_id, detail)
            else:
                self._insert_items(request_id, detail.items)
            return request_id

    def update(self, request_id: int, *, status: RequestStatus, detail: Optional[RequestDetail]) -> bool:
        with self._store.transaction():
            rows = self._store.table("requests")
            row = rows.get(int(request_id))
            if not row:
                return False
            if detail is not None and not detail_matches(row.type, detail):
                raise ValueError(f"{row.type} request cannot carry {detail.__class__.__name__}")

            rows[row.request_id] = replace(row, status=status, updated=now_local())
            if is_leave_type(row.type):
                self._delete_children("request_items", row.request_id)
                if isinstance(detail, LeaveDetail):
                    self._save_leave(row.request_id, detail)
            else:
                self._delete_children("request_leaves", row.request_id)
                if isinstance(detail, ItemsDetail):
                    self._delete_children("request_items", row.request_id)
                    self._insert_items(row.request_id, detail.items)
            return True

    def delete_by_id(self, request_id: int) -> bool:
        with self._store.transaction():
            if int(request_id) not in self._store.table("requests"):
                return False
            delete_request_rows(self._store, int(request_id))
            return True
