from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
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

_COLUMNS = "id, employee_id, type, status, request_date, created, updated"


def _to_request(row: dict, items: Iterable[RequestItem] = (), leave: Optional[RequestLeave] = None) -> Request:
    return Request(
        request_id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        type=row["type"],
        status=RequestStatus(row["status"]),
        request_date=row["request_date"],
        created=row["created"],
        updated=row.get("updated"),
        items=tuple(items),
        leave=leave,
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, cur, rows: List[dict]) -> List[Request]:
        """Attach item and leave rows to the given request rows (two queries total)."""
        if not rows:
            return []
        ids = [int(r["id"]) for r in rows]

        items: Dict[int, List[RequestItem]] = defaultdict(list)
        cur.execute(
            f"SELECT id, request_id, name, quantity FROM request_items "
            f"WHERE request_id IN ({placeholders(ids)}) ORDER BY id",
            tuple(ids),
        )
        for r in fetchall(cur):
            items[int(r["request_id"])].append(
                RequestItem(
                    item_id=int(r["id"]),
                    request_id=int(r["request_id"]),
                    name=r["name"],
                    quantity=int(r["quantity"]),
                )
            )

        leaves: Dict[int, RequestLeave] = {}
        cur.execute(
            f"SELECT id, request_id, start_date, end_date FROM request_leaves WHERE request_id IN ({placeholders(ids)})",
            tuple(ids),
        )
        for r in fetchall(cur):
            leaves[int(r["request_id"])] = RequestLeave(
                leave_id=int(r["id"]),
                request_id=int(r["request_id"]),
                start_date=r["start_date"],
                end_date=r["end_date"],
            )

        return [_to_request(r, items.get(int(r["id"]), ()), leaves.get(int(r["id"]))) for r in rows]

    def get_by_id(self, request_id: int) -> Optional[Request]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM requests WHERE id=%s", (int(request_id),))
            row = fetchone(cur)
            if not row:
                return None
            return self._load(cur, [row])[0]

    def list_all(self) -> Sequence[Request]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM requests ORDER BY id")
            return self._load(cur, fetchall(cur))

    def list_by_employee(self, employee_id: int) -> Sequence[Request]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM requests WHERE employee_id=%s ORDER BY id", (int(employee_id),))
            return self._load(cur, fetchall(cur))

    @staticmethod
    def _insert_items(cur, request_id: int, items: Iterable[NewItem]) -> None:
        cur.executemany(
            "INSERT INTO request_items(request_id, name, quantity) VALUES(%s,%s,%s)",
            [(request_id, i.name, i.quantity) for i in items],
        )

    @staticmethod
    def _save_leave(cur, request_id: int, leave: LeaveDetail) -> None:
        cur.execute(
            "INSERT INTO request_leaves(request_id, start_date, end_date) VALUES(%s,%s,%s) "
            "ON DUPLICATE KEY UPDATE start_date=VALUES(start_date), end_date=VALUES(end_date)",
            (request_id, leave.start_date, leave.end_date),
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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO requests(employee_id, type, status, request_date) VALUES(%s,%s,%s,%s)",
                (int(employee_id), type, status.value, request_date),
            )
            request_id = int(cur.lastrowid)
            if isinstance(detail, LeaveDetail):
                self._save_leave(cur, request_id, detail)
            else:
                self._insert_items(cur, request_id, detail.items)
            return request_id

    def update(self, request_id: int, *, status: RequestStatus, detail: Optional[RequestDetail]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, type FROM requests WHERE id=%s FOR UPDATE", (int(request_id),))
            row = fetchone(cur)
            if not row:
                return False
            request_id, type = int(row["id"]), row["type"]
            if detail is not None and not detail_matches(type, detail):
                raise ValueError(f"{type} request cannot carry {detail.__class__.__name__}")

            cur.execute("UPDATE requests SET status=%s, updated=NOW() WHERE id=%s", (status.value, request_id))
            if is_leave_type(type):
                cur.execute("DELETE FROM request_items WHERE request_id=%s", (request_id,))
                if isinstance(detail, LeaveDetail):
                    self._save_leave(cur, request_id, detail)
            else:
                cur.execute("DELETE FROM request_leaves WHERE request_id=%s", (request_id,))
                if isinstance(detail, ItemsDetail):
                    cur.execute("DELETE FROM request_items WHERE request_id=%s", (request_id,))
                    self._insert_items(cur, request_id, detail.items)
            return True

    def delete_by_id(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # request_items / request_leaves go with it (ON DELETE CASCADE)
            cur.execute("DELETE FROM requests WHERE id=%s", (int(request_id),))
            return cur.rowcount > 0
