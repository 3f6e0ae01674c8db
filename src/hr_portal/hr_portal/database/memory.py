from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator

TABLES = (
    "accounts",
    "departments",
    "employees",
    "requests",
    "request_items",
    "request_leaves",
    "workflows",
)


class MemoryStore:
    """Process-local relational store shared by the memory repositories.

    Build one per application (or per test) and hand it to every
    repository so they see the same rows. Rows are frozen dataclasses, so a
    shallow copy of each table is a complete snapshot.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self.tables: Dict[str, Dict[int, Any]] = {name: {} for name in TABLES}
        self._next_ids: Dict[str, int] = {name: 1 for name in TABLES}

    def next_id(self, table: str) -> int:
        with self._lock:
            value = self._next_ids[table]
            self._next_ids[table] = value + 1
            return value

    def table(self, name: str) -> Dict[int, Any]:
        return self.tables[name]

    @contextmanager
    def transaction(self) -> Iterator["MemoryStore"]:
        """Unit of work: on exception every table is restored to its snapshot."""
        with self._lock:
            snapshot = {name: dict(rows) for name, rows in self.tables.items()}
            ids = dict(self._next_ids)
            try:
                yield self
            except Exception:
                self.tables = snapshot
                self._next_ids = ids
                raise


def delete_request_rows(store: MemoryStore, request_id: int) -> None:
    """Remove a request together with its item and leave rows."""
    for name in ("request_items", "request_leaves"):
        rows = store.table(name)
        for key in [k for k, row in rows.items() if row.request_id == request_id]:
            del rows[key]
    store.table("requests").pop(request_id, None)


def delete_employee_rows(store: MemoryStore, employee_id: int) -> None:
    """Remove an employee with the requests and workflows it owns."""
    for request_id in [k for k, row in store.table("requests").items() if row.employee_id == employee_id]:
        delete_request_rows(store, request_id)
    workflows = store.table("workflows")
    for key in [k for k, row in workflows.items() if row.employee_id == employee_id]:
        del workflows[key]
    store.table("employees").pop(employee_id, None)
