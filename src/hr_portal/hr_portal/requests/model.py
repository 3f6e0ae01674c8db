from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional, Tuple, Union

from ..core.enums import LEAVE_TYPE, RequestStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class NewItem:
    name: str
    quantity: int


@dataclass(frozen=True)
class LeaveDetail:
    start_date: date
    end_date: date


@dataclass(frozen=True)
class ItemsDetail:
    items: Tuple[NewItem, ...]


# A request carries exactly one of these, chosen by its type.
RequestDetail = Union[LeaveDetail, ItemsDetail]


@dataclass(frozen=True)
class RequestItem:
    item_id: int
    request_id: int
    name: str
    quantity: int


@dataclass(frozen=True)
class RequestLeave:
    leave_id: int
    request_id: int
    start_date: date
    end_date: date


@dataclass(frozen=True)
class Request:
    """Employee request with its persisted child rows.

    Leave requests only ever have `leave`; every other type only has `items`.
    """

    request_id: int
    employee_id: int
    type: str
    status: RequestStatus
    request_date: date
    created: datetime
    updated: Optional[datetime] = None
    items: Tuple[RequestItem, ...] = ()
    leave: Optional[RequestLeave] = None

    @property
    def is_leave(self) -> bool:
        return is_leave_type(self.type)

    @property
    def detail(self) -> Optional[RequestDetail]:
        if self.is_leave:
            return LeaveDetail(self.leave.start_date, self.leave.end_date) if self.leave else None
        if self.items:
            return ItemsDetail(tuple(NewItem(i.name, i.quantity) for i in self.items))
        return None


def is_leave_type(type: str) -> bool:
    return type == LEAVE_TYPE


def _parse_quantity(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise ValueError(value)
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(value)
    return int(value)


def parse_item(raw: Any) -> NewItem:
    if isinstance(raw, NewItem):
        name, quantity = raw.name, raw.quantity
    elif isinstance(raw, dict):
        name, quantity = raw.get("name"), raw.get("quantity")
    else:
        raise ValidationError("Each item must be an object with name and quantity", field="items")

    name = (name or "").strip() if isinstance(name, str) else ""
    try:
        qty = _parse_quantity(quantity)
    except (TypeError, ValueError):
        qty = 0
    if not name or qty <= 0:
        raise ValidationError("Each item must have a name and a valid positive quantity.", field="items")
    return NewItem(name=name, quantity=qty)


def parse_items(raw: Any) -> Tuple[NewItem, ...]:
    if not isinstance(raw, (list, tuple)) or not raw:
        raise ValidationError("At least one item is required for this request type.", field="items")
    return tuple(parse_item(r) for r in raw)


def parse_status(value: Any) -> RequestStatus:
    try:
        return RequestStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in RequestStatus)
        raise ValidationError(f"Status must be one of: {allowed}", field="status")


def check_leave_range(start: date, end: date) -> LeaveDetail:
    if end < start:
        raise ValidationError("End date must be on or after start date", field="endDate")
    return LeaveDetail(start_date=start, end_date=end)


def detail_matches(type: str, detail: RequestDetail) -> bool:
    if isinstance(detail, LeaveDetail):
        return is_leave_type(type)
    if isinstance(detail, ItemsDetail):
        return not is_leave_type(type)
    raise TypeError(f"Unknown request detail: {detail!r}")
