from __future__ import annotations

from datetime import date, datetime
from typing import Optional


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def iso(value: Optional[date]) -> Optional[str]:
    """Serialize a date/datetime for JSON payloads."""
    return value.isoformat() if value is not None else None
