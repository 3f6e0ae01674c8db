from __future__ import annotations

from functools import wraps

from flask import session

from ..access.policy import Principal
from ..core.enums import Role
from .http import fail


def current_principal() -> Principal:
    return Principal(account_id=int(session["account_id"]), role=Role(session["role"]))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "account_id" not in session:
            return fail("Unauthorized", status=401, code="UNAUTHENTICATED")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "account_id" not in session:
            return fail("Unauthorized", status=401, code="UNAUTHENTICATED")
        if session.get("role") != Role.ADMIN.value:
            return fail("Forbidden", status=403, code="FORBIDDEN")
        return view(*args, **kwargs)

    return wrapper
