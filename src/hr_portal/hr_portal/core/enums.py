from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for authorization."""

    ADMIN = "Admin"
    USER = "User"


class AccountStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class RequestStatus(str, Enum):
    """Approval states of an employee request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"


class WorkflowStatus(str, Enum):
    PENDING = "Pending"
    FOR_REVIEWING = "ForReviewing"
    COMPLETED = "Completed"


class WorkflowType(str, Enum):
    ONBOARDING = "Onboarding"
    DEPARTMENT_TRANSFER = "Department Transfer"
    REQUEST_APPROVAL = "Request Approval"


# Request.type value selecting the leave detail; every other type carries items.
LEAVE_TYPE = "Leave"
