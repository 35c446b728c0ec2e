from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"


class PeriodStatus(str, Enum):
    """Lifecycle status of a monthly timesheet period."""

    OPEN = "OPEN"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ExceptionType(str, Enum):
    """Calendar override: OFFDAY = company holiday/bridge, WORKDAY = extra working day."""

    OFFDAY = "OFFDAY"
    WORKDAY = "WORKDAY"
