from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ExceptionType


@dataclass(frozen=True)
class Holiday:
    holiday_id: int
    holiday_date: date
    name: Optional[str] = None


@dataclass(frozen=True)
class CalendarException:
    exception_id: int
    exception_date: date
    type: ExceptionType
    name: Optional[str] = None
