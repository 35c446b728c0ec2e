from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_month(year: int, month: int) -> tuple[int, int]:
    """Validate a (year, 0-based month) pair coming from the outside."""
    try:
        year_i = int(year)
        month_i = int(month)
    except (TypeError, ValueError):
        raise ValidationError("Year and month must be integers")
    if not 0 <= month_i <= 11:
        raise ValidationError("Month must be between 0 (January) and 11 (December)")
    if not 1 <= year_i <= 9999:
        raise ValidationError("Year is out of range")
    return year_i, month_i
