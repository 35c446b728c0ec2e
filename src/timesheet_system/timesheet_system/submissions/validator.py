from __future__ import annotations

from datetime import date, timedelta

from ..common.datetime_utils import month_bounds
from ..core.constants import FINAL_STRETCH_DAYS, SUBMISSION_TOLERANCE_HOURS
from .model import SubmissionCheck, SubmissionSummary, ValidationDenied


class SubmissionValidator:
    """Decides whether a month may be submitted now.

    Any one rule is enough:
    1. the month is already closed;
    2. today is in the final stretch of that same month;
    3. logged hours are within the tolerance of the expected hours.
    """

    def __init__(
        self,
        *,
        tolerance_hours: float = SUBMISSION_TOLERANCE_HOURS,
        final_stretch_days: int = FINAL_STRETCH_DAYS,
    ):
        self._tolerance = float(tolerance_hours)
        self._final_stretch_days = int(final_stretch_days)

    @property
    def rules(self) -> tuple[str, ...]:
        return (
            "The month must already be closed",
            f"Today is within the last {self._final_stretch_days} days of the month",
            f"Logged hours are close to the expected total (tolerance of {self._tolerance:g}h)",
        )

    def is_month_closed(self, *, year: int, month: int, today: date) -> bool:
        _, last = month_bounds(year, month)
        return today > last

    def is_final_stretch(self, *, year: int, month: int, today: date) -> bool:
        """True from last_day - N days through month end, which spans N + 1 calendar days."""

        first, last = month_bounds(year, month)
        if (today.year, today.month) != (first.year, first.month):
            return False
        return today >= last - timedelta(days=self._final_stretch_days)

    def is_near_complete(self, *, expected_hours: float, logged_hours: float) -> bool:
        return float(logged_hours) >= float(expected_hours) - self._tolerance

    def evaluate(
        self,
        *,
        year: int,
        month: int,
        expected_hours: float,
        logged_hours: float,
        today: date,
    ) -> SubmissionCheck:
        expected = float(expected_hours)
        logged = round(float(logged_hours), 2)

        if (
            self.is_month_closed(year=year, month=month, today=today)
            or self.is_final_stretch(year=year, month=month, today=today)
            or self.is_near_complete(expected_hours=expected, logged_hours=logged)
        ):
            return SubmissionCheck(allowed=True, summary=SubmissionSummary(expected_hours=expected, logged_hours=logged))

        shortfall = round(expected - logged, 2)
        rules = self.rules
        reason = "\n".join(
            [
                "This month cannot be submitted yet.",
                "",
                "Submission rules (any one is enough):",
                *[f"{i}. {rule}" for i, rule in enumerate(rules, start=1)],
                "",
                f"Expected: {expected:g}h",
                f"Logged: {logged:.1f}h",
                f"Missing: {shortfall:.1f}h",
            ]
        )
        return SubmissionCheck(
            allowed=False,
            denial=ValidationDenied(
                reason=reason,
                expected_hours=expected,
                logged_hours=logged,
                shortfall=shortfall,
                rules=rules,
            ),
        )
