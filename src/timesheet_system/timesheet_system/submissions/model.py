from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SubmissionSummary:
    """Numbers shown to the user before confirming a submission."""

    expected_hours: float
    logged_hours: float

    @property
    def difference(self) -> float:
        """expected - logged; positive = under, negative = over."""
        return round(self.expected_hours - self.logged_hours, 2)

    def describe(self) -> str:
        lines = [
            f"Expected hours: {self.expected_hours:g}h",
            f"Logged hours: {self.logged_hours:.1f}h",
        ]
        if self.difference > 0:
            lines.append(f"Difference: -{self.difference:.1f}h (below expected)")
        elif self.difference < 0:
            lines.append(f"Difference: +{abs(self.difference):.1f}h (above expected)")
        else:
            lines.append("Status: complete")
        lines.append("After submitting, entries for this month can no longer be edited.")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "expected_hours": self.expected_hours,
            "logged_hours": self.logged_hours,
            "difference": self.difference,
        }


@dataclass(frozen=True)
class ValidationDenied:
    """A normal "not yet" outcome of the submission rules, not an error."""

    reason: str
    expected_hours: float
    logged_hours: float
    shortfall: float
    rules: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "reason": self.reason,
            "expected_hours": self.expected_hours,
            "logged_hours": self.logged_hours,
            "shortfall": self.shortfall,
            "rules": list(self.rules),
        }


@dataclass(frozen=True)
class SubmissionCheck:
    allowed: bool
    summary: Optional[SubmissionSummary] = None
    denial: Optional[ValidationDenied] = None

    @property
    def reason(self) -> Optional[str]:
        return self.denial.reason if self.denial else None

    def to_dict(self) -> dict:
        return {
            "allowed": self.allowed,
            "reason": self.reason,
            "summary": self.summary.to_dict() if self.summary else None,
            "denial": self.denial.to_dict() if self.denial else None,
        }
