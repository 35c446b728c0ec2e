"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

HOURS_PER_DAY = 8.8  # 8h 48m
SUBMISSION_TOLERANCE_HOURS = 40
FINAL_STRETCH_DAYS = 7
DEFAULT_PENDING_LIMIT = 200
