"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the approval rules live in the services.
"""

import importlib

from config import get_settings_module

from src.timesheet_system.timesheet_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    print("Expected hours, February 2025:", container.calendar_service.get_expected_hours(2025, 1))
    check = container.period_service.can_submit(3, 2025, 1)
    print(check.summary.describe() if check.allowed else check.reason)


if __name__ == "__main__":
    main()
