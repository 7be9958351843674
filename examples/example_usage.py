"""Example: drive the service layer directly, without Flask.

Controllers stay thin; the monthly view and the totals come from the services.
"""

import importlib

from config import get_settings_module

from crew_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        api_config=settings.API_CONFIG,
        default_hours=settings.DEFAULT_WORKING_HOURS,
        present_day_policy=settings.PRESENT_DAY_POLICY,
        day_cell_cap=settings.DAY_CELL_RECORD_CAP,
    )
    month = container.attendance_service.load_month("USER_ID", 5, 2024)
    print(month.totals.as_dict())


if __name__ == "__main__":
    main()
