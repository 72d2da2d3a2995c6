"""Example: use the service layer directly, without Flask.

Prints an employee's salary slip summary for a month.
Usage: python examples/example_usage.py USER_ID YEAR MONTH
"""

import importlib
import sys

from config import get_settings_module

from workforce_system.common.formatting import format_currency, format_hours
from workforce_system.container import build_container


def main(argv):
    user_id, year, month = argv[0], int(argv[1]), int(argv[2])
    settings = importlib.import_module(get_settings_module())
    container = build_container(backend_config=settings.BACKEND_CONFIG, timezone=settings.TIMEZONE)

    slip = container.salary_slip_service.build_slip(user_id, month=month, year=year)
    print(f"{slip.employee_name} ({slip.employee_code}) {slip.period_start} - {slip.period_end}")
    print(f"Worked {format_hours(slip.total_hours)} of {format_hours(slip.expected_hours)}")
    print(f"Present {slip.present_days}, absent {slip.absent_days}")
    print(f"Earned {format_currency(slip.earned_salary)}")
    print(" ".join(d.mark.value for d in slip.days))


if __name__ == "__main__":
    main(sys.argv[1:])
