"""Example: use the service layer directly (no Flask).

Builds the current month's report against the configured backend and prints it.
"""

import importlib
from datetime import date

from dotenv import load_dotenv

from config import get_settings_module

from src.school_attendance.school_attendance.common.datetime_utils import month_label
from src.school_attendance.school_attendance.container import build_container


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(api_base=settings.API_BASE, max_workers=settings.FETCH_MAX_WORKERS)

    today = date.today()
    month_start = date(today.year, today.month, 1)
    print(month_label(month_start))
    for t in container.aggregator.compute_monthly_report(month_start):
        print(f"{t.name:<30} {t.reg_no:<12} P={t.present:<3} A={t.absent:<3} L={t.late:<3} {t.percentage:>3}%")


if __name__ == "__main__":
    main()
