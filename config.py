# config.py
# Defaults for the time card page, overridable per environment.
from __future__ import annotations

import logging
import os
from datetime import date, datetime
from zoneinfo import ZoneInfo

from domain import Settings, TIME_FORMAT_12H

TZ = ZoneInfo(os.getenv("TIMECARD_TZ", "UTC"))
LOG_LEVEL = os.getenv("TIMECARD_LOG_LEVEL", "INFO").upper()

PAY_RATE = float(os.getenv("TIMECARD_PAY_RATE", "15.0"))
OVERTIME_RATE = float(os.getenv("TIMECARD_OVERTIME_RATE", "1.5"))
DAILY_OT_THRESHOLD_H = float(os.getenv("TIMECARD_DAILY_OT", "8"))
WEEKLY_OT_THRESHOLD_H = float(os.getenv("TIMECARD_WEEKLY_OT", "40"))
PAY_PERIOD_WEEKS = int(os.getenv("TIMECARD_PAY_PERIOD_WEEKS", "2"))
DAYS_PER_WEEK = int(os.getenv("TIMECARD_DAYS_PER_WEEK", "5"))
TIME_PERIODS_PER_DAY = 2

PDF_TITLE = "Employee Time Cards"
PDF_FILE_NAME = "timecards.pdf"


def today_local() -> date:
    return datetime.now(TZ).date()


def default_settings() -> Settings:
    return Settings(
        time_format=TIME_FORMAT_12H,
        pay_period_weeks=PAY_PERIOD_WEEKS,
        days_per_week=DAYS_PER_WEEK,
        week_starts_on=0,
        time_periods_per_day=TIME_PERIODS_PER_DAY,
        auto_deduct_breaks=False,
        break_minutes=0,
        calculate_overtime=False,
        daily_overtime_threshold=DAILY_OT_THRESHOLD_H,
        weekly_overtime_threshold=WEEKLY_OT_THRESHOLD_H,
        overtime_rate=OVERTIME_RATE,
        pay_rate=PAY_RATE,
        name_days=True,
    )


_logging_ready = False


def configure_logging() -> None:
    """Set up root logging once per process (Streamlit reruns the script)."""
    global _logging_ready
    if _logging_ready:
        return
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _logging_ready = True
