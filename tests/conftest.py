from __future__ import annotations

from datetime import date, timedelta

import pytest

from domain import Day, Employee, Settings, TimeEntry, Week


def entry(start: str, end: str, start_period: str = "AM", end_period: str = "PM") -> TimeEntry:
    return TimeEntry(start=start, start_period=start_period, end=end, end_period=end_period)


def employee_with_days(days: list[list[TimeEntry]], first_day: date = date(2026, 10, 18)) -> Employee:
    """One week, one Day per item of `days`, consecutive dates from `first_day`."""
    week = Week(days=[
        Day(date=first_day + timedelta(days=i), entries=entries)
        for i, entries in enumerate(days)
    ])
    return Employee(id="e1", name="Ana", start_date=first_day, weeks=[week])


@pytest.fixture
def settings() -> Settings:
    return Settings(pay_period_weeks=1, days_per_week=5, pay_rate=15.0)


@pytest.fixture
def ot_settings() -> Settings:
    return Settings(
        pay_period_weeks=1,
        days_per_week=5,
        pay_rate=15.0,
        calculate_overtime=True,
        daily_overtime_threshold=8,
        weekly_overtime_threshold=40,
        overtime_rate=1.5,
    )
