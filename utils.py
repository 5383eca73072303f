# utils.py
from __future__ import annotations

import re
from dataclasses import replace
from datetime import date
from typing import Iterable

import pandas as pd

from domain import (
    Employee,
    Settings,
    TIME_FORMAT_12H,
    TIME_FORMAT_24H,
    TimeCard,
    TimeCardRow,
    TimeEntry,
    Week,
)
from services import DAY_NAMES, sunday_based_weekday

TIME_12H_RE = re.compile(r"^(0?[1-9]|1[0-2]):[0-5][0-9]$")
TIME_24H_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

WEEK_COLUMNS = ["Date", "Dec Hours", "hh:mm", "Pay"]


def money(x: float) -> str:
    return f"${x:,.2f}"


def weekday_name(d: date) -> str:
    return DAY_NAMES[sunday_based_weekday(d)]


def format_date(d: date) -> str:
    return d.strftime("%m/%d/%Y")


def cell_text(value) -> str:
    """Editor cell as text; None and NaN read as empty."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()

def is_valid_time(value: str, time_format: str) -> bool:
    """Empty means "not filled yet" and is accepted."""
    value = (value or "").strip()
    if not value:
        return True
    pattern = TIME_12H_RE if time_format == TIME_FORMAT_12H else TIME_24H_RE
    return pattern.match(value) is not None


def drop_invalid_entries(employee: Employee, time_format: str) -> tuple[Employee, int]:
    """Copy of `employee` with unparseable entries blanked, plus how many were blanked."""
    dropped = 0
    weeks = []
    for week in employee.weeks:
        days = []
        for day in week.days:
            entries = []
            for e in day.entries:
                if is_valid_time(e.start, time_format) and is_valid_time(e.end, time_format):
                    entries.append(e)
                else:
                    dropped += 1
                    entries.append(TimeEntry())
            days.append(replace(day, entries=entries))
        weeks.append(Week(days=days))
    return replace(employee, weeks=weeks), dropped


def settings_problems(settings: Settings) -> list[str]:
    problems = []
    if settings.time_format not in (TIME_FORMAT_12H, TIME_FORMAT_24H):
        problems.append("Time format must be 12-hour or 24-hour.")
    if not 1 <= settings.pay_period_weeks <= 4:
        problems.append("Pay period weeks must be between 1 and 4.")
    if not 1 <= settings.days_per_week <= 7:
        problems.append("Days per week must be between 1 and 7.")
    if not 0 <= settings.week_starts_on <= 6:
        problems.append("Week start must be a weekday (Sunday to Saturday).")
    if settings.time_periods_per_day < 1:
        problems.append("At least one time period per day is required.")
    if settings.break_minutes < 0:
        problems.append("Break minutes cannot be negative.")
    if settings.daily_overtime_threshold < 0 or settings.weekly_overtime_threshold < 0:
        problems.append("Overtime thresholds cannot be negative.")
    if settings.pay_rate < 0 or settings.overtime_rate < 0:
        problems.append("Pay rates cannot be negative.")
    return problems


def _date_label(row: TimeCardRow, name_days: bool) -> str:
    if name_days:
        return f"{row.day_name} {format_date(row.date)}"
    return format_date(row.date)


def week_to_dataframe(rows: Iterable[TimeCardRow], name_days: bool = True) -> pd.DataFrame:
    data = [
        {
            "Date": _date_label(r, name_days),
            "Dec Hours": f"{r.decimal_hours:.2f}",
            "hh:mm": r.hhmm,
            "Pay": money(r.pay),
        }
        for r in rows
    ]
    return pd.DataFrame(data, columns=WEEK_COLUMNS)


def time_card_to_dataframe(card: TimeCard) -> pd.DataFrame:
    rows = []
    for week_index, week in enumerate(card.weeks, start=1):
        for r in week:
            rows.append({
                "Week": week_index,
                "Date": r.date.isoformat(),
                "Day": r.day_name,
                "Dec Hours": round(r.decimal_hours, 2),
                "hh:mm": r.hhmm,
                "Pay": round(r.pay, 2),
            })
    return pd.DataFrame(rows, columns=["Week", "Date", "Day", "Dec Hours", "hh:mm", "Pay"])
