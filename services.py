# services.py
from __future__ import annotations

import logging
import math
import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from config import today_local
from domain import (
    Day,
    DayResult,
    Employee,
    Settings,
    SettingsStatus,
    TIME_FORMAT_12H,
    TimeCard,
    TimeCardRow,
    TimeEntry,
    Week,
    WeekResult,
)

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


# =========================
# Dates
# =========================
def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def sunday_based_weekday(d: date) -> int:
    """Weekday with Sunday=0 (Python's date.weekday() has Monday=0)."""
    return (d.weekday() + 1) % 7


def start_of_week(d: date, week_starts_on: int) -> date:
    """Most recent `week_starts_on` weekday at or before `d`."""
    diff = (sunday_based_weekday(d) - week_starts_on + 7) % 7
    return add_days(d, -diff)


# =========================
# Hours
# =========================
def parse_time(time_str: str, period: str, ref_date: date, time_format: str) -> datetime:
    """Resolve "H:MM" (plus AM/PM under 12-hour notation) to a datetime on ref_date."""
    hours, minutes = (int(part) for part in time_str.split(":"))
    if time_format == TIME_FORMAT_12H:
        if period == "PM" and hours < 12:
            hours += 12
        if period == "AM" and hours == 12:
            hours = 0
    return datetime(ref_date.year, ref_date.month, ref_date.day, hours, minutes, 0, 0)


def calculate_daily_hours(
    entries: Iterable[TimeEntry],
    breaks: Iterable[TimeEntry],
    day_date: date,
    time_format: str,
    break_minutes: int,
    auto_deduct_breaks: bool,
) -> float:
    """Hours worked on one day. No overnight shifts: end <= start counts as 0.

    The break deduction is a flat `break_minutes` once per day; the recorded
    break intervals do not change the amount.
    """
    total = 0.0
    for entry in entries:
        if not entry.is_complete:
            continue
        t0 = parse_time(entry.start, entry.start_period, day_date, time_format)
        t1 = parse_time(entry.end, entry.end_period, day_date, time_format)
        diff = (t1 - t0).total_seconds() / 3600.0
        if diff > 0:
            total += diff
    if auto_deduct_breaks:
        total -= break_minutes / 60.0
    return total if total > 0 else 0.0


def calculate_overtime(
    daily_hours: float, week_total: float, daily_threshold: float, weekly_threshold: float
) -> Tuple[float, float]:
    """Returns (daily_ot, weekly_ot).

    `week_total` is the running total through the current day, so hours
    already counted as daily overtime may also count as weekly overtime.
    """
    daily_ot = max(0.0, daily_hours - daily_threshold)
    weekly_ot = max(0.0, week_total - weekly_threshold)
    return daily_ot, weekly_ot


def decimal_to_hhmm(decimal_hours: float) -> str:
    """8.5 -> "8:30". Half minutes round up; 60 minutes roll into the hour."""
    minutes = int(math.floor(float(decimal_hours) * 60 + 0.5))
    h, m = divmod(minutes, 60)
    return f"{h}:{m:02d}"


class TimeCardCalculator:
    """Business rules for worked hours, overtime and gross pay."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def daily_hours(self, day: Day) -> float:
        s = self.settings
        return calculate_daily_hours(
            day.entries, day.breaks, day.date, s.time_format, s.break_minutes, s.auto_deduct_breaks
        )

    def overtime(self, daily_hours: float, week_total: float) -> Tuple[float, float]:
        s = self.settings
        if not s.calculate_overtime:
            return 0.0, 0.0
        return calculate_overtime(
            daily_hours, week_total, s.daily_overtime_threshold, s.weekly_overtime_threshold
        )

    def process_week(self, week: Week) -> WeekResult:
        s = self.settings
        week_regular = week_overtime = week_gross = 0.0
        days: List[DayResult] = []
        for day in week.days:
            hours = self.daily_hours(day)
            daily_ot, weekly_ot = self.overtime(hours, week_regular + hours)
            regular = hours - daily_ot
            week_regular += regular
            week_overtime += daily_ot + weekly_ot
            pay = regular * s.pay_rate + (daily_ot + weekly_ot) * s.pay_rate * s.overtime_rate
            week_gross += pay
            days.append(DayResult(
                date=day.date,
                worked_hours=hours,
                regular_hours=regular,
                daily_overtime=daily_ot,
                weekly_overtime=weekly_ot,
                total_pay=pay,
            ))
        return WeekResult(days=days, week_regular=week_regular,
                          week_overtime=week_overtime, week_gross=week_gross)

    def process_employee_hours(self, employee: Employee) -> List[WeekResult]:
        weeks = [self.process_week(w) for w in employee.weeks]
        logger.debug(
            "employee %s: %d weeks, gross %.2f",
            employee.id, len(weeks), sum(w.week_gross for w in weeks),
        )
        return weeks

    def time_card(self, employee: Employee) -> TimeCard:
        weeks = self.process_employee_hours(employee)
        rows = [
            [
                TimeCardRow(
                    date=d.date,
                    day_name=DAY_NAMES[sunday_based_weekday(d.date)],
                    decimal_hours=d.worked_hours,
                    hhmm=decimal_to_hhmm(d.worked_hours),
                    pay=d.total_pay,
                )
                for d in w.days
            ]
            for w in weeks
        ]
        overall_hours = sum(w.worked_hours for w in weeks)
        return TimeCard(
            employee_name=employee.name,
            start_date=employee.start_date,
            weeks=rows,
            overall_decimal_hours=overall_hours,
            overall_hhmm=decimal_to_hhmm(overall_hours),
            overall_gross_pay=sum(w.week_gross for w in weeks),
        )


def process_employee_hours(employee: Employee, settings: Settings) -> List[WeekResult]:
    return TimeCardCalculator(settings).process_employee_hours(employee)


def build_time_card(employee: Employee, settings: Settings) -> TimeCard:
    return TimeCardCalculator(settings).time_card(employee)


def build_time_cards(employees: Iterable[Employee], settings: Settings) -> List[TimeCard]:
    calc = TimeCardCalculator(settings)
    return [calc.time_card(e) for e in employees]


# =========================
# Schedules
# =========================
def _empty_day(d: date, settings: Settings) -> Day:
    return Day(
        date=d,
        entries=[TimeEntry() for _ in range(settings.time_periods_per_day)],
        breaks=[TimeEntry()] if settings.auto_deduct_breaks else [],
    )


def build_weeks(settings: Settings, today: date) -> List[Week]:
    """Empty pay period starting on the week that contains `today`."""
    week_start = start_of_week(today, settings.week_starts_on)
    return [
        Week(days=[
            _empty_day(add_days(week_start, week_index * 7 + day_index), settings)
            for day_index in range(settings.days_per_week)
        ])
        for week_index in range(settings.pay_period_weeks)
    ]


def create_new_employee(settings: Settings, name: str = "", today: Optional[date] = None) -> Employee:
    if today is None:
        today = today_local()
    employee = Employee(
        id=uuid.uuid4().hex,
        name=name,
        start_date=today,
        weeks=build_weeks(settings, today),
    )
    logger.debug("new employee %s: %d weeks x %d days",
                 employee.id, settings.pay_period_weeks, settings.days_per_week)
    return employee


def regenerate_schedule(employee: Employee, settings: Settings, today: Optional[date] = None) -> Employee:
    """Copy of `employee` with a fresh schedule; id, name and start date are kept."""
    if today is None:
        today = today_local()
    return replace(employee, weeks=build_weeks(settings, today))


def apply_settings(employees: Iterable[Employee], settings: Settings, today: Optional[date] = None) -> List[Employee]:
    return [regenerate_schedule(e, settings, today=today) for e in employees]


def settings_status(saved: Settings, current: Settings) -> SettingsStatus:
    return SettingsStatus.SAVED if saved == current else SettingsStatus.PENDING


SCHEDULE_FIELDS = (
    "pay_period_weeks",
    "days_per_week",
    "week_starts_on",
    "time_periods_per_day",
    "auto_deduct_breaks",
)


def schedule_changed(saved: Settings, current: Settings) -> bool:
    """True when `current` needs different weeks, days or entry slots than `saved`."""
    return any(getattr(saved, f) != getattr(current, f) for f in SCHEDULE_FIELDS)
