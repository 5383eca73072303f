# domain.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

TIME_FORMAT_12H = "12"
TIME_FORMAT_24H = "24"


class SettingsStatus(str, Enum):
    SAVED = "saved"
    PENDING = "pending"  # form differs from what the schedules were built with


@dataclass(frozen=True)
class Settings:
    """Time card settings, fixed for one computation pass."""
    time_format: str = TIME_FORMAT_12H
    pay_period_weeks: int = 2
    days_per_week: int = 5
    week_starts_on: int = 0  # Sunday=0 ... Saturday=6
    time_periods_per_day: int = 2
    auto_deduct_breaks: bool = False
    break_minutes: int = 0
    calculate_overtime: bool = False
    daily_overtime_threshold: float = 8.0
    weekly_overtime_threshold: float = 40.0
    overtime_rate: float = 1.5
    pay_rate: float = 15.0
    name_days: bool = True


@dataclass
class TimeEntry:
    """A clock-in / clock-out pair. Empty strings mean not filled yet."""
    start: str = ""
    start_period: str = "AM"
    end: str = ""
    end_period: str = "AM"

    @property
    def is_complete(self) -> bool:
        return bool(self.start) and bool(self.end)


@dataclass
class Day:
    date: date
    entries: list[TimeEntry] = field(default_factory=list)
    breaks: list[TimeEntry] = field(default_factory=list)


@dataclass
class Week:
    days: list[Day] = field(default_factory=list)


@dataclass
class Employee:
    id: str
    name: str
    start_date: date
    weeks: list[Week] = field(default_factory=list)


@dataclass
class DayResult:
    date: date
    worked_hours: float
    regular_hours: float
    daily_overtime: float
    weekly_overtime: float
    total_pay: float

    @property
    def overtime_hours(self) -> float:
        return self.daily_overtime + self.weekly_overtime


@dataclass
class WeekResult:
    days: list[DayResult]
    week_regular: float
    week_overtime: float
    week_gross: float

    @property
    def worked_hours(self) -> float:
        return sum(d.worked_hours for d in self.days)


@dataclass
class TimeCardRow:
    """One exported line: a day of one employee."""
    date: date
    day_name: str
    decimal_hours: float
    hhmm: str
    pay: float


@dataclass
class TimeCard:
    """Export view of an employee's pay period."""
    employee_name: str
    start_date: date
    weeks: list[list[TimeCardRow]]
    overall_decimal_hours: float
    overall_hhmm: str
    overall_gross_pay: float
