from __future__ import annotations

from datetime import date, datetime

import pytest

from conftest import employee_with_days, entry
from domain import TimeEntry, TIME_FORMAT_12H, TIME_FORMAT_24H
from services import (
    build_time_card,
    calculate_daily_hours,
    calculate_overtime,
    decimal_to_hhmm,
    parse_time,
    process_employee_hours,
)

DAY = date(2026, 10, 19)


@pytest.mark.parametrize("value, period, expected", [
    ("9:00", "AM", (9, 0)),
    ("5:30", "PM", (17, 30)),
    ("12:00", "PM", (12, 0)),
    ("12:15", "AM", (0, 15)),
    ("11:59", "PM", (23, 59)),
])
def test_parse_time_12h(value, period, expected):
    assert parse_time(value, period, DAY, TIME_FORMAT_12H) == datetime(2026, 10, 19, *expected)


def test_parse_time_24h_ignores_marker():
    assert parse_time("17:05", "AM", DAY, TIME_FORMAT_24H) == datetime(2026, 10, 19, 17, 5)
    assert parse_time("12:00", "AM", DAY, TIME_FORMAT_24H) == datetime(2026, 10, 19, 12, 0)


def test_parse_time_malformed_raises():
    with pytest.raises(ValueError):
        parse_time("ab:cd", "AM", DAY, TIME_FORMAT_24H)


def test_daily_hours_single_pair():
    hours = calculate_daily_hours([entry("9:00", "5:00")], [], DAY, TIME_FORMAT_12H, 0, False)
    assert hours == pytest.approx(8.0)


def test_daily_hours_sums_split_shift():
    entries = [entry("8:00", "12:00", "AM", "PM"), entry("12:30", "4:45", "PM", "PM")]
    assert calculate_daily_hours(entries, [], DAY, TIME_FORMAT_12H, 0, False) == pytest.approx(8.25)


@pytest.mark.parametrize("start, end", [("17:00", "9:00"), ("9:00", "9:00")])
def test_daily_hours_reversed_or_equal_is_zero(start, end):
    assert calculate_daily_hours([entry(start, end)], [], DAY, TIME_FORMAT_24H, 0, False) == 0


def test_daily_hours_skips_incomplete_entries():
    entries = [TimeEntry(start="9:00"), TimeEntry(end="5:00", end_period="PM"), TimeEntry()]
    assert calculate_daily_hours(entries, [], DAY, TIME_FORMAT_12H, 0, False) == 0


def test_daily_hours_reversed_entry_does_not_reduce_others():
    entries = [entry("9:00", "17:00"), entry("18:00", "17:00")]
    assert calculate_daily_hours(entries, [], DAY, TIME_FORMAT_24H, 0, False) == pytest.approx(8.0)


def test_auto_deduct_break_is_flat_per_day():
    nine_hours = [entry("8:00", "5:00")]
    two_breaks = [entry("10:00", "10:15", "AM", "AM"), entry("12:00", "12:30", "PM", "PM")]
    assert calculate_daily_hours(nine_hours, [], DAY, TIME_FORMAT_12H, 60, True) == pytest.approx(8.0)
    assert calculate_daily_hours(nine_hours, two_breaks, DAY, TIME_FORMAT_12H, 60, True) == pytest.approx(8.0)


def test_break_not_deducted_when_disabled():
    assert calculate_daily_hours([entry("8:00", "5:00")], [], DAY, TIME_FORMAT_12H, 60, False) == pytest.approx(9.0)


def test_break_deduction_clamps_to_zero():
    assert calculate_daily_hours([], [], DAY, TIME_FORMAT_12H, 30, True) == 0
    short = [entry("9:00", "9:20", "AM", "AM")]
    assert calculate_daily_hours(short, [], DAY, TIME_FORMAT_12H, 30, True) == 0


def test_overtime_thresholds():
    assert calculate_overtime(10, 10, 8, 40) == (2, 0)
    assert calculate_overtime(6, 44, 8, 40) == (0, 4)
    assert calculate_overtime(8, 40, 8, 40) == (0, 0)


@pytest.mark.parametrize("hours, expected", [
    (8.5, "8:30"),
    (8.0, "8:00"),
    (0, "0:00"),
    (1.75, "1:45"),
    (40.25, "40:15"),
    (7.999, "8:00"),
    (0.375, "0:23"),  # 22.5 minutes: halves round up
    (1.375, "1:23"),
])
def test_decimal_to_hhmm(hours, expected):
    assert decimal_to_hhmm(hours) == expected


def test_five_eight_hour_days_without_overtime(settings):
    emp = employee_with_days([[entry("9:00", "5:00")] for _ in range(5)])
    (week,) = process_employee_hours(emp, settings)
    assert week.week_regular == pytest.approx(40)
    assert week.week_overtime == 0
    assert week.week_gross == pytest.approx(600.00)
    assert [d.date for d in week.days] == [w.date for w in emp.weeks[0].days]


def test_ten_hour_day_has_two_hours_daily_overtime(ot_settings):
    emp = employee_with_days([[entry("7:00", "5:00")]])
    day = process_employee_hours(emp, ot_settings)[0].days[0]
    assert day.daily_overtime == pytest.approx(2)
    assert day.weekly_overtime == 0
    assert day.regular_hours == pytest.approx(8)
    assert day.total_pay == pytest.approx(8 * 15 + 2 * 15 * 1.5)


def test_weekly_overtime_uses_running_total_and_double_counts(ot_settings):
    days = [[entry("9:00", "5:00")] for _ in range(4)] + [[entry("7:00", "5:00")]]
    week = process_employee_hours(employee_with_days(days), ot_settings)[0]
    last = week.days[-1]
    # 32 regular + 10 today = 42 against 40; today's 2 daily OT hours count again
    assert last.daily_overtime == pytest.approx(2)
    assert last.weekly_overtime == pytest.approx(2)
    assert last.overtime_hours == pytest.approx(4)
    assert week.week_regular == pytest.approx(40)
    assert week.week_overtime == pytest.approx(4)
    assert week.week_gross == pytest.approx(4 * 120 + 8 * 15 + 4 * 15 * 1.5)


def test_overtime_disabled_pays_everything_as_regular(settings):
    emp = employee_with_days([[entry("7:00", "5:00")] for _ in range(5)])
    week = process_employee_hours(emp, settings)[0]
    assert week.week_regular == pytest.approx(50)
    assert week.week_overtime == 0
    assert week.week_gross == pytest.approx(750)


def test_process_is_repeatable(ot_settings):
    emp = employee_with_days([[entry("9:00", "6:15")] for _ in range(5)])
    assert process_employee_hours(emp, ot_settings) == process_employee_hours(emp, ot_settings)


def test_time_card_rows_and_totals(ot_settings):
    emp = employee_with_days([[entry("9:00", "5:30")], [entry("7:00", "5:00")], []])
    card = build_time_card(emp, ot_settings)
    rows = card.weeks[0]
    assert [r.day_name for r in rows] == ["Sunday", "Monday", "Tuesday"]
    assert [r.hhmm for r in rows] == ["8:30", "10:00", "0:00"]
    assert rows[1].decimal_hours == pytest.approx(10)
    assert rows[2].pay == 0
    assert card.overall_decimal_hours == pytest.approx(18.5)
    assert card.overall_hhmm == "18:30"
    assert card.overall_gross_pay == pytest.approx(sum(r.pay for r in rows))
    assert card.employee_name == "Ana"
