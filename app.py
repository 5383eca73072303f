# -----------------------------------------------
# ⏱️ Time card calculator (Streamlit)
# -----------------------------------------------
# Requires: streamlit, pandas, reportlab
# Run with: streamlit run app.py

import logging
from dataclasses import replace

import pandas as pd
import streamlit as st

from config import PDF_FILE_NAME, PDF_TITLE, configure_logging, default_settings, today_local
from domain import Day, Employee, Settings, SettingsStatus, TimeEntry, Week, TIME_FORMAT_12H, TIME_FORMAT_24H
from report import time_cards_to_pdf
from services import (
    DAY_NAMES,
    apply_settings,
    build_time_card,
    build_time_cards,
    create_new_employee,
    schedule_changed,
    settings_status,
)
from utils import cell_text, drop_invalid_entries, format_date, money, settings_problems, time_card_to_dataframe, weekday_name

configure_logging()
logger = logging.getLogger(__name__)

APP_TITLE = "Advanced Time Card Calculator"
AMPM = ["AM", "PM"]

st.set_page_config(page_title=APP_TITLE, page_icon="⏱️", layout="wide")
st.title(f"⏱️ {APP_TITLE}")

# =========================
# Session state
# =========================
if "saved_settings" not in st.session_state:
    st.session_state["saved_settings"] = default_settings()
if "employees" not in st.session_state:
    st.session_state["employees"] = [create_new_employee(st.session_state["saved_settings"])]

saved: Settings = st.session_state["saved_settings"]


def _flash_success_if_any():
    msg = st.session_state.pop("_flash_success", None)
    if msg:
        st.success(msg)


_flash_success_if_any()

# =========================
# Settings
# =========================
with st.expander("Settings", expanded=True):
    c1, c2, c3 = st.columns(3)
    time_format = c1.selectbox(
        "Time Format", [TIME_FORMAT_12H, TIME_FORMAT_24H],
        index=[TIME_FORMAT_12H, TIME_FORMAT_24H].index(saved.time_format),
        format_func=lambda v: f"{v}-hour",
    )
    pay_rate = c2.number_input("Hourly Pay", min_value=0.0, step=0.25, value=float(saved.pay_rate))
    pay_period_weeks = c3.number_input("Pay Period Weeks", min_value=1, max_value=4, step=1,
                                       value=int(saved.pay_period_weeks))

    c4, c5, c6 = st.columns(3)
    days_per_week = c4.number_input("Days per Week", min_value=1, max_value=7, step=1,
                                    value=int(saved.days_per_week))
    week_starts_on = c5.selectbox("Week Starts On", list(range(7)), index=saved.week_starts_on,
                                  format_func=lambda i: DAY_NAMES[i])
    time_periods_per_day = c6.number_input("Time Periods per Day", min_value=1, max_value=6, step=1,
                                           value=int(saved.time_periods_per_day))

    c7, c8, c9 = st.columns(3)
    auto_deduct_breaks = c7.toggle("Auto Deduct Breaks", value=saved.auto_deduct_breaks)
    break_minutes = c8.number_input("Break Minutes", min_value=0, step=5, value=int(saved.break_minutes))
    name_days = c9.toggle("Display Actual Weekday Names", value=saved.name_days)

    calc_ot = st.toggle("Calculate Overtime", value=saved.calculate_overtime)
    daily_ot, weekly_ot, ot_rate = saved.daily_overtime_threshold, saved.weekly_overtime_threshold, saved.overtime_rate
    if calc_ot:
        o1, o2, o3 = st.columns(3)
        daily_ot = o1.number_input("Daily OT Threshold (hrs)", min_value=0.0, step=0.5, value=float(daily_ot))
        weekly_ot = o2.number_input("Weekly OT Threshold (hrs)", min_value=0.0, step=0.5, value=float(weekly_ot))
        ot_rate = o3.number_input("Overtime Multiplier", min_value=0.0, step=0.25, value=float(ot_rate))

    current = Settings(
        time_format=time_format,
        pay_period_weeks=int(pay_period_weeks),
        days_per_week=int(days_per_week),
        week_starts_on=int(week_starts_on),
        time_periods_per_day=int(time_periods_per_day),
        auto_deduct_breaks=bool(auto_deduct_breaks),
        break_minutes=int(break_minutes),
        calculate_overtime=bool(calc_ot),
        daily_overtime_threshold=float(daily_ot),
        weekly_overtime_threshold=float(weekly_ot),
        overtime_rate=float(ot_rate),
        pay_rate=float(pay_rate),
        name_days=bool(name_days),
    )

    status = settings_status(saved, current)
    rebuild = schedule_changed(saved, current)
    if status is SettingsStatus.PENDING:
        if rebuild:
            st.info("Schedule settings changed. Saving rebuilds every employee's schedule and clears entered times.", icon="ℹ️")
        else:
            st.info("Settings changed. Saving keeps entered times.", icon="ℹ️")
    if st.button("Save Settings", disabled=status is SettingsStatus.SAVED):
        problems = settings_problems(current)
        if problems:
            for p in problems:
                st.error(p)
        else:
            if rebuild:
                st.session_state["employees"] = apply_settings(st.session_state["employees"], current)
                logger.info("settings saved, %d schedules rebuilt", len(st.session_state["employees"]))
            else:
                logger.info("settings saved, schedules kept")
            st.session_state["saved_settings"] = current
            st.session_state["_flash_success"] = "Settings saved."
            st.rerun()


# =========================
# Time entry grids
# =========================
def _week_frame(week: Week, settings: Settings) -> pd.DataFrame:
    rows = []
    for day in week.days:
        label = f"{weekday_name(day.date)} {format_date(day.date)}" if settings.name_days else format_date(day.date)
        for k, entry in enumerate(day.entries, start=1):
            rows.append({
                "Date": label,
                "#": k,
                "In": entry.start,
                "In AM/PM": entry.start_period,
                "Out": entry.end,
                "Out AM/PM": entry.end_period,
            })
    df = pd.DataFrame(rows)
    if settings.time_format == TIME_FORMAT_24H and not df.empty:
        df = df.drop(columns=["In AM/PM", "Out AM/PM"])
    return df


def _week_from_frame(week: Week, df: pd.DataFrame) -> Week:
    records = df.to_dict("records")
    days, i = [], 0
    for day in week.days:
        entries = []
        for entry in day.entries:
            r = records[i]
            i += 1
            entries.append(TimeEntry(
                start=cell_text(r.get("In")),
                start_period=cell_text(r.get("In AM/PM")) or entry.start_period,
                end=cell_text(r.get("Out")),
                end_period=cell_text(r.get("Out AM/PM")) or entry.end_period,
            ))
        days.append(Day(date=day.date, entries=entries, breaks=list(day.breaks)))
    return Week(days=days)


column_config = {
    "Date": st.column_config.TextColumn(disabled=True),
    "#": st.column_config.NumberColumn(disabled=True, width="small"),
    "In": st.column_config.TextColumn(help="H:MM"),
    "In AM/PM": st.column_config.SelectboxColumn(options=AMPM, required=True),
    "Out": st.column_config.TextColumn(help="H:MM"),
    "Out AM/PM": st.column_config.SelectboxColumn(options=AMPM, required=True),
}

employees: list[Employee] = list(st.session_state["employees"])
valid_employees: list[Employee] = []
to_remove = None

for emp_index, emp in enumerate(employees):
    with st.container(border=True):
        h1, h2, h3 = st.columns([4, 3, 1])
        name = h1.text_input("Employee Name", value=emp.name, key=f"name_{emp.id}")
        start_date = h2.date_input("Start Date", value=emp.start_date, key=f"start_{emp.id}")
        if h3.button("🗑️", key=f"del_{emp.id}", help="Remove employee"):
            to_remove = emp_index

        weeks = []
        for week_index, week in enumerate(emp.weeks):
            st.caption(f"Week {week_index + 1}")
            edited = st.data_editor(
                _week_frame(week, saved),
                column_config=column_config,
                hide_index=True,
                num_rows="fixed",
                use_container_width=True,
                key=f"week_{emp.id}_{week_index}_{hash(saved)}",
            )
            weeks.append(_week_from_frame(week, edited))

        emp = replace(emp, name=name, start_date=start_date, weeks=weeks)
        employees[emp_index] = emp

        checked, dropped = drop_invalid_entries(emp, saved.time_format)
        if dropped:
            fmt = "H:MM (1-12)" if saved.time_format == TIME_FORMAT_12H else "H:MM (0-23)"
            st.warning(f"{dropped} time entr{'y' if dropped == 1 else 'ies'} ignored: use {fmt}.")
        valid_employees.append(checked)

        card = build_time_card(checked, saved)
        st.dataframe(time_card_to_dataframe(card), hide_index=True, use_container_width=True)
        m1, m2, m3 = st.columns(3)
        m1.metric("Total (decimal)", f"{card.overall_decimal_hours:.2f} hrs")
        m2.metric("Total (hh:mm)", card.overall_hhmm)
        m3.metric("Gross Pay", money(card.overall_gross_pay))

st.session_state["employees"] = employees

if to_remove is not None:
    st.session_state["employees"] = [e for i, e in enumerate(employees) if i != to_remove]
    st.rerun()

# =========================
# Actions
# =========================
a1, a2 = st.columns(2)
if a1.button("Add Employee", use_container_width=True):
    st.session_state["employees"] = employees + [create_new_employee(saved, today=today_local())]
    st.rerun()

pdf_bytes = time_cards_to_pdf(build_time_cards(valid_employees, saved), title=PDF_TITLE, name_days=saved.name_days)
a2.download_button(
    "Generate PDF",
    data=pdf_bytes,
    file_name=PDF_FILE_NAME,
    mime="application/pdf",
    use_container_width=True,
)
