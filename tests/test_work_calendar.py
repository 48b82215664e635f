from __future__ import annotations

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from schedview.calendar import DEFAULT_SHIFTS, WorkCalendar, WorkShift, iter_days


def test_default_calendar_has_two_shifts_and_eight_hours():
    calendar = WorkCalendar.default()
    assert calendar.shifts == DEFAULT_SHIFTS
    assert calendar.holidays == frozenset()
    assert calendar.daily_capacity_hours() == pytest.approx(8.0)


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2024, 1, 5), True),  # Friday
        (date(2024, 1, 6), False),  # Saturday
        (date(2024, 1, 7), False),  # Sunday
        (date(2024, 1, 8), True),  # Monday
    ],
)
def test_weekends_are_never_working(day, expected):
    assert WorkCalendar.default().is_working_day(day) is expected


def test_holidays_are_not_working():
    calendar = WorkCalendar(holidays=["2024-01-01"])
    assert not calendar.is_working_day(date(2024, 1, 1))
    assert calendar.is_working_day(date(2024, 1, 2))
    assert calendar.working_windows_for(date(2024, 1, 1)) == []


def test_working_day_accepts_datetime():
    calendar = WorkCalendar.default()
    assert calendar.is_working_day(datetime(2024, 1, 5, 23, 59))
    assert not calendar.is_working_day(datetime(2024, 1, 6, 0, 0))


def test_working_windows_anchor_shifts_to_the_day():
    windows = WorkCalendar.default().working_windows_for(date(2024, 1, 5))
    assert windows == [
        (datetime(2024, 1, 5, 8), datetime(2024, 1, 5, 12)),
        (datetime(2024, 1, 5, 14), datetime(2024, 1, 5, 18)),
    ]


def test_working_windows_empty_on_weekend():
    assert WorkCalendar.default().working_windows_for(date(2024, 1, 6)) == []


def test_shifts_sorted_by_start():
    calendar = WorkCalendar(
        shifts=[
            WorkShift(start_hour=14, end_hour=18),
            WorkShift(start_hour=8, start_minute=30, end_hour=12),
        ]
    )
    assert [shift.start_hour for shift in calendar.shifts] == [8, 14]
    assert calendar.daily_capacity_hours() == pytest.approx(7.5)


def test_shift_ending_at_midnight():
    shift = WorkShift(start_hour=20, end_hour=24)
    start, end = shift.window_on(date(2024, 1, 5))
    assert start == datetime(2024, 1, 5, 20)
    assert end == datetime(2024, 1, 6, 0)
    assert shift.hours() == pytest.approx(4.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"start_hour": 12, "end_hour": 8},
        {"start_hour": 8, "end_hour": 8},
        {"start_hour": 25, "end_hour": 26},
        {"start_hour": 8, "start_minute": 60, "end_hour": 9},
        {"start_hour": 22, "end_hour": 24, "end_minute": 30},
    ],
)
def test_invalid_shift_rejected(kwargs):
    with pytest.raises(ValidationError):
        WorkShift(**kwargs)


def test_unknown_timezone_rejected():
    with pytest.raises(ValidationError):
        WorkCalendar(timezone="Mars/Olympus_Mons")


def test_shift_label():
    assert WorkShift(start_hour=8, end_hour=12, name="AM").label() == "AM 08:00-12:00"
    assert WorkShift(start_hour=14, start_minute=30, end_hour=18).label() == "14:30-18:00"


def test_iter_days_inclusive():
    days = list(iter_days(date(2024, 1, 30), date(2024, 2, 2)))
    assert days == [date(2024, 1, 30), date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2)]
    assert list(iter_days(date(2024, 1, 2), date(2024, 1, 1))) == []
