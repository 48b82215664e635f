"""Work calendar model and interval splitting."""

from .models import DEFAULT_SHIFTS, WEEKEND_DAYS, WorkCalendar, WorkShift, iter_days
from .splitting import (
    actual_worked_hours,
    actual_worked_minutes,
    intersect,
    iter_worked_windows,
    split_all,
    split_into_work_segments,
)

__all__ = [
    "WorkShift",
    "WorkCalendar",
    "DEFAULT_SHIFTS",
    "WEEKEND_DAYS",
    "iter_days",
    "intersect",
    "iter_worked_windows",
    "actual_worked_minutes",
    "actual_worked_hours",
    "split_into_work_segments",
    "split_all",
]
