"""Intersect planned task spans with a work calendar.

Planned spans routinely run across nights, weekends, and holidays. Subtracting
whole days is not enough near partial-day boundaries, so both helpers here
walk the span one calendar day at a time and intersect it with every shift
window of that day.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import replace
from datetime import datetime, tzinfo
from typing import Protocol, TypeVar

from schedview.calendar.models import WorkCalendar, iter_days
from schedview.core.timestamps import parse_timestamp

__all__ = [
    "SupportsInterval",
    "intersect",
    "iter_worked_windows",
    "actual_worked_minutes",
    "actual_worked_hours",
    "split_into_work_segments",
    "split_all",
]


class SupportsInterval(Protocol):
    """Dataclass-like record carrying an id and a planned ``[start, end)`` span."""

    id: str
    start: datetime | None
    end: datetime | None


ItemT = TypeVar("ItemT", bound=SupportsInterval)


def intersect(
    first: tuple[datetime, datetime],
    second: tuple[datetime, datetime],
) -> tuple[datetime, datetime] | None:
    """Return ``[max(starts), min(ends))`` or ``None`` when it is empty."""
    start = max(first[0], second[0])
    end = min(first[1], second[1])
    if start < end:
        return start, end
    return None


def _normalise_span(
    start: datetime | str | None,
    end: datetime | str | None,
    calendar: WorkCalendar,
) -> tuple[datetime, datetime, tzinfo | None] | None:
    """Naive wall-clock bounds of the span plus the zone they were read in.

    When both bounds are aware they are read on one clock: the calendar's zone
    if it has one, otherwise the zone of ``start``. Any other mix is read bound
    by bound and the zone is ``None``.
    """
    start_ts = parse_timestamp(start)
    end_ts = parse_timestamp(end)
    if start_ts is None or end_ts is None:
        return None
    zone = None
    if start_ts.tzinfo is not None and end_ts.tzinfo is not None:
        zone = calendar.zone or start_ts.tzinfo
        start_ts = start_ts.astimezone(zone).replace(tzinfo=None)
        end_ts = end_ts.astimezone(zone).replace(tzinfo=None)
    else:
        start_ts = calendar.localize(start_ts)
        end_ts = calendar.localize(end_ts)
    if end_ts < start_ts:
        return None
    return start_ts, end_ts, zone


def iter_worked_windows(
    start: datetime | str | None,
    end: datetime | str | None,
    calendar: WorkCalendar | None = None,
) -> Iterator[tuple[datetime, datetime]]:
    """Yield the chronological parts of ``[start, end)`` inside working windows.

    Invalid spans (missing or unparsable bounds, ``end < start``) yield nothing.
    Aware spans yield aware bounds in the zone the span was read in; naive
    spans yield naive wall-clock bounds.
    """
    cal = calendar or WorkCalendar.default()
    span = _normalise_span(start, end, cal)
    if span is None:
        return
    first, last, zone = span
    for day in iter_days(first.date(), last.date()):
        for window in cal.working_windows_for(day):
            overlap = intersect((first, last), window)
            if overlap is None:
                continue
            if zone is None:
                yield overlap
            else:
                yield overlap[0].replace(tzinfo=zone), overlap[1].replace(tzinfo=zone)


def actual_worked_minutes(
    start: datetime | str | None,
    end: datetime | str | None,
    calendar: WorkCalendar | None = None,
) -> float:
    """Minutes of ``[start, end)`` that fall inside the calendar's working windows."""
    total = 0.0
    for window_start, window_end in iter_worked_windows(start, end, calendar):
        total += (window_end - window_start).total_seconds() / 60.0
    return total


def actual_worked_hours(
    start: datetime | str | None,
    end: datetime | str | None,
    calendar: WorkCalendar | None = None,
) -> float:
    return actual_worked_minutes(start, end, calendar) / 60.0


def split_into_work_segments(item: ItemT, calendar: WorkCalendar | None = None) -> list[ItemT]:
    """Split ``item`` into one copy per worked window.

    Segment ids are ``<id>_seg_<n>`` numbered from zero in chronological order.
    Segments are as aware as the item: naive items give naive wall-clock
    bounds, aware items give bounds in the calendar's zone (or the zone of
    ``item.start`` when the calendar has none). When the span never touches
    working time (or is invalid) the original item is returned as the only
    element, so a one-element result does not imply a split happened.
    """
    segments = [
        replace(item, id=f"{item.id}_seg_{index}", start=window_start, end=window_end)
        for index, (window_start, window_end) in enumerate(
            iter_worked_windows(item.start, item.end, calendar)
        )
    ]
    if not segments:
        return [item]
    return segments


def split_all(items: Iterable[ItemT], calendar: WorkCalendar | None = None) -> list[ItemT]:
    """Flat-map :func:`split_into_work_segments` over ``items``."""
    result: list[ItemT] = []
    for item in items:
        result.extend(split_into_work_segments(item, calendar))
    return result
