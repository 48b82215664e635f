"""Timestamp parsing helpers for wire-format schedule values."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone

__all__ = ["parse_timestamp", "round_half_up", "comparable"]


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning ``None`` when it cannot be read.

    ``datetime`` instances pass through untouched and bare ``date`` values are
    anchored at midnight. Strings accept the forms understood by
    :meth:`datetime.fromisoformat` (``T`` or space separator, optional offset
    or trailing ``Z``).
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def comparable(moment: datetime) -> datetime:
    """Naive key for ordering: aware values become UTC, naive ones stay as written."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)
