"""CLI helper utilities for schedview."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import typer

from schedview.core.timestamps import parse_timestamp


def parse_code_list(values: Sequence[str] | None) -> list[str]:
    """Flatten repeatable, comma-separated code options into a deduplicated list."""
    codes: dict[str, None] = {}
    if not values:
        return []
    for value in values:
        for part in value.split(","):
            code = part.strip()
            if code:
                codes[code] = None
    return list(codes)


def parse_code_name_pairs(values: Sequence[str] | None) -> list[tuple[str, str]]:
    """Parse ``CODE=NAME`` (or bare ``CODE``) entries."""
    pairs: list[tuple[str, str]] = []
    if not values:
        return pairs
    for entry in values:
        code, _, name = entry.partition("=")
        code = code.strip()
        if not code:
            raise ValueError(f"Station entry missing code in '{entry}'")
        pairs.append((code, name.strip() or code))
    return pairs


def parse_date_range(
    start: str | None,
    end: str | None,
) -> tuple[datetime, datetime] | None:
    """Build a ``(start, end)`` filter window from optional CLI bounds.

    A missing bound leaves that side open (``datetime.min`` / ``datetime.max``).
    """
    if start is None and end is None:
        return None
    lower = datetime.min if start is None else parse_timestamp(start)
    upper = datetime.max if end is None else parse_timestamp(end)
    if lower is None:
        raise ValueError(f"Unreadable start bound '{start}'")
    if upper is None:
        raise ValueError(f"Unreadable end bound '{end}'")
    return lower, upper


def require_timestamp(value: str, label: str) -> datetime:
    moment = parse_timestamp(value)
    if moment is None:
        raise typer.BadParameter(f"{label} must be an ISO-8601 timestamp (got '{value}')")
    return moment


def format_hours(hours: float) -> str:
    return f"{hours:.2f}"


def format_moment(moment: datetime | None) -> str:
    if moment is None:
        return "-"
    return moment.strftime("%Y-%m-%d %H:%M")


__all__ = [
    "parse_code_list",
    "parse_code_name_pairs",
    "parse_date_range",
    "require_timestamp",
    "format_hours",
    "format_moment",
]
