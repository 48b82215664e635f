"""Loading utilities (schedule result JSON + work calendar YAML)."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter

from schedview.calendar import WorkCalendar
from schedview.core.errors import SchedViewValueError
from schedview.schedule.contract import SchedulePayload, ScheduleResultResponse

__all__ = ["load_schedule", "parse_schedule", "load_calendar", "parse_calendar"]

_ENVELOPE_KEYS = {"status", "data"}


def parse_schedule(data: Mapping[str, Any]) -> SchedulePayload:
    """Validate a decoded schedule result, unwrapping the API envelope if present.

    Parameters
    ----------
    data:
        Either the bare payload (``best_order_sequence``, ``product_order_plan``,
        ``task_plan``) or the ``{"status", "data", "meta"}`` response wrapper.

    Raises
    ------
    SchedViewValueError
        If ``data`` is not a JSON object.
    pydantic.ValidationError
        If required task/order fields are missing or mistyped.
    """
    if not isinstance(data, Mapping):
        raise SchedViewValueError("Schedule result must be a JSON object")
    if _ENVELOPE_KEYS.issubset(data) and isinstance(data.get("data"), Mapping):
        return TypeAdapter(ScheduleResultResponse).validate_python(data).data
    return TypeAdapter(SchedulePayload).validate_python(data)


def load_schedule(path: str | Path) -> SchedulePayload:
    """Read a schedule result JSON file into a :class:`SchedulePayload`."""
    json_path = Path(path)
    if not json_path.exists():
        raise FileNotFoundError(json_path)
    with json_path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    return parse_schedule(data)


def parse_calendar(data: Mapping[str, Any] | None) -> WorkCalendar:
    """Validate a work calendar mapping; ``None`` or empty yields the default calendar.

    The calendar may sit at the top level or under a ``work_calendar`` key.
    """
    if not data:
        return WorkCalendar.default()
    if not isinstance(data, Mapping):
        raise SchedViewValueError("Work calendar configuration must be a mapping")
    section = data.get("work_calendar", data)
    if section is None:
        return WorkCalendar.default()
    return TypeAdapter(WorkCalendar).validate_python(section)


def load_calendar(path: str | Path | None) -> WorkCalendar:
    """Read a work calendar YAML file; ``None`` returns the default calendar."""
    if path is None:
        return WorkCalendar.default()
    yaml_path = Path(path)
    if not yaml_path.exists():
        raise FileNotFoundError(yaml_path)
    with yaml_path.open("r", encoding="utf-8") as handle:
        meta = yaml.safe_load(handle)
    return parse_calendar(meta)
