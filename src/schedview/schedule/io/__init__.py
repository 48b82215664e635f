"""Schedule and calendar loaders."""

from .loaders import load_calendar, load_schedule, parse_calendar, parse_schedule

__all__ = ["load_schedule", "parse_schedule", "load_calendar", "parse_calendar"]
