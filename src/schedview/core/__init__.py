"""Core utilities shared across schedview modules."""

from .errors import NoScheduleDataError, SchedViewValueError
from .timestamps import comparable, parse_timestamp, round_half_up

__all__ = [
    "SchedViewValueError",
    "NoScheduleDataError",
    "parse_timestamp",
    "round_half_up",
    "comparable",
]
