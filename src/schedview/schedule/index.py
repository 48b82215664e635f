"""Generic grouping of schedule tasks by an arbitrary key."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from datetime import datetime
from typing import Any, TypeVar

from schedview.core.timestamps import comparable
from schedview.schedule.contract import TaskPlan

__all__ = ["group_by", "start_sort_key", "by_order", "by_team", "by_station"]

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def group_by(
    items: Iterable[T],
    key_of: Callable[[T], K],
    *,
    sort_key: Callable[[T], Any] | None = None,
) -> dict[K, list[T]]:
    """Group ``items`` by ``key_of``; keys keep first-occurrence order.

    When ``sort_key`` is given every group is sorted by it. ``sorted`` is
    stable, so ties keep their original relative order.
    """
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key_of(item), []).append(item)
    if sort_key is not None:
        for key, members in groups.items():
            groups[key] = sorted(members, key=sort_key)
    return groups


def start_sort_key(task: TaskPlan) -> tuple[int, datetime]:
    """Sort key on planned start; tasks without a readable start go last."""
    start = task.start
    if start is None:
        return (1, datetime.min)
    return (0, comparable(start))


def by_order(task: TaskPlan) -> str:
    return task.order_code


def by_team(task: TaskPlan) -> str:
    return task.team_code


def by_station(task: TaskPlan) -> str:
    return task.station_code
