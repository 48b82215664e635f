"""Derived view records produced by :class:`schedview.schedule.adapter.ScheduleAdapter`."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from schedview.schedule.contract import TaskPlan

__all__ = [
    "GanttAxis",
    "GanttItem",
    "ProductNode",
    "OrderTreeNode",
    "StationTimelineSummary",
    "TeamWorkloadSummary",
    "DateRange",
    "StatisticSummary",
    "CodeName",
    "CommitCodes",
]


class GanttAxis(str, Enum):
    ORDER = "order"
    TEAM = "team"
    STATION = "station"


@dataclass(slots=True, frozen=True)
class GanttItem:
    """One task reshaped for a Gantt row; ``group`` holds the axis display name."""

    id: str
    name: str
    start: datetime | None
    end: datetime | None
    group: str
    order_code: str
    order_name: str
    task_code: str
    process_code: str
    team_code: str
    team_name: str
    station_code: str
    station_name: str
    product_code: str | None = None
    product_name: str | None = None
    machine_code: str | None = None
    machine_name: str | None = None


@dataclass(slots=True)
class ProductNode:
    """Tasks of one product inside an order."""

    key: str
    product_code: str
    product_name: str
    tasks: list[TaskPlan] = field(default_factory=list)


@dataclass(slots=True)
class OrderTreeNode:
    """Order with its tasks and the products it touches in first-seen order."""

    key: str
    order_code: str
    order_name: str
    plan_start: str | None
    plan_end: str | None
    product_sequence: list[str] = field(default_factory=list)
    tasks: list[TaskPlan] = field(default_factory=list)
    children: list[ProductNode] = field(default_factory=list)


@dataclass(slots=True)
class StationTimelineSummary:
    """Station tasks in start order with worked hours and clamped utilisation (%)."""

    station_code: str
    station_name: str
    tasks: list[TaskPlan]
    worked_hours: float
    utilization: int


@dataclass(slots=True)
class TeamWorkloadSummary:
    """Team tasks in start order with rounded worked hours."""

    team_code: str
    team_name: str
    tasks: list[TaskPlan]
    total_hours: int


@dataclass(slots=True, frozen=True)
class DateRange:
    start: datetime
    end: datetime
    days: int


@dataclass(slots=True, frozen=True)
class StatisticSummary:
    total_orders: int
    total_tasks: int
    total_teams: int
    total_stations: int
    date_range: DateRange


@dataclass(slots=True, frozen=True)
class CodeName:
    code: str
    name: str


@dataclass(slots=True, frozen=True)
class CommitCodes:
    """Deduplicated codes handed to the confirmation collaborator."""

    order_codes: list[str]
    task_codes: list[str]
