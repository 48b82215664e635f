"""Schedule result contract, grouping, views, and reporting."""

from .adapter import ScheduleAdapter, resolve_axis, utilization_percent
from .contract import OrderPlan, SchedulePayload, TaskPlan
from .index import group_by
from .views import (
    CodeName,
    CommitCodes,
    DateRange,
    GanttAxis,
    GanttItem,
    OrderTreeNode,
    ProductNode,
    StationTimelineSummary,
    StatisticSummary,
    TeamWorkloadSummary,
)

__all__ = [
    "ScheduleAdapter",
    "resolve_axis",
    "utilization_percent",
    "SchedulePayload",
    "OrderPlan",
    "TaskPlan",
    "group_by",
    "GanttAxis",
    "GanttItem",
    "OrderTreeNode",
    "ProductNode",
    "StationTimelineSummary",
    "TeamWorkloadSummary",
    "DateRange",
    "StatisticSummary",
    "CodeName",
    "CommitCodes",
]
