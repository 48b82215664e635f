"""Tabular and JSON-ready exports of schedule views."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict
from typing import Any

import pandas as pd

from schedview.core.timestamps import comparable
from schedview.schedule.contract import TaskPlan
from schedview.schedule.views import (
    CommitCodes,
    GanttItem,
    OrderTreeNode,
    StationTimelineSummary,
    StatisticSummary,
    TeamWorkloadSummary,
)

__all__ = [
    "GANTT_COLUMNS",
    "TASK_COLUMNS",
    "STATION_TIMELINE_COLUMNS",
    "TEAM_WORKLOAD_COLUMNS",
    "gantt_dataframe",
    "task_dataframe",
    "station_timeline_dataframe",
    "team_workload_dataframe",
    "statistics_record",
    "order_tree_records",
    "commit_codes_record",
]

GANTT_COLUMNS = [
    "id",
    "name",
    "start",
    "end",
    "group",
    "order_code",
    "order_name",
    "task_code",
    "process_code",
    "team_code",
    "team_name",
    "station_code",
    "station_name",
    "product_code",
    "product_name",
    "machine_code",
    "machine_name",
]

TASK_COLUMNS = [
    "task_id",
    "task_code",
    "process_code",
    "name",
    "order_code",
    "order_name",
    "product_code",
    "product_name",
    "planstart",
    "planend",
    "team_code",
    "team_name",
    "station_code",
    "station_name",
    "machine_code",
    "machine_name",
]

STATION_TIMELINE_COLUMNS = [
    "station_code",
    "station_name",
    "task_count",
    "worked_hours",
    "utilization",
    "first_start",
    "last_end",
]

TEAM_WORKLOAD_COLUMNS = [
    "team_code",
    "team_name",
    "task_count",
    "total_hours",
    "first_start",
    "last_end",
]


def _frame(rows: list[dict[str, Any]], columns: Sequence[str]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=list(columns))
    return pd.DataFrame(rows).reindex(columns=list(columns))


def _task_bounds(tasks: Sequence[TaskPlan]) -> tuple[str | None, str | None]:
    """First planned start and last planned end of tasks already sorted by start."""
    if not tasks:
        return None, None
    readable = [task for task in tasks if task.end is not None]
    if not readable:
        return tasks[0].planstart, None
    last = max(readable, key=lambda task: comparable(task.end))
    return tasks[0].planstart, last.planend


def gantt_dataframe(items: Sequence[GanttItem]) -> pd.DataFrame:
    """One row per Gantt item (or worked segment) in :data:`GANTT_COLUMNS` order."""
    return _frame([asdict(item) for item in items], GANTT_COLUMNS)


def task_dataframe(tasks: Sequence[TaskPlan]) -> pd.DataFrame:
    """Flatten wire-format tasks into snake_case columns."""
    return _frame([task.model_dump() for task in tasks], TASK_COLUMNS)


def station_timeline_dataframe(summaries: Sequence[StationTimelineSummary]) -> pd.DataFrame:
    rows = []
    for summary in summaries:
        first_start, last_end = _task_bounds(summary.tasks)
        rows.append(
            {
                "station_code": summary.station_code,
                "station_name": summary.station_name,
                "task_count": len(summary.tasks),
                "worked_hours": round(summary.worked_hours, 2),
                "utilization": summary.utilization,
                "first_start": first_start,
                "last_end": last_end,
            }
        )
    return _frame(rows, STATION_TIMELINE_COLUMNS)


def team_workload_dataframe(summaries: Sequence[TeamWorkloadSummary]) -> pd.DataFrame:
    rows = []
    for summary in summaries:
        first_start, last_end = _task_bounds(summary.tasks)
        rows.append(
            {
                "team_code": summary.team_code,
                "team_name": summary.team_name,
                "task_count": len(summary.tasks),
                "total_hours": summary.total_hours,
                "first_start": first_start,
                "last_end": last_end,
            }
        )
    return _frame(rows, TEAM_WORKLOAD_COLUMNS)


def statistics_record(summary: StatisticSummary) -> dict[str, object]:
    """Statistic summary with ``YYYY-MM-DD`` date bounds."""
    return {
        "total_orders": summary.total_orders,
        "total_tasks": summary.total_tasks,
        "total_teams": summary.total_teams,
        "total_stations": summary.total_stations,
        "date_range": {
            "start": summary.date_range.start.strftime("%Y-%m-%d"),
            "end": summary.date_range.end.strftime("%Y-%m-%d"),
            "days": summary.date_range.days,
        },
    }


def order_tree_records(nodes: Sequence[OrderTreeNode]) -> list[dict[str, object]]:
    """JSON-ready order tree; tasks are dumped with their wire-format keys."""
    return [
        {
            "key": node.key,
            "order_code": node.order_code,
            "order_name": node.order_name,
            "plan_start": node.plan_start,
            "plan_end": node.plan_end,
            "product_sequence": list(node.product_sequence),
            "tasks": [task.model_dump(by_alias=True) for task in node.tasks],
            "children": [
                {
                    "key": child.key,
                    "product_code": child.product_code,
                    "product_name": child.product_name,
                    "task_ids": [task.task_id for task in child.tasks],
                }
                for child in node.children
            ],
        }
        for node in nodes
    ]


def commit_codes_record(codes: CommitCodes) -> dict[str, list[str]]:
    return {"order_codes": list(codes.order_codes), "task_codes": list(codes.task_codes)}
