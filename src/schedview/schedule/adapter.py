"""Read-only view derivations over one schedule result snapshot."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from schedview.calendar import WorkCalendar, actual_worked_hours, split_all
from schedview.core.errors import NoScheduleDataError, SchedViewValueError
from schedview.core.timestamps import comparable, parse_timestamp, round_half_up
from schedview.schedule.contract import SchedulePayload, TaskPlan
from schedview.schedule.index import by_station, by_team, group_by, start_sort_key
from schedview.schedule.views import (
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

__all__ = ["ScheduleAdapter", "resolve_axis", "utilization_percent"]

StationRef = CodeName | tuple[str, str] | Mapping[str, str]

_AXIS_GROUP: dict[GanttAxis, Callable[[TaskPlan], str]] = {
    GanttAxis.ORDER: lambda task: task.order_name,
    GanttAxis.TEAM: lambda task: task.team_name,
    GanttAxis.STATION: lambda task: task.station_name,
}


def resolve_axis(axis: GanttAxis | str) -> GanttAxis:
    """Coerce ``axis`` into a :class:`GanttAxis` member."""
    if isinstance(axis, GanttAxis):
        return axis
    try:
        return GanttAxis(str(axis).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in GanttAxis)
        raise SchedViewValueError(f"Unknown gantt axis '{axis}'. Allowed: {allowed}.") from exc


def utilization_percent(worked_hours: float, span_days: int, daily_capacity_hours: float) -> int:
    """Worked share of the available hours as an integer percentage in ``[0, 100]``.

    Spans shorter than one whole day are treated as one day of capacity. A
    plain ``worked / (span_days * capacity)`` would divide by zero for such
    spans and report any positive work as 100%; here the hours are measured
    against a single day instead.
    """
    capacity = max(span_days, 1) * daily_capacity_hours
    if capacity <= 0:
        return 0
    percent = 100.0 * worked_hours / capacity
    if percent >= 100:
        return 100
    if percent <= 0:
        return 0
    return round_half_up(percent)


def _whole_days(first: datetime, last: datetime) -> int:
    return int((comparable(last) - comparable(first)) / timedelta(days=1))


def _code_name(ref: StationRef) -> tuple[str, str]:
    if isinstance(ref, CodeName):
        return ref.code, ref.name
    if isinstance(ref, Mapping):
        code = str(ref["code"])
        return code, str(ref.get("name") or code)
    code, name = ref
    return str(code), str(name)


def _gantt_item(task: TaskPlan, group: str) -> GanttItem:
    return GanttItem(
        id=task.task_id,
        name=task.name,
        start=task.start,
        end=task.end,
        group=group,
        order_code=task.order_code,
        order_name=task.order_name,
        task_code=task.task_code,
        process_code=task.process_code,
        team_code=task.team_code,
        team_name=task.team_name,
        station_code=task.station_code,
        station_name=task.station_name,
        product_code=task.product_code,
        product_name=task.product_name,
        machine_code=task.machine_code,
        machine_name=task.machine_name,
    )


@dataclass(frozen=True, slots=True)
class ScheduleAdapter:
    """Stateless view over an immutable :class:`SchedulePayload`.

    Every method recomputes its result from the payload; nothing is cached, so
    calls are idempotent and may run in any order or concurrently.
    """

    payload: SchedulePayload

    @property
    def tasks(self) -> tuple[TaskPlan, ...]:
        return self.payload.task_plan

    def _require_tasks(self) -> tuple[TaskPlan, ...]:
        if not self.tasks:
            raise NoScheduleDataError("Schedule contains no tasks")
        return self.tasks

    def statistics(self) -> StatisticSummary:
        """Distinct order/team/station counts, task count, and global date span.

        Raises
        ------
        NoScheduleDataError
            If the schedule has no tasks or no task carries readable timestamps.
        """
        tasks = self._require_tasks()
        starts = [task.start for task in tasks if task.start is not None]
        ends = [task.end for task in tasks if task.end is not None]
        if not starts or not ends:
            raise NoScheduleDataError("Schedule tasks carry no readable timestamps")
        first = min(starts, key=comparable)
        last = max(ends, key=comparable)
        return StatisticSummary(
            total_orders=len({task.order_code for task in tasks}),
            total_tasks=len(tasks),
            total_teams=len({task.team_code for task in tasks}),
            total_stations=len({task.station_code for task in tasks}),
            date_range=DateRange(start=first, end=last, days=_whole_days(first, last)),
        )

    def to_gantt_items(self, axis: GanttAxis | str) -> list[GanttItem]:
        group_of = _AXIS_GROUP[resolve_axis(axis)]
        return [_gantt_item(task, group_of(task)) for task in self.tasks]

    def split_gantt_items(
        self,
        axis: GanttAxis | str,
        calendar: WorkCalendar | None = None,
    ) -> list[GanttItem]:
        """Gantt items re-expressed as their worked segments."""
        return split_all(self.to_gantt_items(axis), calendar)

    def to_order_tree(self) -> list[OrderTreeNode]:
        """Order nodes with their tasks, honouring ``best_order_sequence`` when present.

        Tasks whose order code has no order plan, and sequence entries without
        an order plan, are left out. :meth:`integrity_warnings` reports both.
        """
        nodes: dict[str, OrderTreeNode] = {}
        for plan in self.payload.product_order_plan:
            if plan.order_code in nodes:
                continue
            nodes[plan.order_code] = OrderTreeNode(
                key=plan.order_code,
                order_code=plan.order_code,
                order_name=plan.order_name,
                plan_start=plan.planstart,
                plan_end=plan.planend,
            )

        for task in self.tasks:
            node = nodes.get(task.order_code)
            if node is not None:
                node.tasks.append(task)

        for node in nodes.values():
            products = group_by(
                (task for task in node.tasks if task.product_code),
                lambda task: str(task.product_code),
            )
            node.product_sequence = list(products)
            node.children = [
                ProductNode(
                    key=f"{node.order_code}/{code}",
                    product_code=code,
                    product_name=members[0].product_name or code,
                    tasks=members,
                )
                for code, members in products.items()
            ]

        sequence = self.payload.best_order_sequence
        if not sequence:
            return list(nodes.values())
        ordered: list[OrderTreeNode] = []
        seen: set[str] = set()
        for code in sequence:
            if code in seen or code not in nodes:
                continue
            seen.add(code)
            ordered.append(nodes[code])
        return ordered

    def station_timeline(
        self,
        calendar: WorkCalendar | None = None,
        all_stations: Iterable[StationRef] | None = None,
    ) -> list[StationTimelineSummary]:
        """Per-station tasks in start order with calendar-aware utilisation.

        ``all_stations`` lists stations to report even when they carry no task;
        those appear with zero hours and zero utilisation. Rows are sorted by
        station code.
        """
        cal = calendar or WorkCalendar.default()
        span_days = self.statistics().date_range.days
        capacity = cal.daily_capacity_hours()

        groups = group_by(self.tasks, by_station, sort_key=start_sort_key)
        names: dict[str, str] = {}
        for ref in all_stations or ():
            code, name = _code_name(ref)
            names[code] = name
            groups.setdefault(code, [])

        summaries: list[StationTimelineSummary] = []
        for code, members in groups.items():
            worked = sum(actual_worked_hours(task.start, task.end, cal) for task in members)
            summaries.append(
                StationTimelineSummary(
                    station_code=code,
                    station_name=members[0].station_name if members else names.get(code, code),
                    tasks=members,
                    worked_hours=worked,
                    utilization=utilization_percent(worked, span_days, capacity),
                )
            )
        return sorted(summaries, key=lambda summary: summary.station_code)

    def team_workload(self, calendar: WorkCalendar | None = None) -> list[TeamWorkloadSummary]:
        """Per-team tasks in start order with rounded worked hours, sorted by team code."""
        tasks = self._require_tasks()
        cal = calendar or WorkCalendar.default()
        summaries = [
            TeamWorkloadSummary(
                team_code=code,
                team_name=members[0].team_name,
                tasks=members,
                total_hours=round_half_up(
                    sum(actual_worked_hours(task.start, task.end, cal) for task in members)
                ),
            )
            for code, members in group_by(tasks, by_team, sort_key=start_sort_key).items()
        ]
        return sorted(summaries, key=lambda summary: summary.team_code)

    def filter_tasks(
        self,
        order_codes: Sequence[str] | None = None,
        station_codes: Sequence[str] | None = None,
        team_codes: Sequence[str] | None = None,
        date_range: tuple[datetime | str, datetime | str] | None = None,
    ) -> list[TaskPlan]:
        """Tasks matching every supplied filter.

        Empty or ``None`` filters do not constrain their axis. A task matches
        the date range when its span overlaps it; tasks without readable
        timestamps never match a date range.
        """
        orders = set(order_codes or ())
        stations = set(station_codes or ())
        teams = set(team_codes or ())
        window = None
        if date_range is not None:
            lower = parse_timestamp(date_range[0])
            upper = parse_timestamp(date_range[1])
            if lower is None or upper is None:
                raise SchedViewValueError(f"Unreadable date range {date_range!r}")
            window = comparable(lower), comparable(upper)

        matches: list[TaskPlan] = []
        for task in self.tasks:
            if orders and task.order_code not in orders:
                continue
            if stations and task.station_code not in stations:
                continue
            if teams and task.team_code not in teams:
                continue
            if window is not None:
                start, end = task.start, task.end
                if start is None or end is None:
                    continue
                if comparable(end) < window[0] or comparable(start) > window[1]:
                    continue
            matches.append(task)
        return matches

    def unique_orders(self) -> list[CodeName]:
        """Distinct orders in first-seen order (the last name seen wins)."""
        names: dict[str, str] = {}
        for task in self.tasks:
            names[task.order_code] = task.order_name
        return [CodeName(code=code, name=name) for code, name in names.items()]

    def unique_stations(self) -> list[CodeName]:
        names: dict[str, str] = {}
        for task in self.tasks:
            names[task.station_code] = task.station_name
        return [CodeName(code=code, name=names[code]) for code in sorted(names)]

    def unique_teams(self) -> list[CodeName]:
        names: dict[str, str] = {}
        for task in self.tasks:
            names[task.team_code] = task.team_name
        return [CodeName(code=code, name=names[code]) for code in sorted(names)]

    def commit_codes(self) -> CommitCodes:
        """Order and task codes present in the task plan, deduplicated in first-seen order."""
        order_codes = dict.fromkeys(task.order_code for task in self.tasks)
        task_codes = dict.fromkeys(task.task_code for task in self.tasks if task.task_code)
        return CommitCodes(order_codes=list(order_codes), task_codes=list(task_codes))

    def integrity_warnings(self) -> list[str]:
        """Describe payload gaps that views silently work around."""
        warnings: list[str] = []
        plan_codes: set[str] = set()
        for plan in self.payload.product_order_plan:
            if plan.order_code in plan_codes:
                warnings.append(f"Order {plan.order_code}: duplicate order plan entry ignored")
            plan_codes.add(plan.order_code)

        orphans: dict[str, int] = {}
        for task in self.tasks:
            if task.order_code not in plan_codes:
                orphans[task.order_code] = orphans.get(task.order_code, 0) + 1
            start, end = task.start, task.end
            if start is None or end is None:
                warnings.append(f"Task {task.task_id}: unreadable planned start/end")
            elif comparable(end) < comparable(start):
                warnings.append(f"Task {task.task_id}: planned end before planned start")
        for code, count in orphans.items():
            warnings.append(f"Order {code}: {count} task(s) without an order plan entry")

        for code in dict.fromkeys(self.payload.best_order_sequence):
            if code not in plan_codes:
                warnings.append(f"Order {code}: listed in best_order_sequence but not planned")
        return warnings
