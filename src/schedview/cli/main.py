from __future__ import annotations

import json
from contextlib import nullcontext
from pathlib import Path
from typing import Annotated, Any

import click
import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from schedview.calendar import (
    WorkCalendar,
    actual_worked_hours,
    iter_days,
    split_into_work_segments,
)
from schedview.cli._utils import (
    format_hours,
    format_moment,
    parse_code_list,
    parse_code_name_pairs,
    parse_date_range,
    require_timestamp,
)
from schedview.core.errors import NoScheduleDataError, SchedViewValueError
from schedview.schedule import GanttItem, ScheduleAdapter
from schedview.schedule.io import load_calendar, load_schedule
from schedview.schedule.reporting import (
    commit_codes_record,
    gantt_dataframe,
    order_tree_records,
    station_timeline_dataframe,
    statistics_record,
    task_dataframe,
    team_workload_dataframe,
)
from schedview.telemetry import AnalysisTelemetryLogger

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()
AXIS_CHOICE = click.Choice(["order", "team", "station"], case_sensitive=False)

ScheduleArg = Annotated[
    Path, typer.Argument(help="Schedule result JSON (bare payload or API envelope).")
]
CalendarOpt = Annotated[
    Path | None,
    typer.Option(
        "--calendar",
        "-c",
        help="Work calendar YAML (shifts, holidays). Defaults to 08-12/14-18, no holidays.",
        dir_okay=False,
    ),
]
TelemetryOpt = Annotated[
    Path | None,
    typer.Option(
        "--telemetry-log",
        help="Append run telemetry to a JSONL file (e.g. telemetry/runs.jsonl).",
        writable=True,
        dir_okay=False,
    ),
]


def _load_adapter(schedule: Path) -> ScheduleAdapter:
    try:
        payload = load_schedule(schedule)
    except (FileNotFoundError, json.JSONDecodeError, ValidationError, SchedViewValueError) as exc:
        raise typer.BadParameter(f"Cannot load schedule {schedule}: {exc}") from exc
    return ScheduleAdapter(payload)


def _load_calendar(calendar: Path | None) -> WorkCalendar:
    try:
        return load_calendar(calendar)
    except (FileNotFoundError, yaml.YAMLError, ValidationError, SchedViewValueError) as exc:
        raise typer.BadParameter(f"Cannot load work calendar {calendar}: {exc}") from exc


def _telemetry(
    log_path: Path | None,
    command: str,
    schedule: Path | None,
    calendar: Path | None = None,
    **context: Any,
):
    if log_path is None:
        return nullcontext(None)
    return AnalysisTelemetryLogger(
        log_path=log_path,
        command=command,
        schedule_path=str(schedule) if schedule else None,
        calendar_path=str(calendar) if calendar else None,
        context=context,
    )


def _print_integrity_warnings(adapter: ScheduleAdapter) -> None:
    warnings = adapter.integrity_warnings()
    if warnings:
        console.print("[yellow]Warnings:[/]\n- " + "\n- ".join(warnings))


def _write_csv(frame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False)
    console.print(f"Wrote {len(frame)} rows to {path}")


def _write_json(data: Any, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    console.print(f"Wrote {path}")


@app.command()
def stats(
    schedule: ScheduleArg,
    out_json: Annotated[
        Path | None, typer.Option("--out-json", help="Optional path to write statistics JSON.")
    ] = None,
    telemetry_log: TelemetryOpt = None,
) -> None:
    """Print distinct order/team/station counts and the schedule date span."""
    adapter = _load_adapter(schedule)
    _print_integrity_warnings(adapter)
    with _telemetry(telemetry_log, "stats", schedule) as telemetry:
        try:
            summary = adapter.statistics()
        except NoScheduleDataError as exc:
            console.print(f"[yellow]No data:[/] {exc}")
            if telemetry:
                telemetry.finalize(status="empty")
            return
        record = statistics_record(summary)
        table = Table(title=f"Schedule: {schedule.name}")
        table.add_column("Metric")
        table.add_column("Value", justify="right")
        table.add_row("Orders", str(summary.total_orders))
        table.add_row("Tasks", str(summary.total_tasks))
        table.add_row("Teams", str(summary.total_teams))
        table.add_row("Stations", str(summary.total_stations))
        table.add_row("Start", record["date_range"]["start"])
        table.add_row("End", record["date_range"]["end"])
        table.add_row("Days", str(summary.date_range.days))
        console.print(table)
        if out_json:
            _write_json(record, out_json)
        if telemetry:
            telemetry.finalize(metrics=record)


@app.command()
def gantt(
    schedule: ScheduleArg,
    axis: Annotated[
        str,
        typer.Option(
            "--axis",
            "-a",
            help="Grouping axis for the Gantt rows.",
            show_choices=True,
            click_type=AXIS_CHOICE,
        ),
    ] = "station",
    split: Annotated[
        bool,
        typer.Option("--split/--no-split", help="Break tasks into worked segments."),
    ] = False,
    calendar: CalendarOpt = None,
    out_csv: Annotated[
        Path | None, typer.Option("--out-csv", help="Optional path to write Gantt rows as CSV.")
    ] = None,
    limit: Annotated[int, typer.Option("--limit", min=0, help="Rows to print (0 = all).")] = 20,
    telemetry_log: TelemetryOpt = None,
) -> None:
    """Reshape tasks into Gantt rows grouped by order, team, or station."""
    adapter = _load_adapter(schedule)
    work_calendar = _load_calendar(calendar) if split else None
    with _telemetry(
        telemetry_log, "gantt", schedule, calendar, axis=axis, split=split
    ) as telemetry:
        if split:
            items = adapter.split_gantt_items(axis, work_calendar)
        else:
            items = adapter.to_gantt_items(axis)
        if telemetry:
            telemetry.log_view(view="gantt", rows=len(items), axis=axis, split=split)
        if not items:
            console.print("[yellow]No data:[/] schedule contains no tasks")
            return
        _print_gantt(items, axis, limit)
        if out_csv:
            _write_csv(gantt_dataframe(items), out_csv)


def _print_gantt(items: list[GanttItem], axis: str, limit: int) -> None:
    table = Table(title=f"Gantt rows by {axis}")
    table.add_column("Group")
    table.add_column("Id")
    table.add_column("Task")
    table.add_column("Start")
    table.add_column("End")
    shown = items if limit == 0 else items[:limit]
    for item in shown:
        table.add_row(
            item.group, item.id, item.name, format_moment(item.start), format_moment(item.end)
        )
    console.print(table)
    if len(shown) < len(items):
        console.print(f"[dim]{len(items) - len(shown)} more rows not shown[/]")


@app.command()
def orders(
    schedule: ScheduleArg,
    out_json: Annotated[
        Path | None, typer.Option("--out-json", help="Optional path to write the order tree JSON.")
    ] = None,
    telemetry_log: TelemetryOpt = None,
) -> None:
    """Show the order tree in best-sequence order."""
    adapter = _load_adapter(schedule)
    _print_integrity_warnings(adapter)
    with _telemetry(telemetry_log, "orders", schedule) as telemetry:
        nodes = adapter.to_order_tree()
        if telemetry:
            telemetry.log_view(view="order_tree", rows=len(nodes))
        if not nodes:
            console.print("[yellow]No data:[/] no planned orders")
            return
        table = Table(title="Order tree")
        table.add_column("#", justify="right")
        table.add_column("Order")
        table.add_column("Name")
        table.add_column("Tasks", justify="right")
        table.add_column("Products")
        table.add_column("Plan start")
        table.add_column("Plan end")
        for position, node in enumerate(nodes, start=1):
            table.add_row(
                str(position),
                node.order_code,
                node.order_name,
                str(len(node.tasks)),
                ", ".join(node.product_sequence) or "-",
                node.plan_start or "-",
                node.plan_end or "-",
            )
        console.print(table)
        if out_json:
            _write_json(order_tree_records(nodes), out_json)


@app.command()
def stations(
    schedule: ScheduleArg,
    calendar: CalendarOpt = None,
    include_station: Annotated[
        list[str] | None,
        typer.Option(
            "--include-station",
            help="Repeatable CODE=NAME entries reported even when the station has no task.",
        ),
    ] = None,
    out_csv: Annotated[
        Path | None, typer.Option("--out-csv", help="Optional path to write the station summary.")
    ] = None,
    telemetry_log: TelemetryOpt = None,
) -> None:
    """Station timelines with calendar-aware utilisation."""
    adapter = _load_adapter(schedule)
    work_calendar = _load_calendar(calendar)
    try:
        extra_stations = parse_code_name_pairs(include_station)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    with _telemetry(telemetry_log, "stations", schedule, calendar) as telemetry:
        try:
            summaries = adapter.station_timeline(work_calendar, all_stations=extra_stations)
        except NoScheduleDataError as exc:
            console.print(f"[yellow]No data:[/] {exc}")
            if telemetry:
                telemetry.finalize(status="empty")
            return
        if telemetry:
            telemetry.log_view(view="station_timeline", rows=len(summaries))
        table = Table(title="Station utilisation")
        table.add_column("Station")
        table.add_column("Name")
        table.add_column("Tasks", justify="right")
        table.add_column("Worked h", justify="right")
        table.add_column("Utilisation", justify="right")
        for summary in summaries:
            table.add_row(
                summary.station_code,
                summary.station_name,
                str(len(summary.tasks)),
                format_hours(summary.worked_hours),
                f"{summary.utilization}%",
            )
        console.print(table)
        if out_csv:
            _write_csv(station_timeline_dataframe(summaries), out_csv)


@app.command()
def teams(
    schedule: ScheduleArg,
    calendar: CalendarOpt = None,
    out_csv: Annotated[
        Path | None, typer.Option("--out-csv", help="Optional path to write the team summary.")
    ] = None,
    telemetry_log: TelemetryOpt = None,
) -> None:
    """Team workloads in worked hours."""
    adapter = _load_adapter(schedule)
    work_calendar = _load_calendar(calendar)
    with _telemetry(telemetry_log, "teams", schedule, calendar) as telemetry:
        try:
            summaries = adapter.team_workload(work_calendar)
        except NoScheduleDataError as exc:
            console.print(f"[yellow]No data:[/] {exc}")
            if telemetry:
                telemetry.finalize(status="empty")
            return
        if telemetry:
            telemetry.log_view(view="team_workload", rows=len(summaries))
        table = Table(title="Team workload")
        table.add_column("Team")
        table.add_column("Name")
        table.add_column("Tasks", justify="right")
        table.add_column("Hours", justify="right")
        for summary in summaries:
            table.add_row(
                summary.team_code,
                summary.team_name,
                str(len(summary.tasks)),
                str(summary.total_hours),
            )
        console.print(table)
        if out_csv:
            _write_csv(team_workload_dataframe(summaries), out_csv)


@app.command("filter")
def filter_cmd(
    schedule: ScheduleArg,
    order: Annotated[
        list[str] | None,
        typer.Option("--order", "-o", help="Order code(s); repeat or comma-separate."),
    ] = None,
    station: Annotated[
        list[str] | None,
        typer.Option("--station", "-s", help="Station code(s); repeat or comma-separate."),
    ] = None,
    team: Annotated[
        list[str] | None,
        typer.Option("--team", "-t", help="Team code(s); repeat or comma-separate."),
    ] = None,
    date_from: Annotated[
        str | None, typer.Option("--from", help="Keep tasks ending at or after this time.")
    ] = None,
    date_to: Annotated[
        str | None, typer.Option("--to", help="Keep tasks starting at or before this time.")
    ] = None,
    out_csv: Annotated[
        Path | None, typer.Option("--out-csv", help="Optional path to write matching tasks.")
    ] = None,
    telemetry_log: TelemetryOpt = None,
) -> None:
    """List tasks matching every supplied filter."""
    adapter = _load_adapter(schedule)
    try:
        window = parse_date_range(date_from, date_to)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    order_codes = parse_code_list(order)
    station_codes = parse_code_list(station)
    team_codes = parse_code_list(team)
    with _telemetry(
        telemetry_log,
        "filter",
        schedule,
        orders=order_codes,
        stations=station_codes,
        teams=team_codes,
        date_from=date_from,
        date_to=date_to,
    ) as telemetry:
        tasks = adapter.filter_tasks(order_codes, station_codes, team_codes, window)
        if telemetry:
            telemetry.log_view(view="filter", rows=len(tasks))
        console.print(f"[bold]{len(tasks)}[/] of {len(adapter.tasks)} tasks match")
        if tasks:
            table = Table(title="Matching tasks")
            table.add_column("Task id")
            table.add_column("Name")
            table.add_column("Order")
            table.add_column("Station")
            table.add_column("Team")
            table.add_column("Start")
            table.add_column("End")
            for task in tasks:
                table.add_row(
                    task.task_id,
                    task.name,
                    task.order_code,
                    task.station_code,
                    task.team_code,
                    format_moment(task.start),
                    format_moment(task.end),
                )
            console.print(table)
        if out_csv:
            _write_csv(task_dataframe(tasks), out_csv)


@app.command("commit-codes")
def commit_codes(
    schedule: ScheduleArg,
    out_json: Annotated[
        Path | None,
        typer.Option("--out-json", help="Optional path to write the confirmation code lists."),
    ] = None,
    telemetry_log: TelemetryOpt = None,
) -> None:
    """Print the deduplicated order/task codes to mark as committed."""
    adapter = _load_adapter(schedule)
    with _telemetry(telemetry_log, "commit-codes", schedule) as telemetry:
        record = commit_codes_record(adapter.commit_codes())
        if telemetry:
            telemetry.log_view(view="commit_codes", rows=len(record["task_codes"]))
        for label, key in (("Orders", "order_codes"), ("Tasks", "task_codes")):
            codes = record[key]
            console.print(f"[cyan]{label} ({len(codes)}):[/] " + ", ".join(codes))
        if out_json:
            _write_json(record, out_json)


@app.command()
def worked(
    start: Annotated[str, typer.Argument(help="Span start (ISO-8601).")],
    end: Annotated[str, typer.Argument(help="Span end (ISO-8601).")],
    calendar: CalendarOpt = None,
    span_id: Annotated[str, typer.Option("--id", help="Identifier used for segment ids.")] = "span",
) -> None:
    """Show the worked hours and worked segments of an ad-hoc span."""
    work_calendar = _load_calendar(calendar)
    start_ts = require_timestamp(start, "START")
    end_ts = require_timestamp(end, "END")
    span_item = GanttItem(
        id=span_id,
        name=span_id,
        start=start_ts,
        end=end_ts,
        group="",
        order_code="",
        order_name="",
        task_code="",
        process_code="",
        team_code="",
        team_name="",
        station_code="",
        station_name="",
    )
    segments = split_into_work_segments(span_item, work_calendar)
    if segments == [span_item]:
        console.print("[yellow]Span does not touch working time.[/] Worked hours: 0.00")
        return
    total = actual_worked_hours(start_ts, end_ts, work_calendar)
    table = Table(title=f"Worked segments ({format_hours(total)} h)")
    table.add_column("Segment")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Hours", justify="right")
    for seg in segments:
        table.add_row(
            seg.id,
            format_moment(seg.start),
            format_moment(seg.end),
            format_hours((seg.end - seg.start).total_seconds() / 3600.0),
        )
    console.print(table)


@app.command()
def windows(
    first_day: Annotated[str, typer.Argument(help="First calendar day (YYYY-MM-DD).")],
    last_day: Annotated[str, typer.Argument(help="Last calendar day (YYYY-MM-DD).")],
    calendar: CalendarOpt = None,
) -> None:
    """List working windows per day for a calendar."""
    work_calendar = _load_calendar(calendar)
    first = require_timestamp(first_day, "FIRST_DAY").date()
    last = require_timestamp(last_day, "LAST_DAY").date()
    if last < first:
        raise typer.BadParameter("LAST_DAY must not precede FIRST_DAY")
    capacity = format_hours(work_calendar.daily_capacity_hours())
    table = Table(title=f"Working windows ({capacity} h/day)")
    table.add_column("Day")
    table.add_column("Weekday")
    table.add_column("Windows")
    for day in iter_days(first, last):
        day_windows = work_calendar.working_windows_for(day)
        rendered = ", ".join(
            f"{lo.strftime('%H:%M')}-{hi.strftime('%H:%M')}" for lo, hi in day_windows
        )
        table.add_row(day.isoformat(), day.strftime("%a"), rendered or "[dim]non-working[/]")
    console.print(table)


if __name__ == "__main__":
    app()
