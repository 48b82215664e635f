from __future__ import annotations

from pathlib import Path

import pytest

from schedview.telemetry import AnalysisTelemetryLogger, append_jsonl, read_jsonl


def test_append_and_read_jsonl(tmp_path: Path):
    path = tmp_path / "nested" / "runs.jsonl"
    append_jsonl(path, {"a": 1})
    with path.open("a", encoding="utf-8") as handle:
        handle.write("\n")
    append_jsonl(path, {"b": Path("x.json")})
    assert list(read_jsonl(path)) == [{"a": 1}, {"b": "x.json"}]


def test_logger_writes_view_and_run_records(tmp_path: Path):
    log_path = tmp_path / "runs.jsonl"
    with AnalysisTelemetryLogger(
        log_path=log_path,
        command="gantt",
        schedule_path="schedule.json",
        context={"axis": "team"},
    ) as telemetry:
        telemetry.log_view(view="gantt", rows=7, split=True)

    view, run = read_jsonl(log_path)
    assert view["record_type"] == "view"
    assert view["rows"] == 7
    assert view["details"] == {"split": True}
    assert run["record_type"] == "run"
    assert run["run_id"] == view["run_id"] == telemetry.run_id
    assert run["command"] == "gantt"
    assert run["status"] == "ok"
    assert run["view_rows"] == {"gantt": 7}
    assert run["context"] == {"axis": "team"}
    assert run["calendar_path"] is None
    assert run["duration_seconds"] >= 0


def test_logger_records_errors(tmp_path: Path):
    log_path = tmp_path / "runs.jsonl"
    with pytest.raises(RuntimeError):
        with AnalysisTelemetryLogger(log_path=log_path, command="stats"):
            raise RuntimeError("boom")
    (run,) = read_jsonl(log_path)
    assert run["status"] == "error"
    assert "boom" in run["error"]


def test_finalize_writes_run_once(tmp_path: Path):
    log_path = tmp_path / "runs.jsonl"
    with AnalysisTelemetryLogger(log_path=log_path, command="stats") as telemetry:
        telemetry.finalize(status="empty", metrics={"total_tasks": 0})
    (run,) = read_jsonl(log_path)
    assert run["status"] == "empty"
    assert run["metrics"] == {"total_tasks": 0}
