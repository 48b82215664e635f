"""Context manager recording telemetry for one analysis command."""

from __future__ import annotations

import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

from .jsonl import append_jsonl


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(slots=True)
class AnalysisTelemetryLogger(AbstractContextManager["AnalysisTelemetryLogger"]):
    """Append ``view`` records while a command runs and one ``run`` record when it ends.

    Parameters
    ----------
    log_path:
        JSONL path where records are appended.
    command:
        CLI command name (``"stats"``, ``"stations"`` ...).
    schedule_path:
        Schedule result file the command read.
    calendar_path:
        Optional work calendar YAML used for calendar-aware views.
    context:
        Extra metadata (axis, filters, flags).

    The run record carries ``view_rows``, a mapping of every logged view to its
    row count, so a single line answers "what did this command produce".
    """

    log_path: Path
    command: str
    schedule_path: str | None = None
    calendar_path: str | None = None
    context: Mapping[str, Any] | None = None
    schema_version: str = "1.0"
    run_id: str = field(default_factory=lambda: uuid4().hex, init=False)
    view_rows: dict[str, int] = field(default_factory=dict, init=False)
    _started: float | None = field(default=None, init=False)
    _started_at: str | None = field(default=None, init=False)
    _closed: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.log_path = Path(self.log_path)

    def __enter__(self) -> "AnalysisTelemetryLogger":
        self._started = time.perf_counter()
        self._started_at = _iso_now()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type:
            self.finalize(status="error", error=repr(exc))
        else:
            self.finalize()
        return False

    def _record(self, record_type: str, **fields: Any) -> dict[str, Any]:
        return {
            "record_type": record_type,
            "schema_version": self.schema_version,
            "run_id": self.run_id,
            "command": self.command,
            **fields,
        }

    def log_view(self, *, view: str, rows: int, **details: Any) -> None:
        """Record one derived view (its name, row count, and any parameters)."""
        self.view_rows[view] = rows
        append_jsonl(
            self.log_path,
            self._record("view", timestamp=_iso_now(), view=view, rows=rows, details=details),
        )

    def elapsed(self) -> float:
        if self._started is None:
            return 0.0
        return time.perf_counter() - self._started

    def finalize(
        self,
        *,
        status: str = "ok",
        metrics: Mapping[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        """Write the terminal run record; later calls (including ``__exit__``) do nothing."""
        if self._closed:
            return
        self._closed = True
        append_jsonl(
            self.log_path,
            self._record(
                "run",
                schedule_path=self.schedule_path,
                calendar_path=self.calendar_path,
                status=status,
                view_rows=dict(self.view_rows),
                metrics=dict(metrics or {}),
                context=dict(self.context or {}),
                error=error,
                started_at=self._started_at,
                finished_at=_iso_now(),
                duration_seconds=round(self.elapsed(), 3),
            ),
        )


__all__ = ["AnalysisTelemetryLogger"]
