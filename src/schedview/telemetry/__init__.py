"""Run telemetry for schedview analysis commands."""

from .jsonl import append_jsonl, read_jsonl
from .run_logger import AnalysisTelemetryLogger

__all__ = ["append_jsonl", "read_jsonl", "AnalysisTelemetryLogger"]
