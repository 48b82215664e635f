from __future__ import annotations

from pathlib import Path

import pytest

from schedview.schedule import ScheduleAdapter
from schedview.schedule.io import load_schedule

FIXTURES = Path(__file__).parent / "fixtures" / "schedule"


@pytest.fixture
def schedule_path() -> Path:
    return FIXTURES / "sample_schedule.json"


@pytest.fixture
def calendar_path() -> Path:
    return FIXTURES / "work_calendar.yaml"


@pytest.fixture
def adapter(schedule_path: Path) -> ScheduleAdapter:
    return ScheduleAdapter(load_schedule(schedule_path))
