"""Work calendar primitives (daily shifts, weekends, holidays)."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

__all__ = [
    "WorkShift",
    "WorkCalendar",
    "DEFAULT_SHIFTS",
    "WEEKEND_DAYS",
    "iter_days",
]

# ``date.weekday()`` values for Saturday and Sunday.
WEEKEND_DAYS = frozenset({5, 6})


class WorkShift(BaseModel):
    """One daily working window expressed as wall-clock hour/minute bounds.

    Attributes
    ----------
    start_hour / start_minute:
        Time of day the shift starts.
    end_hour / end_minute:
        Time of day the shift ends. ``24:00`` is accepted and means midnight at
        the end of the day; shifts may not cross midnight otherwise.
    name:
        Optional label (``AM``, ``PM``) surfaced in CLI output.
    """

    model_config = ConfigDict(frozen=True)

    start_hour: int
    start_minute: int = 0
    end_hour: int
    end_minute: int = 0
    name: str | None = None

    @field_validator("start_hour")
    @classmethod
    def _start_hour_range(cls, value: int) -> int:
        if not 0 <= value <= 23:
            raise ValueError("WorkShift.start_hour must be within 0..23")
        return value

    @field_validator("end_hour")
    @classmethod
    def _end_hour_range(cls, value: int) -> int:
        if not 0 <= value <= 24:
            raise ValueError("WorkShift.end_hour must be within 0..24")
        return value

    @field_validator("start_minute", "end_minute")
    @classmethod
    def _minute_range(cls, value: int) -> int:
        if not 0 <= value <= 59:
            raise ValueError("WorkShift minutes must be within 0..59")
        return value

    @model_validator(mode="after")
    def _end_after_start(self) -> WorkShift:
        if self.end_hour == 24 and self.end_minute != 0:
            raise ValueError("WorkShift ending at hour 24 must end at minute 0")
        if self.end_offset <= self.start_offset:
            raise ValueError("WorkShift must end after it starts (overnight shifts unsupported)")
        return self

    @property
    def start_offset(self) -> timedelta:
        return timedelta(hours=self.start_hour, minutes=self.start_minute)

    @property
    def end_offset(self) -> timedelta:
        return timedelta(hours=self.end_hour, minutes=self.end_minute)

    def hours(self) -> float:
        """Length of the shift in hours."""
        return (self.end_offset - self.start_offset).total_seconds() / 3600.0

    def window_on(self, day: date) -> tuple[datetime, datetime]:
        """Anchor the shift to ``day`` and return its absolute bounds."""
        midnight = datetime.combine(day, time())
        return midnight + self.start_offset, midnight + self.end_offset

    def label(self) -> str:
        bounds = (
            f"{self.start_hour:02d}:{self.start_minute:02d}-"
            f"{self.end_hour:02d}:{self.end_minute:02d}"
        )
        return f"{self.name} {bounds}" if self.name else bounds


DEFAULT_SHIFTS: tuple[WorkShift, ...] = (
    WorkShift(start_hour=8, end_hour=12, name="AM"),
    WorkShift(start_hour=14, end_hour=18, name="PM"),
)


def iter_days(first: date, last: date) -> Iterator[date]:
    """Yield every calendar day from ``first`` to ``last`` inclusive."""
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)


class WorkCalendar(BaseModel):
    """Daily shifts plus holiday exclusions; Saturday and Sunday never work.

    Shifts are kept sorted by start time. Overlapping shifts are not rejected;
    intersecting work with overlapping shifts counts the shared minutes twice.
    """

    model_config = ConfigDict(frozen=True)

    shifts: tuple[WorkShift, ...] = DEFAULT_SHIFTS
    holidays: frozenset[date] = frozenset()
    timezone: str | None = None

    @field_validator("shifts")
    @classmethod
    def _sort_shifts(cls, value: tuple[WorkShift, ...]) -> tuple[WorkShift, ...]:
        return tuple(sorted(value, key=lambda shift: shift.start_offset))

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{value}'") from exc
        return value

    @classmethod
    def default(cls) -> WorkCalendar:
        """Two shifts (08:00-12:00, 14:00-18:00), no holidays."""
        return cls()

    def is_working_day(self, day: date) -> bool:
        if isinstance(day, datetime):
            day = day.date()
        if day.weekday() in WEEKEND_DAYS:
            return False
        return day not in self.holidays

    def working_windows_for(self, day: date) -> list[tuple[datetime, datetime]]:
        """Return the absolute shift windows of ``day`` (empty on non-working days)."""
        if isinstance(day, datetime):
            day = day.date()
        if not self.is_working_day(day):
            return []
        return [shift.window_on(day) for shift in self.shifts]

    def daily_capacity_hours(self) -> float:
        return sum(shift.hours() for shift in self.shifts)

    @property
    def zone(self) -> ZoneInfo | None:
        return ZoneInfo(self.timezone) if self.timezone else None

    def localize(self, moment: datetime) -> datetime:
        """Express ``moment`` as a naive wall-clock time of this calendar."""
        if moment.tzinfo is None:
            return moment
        zone = self.zone
        if zone is not None:
            moment = moment.astimezone(zone)
        return moment.replace(tzinfo=None)
