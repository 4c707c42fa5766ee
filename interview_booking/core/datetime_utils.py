from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterator, Protocol
from zoneinfo import ZoneInfo

# Upper-case English names, indexed like date.weekday() (Monday == 0).
DAYS_OF_WEEK: tuple[str, ...] = (
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
)


class Clock(Protocol):
    def now(self) -> datetime:
        ...


@dataclass(frozen=True)
class SystemClock:
    tz: ZoneInfo

    def now(self) -> datetime:
        """Return current local time as naive datetime for DATETIME columns."""
        return datetime.now(self.tz).replace(tzinfo=None)


@dataclass
class FixedClock:
    instant: datetime = field(default_factory=lambda: datetime(2030, 1, 7, 8, 0))

    def now(self) -> datetime:
        return self.instant

    def advance(self, delta: timedelta) -> None:
        self.instant = self.instant + delta


def to_local_naive(value: datetime, tz: ZoneInfo) -> datetime:
    """Normalize a datetime to the calendar zone and strip tzinfo."""
    if value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)


def day_name(value: date) -> str:
    return DAYS_OF_WEEK[value.weekday()]


def week_bounds(value: datetime) -> tuple[datetime, datetime]:
    """Monday 00:00 of the week containing ``value`` and the following Monday 00:00."""
    monday = value.date() - timedelta(days=value.weekday())
    week_start = datetime.combine(monday, time.min)
    return week_start, week_start + timedelta(weeks=1)


def iter_horizon_days(horizon_start: date, weeks: int) -> Iterator[date]:
    current = horizon_start
    horizon_end = horizon_start + timedelta(weeks=weeks)
    while current < horizon_end:
        yield current
        current += timedelta(days=1)


def enumerate_slot_starts(day: date, start: time, end: time, duration_minutes: int) -> list[datetime]:
    # A slot ending exactly at ``end`` is still inside the window.
    if duration_minutes <= 0:
        return []
    step = timedelta(minutes=duration_minutes)
    current = datetime.combine(day, start)
    window_end = datetime.combine(day, end)
    starts: list[datetime] = []
    while current + step <= window_end:
        starts.append(current)
        current += step
    return starts
