from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List

APPOINTMENT_DURATION = timedelta(hours=1)


@dataclass(frozen=True, order=True)
class TimeRange:
    """Half-open interval ``[start, end)`` on a single day."""

    start: datetime
    end: datetime

    def contains(self, other: "TimeRange") -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start < other.end and other.start < self.end

    def label(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"


def slot_for(start: datetime) -> TimeRange:
    return TimeRange(start, start + APPOINTMENT_DURATION)


def parse_clock_range(value: str) -> tuple:
    """Parse ``"HH:MM-HH:MM"`` into a pair of ``time`` objects."""
    try:
        start_s, end_s = value.split("-")
        start = datetime.strptime(start_s.strip(), "%H:%M").time()
        end = datetime.strptime(end_s.strip(), "%H:%M").time()
    except ValueError:
        raise ValueError(f"Invalid time range '{value}'. Use HH:MM-HH:MM")
    if start >= end:
        raise ValueError(f"Invalid time range '{value}': start must be before end")
    return start, end


def working_windows(working_hours: Dict[int, List[str]], day: date) -> List[TimeRange]:
    """Declared working ranges for the weekday of ``day`` as merged datetimes."""
    ranges = []
    for value in working_hours.get(day.weekday(), []):
        start, end = parse_clock_range(value)
        ranges.append(TimeRange(datetime.combine(day, start), datetime.combine(day, end)))
    return merge(ranges)


def merge(ranges: Iterable[TimeRange]) -> List[TimeRange]:
    merged: List[TimeRange] = []
    for r in sorted(ranges):
        if merged and r.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = TimeRange(last.start, max(last.end, r.end))
        else:
            merged.append(r)
    return merged


def subtract(windows: Iterable[TimeRange], busy: Iterable[TimeRange]) -> List[TimeRange]:
    """Remove every busy range from the windows.

    Windows must be ordered and non-overlapping (see ``merge``); the result
    keeps that shape. Ranges that merely touch do not cut each other.
    """
    busy = merge(busy)
    free: List[TimeRange] = []
    for window in windows:
        cursor = window.start
        for b in busy:
            if b.end <= cursor or b.start >= window.end:
                continue
            if b.start > cursor:
                free.append(TimeRange(cursor, b.start))
            cursor = max(cursor, b.end)
            if cursor >= window.end:
                break
        if cursor < window.end:
            free.append(TimeRange(cursor, window.end))
    return free


def overlaps_morning(value: str) -> bool:
    start, _ = parse_clock_range(value)
    return start < time(12, 0)


def overlaps_afternoon(value: str) -> bool:
    _, end = parse_clock_range(value)
    return end > time(12, 0)
