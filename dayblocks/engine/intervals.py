"""Minute-of-day arithmetic over half-open [start, end) intervals.

All intervals live within a single calendar day; there is no overnight wrap.
"""

from datetime import time
from typing import Tuple, Union

from dayblocks.errors import ScheduleValidationError
from dayblocks.models.constants import MINUTES_PER_DAY

TimeLike = Union[time, str]


def parse_time(value: TimeLike) -> time:
    """Accept a `time` or an "HH:MM" / "HH:MM:SS" string."""
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ScheduleValidationError(f"Invalid time of day: {value!r}") from e


def to_minutes(value: TimeLike) -> int:
    """Minutes since midnight (seconds are ignored)."""
    t = parse_time(value)
    return t.hour * 60 + t.minute


def minutes_to_time(minutes: int) -> time:
    """Inverse of to_minutes for 0 <= minutes < 1440."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ScheduleValidationError(f"Minute offset out of range: {minutes}")
    return time(minutes // 60, minutes % 60)


def interval_minutes(start: TimeLike, end: TimeLike) -> Tuple[int, int]:
    return to_minutes(start), to_minutes(end)


def duration_minutes(start: TimeLike, end: TimeLike) -> int:
    s, e = interval_minutes(start, end)
    return e - s


def overlaps(s1: int, e1: int, s2: int, e2: int) -> bool:
    """Half-open overlap test: touching at a boundary is not an overlap."""
    return s1 < e2 and e1 > s2


def times_overlap(start1: TimeLike, end1: TimeLike, start2: TimeLike, end2: TimeLike) -> bool:
    return overlaps(*interval_minutes(start1, end1), *interval_minutes(start2, end2))


def validate_interval(start: TimeLike, end: TimeLike) -> Tuple[int, int]:
    """Return (start, end) minutes, raising if the interval is empty or inverted."""
    s, e = interval_minutes(start, end)
    if s >= e:
        raise ScheduleValidationError(
            f"start_time ({parse_time(start).strftime('%H:%M')}) must be before "
            f"end_time ({parse_time(end).strftime('%H:%M')})",
            field="end_time",
        )
    return s, e
