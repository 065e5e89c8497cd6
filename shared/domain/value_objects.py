"""
Common Value Objects

Value objects used across multiple domains:
- TimeRange: Half-open range of instants [start, end) for slots and reservations
- overlaps(): the interval test shared by rule checks and reservation checks
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from shared.domain.base import ValueObject


def overlaps(a_start: Any, a_end: Any, b_start: Any, b_end: Any) -> bool:
    """
    Check whether two half-open intervals [a_start, a_end) and [b_start, b_end) overlap.

    Works for any mutually comparable bounds: aware datetimes for reservations
    and fixed-width "HH:MM" strings for availability windows.

    Examples:
        - overlaps("09:00", "10:00", "09:30", "11:00") -> True
        - overlaps("09:00", "10:00", "10:00", "11:00") -> False (adjacent)
    """
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents a range from start (inclusive) to end (exclusive).
    Used for requested reservation windows.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start}) must be before end ({self.end})")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def minutes(self) -> int:
        return int(self.duration.total_seconds() // 60)

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"
