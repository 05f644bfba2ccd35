"""
Busy-interval representation for the scheduling engine.
"""

from datetime import datetime, timedelta
from typing import Any, Optional


class Interval:
    """
    A contiguous time range. Busy intervals carry the calendar event they were
    derived from as their occupant; free gaps have no occupant.

    Ordering is by start, ties broken by end.
    """
    __slots__ = ("start", "end", "occupant")

    def __init__(self, start: datetime, end: datetime, occupant: Any = None):
        self.start = start
        self.end = end
        self.occupant = occupant

    def duration(self) -> timedelta:
        return self.end - self.start

    def duration_minutes(self) -> float:
        return self.duration().total_seconds() / 60

    def duration_hours(self) -> float:
        return self.duration().total_seconds() / 3600

    @property
    def weekday(self) -> int:
        """Monday is 0, Sunday is 6."""
        return self.start.weekday()

    @property
    def start_hour(self) -> int:
        return self.start.hour

    @property
    def is_weekend(self) -> bool:
        return self.weekday >= 5

    @property
    def attendee_count(self) -> int:
        attendees = getattr(self.occupant, "attendees", None)
        return len(attendees) if attendees else 0

    @property
    def title(self) -> Optional[str]:
        return getattr(self.occupant, "summary", None)

    def _key(self):
        return (self.start, self.end)

    def __lt__(self, other):
        return self._key() < other._key()

    def __eq__(self, other):
        if not isinstance(other, Interval):
            return NotImplemented
        return self._key() == other._key() and self.occupant == other.occupant

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        window = f"{self.start.strftime('%a %I:%M %p')} - {self.end.strftime('%I:%M %p')}"
        if self.occupant is not None:
            return f"BusyInterval({window}, {self.title or 'untitled'})"
        return f"FreeInterval({window})"
