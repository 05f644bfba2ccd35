"""
Time-related constraint checking functions.
"""

from datetime import datetime, time
from typing import Optional, Sequence
from ..core.interval import Interval
from ..core.constants import CORE_HOURS_START, CORE_HOURS_END
from ..utils.slot_utils import overlaps


def is_within_working_hours(start: datetime, end: datetime,
                            start_hour: int = CORE_HOURS_START, end_hour: int = CORE_HOURS_END) -> bool:
    """
    Check that a range starts no earlier than start_hour and finishes by
    end_hour on the same day.
    """
    if start.date() != end.date():
        return False
    return start.time() >= time(start_hour) and end.time() <= time(end_hour)


def conflicts_with(start: datetime, end: datetime, intervals: Sequence[Interval]) -> Optional[Interval]:
    """Return the first busy interval overlapping [start, end), if any."""
    for interval in intervals:
        if overlaps(start, end, interval.start, interval.end):
            return interval
    return None


def is_slot_allowed(start: datetime, end: datetime, intervals: Sequence[Interval],
                    start_hour: int = CORE_HOURS_START, end_hour: int = CORE_HOURS_END) -> bool:
    """
    A slot is allowed when it sits inside working hours on a weekday and
    overlaps no busy interval.
    """
    if start.weekday() >= 5:
        return False
    if not is_within_working_hours(start, end, start_hour, end_hour):
        return False
    return conflicts_with(start, end, intervals) is None
