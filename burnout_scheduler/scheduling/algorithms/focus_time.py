"""
Focus-time blocks: long stretches of the working day with no meetings.
"""

from datetime import date, datetime, timedelta
from typing import List, Sequence
from ..core.interval import Interval
from ..core.errors import InvalidInputError
from ..core.constants import WORK_DAY_START_HOUR, WORK_DAY_END_HOUR, BUSINESS_DAYS_AHEAD, FOCUS_BLOCK_MIN_MINUTES
from ..utils.slot_utils import gaps_between, intervals_on_day, day_window, next_business_days, zone_of
from ...schemas import FocusBlock


def find_focus_blocks(intervals: Sequence[Interval], day: date, min_minutes: int = FOCUS_BLOCK_MIN_MINUTES,
                      tzinfo=None) -> List[FocusBlock]:
    """Free gaps of at least `min_minutes` inside 9 AM - 6 PM on `day`."""
    if min_minutes <= 0:
        raise InvalidInputError("Focus block length must be positive")

    day_start, day_end = day_window(day, WORK_DAY_START_HOUR, WORK_DAY_END_HOUR, tzinfo)
    blocks = []
    for gap in gaps_between(intervals_on_day(sorted(intervals), day_start, day_end), day_start, day_end):
        if gap.duration() >= timedelta(minutes=min_minutes):
            blocks.append(FocusBlock(
                start=gap.start,
                end=gap.end,
                duration_minutes=int(gap.duration_minutes()),
            ))
    return blocks


def find_focus_blocks_for_week(intervals: Sequence[Interval], now: datetime,
                               min_minutes: int = FOCUS_BLOCK_MIN_MINUTES) -> List[FocusBlock]:
    tzinfo = zone_of(now)
    blocks = []
    for day in next_business_days(now, BUSINESS_DAYS_AHEAD):
        blocks.extend(find_focus_blocks(intervals, day, min_minutes, tzinfo))
    return blocks
