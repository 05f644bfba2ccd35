"""
Break suggestion algorithms: gaps worth protecting and recovery time after long meetings.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence
from ..core.interval import Interval
from ..core.errors import InvalidInputError
from ..core.constants import (
    BREAK_LENGTH, MIN_BREAK_GAP_MINUTES, HIGH_PRIORITY_GAP_MINUTES, LONG_GAP_MINUTES, LONG_MEETING_MINUTES,
    WORK_DAY_START_HOUR
)
from ..constraints.time_constraints import is_within_working_hours, conflicts_with
from ..utils.slot_utils import gaps_between, at_time, zone_of
from ...models import BreakType, BreakPriority
from ...schemas import BreakSuggestion, BreakValidation


def suggest_smart_breaks(intervals: Sequence[Interval]) -> List[BreakSuggestion]:
    """
    Suggest 30-minute breaks for one participant's day.

    - Every gap of 30+ minutes gets a break at its start (high priority from 60 minutes).
    - Gaps of 90+ minutes also get a recovery break centred on the gap.
    - Meetings of 90+ minutes get a recovery break right after them.

    Suggestions may overlap; the caller picks one.
    """
    suggestions = []
    last_end = None

    for interval in sorted(intervals):
        if last_end is not None:
            gap_minutes = (interval.start - last_end).total_seconds() / 60
            if gap_minutes >= MIN_BREAK_GAP_MINUTES:
                suggestions.append(BreakSuggestion(
                    start=last_end,
                    end=last_end + BREAK_LENGTH,
                    type=BreakType.GAP,
                    priority=BreakPriority.HIGH if gap_minutes >= HIGH_PRIORITY_GAP_MINUTES else BreakPriority.MEDIUM,
                    reason=f"{int(gap_minutes)} minute gap available between meetings",
                ))

                if gap_minutes >= LONG_GAP_MINUTES:
                    midpoint = last_end + timedelta(minutes=gap_minutes / 2)
                    suggestions.append(BreakSuggestion(
                        start=midpoint - BREAK_LENGTH / 2,
                        end=midpoint + BREAK_LENGTH / 2,
                        type=BreakType.RECOVERY,
                        priority=BreakPriority.HIGH,
                        reason="Extended break during long gap",
                    ))

        last_end = interval.end

        if interval.duration_minutes() >= LONG_MEETING_MINUTES:
            suggestions.append(BreakSuggestion(
                start=interval.end,
                end=interval.end + BREAK_LENGTH,
                type=BreakType.RECOVERY,
                priority=BreakPriority.HIGH,
                reason="Recovery break after long meeting",
            ))

    return suggestions


def suggest_break_time(intervals: Sequence[Interval], now: datetime, duration_minutes: int = 30) -> BreakSuggestion:
    """
    Next free window of `duration_minutes` between now and midnight.
    Falls back to 9 AM the next day when today is full.
    """
    if duration_minutes <= 0:
        raise InvalidInputError("Break duration must be positive")
    duration = timedelta(minutes=duration_minutes)
    tzinfo = zone_of(now)
    end_of_day = at_time(now.date() + timedelta(days=1), 0, tzinfo=tzinfo)

    upcoming = [i for i in intervals if i.end > now]
    for gap in gaps_between(upcoming, now, end_of_day):
        if gap.duration() >= duration:
            return BreakSuggestion(
                start=gap.start,
                end=gap.start + duration,
                type=BreakType.GAP,
                priority=BreakPriority.MEDIUM,
                reason=f"Next free {duration_minutes} minutes today",
            )

    tomorrow = at_time(now.date() + timedelta(days=1), WORK_DAY_START_HOUR, tzinfo=tzinfo)
    return BreakSuggestion(
        start=tomorrow,
        end=tomorrow + duration,
        type=BreakType.GAP,
        priority=BreakPriority.MEDIUM,
        reason="No free time left today, first thing tomorrow instead",
    )


def validate_break_time(start: datetime, end: datetime, intervals: Sequence[Interval]) -> BreakValidation:
    """A break must sit inside 9 AM - 5 PM and not collide with a meeting."""
    if not is_within_working_hours(start, end):
        return BreakValidation(
            is_valid=False,
            reason="Break should be scheduled during work hours (9 AM - 5 PM)",
        )

    conflict: Optional[Interval] = conflicts_with(start, end, intervals)
    if conflict is not None:
        return BreakValidation(
            is_valid=False,
            reason=f"Break conflicts with existing event: {conflict.title or 'untitled'}",
        )

    return BreakValidation(is_valid=True, reason="Break time is valid")
