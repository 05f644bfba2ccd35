"""
Burnout risk scoring for one participant's busy intervals.
"""

from typing import Sequence
from ..core.interval import Interval
from ..core.constants import (
    BACK_TO_BACK_THRESHOLD, AFTER_HOURS_START_BEFORE, AFTER_HOURS_START_AFTER, LONG_STREAK_HOURS
)
from ...schemas import BurnoutMetrics


def calculate_burnout_metrics(intervals: Sequence[Interval]) -> BurnoutMetrics:
    """
    Compute burnout sub-metrics and the weighted risk score.

    Meetings starting within 15 minutes of the previous meeting's end are
    back-to-back and extend the current streak. The score has no upper bound.
    """
    total_hours = 0.0
    back_to_back_count = 0
    after_hours_count = 0
    weekend_count = 0
    longest_streak = 0.0
    streak = 0.0
    prev_end = None

    for interval in sorted(intervals):
        duration = interval.duration_hours()
        total_hours += duration

        if prev_end is not None and interval.start - prev_end <= BACK_TO_BACK_THRESHOLD:
            streak += duration
            back_to_back_count += 1
        else:
            streak = duration
        longest_streak = max(longest_streak, streak)
        prev_end = interval.end

        if is_after_hours(interval):
            after_hours_count += 1
        if interval.is_weekend:
            weekend_count += 1

    score = calculate_burnout_score(
        total_hours, back_to_back_count, after_hours_count, weekend_count, longest_streak
    )

    return BurnoutMetrics(
        total_hours=total_hours,
        back_to_back_count=back_to_back_count,
        after_hours_count=after_hours_count,
        weekend_count=weekend_count,
        longest_streak_hours=longest_streak,
        score=score,
    )


def calculate_burnout_score(total_hours: float, back_to_back_count: int, after_hours_count: int,
                            weekend_count: int, longest_streak_hours: float) -> float:
    """Fixed-weight burnout formula."""
    return (
        (total_hours / 8) * 30 +      # Meeting load
        back_to_back_count * 20 +     # No recovery between meetings
        after_hours_count * 15 +      # Early or late starts
        weekend_count * 15 +          # Weekend meetings
        (20 if longest_streak_hours > LONG_STREAK_HOURS else 0)
    )


def is_after_hours(interval: Interval) -> bool:
    return interval.start_hour < AFTER_HOURS_START_BEFORE or interval.start_hour > AFTER_HOURS_START_AFTER
