"""
Scoring functions for candidate meeting slots.
"""

from datetime import datetime, timedelta
from typing import Dict, Sequence
from ..core.interval import Interval


def calculate_time_of_day_score(start: datetime) -> float:
    """
    Score a meeting start by time of day:
    mornings are best, mid-afternoon next, lunch hours after that.
    """
    hour = start.hour
    if 9 <= hour < 12:
        return 10.0  # Morning
    if 14 <= hour < 16:
        return 8.0   # Mid-afternoon
    if 12 <= hour < 14:
        return 5.0   # Lunch
    return 3.0


def calculate_midday_bonus(start: datetime) -> float:
    """Team meetings between 11:00 and 15:59 get a small bonus."""
    return 0.2 if 11 <= start.hour <= 15 else 0.0


def calculate_recovery_penalty(start: datetime, busy_by_member: Dict[str, Sequence[Interval]]) -> float:
    """
    -0.1 for every member who would walk in less than 15 minutes after one of
    their own meetings ends.
    """
    penalty = 0.0
    for intervals in busy_by_member.values():
        for interval in intervals:
            if timedelta(0) < start - interval.end < timedelta(minutes=15):
                penalty -= 0.1
                break
    return penalty


def calculate_earlier_in_week_bonus(start: datetime) -> float:
    """Monday earns 0.2, Friday nothing."""
    return (5 - start.isoweekday()) * 0.05


def calculate_team_slot_score(start: datetime, busy_by_member: Dict[str, Sequence[Interval]]) -> float:
    """
    Combine the team slot factors on a base of 1.0, floored at zero.
    """
    score = (
        1.0 +
        calculate_midday_bonus(start) +
        calculate_recovery_penalty(start, busy_by_member) +
        calculate_earlier_in_week_bonus(start)
    )
    return max(0.0, score)
