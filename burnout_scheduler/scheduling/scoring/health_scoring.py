"""
Calendar health score: four 0-1 sub-scores combined into a 0-100 score.
"""

from datetime import time
from typing import Sequence
from ..core.interval import Interval
from ..core.constants import (
    WORKING_DAY_HOURS, HEALTH_BUFFER_MINUTES, HEALTH_PENALTY, HEALTH_GOOD_THRESHOLD, FOCUS_GOOD_THRESHOLD,
    CORE_HOURS_START, CORE_HOURS_END
)
from ...schemas import HealthMetrics


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def calculate_break_compliance(ordered: Sequence[Interval]) -> float:
    """
    Each run of short gaps costs more the longer it gets: the n-th consecutive
    pair under 15 minutes subtracts 0.1 * n.
    """
    score = 1.0
    run = 0
    for previous, current in zip(ordered, ordered[1:]):
        gap_minutes = (current.start - previous.end).total_seconds() / 60
        if gap_minutes < HEALTH_BUFFER_MINUTES:
            run += 1
            score -= HEALTH_PENALTY * run
        else:
            run = 0
    return clamp(score)


def calculate_focus_time_ratio(ordered: Sequence[Interval]) -> float:
    meeting_hours = sum(i.duration_hours() for i in ordered)
    return clamp((WORKING_DAY_HOURS - meeting_hours) / WORKING_DAY_HOURS)


def calculate_meeting_efficiency(ordered: Sequence[Interval]) -> float:
    score = 1.0
    for interval in ordered:
        minutes = interval.duration_minutes()
        attendees = interval.attendee_count
        if minutes > 60 and attendees > 5:
            score -= HEALTH_PENALTY  # Long meeting with a big group
        if minutes < 15 and attendees > 3:
            score -= HEALTH_PENALTY  # Too short for that many people
    return clamp(score)


def calculate_work_life_balance(ordered: Sequence[Interval]) -> float:
    score = 1.0
    for interval in ordered:
        day_end = interval.start.replace(hour=CORE_HOURS_END, minute=0, second=0, microsecond=0)
        if interval.start.time() < time(CORE_HOURS_START) or interval.end >= day_end:
            score -= HEALTH_PENALTY
    return clamp(score)


def calculate_health_metrics(intervals: Sequence[Interval]) -> HealthMetrics:
    ordered = sorted(intervals)

    break_compliance = calculate_break_compliance(ordered)
    focus_time_ratio = calculate_focus_time_ratio(ordered)
    meeting_efficiency = calculate_meeting_efficiency(ordered)
    work_life_balance = calculate_work_life_balance(ordered)

    # Equal 25-point weighting
    score = round(25 * (break_compliance + focus_time_ratio + meeting_efficiency + work_life_balance))

    positive_factors = []
    negative_factors = []
    recommendations = []

    if break_compliance > HEALTH_GOOD_THRESHOLD:
        positive_factors.append("Good breaks between meetings")
    else:
        negative_factors.append("Too many back-to-back meetings")
        recommendations.append("Leave at least 15 minutes between meetings")

    if focus_time_ratio > FOCUS_GOOD_THRESHOLD:
        positive_factors.append("Healthy amount of focus time")
    else:
        negative_factors.append("Little time left for focused work")
        recommendations.append("Block 2-hour focus sessions in your calendar")

    if meeting_efficiency > HEALTH_GOOD_THRESHOLD:
        positive_factors.append("Meetings are well sized")
    else:
        negative_factors.append("Long meetings with large groups or very short meetings with many attendees")
        recommendations.append("Keep large meetings under an hour and handle quick syncs asynchronously")

    if work_life_balance > HEALTH_GOOD_THRESHOLD:
        positive_factors.append("Meetings stay within working hours")
    else:
        negative_factors.append("Meetings start early or run late")
        recommendations.append("Schedule meetings between 9 AM and 5 PM")

    return HealthMetrics(
        score=score,
        break_compliance=break_compliance,
        focus_time_ratio=focus_time_ratio,
        meeting_efficiency=meeting_efficiency,
        work_life_balance=work_life_balance,
        positive_factors=positive_factors,
        negative_factors=negative_factors,
        recommendations=recommendations,
    )
