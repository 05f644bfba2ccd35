"""
Find common free slots for a new meeting across several participants.
"""

from datetime import datetime, timedelta
from typing import List, Mapping, Optional, Sequence
from ..core.interval import Interval
from ..core.errors import InvalidInputError
from ..core.constants import (
    WORK_DAY_START_HOUR, WORK_DAY_END_HOUR, BUSINESS_DAYS_AHEAD, SLOT_TOP_K, BURNOUT_ALERT_THRESHOLD
)
from ..scoring.slot_scoring import calculate_time_of_day_score
from ..constraints.time_constraints import is_slot_allowed
from ..utils.slot_utils import gaps_between, intervals_on_day, day_window, next_business_days, zone_of
from ...schemas import Slot, SlotSearchResult


def find_optimal_slots(busy_by_participant: Mapping[str, Optional[Sequence[Interval]]], duration_minutes: int,
                       now: datetime, top_k: int = SLOT_TOP_K,
                       burnout_by_participant: Optional[Mapping[str, float]] = None) -> SlotSearchResult:
    """
    Rank meeting slots of exactly `duration_minutes` over the next five weekdays.

    A participant mapped to None has no retrievable calendar: they are skipped
    and reported, never assumed free or busy. Participants whose burnout score
    is at or above the alert threshold are reported but do not filter slots.
    """
    if not busy_by_participant:
        raise InvalidInputError("At least one participant is required")
    if duration_minutes is None or duration_minutes <= 0:
        raise InvalidInputError("Meeting duration must be a positive number of minutes")

    skipped = [p for p, intervals in busy_by_participant.items() if intervals is None]
    available = {p: intervals for p, intervals in busy_by_participant.items() if intervals is not None}

    overloaded = []
    for participant, score in (burnout_by_participant or {}).items():
        if score >= BURNOUT_ALERT_THRESHOLD:
            overloaded.append(participant)

    slots: List[Slot] = []
    if available:
        merged = sorted(i for intervals in available.values() for i in intervals)
        candidates = generate_candidate_slots(merged, duration_minutes, now)
        slots = rank_slots(candidates)[:top_k]

    return SlotSearchResult(slots=slots, skipped_participants=skipped, overloaded_participants=overloaded)


def generate_candidate_slots(merged: Sequence[Interval], duration_minutes: int, now: datetime) -> List[Slot]:
    """
    One candidate per free gap that fits, anchored at the start of the gap.
    Every candidate is checked against working hours and busy time.
    """
    duration = timedelta(minutes=duration_minutes)
    tzinfo = zone_of(now)
    candidates = []

    for day in next_business_days(now, BUSINESS_DAYS_AHEAD):
        day_start, day_end = day_window(day, WORK_DAY_START_HOUR, WORK_DAY_END_HOUR, tzinfo)
        day_intervals = intervals_on_day(merged, day_start, day_end)

        for gap in gaps_between(day_intervals, day_start, day_end):
            if gap.duration() < duration:
                continue
            if not is_slot_allowed(gap.start, gap.start + duration, day_intervals,
                                   WORK_DAY_START_HOUR, WORK_DAY_END_HOUR):
                continue
            candidates.append(Slot(
                start=gap.start,
                end=gap.start + duration,
                score=calculate_time_of_day_score(gap.start),
                duration_minutes=duration_minutes,
            ))

    return candidates


def rank_slots(candidates: Sequence[Slot]) -> List[Slot]:
    """Highest score first; earlier start wins a tie."""
    return sorted(candidates, key=lambda slot: (-slot.score, slot.start))
