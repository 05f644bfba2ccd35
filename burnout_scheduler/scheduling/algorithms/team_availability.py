"""
Team availability: intersect members' calendars on a fixed 30-minute grid.
"""

import math
from datetime import date, datetime, timedelta
from typing import Dict, Mapping, Optional, Sequence
from ..core.interval import Interval
from ..core.errors import InvalidInputError
from ..core.constants import (
    CORE_HOURS_START, CORE_HOURS_END, TEAM_GRID_MINUTES, TEAM_TOP_K, BUSINESS_DAYS_AHEAD, BACK_TO_BACK_THRESHOLD
)
from ..scoring.slot_scoring import calculate_team_slot_score
from ..utils.slot_utils import overlaps, day_window, next_business_days, zone_of
from ...models import RecommendationPriority
from ...schemas import (
    TeamSlot, TeamAvailability, TeamMeetingSuggestion, TeamMeetingSearchResult, MemberWorkload, TeamWorkload,
    Recommendation
)


def _split_members(team: Sequence[str], busy_by_member: Mapping[str, Optional[Sequence[Interval]]]):
    if not team:
        raise InvalidInputError("A team needs at least one member")
    reachable = {m: busy_by_member.get(m) for m in team if busy_by_member.get(m) is not None}
    skipped = [m for m in team if m not in reachable]
    return reachable, skipped


def get_team_availability(team: Sequence[str], busy_by_member: Mapping[str, Optional[Sequence[Interval]]],
                          day: date, tzinfo=None) -> TeamAvailability:
    """
    Build the 9 AM - 5 PM grid of 30-minute slots for `day` and strike every
    member from each slot that overlaps one of their meetings.

    Any overlap counts as busy, so a short meeting inside a grid slot blocks
    the whole slot. Members without a calendar (None) are skipped.
    """
    reachable, skipped = _split_members(team, busy_by_member)
    members = [m for m in team if m in reachable]

    work_start, work_end = day_window(day, CORE_HOURS_START, CORE_HOURS_END, tzinfo)
    step = timedelta(minutes=TEAM_GRID_MINUTES)

    grid = []
    current = work_start
    while current < work_end:
        grid.append((current, current + step, list(members)))
        current += step

    for member, intervals in reachable.items():
        for interval in intervals:
            for slot_start, slot_end, available in grid:
                if member in available and overlaps(slot_start, slot_end, interval.start, interval.end):
                    available.remove(member)

    slots = [TeamSlot(start=s, end=e, available_members=available) for s, e, available in grid]
    common_slots = [slot for slot in slots if members and len(slot.available_members) == len(members)]
    member_availability = {
        member: sum(1 for slot in slots if member in slot.available_members) for member in members
    }

    return TeamAvailability(
        date=day,
        slots=slots,
        common_slots=common_slots,
        member_availability=member_availability,
        skipped_members=skipped,
    )


def find_optimal_team_meeting(team: Sequence[str], busy_by_member: Mapping[str, Optional[Sequence[Interval]]],
                              now: datetime, duration_minutes: int = TEAM_GRID_MINUTES,
                              top_k: int = TEAM_TOP_K) -> TeamMeetingSearchResult:
    """
    Best team meeting starts over the next five business days.

    A common grid slot qualifies when enough consecutive common slots follow
    it to cover the meeting. Returns the top three by score, earliest first
    on ties. Members without a calendar are skipped and reported.
    """
    if duration_minutes is None or duration_minutes <= 0:
        raise InvalidInputError("Meeting duration must be a positive number of minutes")

    reachable, skipped = _split_members(team, busy_by_member)
    if not reachable:
        return TeamMeetingSearchResult(skipped_members=skipped)

    tzinfo = zone_of(now)
    slots_needed = math.ceil(duration_minutes / TEAM_GRID_MINUTES)
    duration = timedelta(minutes=duration_minutes)
    suggestions = []

    for day in next_business_days(now, BUSINESS_DAYS_AHEAD):
        availability = get_team_availability(team, busy_by_member, day, tzinfo)
        common_starts = {slot.start for slot in availability.common_slots}

        for slot in availability.common_slots:
            run = [slot.start + timedelta(minutes=TEAM_GRID_MINUTES * k) for k in range(slots_needed)]
            if not all(start in common_starts for start in run):
                continue
            suggestions.append(TeamMeetingSuggestion(
                start=slot.start,
                end=slot.start + duration,
                score=calculate_team_slot_score(slot.start, reachable),
                date=day,
            ))

    suggestions.sort(key=lambda s: (-s.score, s.start))
    return TeamMeetingSearchResult(suggestions=suggestions[:top_k], skipped_members=skipped)


def calculate_member_workload(member: str, intervals: Sequence[Interval]) -> MemberWorkload:
    ordered = sorted(intervals)
    total_hours = 0.0
    back_to_back = 0
    out_of_hours = 0

    for index, interval in enumerate(ordered):
        total_hours += interval.duration_hours()
        if index > 0 and interval.start - ordered[index - 1].end < BACK_TO_BACK_THRESHOLD:
            back_to_back += 1
        if interval.start_hour < CORE_HOURS_START or interval.end.hour >= CORE_HOURS_END:
            out_of_hours += 1

    return MemberWorkload(
        member=member,
        meeting_count=len(ordered),
        total_hours=total_hours,
        back_to_back_meetings=back_to_back,
        out_of_hours_meetings=out_of_hours,
    )


def analyze_team_workload(team: Sequence[str],
                          busy_by_member: Mapping[str, Optional[Sequence[Interval]]]) -> TeamWorkload:
    """Per-member meeting load plus team-level recommendations."""
    reachable, skipped = _split_members(team, busy_by_member)

    workloads: Dict[str, MemberWorkload] = {
        member: calculate_member_workload(member, intervals) for member, intervals in reachable.items()
    }
    total_meetings = sum(w.meeting_count for w in workloads.values())
    total_hours = sum(w.total_hours for w in workloads.values())
    average = total_meetings / len(workloads) if workloads else 0.0

    recommendations = []
    if average > 5:
        recommendations.append(Recommendation(
            priority=RecommendationPriority.HIGH,
            message="Team meeting load is high. Consider implementing no-meeting days.",
        ))

    if workloads:
        hours = [w.total_hours for w in workloads.values()]
        if max(hours) - min(hours) > 10:
            recommendations.append(Recommendation(
                priority=RecommendationPriority.MEDIUM,
                message="Meeting workload is unevenly distributed across the team.",
            ))

    total_back_to_back = sum(w.back_to_back_meetings for w in workloads.values())
    if total_back_to_back > total_meetings * 0.3:
        recommendations.append(Recommendation(
            priority=RecommendationPriority.HIGH,
            message="Too many back-to-back meetings. Encourage breaks between meetings.",
        ))

    return TeamWorkload(
        total_meetings=total_meetings,
        total_meeting_hours=total_hours,
        average_meetings_per_person=average,
        member_workloads=workloads,
        recommendations=recommendations,
        skipped_members=skipped,
    )
