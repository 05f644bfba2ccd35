"""
Meeting pattern analytics and the recommendation table built on them.
"""

from typing import List, Sequence
from ..core.interval import Interval
from ..core.constants import CORE_HOURS_START, CORE_HOURS_END, BACK_TO_BACK_THRESHOLD
from ...models import RecommendationType
from ...schemas import MeetingPatterns, MeetingMetrics, MeetingEfficiency, AnalyticsReport, Recommendation


def analyze_meeting_patterns(intervals: Sequence[Interval]) -> MeetingPatterns:
    ordered = sorted(intervals)
    back_to_back = early_morning = late_evening = long_meetings = 0

    for index, interval in enumerate(ordered):
        if index > 0 and interval.start - ordered[index - 1].end < BACK_TO_BACK_THRESHOLD:
            back_to_back += 1
        if interval.start_hour < CORE_HOURS_START:
            early_morning += 1
        if interval.end.hour >= CORE_HOURS_END:
            late_evening += 1
        if interval.duration_minutes() > 60:
            long_meetings += 1

    return MeetingPatterns(
        back_to_back=back_to_back,
        early_morning=early_morning,
        late_evening=late_evening,
        long_meetings=long_meetings,
    )


def calculate_meeting_metrics(intervals: Sequence[Interval]) -> MeetingMetrics:
    """
    Totals plus a per-day count and a 24-hour histogram. A meeting counts
    towards every hour from its start hour to its end hour inclusive.
    """
    ordered = sorted(intervals)
    total_minutes = 0.0
    meetings_per_day = {}
    busy_hours = [0] * 24

    for interval in ordered:
        total_minutes += interval.duration_minutes()
        day = interval.start.date().isoformat()
        meetings_per_day[day] = meetings_per_day.get(day, 0) + 1

        last_hour = interval.end.hour if interval.end.date() == interval.start.date() else 23
        for hour in range(interval.start_hour, last_hour + 1):
            busy_hours[hour] += 1

    return MeetingMetrics(
        total_meetings=len(ordered),
        total_duration_minutes=total_minutes,
        average_duration_minutes=total_minutes / len(ordered) if ordered else 0.0,
        meetings_per_day=meetings_per_day,
        busy_hours=busy_hours,
    )


def calculate_meeting_efficiency(intervals: Sequence[Interval]) -> MeetingEfficiency:
    """
    Weighted 0-1 efficiency: 40% spacing between meetings, 30% staying inside
    working hours, 30% total meeting time under four hours.
    """
    ordered = sorted(intervals)
    if not ordered:
        return MeetingEfficiency(
            score=0.0,
            average_duration_minutes=0,
            back_to_back_count=0,
            outside_hours_count=0,
            longest_meeting_minutes=0.0,
            total_meetings=0,
        )

    total_minutes = 0.0
    longest = 0.0
    back_to_back = 0
    outside_hours = 0
    previous_end = None

    for interval in ordered:
        minutes = interval.duration_minutes()
        total_minutes += minutes
        longest = max(longest, minutes)

        if previous_end is not None and interval.start - previous_end < BACK_TO_BACK_THRESHOLD:
            back_to_back += 1
        if interval.start_hour < CORE_HOURS_START or interval.end.hour > CORE_HOURS_END:
            outside_hours += 1
        previous_end = interval.end

    count = len(ordered)
    back_to_back_ratio = 1 - back_to_back / max(count - 1, 1)
    work_hours_ratio = 1 - outside_hours / count
    duration_ratio = 1 - max(0.0, total_minutes - 240) / 480

    score = back_to_back_ratio * 0.4 + work_hours_ratio * 0.3 + duration_ratio * 0.3

    return MeetingEfficiency(
        score=max(0.0, min(1.0, score)),
        average_duration_minutes=round(total_minutes / count),
        back_to_back_count=back_to_back,
        outside_hours_count=outside_hours,
        longest_meeting_minutes=longest,
        total_meetings=count,
    )


def generate_recommendations(patterns: MeetingPatterns, metrics: MeetingMetrics) -> List[Recommendation]:
    recommendations = []

    if patterns.back_to_back > 3:
        recommendations.append(Recommendation(
            type=RecommendationType.WARNING,
            message="Consider adding breaks between meetings to avoid burnout",
        ))

    if patterns.early_morning > 0 or patterns.late_evening > 0:
        recommendations.append(Recommendation(
            type=RecommendationType.SUGGESTION,
            message="Try to schedule meetings within core work hours (9 AM - 5 PM)",
        ))

    if patterns.long_meetings > 2:
        recommendations.append(Recommendation(
            type=RecommendationType.OPTIMIZATION,
            message="Consider breaking down longer meetings into shorter sessions",
        ))

    if metrics.average_duration_minutes > 45:
        recommendations.append(Recommendation(
            type=RecommendationType.OPTIMIZATION,
            message="Your average meeting duration is high. Consider setting 30-minute meetings as default",
        ))

    return recommendations


def generate_analytics_report(intervals: Sequence[Interval]) -> AnalyticsReport:
    patterns = analyze_meeting_patterns(intervals)
    metrics = calculate_meeting_metrics(intervals)
    return AnalyticsReport(
        patterns=patterns,
        metrics=metrics,
        recommendations=generate_recommendations(patterns, metrics),
    )
