"""Tests for scheduling/algorithms/focus_time.py and scheduling/algorithms/analytics.py"""

from datetime import time, timedelta

import pytest

from burnout_scheduler.models import RecommendationType
from burnout_scheduler.scheduling.core.errors import InvalidInputError
from burnout_scheduler.scheduling.algorithms.focus_time import find_focus_blocks, find_focus_blocks_for_week
from burnout_scheduler.scheduling.algorithms.analytics import (
    analyze_meeting_patterns, calculate_meeting_metrics, calculate_meeting_efficiency, generate_analytics_report
)


# ─────────────────────────────────────────────────────────────────────────────
# Focus Time
# ─────────────────────────────────────────────────────────────────────────────


class TestFocusBlocks:
    """Tests for long meeting-free stretches."""

    def test_two_hour_gaps_only(self, make_interval, monday):
        """Should keep gaps of at least two hours between 9 AM and 6 PM."""
        intervals = [make_interval(monday, "11:00", "12:00"), make_interval(monday, "13:00", "16:00")]

        blocks = find_focus_blocks(intervals, monday)

        assert [(b.start.time(), b.end.time()) for b in blocks] == [(time(9), time(11)), (time(16), time(18))]
        assert blocks[0].duration_minutes == 120

    def test_free_day_is_one_block(self, monday):
        """Should return the whole working day when nothing is booked."""
        blocks = find_focus_blocks([], monday)

        assert len(blocks) == 1
        assert blocks[0].duration_minutes == 9 * 60

    def test_custom_minimum(self, make_interval, monday):
        """Should honour a shorter minimum length."""
        intervals = [make_interval(monday, "10:00", "17:00")]

        blocks = find_focus_blocks(intervals, monday, min_minutes=60)

        assert [b.duration_minutes for b in blocks] == [60, 60]

    def test_rejects_non_positive_minimum(self, monday):
        """Should raise for a zero minimum."""
        with pytest.raises(InvalidInputError):
            find_focus_blocks([], monday, min_minutes=0)

    def test_week_covers_next_business_days(self, sunday_evening, monday):
        """Should search the five business days after now."""
        blocks = find_focus_blocks_for_week([], sunday_evening)

        assert [b.start.date() for b in blocks] == [monday + timedelta(days=d) for d in range(5)]


# ─────────────────────────────────────────────────────────────────────────────
# Meeting Analytics
# ─────────────────────────────────────────────────────────────────────────────


class TestMeetingPatterns:
    """Tests for meeting pattern detection."""

    def test_counts_patterns(self, make_interval, monday):
        """Should count back-to-back, early, late and long meetings."""
        intervals = [
            make_interval(monday, "08:00", "08:30"),
            make_interval(monday, "08:40", "10:00"),
            make_interval(monday, "16:30", "17:30"),
        ]

        patterns = analyze_meeting_patterns(intervals)

        assert patterns.back_to_back == 1
        assert patterns.early_morning == 2
        assert patterns.late_evening == 1
        assert patterns.long_meetings == 1

    def test_fifteen_minute_gap_is_not_back_to_back(self, make_interval, monday):
        """Should require a gap strictly under 15 minutes."""
        intervals = [make_interval(monday, "09:00", "10:00"), make_interval(monday, "10:15", "11:00")]

        assert analyze_meeting_patterns(intervals).back_to_back == 0


class TestMeetingMetrics:
    """Tests for meeting totals and the busy-hours histogram."""

    def test_metrics(self, make_interval, monday):
        """Should total minutes and mark every hour a meeting touches."""
        tuesday = monday + timedelta(days=1)
        intervals = [make_interval(monday, "09:30", "11:15"), make_interval(tuesday, "14:00", "14:30")]

        metrics = calculate_meeting_metrics(intervals)

        assert metrics.total_meetings == 2
        assert metrics.total_duration_minutes == 135
        assert metrics.average_duration_minutes == pytest.approx(67.5)
        assert metrics.meetings_per_day == {"2024-01-15": 1, "2024-01-16": 1}
        assert metrics.busy_hours[9] == metrics.busy_hours[10] == metrics.busy_hours[11] == 1
        assert metrics.busy_hours[14] == 1
        assert sum(metrics.busy_hours) == 4

    def test_empty(self):
        """Should return zeros for no meetings."""
        metrics = calculate_meeting_metrics([])

        assert metrics.total_meetings == 0
        assert metrics.average_duration_minutes == 0
        assert metrics.busy_hours == [0] * 24


class TestMeetingEfficiency:
    """Tests for the weighted efficiency score."""

    def test_empty_calendar(self):
        """Should return a zero score for no meetings."""
        efficiency = calculate_meeting_efficiency([])

        assert efficiency.score == 0
        assert efficiency.total_meetings == 0

    def test_well_spaced_day(self, make_interval, monday):
        """Should score a light, well spaced day at the maximum."""
        intervals = [make_interval(monday, "09:00", "10:00"), make_interval(monday, "11:00", "12:00")]

        efficiency = calculate_meeting_efficiency(intervals)

        assert efficiency.score == pytest.approx(1.0)
        assert efficiency.average_duration_minutes == 60
        assert efficiency.longest_meeting_minutes == 60

    def test_penalties(self, make_interval, monday):
        """Should lose points for back-to-back, out-of-hours and long days."""
        intervals = [
            make_interval(monday, "07:00", "12:00"),
            make_interval(monday, "12:05", "17:00"),
        ]

        efficiency = calculate_meeting_efficiency(intervals)

        # one of one pairs back-to-back, one of two outside hours, 595 minutes
        expected = 0 * 0.4 + 0.5 * 0.3 + (1 - 355 / 480) * 0.3
        assert efficiency.score == pytest.approx(expected)
        assert efficiency.back_to_back_count == 1
        assert efficiency.outside_hours_count == 1


class TestAnalyticsReport:
    """Tests for the combined report and its recommendations."""

    def test_busy_week_recommendations(self, make_interval, monday):
        """Should warn about back-to-back meetings and suggest core hours."""
        intervals = [make_interval(monday, f"{h:02d}:00", f"{h:02d}:50") for h in range(8, 14)]

        report = generate_analytics_report(intervals)

        types = [r.type for r in report.recommendations]
        assert RecommendationType.WARNING in types
        assert RecommendationType.SUGGESTION in types
        assert report.patterns.back_to_back == 5
        assert report.metrics.average_duration_minutes == pytest.approx(50)

    def test_long_meetings_recommend_shorter_defaults(self, make_interval, monday):
        """Should suggest shorter meetings when long meetings dominate."""
        intervals = [
            make_interval(monday + timedelta(days=d), "10:00", "11:30") for d in range(3)
        ]

        report = generate_analytics_report(intervals)

        messages = [r.message for r in report.recommendations]
        assert "Consider breaking down longer meetings into shorter sessions" in messages
        assert any("30-minute meetings" in m for m in messages)

    def test_quiet_calendar(self, make_interval, monday):
        """Should make no recommendations for a light calendar."""
        report = generate_analytics_report([make_interval(monday, "10:00", "10:30")])

        assert report.recommendations == []
