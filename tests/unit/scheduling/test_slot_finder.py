"""Tests for scheduling/algorithms/slot_finder.py

The slot finder merges every participant's busy time and ranks free slots
over the next five business days.
"""

from datetime import datetime, time, timedelta

import pytest
import pytz

from burnout_scheduler.schemas import Event, Slot
from burnout_scheduler.scheduling.core.errors import InvalidInputError
from burnout_scheduler.scheduling.algorithms import slot_finder
from burnout_scheduler.scheduling.algorithms.slot_finder import find_optimal_slots, rank_slots
from burnout_scheduler.scheduling.utils.slot_utils import overlaps, to_intervals


@pytest.fixture
def week(monday):
    return [monday + timedelta(days=offset) for offset in range(5)]


class TestFindOptimalSlots:
    """Tests for multi-participant slot search."""

    def test_free_calendars_give_morning_slots(self, sunday_evening, week):
        """Should offer 9 AM on each of the next five business days."""
        result = find_optimal_slots({"ana": [], "ben": []}, 30, sunday_evening)

        assert [s.start for s in result.slots] == [datetime.combine(d, time(9)) for d in week]
        assert all(s.score == 10 for s in result.slots)
        assert all(s.duration_minutes == 30 for s in result.slots)
        assert not result.partial

    def test_fully_booked_participant_blocks_everything(self, make_interval, sunday_evening, week):
        """Should return no slots when one participant is busy 9 to 6 every day."""
        busy = {"ana": [], "ben": [make_interval(day, "09:00", "18:00") for day in week]}

        result = find_optimal_slots(busy, 30, sunday_evening)

        assert result.slots == []

    def test_fully_booked_day_is_skipped(self, make_interval, sunday_evening, monday):
        """Should return nothing on a day one participant has fully booked."""
        busy = {"ana": [], "ben": [make_interval(monday, "09:00", "18:00")]}

        result = find_optimal_slots(busy, 30, sunday_evening, top_k=10)

        assert result.slots
        assert all(s.start.date() != monday for s in result.slots)

    def test_slots_never_overlap_busy_time(self, make_interval, sunday_evening, week):
        """Should keep every slot clear of every participant's meetings, on weekdays 9 to 6."""
        busy = {
            "ana": [make_interval(day, "09:00", "10:30") for day in week],
            "ben": [make_interval(day, "10:45", "12:15") for day in week]
                   + [make_interval(day, "14:00", "17:40") for day in week],
        }

        result = find_optimal_slots(busy, 45, sunday_evening, top_k=20)

        assert result.slots
        all_busy = [i for intervals in busy.values() for i in intervals]
        for slot in result.slots:
            assert slot.start.weekday() < 5
            assert slot.start.time() >= time(9) and slot.end.time() <= time(18)
            assert slot.end - slot.start == timedelta(minutes=45)
            for interval in all_busy:
                assert not overlaps(slot.start, slot.end, interval.start, interval.end)

    def test_gap_too_short_is_ignored(self, make_interval, sunday_evening, monday):
        """Should skip a 15 minute gap for a 30 minute meeting."""
        busy = {"ana": [make_interval(monday, "09:00", "17:45")]}

        result = find_optimal_slots(busy, 30, sunday_evening, top_k=10)

        assert all(s.start.date() != monday for s in result.slots)

    def test_better_time_of_day_ranks_first(self, make_interval, sunday_evening, monday, week):
        """Should rank an afternoon-only day below free mornings."""
        busy = {"ana": [make_interval(monday, "09:00", "12:00")]}

        result = find_optimal_slots(busy, 30, sunday_evening, top_k=5)

        assert result.slots[-1].start == datetime.combine(monday, time(12))
        assert result.slots[-1].score == 5

    def test_unreachable_participant_is_skipped(self, make_interval, sunday_evening, monday):
        """Should report a None calendar as skipped and mark the result partial."""
        result = find_optimal_slots({"ana": [], "ben": None}, 30, sunday_evening)

        assert result.skipped_participants == ["ben"]
        assert result.partial
        assert len(result.slots) == 5

    def test_all_unreachable_gives_no_slots(self, sunday_evening):
        """Should return an empty, partial result when nobody can be fetched."""
        result = find_optimal_slots({"ana": None}, 30, sunday_evening)

        assert result.slots == []
        assert result.partial

    def test_overloaded_participants_are_reported(self, sunday_evening):
        """Should list participants at or above the burnout alert threshold."""
        result = find_optimal_slots(
            {"ana": [], "ben": []}, 30, sunday_evening, burnout_by_participant={"ana": 60, "ben": 59.9}
        )

        assert result.overloaded_participants == ["ana"]
        assert len(result.slots) == 5

    def test_top_k(self, sunday_evening):
        """Should cap the number of slots returned."""
        assert len(find_optimal_slots({"ana": []}, 30, sunday_evening, top_k=2).slots) == 2

    def test_rejects_empty_participants(self, sunday_evening):
        """Should raise for an empty participant mapping."""
        with pytest.raises(InvalidInputError):
            find_optimal_slots({}, 30, sunday_evening)

    @pytest.mark.parametrize("duration", [0, -15])
    def test_rejects_non_positive_duration(self, sunday_evening, duration):
        """Should raise for zero or negative durations."""
        with pytest.raises(InvalidInputError):
            find_optimal_slots({"ana": []}, duration, sunday_evening)


def test_rank_slots_breaks_ties_by_start(monday):
    """Should order by score, then by earliest start."""
    late = Slot(start=datetime.combine(monday, time(10)), end=datetime.combine(monday, time(11)),
                score=10, duration_minutes=60)
    early = Slot(start=datetime.combine(monday, time(9)), end=datetime.combine(monday, time(10)),
                 score=10, duration_minutes=60)
    lunch = Slot(start=datetime.combine(monday, time(12)), end=datetime.combine(monday, time(13)),
                 score=5, duration_minutes=60)

    assert rank_slots([lunch, late, early]) == [early, late, lunch]


def test_parsed_calendars_from_mixed_sources(sunday_evening, monday):
    """Should merge a calendar of offset-free records with one of UTC records."""
    ana = Event.from_provider({"start": f"{monday}T09:00:00", "end": f"{monday}T10:00:00"})
    ben = Event.from_provider({"start": {"dateTime": f"{monday}T10:00:00Z"},
                               "end": {"dateTime": f"{monday}T11:00:00Z"}})
    busy = {"ana": to_intervals([ana]), "ben": to_intervals([ben])}

    result = find_optimal_slots(busy, 60, pytz.utc.localize(sunday_evening))

    monday_slots = [s for s in result.slots if s.start.date() == monday]
    assert [s.start.time() for s in monday_slots] == [time(11, 0)]


def test_candidates_pass_time_constraints(monkeypatch, sunday_evening):
    """Should drop every candidate the time constraints reject."""
    checked = []

    def reject(start, end, intervals, start_hour, end_hour):
        checked.append((start, end, start_hour, end_hour))
        return False

    monkeypatch.setattr(slot_finder, "is_slot_allowed", reject)

    result = find_optimal_slots({"ana": []}, 30, sunday_evening)

    assert result.slots == []
    assert len(checked) == 5
    assert {(c[2], c[3]) for c in checked} == {(9, 18)}
