"""
Scheduler service: fetches calendars through a provider and runs the
scheduling engine over them. Holds the conversation sessions for multi-step
flows such as offering slots and confirming one.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence
from .calendar_fetch import CalendarProvider, fetch_participant_events
from .session_state import SessionStore
from .. import config
from ..config import CALENDAR_FETCH_CONCURRENCY, CALENDAR_FETCH_TIMEOUT_SECONDS
from ..schemas import (
    Slot, SlotSearchResult, WorkloadAnalysis, BreakSuggestion, BreakValidation, HealthMetrics, BurnoutMetrics,
    TeamAvailability, TeamMeetingSearchResult, TeamWorkload, FocusBlock, AnalyticsReport
)
from ..scheduling.core.interval import Interval
from ..scheduling.core.errors import SchedulingError, InvalidInputError
from ..scheduling.utils.slot_utils import to_intervals, at_time, zone_of, localize
from ..scheduling.scoring.burnout_scoring import calculate_burnout_metrics
from ..scheduling.scoring.workload_scoring import analyze_workload, horizon_window, coerce_horizon
from ..scheduling.scoring.health_scoring import calculate_health_metrics
from ..scheduling.algorithms.breaks import suggest_smart_breaks, suggest_break_time, validate_break_time
from ..scheduling.algorithms.slot_finder import find_optimal_slots
from ..scheduling.algorithms.team_availability import (
    get_team_availability, find_optimal_team_meeting, analyze_team_workload
)
from ..scheduling.algorithms.focus_time import find_focus_blocks_for_week
from ..scheduling.algorithms.analytics import generate_analytics_report

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("burnout_scheduler.audit")

# Five business days never span more than seven calendar days, plus today
SEARCH_WINDOW_DAYS = 8
BURNOUT_LOOKBACK_DAYS = 7


class CalendarUnavailableError(SchedulingError):
    """The only participant of a request has no retrievable calendar."""


class SchedulerService:
    """Service that turns participant ids into engine results."""

    def __init__(self, provider: Optional[CalendarProvider] = None,
                 concurrency: int = CALENDAR_FETCH_CONCURRENCY,
                 timeout: float = CALENDAR_FETCH_TIMEOUT_SECONDS,
                 sessions: Optional[SessionStore] = None):
        self.provider = provider
        self.concurrency = concurrency
        self.timeout = timeout
        self.sessions = sessions or SessionStore()

    def use_provider(self, provider: CalendarProvider):
        self.provider = provider

    def _localize(self, moment: datetime) -> datetime:
        """Read a naive timestamp as wall-clock time in config.TIMEZONE."""
        return localize(moment, config.TIMEZONE)

    # ----------------- Fetching ---------------------

    async def fetch_intervals(self, participants: Sequence[str], time_min: datetime,
                              time_max: datetime) -> Dict[str, Optional[List[Interval]]]:
        """Busy intervals per participant inside [time_min, time_max); None when unreachable."""
        if self.provider is None:
            raise RuntimeError("SchedulerService has no calendar provider configured")
        time_min, time_max = self._localize(time_min), self._localize(time_max)
        events = await fetch_participant_events(
            self.provider, participants, time_min, time_max, self.concurrency, self.timeout
        )
        busy = {}
        for participant, participant_events in events.items():
            if participant_events is None:
                busy[participant] = None
                continue
            busy[participant] = [
                i for i in to_intervals(participant_events) if i.end > time_min and i.start < time_max
            ]
        missing = [p for p, intervals in busy.items() if intervals is None]
        if missing:
            logger.info("Continuing without calendars for %s", ", ".join(missing))
        return busy

    async def _fetch_one(self, participant: str, time_min: datetime, time_max: datetime) -> List[Interval]:
        busy = await self.fetch_intervals([participant], time_min, time_max)
        intervals = busy.get(participant)
        if intervals is None:
            raise CalendarUnavailableError(f"Calendar for {participant} could not be retrieved")
        return intervals

    def _day_bounds(self, now: datetime):
        tzinfo = zone_of(now)
        return (at_time(now.date(), 0, tzinfo=tzinfo),
                at_time(now.date() + timedelta(days=1), 0, tzinfo=tzinfo))

    def _audit(self, operation: str, participants: Sequence[str], **fields):
        details = " ".join(f"{key}={value}" for key, value in fields.items())
        audit_logger.info("%s participants=%d %s", operation, len(participants), details)

    # ----------------- Meeting Slots ---------------------

    async def find_meeting_slots(self, participants: Sequence[str], duration_minutes: int, now: datetime,
                                 top_k: int = 5) -> SlotSearchResult:
        """
        Best slots for everyone over the next five business days. Participants
        whose calendar cannot be fetched are reported as skipped.
        """
        if not participants:
            raise InvalidInputError("At least one participant is required")
        if duration_minutes is None or duration_minutes <= 0:
            raise InvalidInputError("Meeting duration must be a positive number of minutes")

        now = self._localize(now)
        time_min = now - timedelta(days=BURNOUT_LOOKBACK_DAYS)
        busy = await self.fetch_intervals(participants, time_min, now + timedelta(days=SEARCH_WINDOW_DAYS))

        burnout = {}
        for participant, intervals in busy.items():
            if intervals is not None:
                recent = [i for i in intervals if i.start < now]
                burnout[participant] = calculate_burnout_metrics(recent).score

        upcoming = {
            p: ([i for i in intervals if i.end > now] if intervals is not None else None)
            for p, intervals in busy.items()
        }
        result = find_optimal_slots(upcoming, duration_minutes, now, top_k, burnout)
        self._audit("find_meeting_slots", participants, duration=duration_minutes,
                    slots=len(result.slots), skipped=len(result.skipped_participants),
                    overloaded=len(result.overloaded_participants))
        return result

    def offer_slots(self, participant_id: str, conversation_id: str, result: SlotSearchResult, now: datetime):
        """Remember offered slots so a later reply can pick one by number."""
        now = self._localize(now)
        return self.sessions.start(participant_id, conversation_id, now, step="choose_slot",
                                   slots=list(result.slots))

    def choose_slot(self, participant_id: str, conversation_id: str, choice: int, now: datetime) -> Optional[Slot]:
        """
        Resolve a 1-based choice against the slots offered in this conversation.
        Returns None when the session has expired or the choice is out of range.
        """
        now = self._localize(now)
        session = self.sessions.get(participant_id, conversation_id, now)
        if session is None or session.step != "choose_slot":
            return None
        slots = session.data.get("slots", [])
        if not 1 <= choice <= len(slots):
            return None
        self.sessions.end(participant_id, conversation_id)
        return slots[choice - 1]

    # ----------------- Personal Analysis ---------------------

    async def get_burnout(self, participant: str, now: datetime) -> BurnoutMetrics:
        now = self._localize(now)
        intervals = await self._fetch_one(participant, now - timedelta(days=BURNOUT_LOOKBACK_DAYS), now)
        metrics = calculate_burnout_metrics(intervals)
        self._audit("get_burnout", [participant], score=metrics.score)
        return metrics

    async def get_workload(self, participant: str, horizon, now: datetime) -> WorkloadAnalysis:
        horizon = coerce_horizon(horizon)
        now = self._localize(now)
        time_min, time_max = horizon_window(horizon, now)
        intervals = await self._fetch_one(participant, time_min, time_max)
        analysis = analyze_workload(intervals, horizon)
        self._audit("get_workload", [participant], horizon=horizon.value,
                    meetings=analysis.meeting_count, risk=analysis.risk_level.value)
        return analysis

    async def get_health(self, participant: str, now: datetime) -> HealthMetrics:
        now = self._localize(now)
        day_start, day_end = self._day_bounds(now)
        intervals = await self._fetch_one(participant, day_start, day_end)
        metrics = calculate_health_metrics(intervals)
        self._audit("get_health", [participant], score=metrics.score)
        return metrics

    async def get_break_suggestions(self, participant: str, now: datetime) -> List[BreakSuggestion]:
        now = self._localize(now)
        day_start, day_end = self._day_bounds(now)
        intervals = await self._fetch_one(participant, day_start, day_end)
        suggestions = suggest_smart_breaks(intervals)
        self._audit("get_break_suggestions", [participant], suggestions=len(suggestions))
        return suggestions

    async def get_next_break(self, participant: str, now: datetime, duration_minutes: int = 30) -> BreakSuggestion:
        now = self._localize(now)
        day_start, day_end = self._day_bounds(now)
        intervals = await self._fetch_one(participant, day_start, day_end)
        suggestion = suggest_break_time(intervals, now, duration_minutes)
        self._audit("get_next_break", [participant], duration=duration_minutes)
        return suggestion

    async def check_break(self, participant: str, start: datetime, end: datetime) -> BreakValidation:
        start, end = self._localize(start), self._localize(end)
        intervals = await self._fetch_one(participant, start, end)
        validation = validate_break_time(start, end, intervals)
        self._audit("check_break", [participant], valid=validation.is_valid)
        return validation

    async def get_focus_blocks(self, participant: str, now: datetime) -> List[FocusBlock]:
        now = self._localize(now)
        intervals = await self._fetch_one(participant, now, now + timedelta(days=SEARCH_WINDOW_DAYS))
        blocks = find_focus_blocks_for_week(intervals, now)
        self._audit("get_focus_blocks", [participant], blocks=len(blocks))
        return blocks

    async def get_analytics(self, participant: str, now: datetime) -> AnalyticsReport:
        now = self._localize(now)
        intervals = await self._fetch_one(participant, now - timedelta(days=BURNOUT_LOOKBACK_DAYS), now)
        report = generate_analytics_report(intervals)
        self._audit("get_analytics", [participant], meetings=report.metrics.total_meetings)
        return report

    # ----------------- Team ---------------------

    async def get_team_availability(self, team: Sequence[str], day: date, now: datetime) -> TeamAvailability:
        if not team:
            raise InvalidInputError("A team needs at least one member")
        tzinfo = zone_of(self._localize(now))
        day_start = at_time(day, 0, tzinfo=tzinfo)
        busy = await self.fetch_intervals(team, day_start, day_start + timedelta(days=1))
        availability = get_team_availability(team, busy, day, tzinfo)
        self._audit("get_team_availability", team, date=day.isoformat(),
                    common_slots=len(availability.common_slots), skipped=len(availability.skipped_members))
        return availability

    async def suggest_team_meeting(self, team: Sequence[str], now: datetime,
                                   duration_minutes: int = 30) -> TeamMeetingSearchResult:
        if not team:
            raise InvalidInputError("A team needs at least one member")
        if duration_minutes is None or duration_minutes <= 0:
            raise InvalidInputError("Meeting duration must be a positive number of minutes")
        now = self._localize(now)
        busy = await self.fetch_intervals(team, now, now + timedelta(days=SEARCH_WINDOW_DAYS))
        result = find_optimal_team_meeting(team, busy, now, duration_minutes)
        self._audit("suggest_team_meeting", team, duration=duration_minutes,
                    suggestions=len(result.suggestions), skipped=len(result.skipped_members))
        return result

    async def get_team_workload(self, team: Sequence[str], now: datetime) -> TeamWorkload:
        if not team:
            raise InvalidInputError("A team needs at least one member")
        now = self._localize(now)
        busy = await self.fetch_intervals(team, now - timedelta(days=BURNOUT_LOOKBACK_DAYS), now)
        workload = analyze_team_workload(team, busy)
        self._audit("get_team_workload", team, meetings=workload.total_meetings,
                    skipped=len(workload.skipped_members))
        return workload


# Global scheduler service instance; call use_provider() before first use
scheduler_service = SchedulerService()
