import logging
from pydantic import BaseModel, Field, ValidationError, model_validator
from datetime import datetime, date
from typing import Any, Dict, List, Optional
from dateutil import parser as date_parser
from . import config
from .models import Horizon, TimeUnit, RiskLevel, BreakType, BreakPriority, RecommendationType, RecommendationPriority
from .scheduling.core.errors import InvalidEventError
from .scheduling.utils.slot_utils import localize

logger = logging.getLogger(__name__)

# ----------------- Event Schemas ---------------------

class Event(BaseModel):
    id: str = ""
    summary: str = ""
    start: datetime
    end: datetime
    attendees: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    all_day: bool = False  # date-only events, excluded from interval algorithms

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_times(self):
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise ValueError("start and end must both be timezone aware or both naive")
        if self.start >= self.end:
            raise ValueError("event must end after it starts")
        return self

    @classmethod
    def from_provider(cls, record: Dict[str, Any]) -> "Event":
        """
        Build an Event from a calendar provider record.

        Accepts Google Calendar items ({"start": {"dateTime": ...}} or
        {"start": {"date": ...}} for all-day events) and flat records using
        startTime/endTime or start/end timestamps. Timestamps without an
        offset are read as wall-clock time in config.TIMEZONE.
        """
        if not isinstance(record, dict):
            raise InvalidEventError("calendar record must be a mapping", record)

        start, start_is_date = _read_time(record.get("start", record.get("startTime")))
        end, end_is_date = _read_time(record.get("end", record.get("endTime")))
        if start is None or end is None:
            raise InvalidEventError(f"event {record.get('id', '?')} is missing its start or end", record)

        try:
            return cls(
                id=str(record.get("id") or ""),
                summary=record.get("summary") or record.get("title") or "",
                start=start,
                end=end,
                attendees=_read_attendees(record.get("attendees")),
                location=record.get("location"),
                all_day=start_is_date or end_is_date,
            )
        except ValidationError as e:
            raise InvalidEventError(f"event {record.get('id', '?')} is invalid: {e}", record) from e


def _read_time(value):
    """Return (aware datetime, is_date_only) for a provider time field."""
    moment, is_date = _read_moment(value)
    if moment is None:
        return None, False
    return localize(moment, config.TIMEZONE), is_date


def _read_moment(value):
    if value is None:
        return None, False
    if isinstance(value, dict):
        if value.get("dateTime"):
            value = value["dateTime"]
        elif value.get("date"):
            return _parse(value["date"]), True
        else:
            return None, False
    if isinstance(value, datetime):
        return value, False
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time()), True
    if isinstance(value, str):
        # YYYY-MM-DD carries no time of day
        return _parse(value), len(value.strip()) == 10
    return None, False


def _parse(text: str) -> datetime:
    try:
        return date_parser.isoparse(text)
    except (ValueError, OverflowError) as e:
        raise InvalidEventError(f"unreadable timestamp {text!r}") from e


def _read_attendees(attendees) -> List[str]:
    if not attendees:
        return []
    result = []
    for attendee in attendees:
        if isinstance(attendee, dict):
            identifier = attendee.get("email") or attendee.get("id")
        else:
            identifier = attendee
        if identifier:
            result.append(str(identifier))
    return result


def parse_events(records: List[Dict[str, Any]], owner: str = "?") -> List[Event]:
    """Parse provider records, skipping and logging malformed ones."""
    events = []
    for record in records or []:
        try:
            events.append(Event.from_provider(record))
        except InvalidEventError as e:
            logger.info("Skipping malformed event for %s: %s", owner, e)
    return events

# ----------------- Burnout Schemas ---------------------

class BurnoutMetrics(BaseModel):
    total_hours: float = 0.0
    back_to_back_count: int = 0
    after_hours_count: int = 0
    weekend_count: int = 0
    longest_streak_hours: float = 0.0
    score: float = 0.0

    class Config:
        frozen = True

# ----------------- Workload Schemas ---------------------

class WorkloadAnalysis(BaseModel):
    horizon: Horizon
    time_unit: TimeUnit
    meeting_count: int
    total_hours: float
    buckets: Dict[str, float]  # hour of day or ISO date -> hours (day) / meetings (week, month)
    busiest_bucket: Optional[str] = None
    busiest_label: Optional[str] = None
    busiest_value: float = 0.0
    average_per_unit: float
    risk_level: RiskLevel
    break_count: int
    suggested_breaks: int
    break_deficit: int
    notes: List[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def display_risk_level(self) -> RiskLevel:
        """Risk level to show; a break deficit turns low risk into moderate."""
        if self.risk_level == RiskLevel.LOW and self.break_deficit > 0:
            return RiskLevel.MODERATE
        return self.risk_level

# ----------------- Break Schemas ---------------------

class BreakSuggestion(BaseModel):
    start: datetime
    end: datetime
    type: BreakType
    priority: BreakPriority
    reason: str

    class Config:
        frozen = True

class BreakValidation(BaseModel):
    is_valid: bool
    reason: str

    class Config:
        frozen = True

# ----------------- Health Schemas ---------------------

class HealthMetrics(BaseModel):
    score: int
    break_compliance: float
    focus_time_ratio: float
    meeting_efficiency: float
    work_life_balance: float
    positive_factors: List[str] = Field(default_factory=list)
    negative_factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

    class Config:
        frozen = True

# ----------------- Slot Schemas ---------------------

class Slot(BaseModel):
    start: datetime
    end: datetime
    score: float
    duration_minutes: int

    class Config:
        frozen = True

class SlotSearchResult(BaseModel):
    slots: List[Slot] = Field(default_factory=list)
    skipped_participants: List[str] = Field(default_factory=list)
    overloaded_participants: List[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def partial(self) -> bool:
        return bool(self.skipped_participants)

class FocusBlock(BaseModel):
    start: datetime
    end: datetime
    duration_minutes: int

    class Config:
        frozen = True

# ----------------- Team Schemas ---------------------

class TeamSlot(BaseModel):
    start: datetime
    end: datetime
    available_members: List[str]

    class Config:
        frozen = True

class TeamAvailability(BaseModel):
    date: date
    slots: List[TeamSlot]
    common_slots: List[TeamSlot]
    member_availability: Dict[str, int]  # member -> free grid slots
    skipped_members: List[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def partial(self) -> bool:
        return bool(self.skipped_members)

class TeamMeetingSuggestion(BaseModel):
    start: datetime
    end: datetime
    score: float
    date: date

    class Config:
        frozen = True

class TeamMeetingSearchResult(BaseModel):
    suggestions: List[TeamMeetingSuggestion] = Field(default_factory=list)
    skipped_members: List[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def partial(self) -> bool:
        return bool(self.skipped_members)

class Recommendation(BaseModel):
    message: str
    type: Optional[RecommendationType] = None
    priority: Optional[RecommendationPriority] = None

    class Config:
        frozen = True

class MemberWorkload(BaseModel):
    member: str
    meeting_count: int = 0
    total_hours: float = 0.0
    back_to_back_meetings: int = 0
    out_of_hours_meetings: int = 0

    class Config:
        frozen = True

class TeamWorkload(BaseModel):
    total_meetings: int
    total_meeting_hours: float
    average_meetings_per_person: float
    member_workloads: Dict[str, MemberWorkload]
    recommendations: List[Recommendation] = Field(default_factory=list)
    skipped_members: List[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def partial(self) -> bool:
        return bool(self.skipped_members)

# ----------------- Analytics Schemas ---------------------

class MeetingPatterns(BaseModel):
    back_to_back: int = 0
    early_morning: int = 0
    late_evening: int = 0
    long_meetings: int = 0

    class Config:
        frozen = True

class MeetingMetrics(BaseModel):
    total_meetings: int
    total_duration_minutes: float
    average_duration_minutes: float
    meetings_per_day: Dict[str, int]
    busy_hours: List[int]

    class Config:
        frozen = True

class MeetingEfficiency(BaseModel):
    score: float
    average_duration_minutes: int
    back_to_back_count: int
    outside_hours_count: int
    longest_meeting_minutes: float
    total_meetings: int

    class Config:
        frozen = True

class AnalyticsReport(BaseModel):
    patterns: MeetingPatterns
    metrics: MeetingMetrics
    recommendations: List[Recommendation] = Field(default_factory=list)

    class Config:
        frozen = True
