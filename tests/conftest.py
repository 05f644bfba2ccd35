"""Shared test fixtures for the burnout scheduler tests.

This module provides common fixtures used across all test modules:
- A fixed reference week (2024-01-15 is a Monday)
- Factories for calendar events and busy intervals
- A fake calendar provider for the service layer
- config.TIMEZONE pinned to UTC

Usage:
    def test_something(make_interval, monday):
        interval = make_interval(monday, "09:00", "10:00")
        ...
"""

import asyncio
from datetime import date, datetime, time, timedelta

import pytest
import pytz

from burnout_scheduler import config
from burnout_scheduler.schemas import Event
from burnout_scheduler.scheduling.core.interval import Interval


# ─────────────────────────────────────────────────────────────────────────────
# Reference Dates
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def utc_timezone(monkeypatch):
    """Read offset-free timestamps as UTC regardless of the local .env."""
    monkeypatch.setattr(config, "TIMEZONE_NAME", "UTC")
    monkeypatch.setattr(config, "TIMEZONE", pytz.utc)


@pytest.fixture
def monday() -> date:
    """A Monday with no holidays or DST changes nearby."""
    return date(2024, 1, 15)


@pytest.fixture
def saturday(monday) -> date:
    return monday + timedelta(days=5)


@pytest.fixture
def sunday_evening(monday) -> datetime:
    """Reference `now` whose next five business days are Mon 15 - Fri 19."""
    return datetime.combine(monday - timedelta(days=1), time(20, 0))


# ─────────────────────────────────────────────────────────────────────────────
# Event Factories
# ─────────────────────────────────────────────────────────────────────────────


def _at(day: date, clock: str) -> datetime:
    hour, minute = (int(part) for part in clock.split(":"))
    return datetime.combine(day, time(hour, minute))


@pytest.fixture
def make_event():
    """Build an Event on `day` from "HH:MM" strings."""

    def _make(day: date, start: str, end: str, **fields) -> Event:
        fields.setdefault("summary", f"Meeting {start}")
        return Event(start=_at(day, start), end=_at(day, end), **fields)

    return _make


@pytest.fixture
def make_interval(make_event):
    """Build a busy Interval on `day` from "HH:MM" strings."""

    def _make(day: date, start: str, end: str, **fields) -> Interval:
        event = make_event(day, start, end, **fields)
        return Interval(event.start, event.end, event)

    return _make


# ─────────────────────────────────────────────────────────────────────────────
# Calendar Provider
# ─────────────────────────────────────────────────────────────────────────────


class FakeCalendarProvider:
    """In-memory provider returning canned records per participant.

    A participant mapped to an Exception instance raises it; participants in
    `slow` never answer within a short timeout.
    """

    def __init__(self, records=None, slow=None, delay: float = 5.0):
        self.records = records or {}
        self.slow = set(slow or [])
        self.delay = delay
        self.calls = []

    async def list_events(self, participant, time_min, time_max):
        self.calls.append((participant, time_min, time_max))
        if participant in self.slow:
            await asyncio.sleep(self.delay)
        value = self.records.get(participant, [])
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def fake_provider_class():
    return FakeCalendarProvider


def google_record(event_id: str, start: datetime, end: datetime, **extra) -> dict:
    """A Google Calendar style item."""
    record = {
        "id": event_id,
        "summary": extra.pop("summary", event_id),
        "start": {"dateTime": start.isoformat()},
        "end": {"dateTime": end.isoformat()},
    }
    record.update(extra)
    return record


@pytest.fixture
def make_record():
    return google_record
