import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import pytz
from googleapiclient.discovery import build
from google.oauth2.credentials import Credentials
from ..config import GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_TOKEN_URI, GOOGLE_CALENDAR_SCOPES

logger = logging.getLogger(__name__)


class GoogleCalendarProvider:
    """
    Calendar provider backed by the Google Calendar v3 API.

    `token_lookup` maps a participant id to their stored OAuth tokens
    ({"access_token": ..., "refresh_token": ...}) or None when the participant
    never connected a calendar. The blocking client runs in a worker thread.
    """

    def __init__(self, token_lookup: Callable[[str], Optional[Dict[str, str]]],
                 calendar_id: str = "primary", service_factory=None):
        self.token_lookup = token_lookup
        self.calendar_id = calendar_id
        self.service_factory = service_factory or self._build_service

    def _build_service(self, tokens: Dict[str, str]):
        creds = Credentials(
            token=tokens.get("access_token"),
            refresh_token=tokens.get("refresh_token"),
            token_uri=GOOGLE_TOKEN_URI,
            client_id=GOOGLE_CLIENT_ID,
            client_secret=GOOGLE_CLIENT_SECRET,
            scopes=GOOGLE_CALENDAR_SCOPES,
        )
        return build("calendar", "v3", credentials=creds, cache_discovery=False)

    async def list_events(self, participant: str, time_min: datetime, time_max: datetime) -> List[Dict[str, Any]]:
        tokens = self.token_lookup(participant)
        if not tokens:
            raise LookupError(f"No Google Calendar token for {participant}")
        return await asyncio.to_thread(self._list_events_sync, tokens, time_min, time_max)

    def _list_events_sync(self, tokens: Dict[str, str], time_min: datetime, time_max: datetime) -> List[Dict[str, Any]]:
        service = self.service_factory(tokens)
        items = []
        page_token = None
        while True:
            events_result = (
                service.events().list(
                    calendarId=self.calendar_id,
                    timeMin=_rfc3339(time_min),
                    timeMax=_rfc3339(time_max),
                    singleEvents=True,
                    orderBy="startTime",
                    pageToken=page_token,
                ).execute()
            )
            items.extend(events_result.get("items", []))
            page_token = events_result.get("nextPageToken")
            if not page_token:
                break
        logger.debug("Fetched %d Google Calendar items", len(items))
        return items


def _rfc3339(value: datetime) -> str:
    # Naive timestamps are taken as UTC
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    return value.isoformat()
