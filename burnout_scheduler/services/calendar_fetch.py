"""
Concurrent calendar retrieval for a set of participants.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence
from ..schemas import Event, parse_events
from ..config import CALENDAR_FETCH_CONCURRENCY, CALENDAR_FETCH_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class CalendarProvider(Protocol):
    async def list_events(self, participant: str, time_min: datetime,
                          time_max: datetime) -> List[Dict[str, Any]]:
        ...


async def fetch_participant_events(provider: CalendarProvider, participants: Sequence[str],
                                   time_min: datetime, time_max: datetime,
                                   concurrency: int = CALENDAR_FETCH_CONCURRENCY,
                                   timeout: float = CALENDAR_FETCH_TIMEOUT_SECONDS
                                   ) -> Dict[str, Optional[List[Event]]]:
    """
    Fetch every participant's events between time_min and time_max.

    At most `concurrency` fetches run at once and each is bounded by
    `timeout` seconds. A participant whose fetch fails or times out maps to
    None; the others are returned once every fetch has settled.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def fetch_one(participant: str) -> Optional[List[Event]]:
        async with semaphore:
            try:
                records = await asyncio.wait_for(
                    provider.list_events(participant, time_min, time_max), timeout
                )
            except asyncio.TimeoutError:
                logger.warning("Calendar fetch for %s timed out after %ss", participant, timeout)
                return None
            except Exception as e:
                logger.warning("Calendar fetch for %s failed: %s", participant, e)
                return None
        return parse_events(records, owner=participant)

    # dict.fromkeys keeps the first occurrence of duplicate ids
    unique = list(dict.fromkeys(participants))
    results = await asyncio.gather(*(fetch_one(p) for p in unique))
    return dict(zip(unique, results))
