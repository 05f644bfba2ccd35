"""
Short-lived conversation state for multi-step flows (pick a slot, confirm a
break, reschedule). Sessions carry an explicit expiry and every call takes the
current time, so nothing here reads the clock.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple
from ..config import SESSION_TTL_MINUTES

logger = logging.getLogger(__name__)

SessionKey = Tuple[str, str]


@dataclass
class Session:
    participant_id: str
    conversation_id: str
    created_at: datetime
    expires_at: datetime
    step: str = "start"
    data: Dict[str, Any] = field(default_factory=dict)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionStore:
    def __init__(self, ttl_minutes: int = SESSION_TTL_MINUTES):
        if ttl_minutes <= 0:
            raise ValueError("Session TTL must be positive")
        self.ttl = timedelta(minutes=ttl_minutes)
        self._sessions: Dict[SessionKey, Session] = {}

    def __len__(self):
        return len(self._sessions)

    def start(self, participant_id: str, conversation_id: str, now: datetime,
              step: str = "start", **data) -> Session:
        """Open (or replace) the session for this participant and conversation."""
        self.purge_expired(now)
        session = Session(
            participant_id=participant_id,
            conversation_id=conversation_id,
            created_at=now,
            expires_at=now + self.ttl,
            step=step,
            data=dict(data),
        )
        self._sessions[(participant_id, conversation_id)] = session
        return session

    def get(self, participant_id: str, conversation_id: str, now: datetime) -> Optional[Session]:
        self.purge_expired(now)
        return self._sessions.get((participant_id, conversation_id))

    def update(self, participant_id: str, conversation_id: str, now: datetime,
               step: Optional[str] = None, **data) -> Optional[Session]:
        """
        Advance a live session and push its expiry out by another TTL.
        Returns None when the session is missing or has expired.
        """
        session = self.get(participant_id, conversation_id, now)
        if session is None:
            return None
        if step is not None:
            session.step = step
        session.data.update(data)
        session.expires_at = now + self.ttl
        return session

    def end(self, participant_id: str, conversation_id: str) -> Optional[Session]:
        return self._sessions.pop((participant_id, conversation_id), None)

    def purge_expired(self, now: datetime) -> int:
        expired = [key for key, session in self._sessions.items() if session.is_expired(now)]
        for key in expired:
            del self._sessions[key]
        if expired:
            logger.debug("Purged %d expired sessions", len(expired))
        return len(expired)
