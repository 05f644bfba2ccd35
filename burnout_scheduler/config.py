"""
Runtime settings, read from the environment (and a local .env file).
"""

import os
import logging
from dotenv import load_dotenv
import pytz

load_dotenv()

TIMEZONE_NAME = os.getenv("TIMEZONE", "UTC")
try:
    TIMEZONE = pytz.timezone(TIMEZONE_NAME)
except pytz.UnknownTimeZoneError:
    raise RuntimeError(f"TIMEZONE {TIMEZONE_NAME!r} is not a known timezone")

# Calendar fetch fan-out
CALENDAR_FETCH_CONCURRENCY = int(os.getenv("CALENDAR_FETCH_CONCURRENCY", "5"))
CALENDAR_FETCH_TIMEOUT_SECONDS = float(os.getenv("CALENDAR_FETCH_TIMEOUT_SECONDS", "10"))

# Multi-step conversations (e.g. reschedule flows) expire after this long
SESSION_TTL_MINUTES = int(os.getenv("SESSION_TTL_MINUTES", "15"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Google Calendar provider
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET")
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
GOOGLE_CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
]


def configure_logging(level: str = None):
    """Configure root logging once for scripts and workers."""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
