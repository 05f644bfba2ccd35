"""
Burnout Scheduler engine

Pure scheduling and analytics algorithms over calendar events: busy-interval
modelling, burnout and health scoring, break suggestions, and meeting slot
search for one person or a whole team. Nothing in this package performs I/O
or reads the clock; callers pass the reference time in.
"""

from .core.interval import Interval
from .core.errors import SchedulingError, InvalidInputError, InvalidEventError
from .utils.slot_utils import to_intervals, gaps_between

# Version for future API compatibility
__version__ = "1.0.0"
