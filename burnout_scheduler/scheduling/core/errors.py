"""
Errors raised by the scheduling engine.

Only caller mistakes raise. Missing data and empty results are reported in the
returned structures instead.
"""


class SchedulingError(Exception):
    """Base class for engine errors."""


class InvalidInputError(SchedulingError, ValueError):
    """The caller passed arguments the engine cannot work with."""


class InvalidEventError(InvalidInputError):
    """A calendar record is missing its times or ends before it starts."""

    def __init__(self, message: str, record=None):
        super().__init__(message)
        self.record = record
