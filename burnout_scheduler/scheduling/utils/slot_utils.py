"""
Interval helpers shared by every scheduling component.
"""

from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple
import pytz
from ..core.interval import Interval


def to_intervals(events: Iterable) -> List[Interval]:
    """
    Turn events into busy intervals sorted by start, then end.
    All-day events and records without concrete times are dropped.
    """
    intervals = []
    for event in events or []:
        if getattr(event, "all_day", False):
            continue
        start = getattr(event, "start", None)
        end = getattr(event, "end", None)
        if not isinstance(start, datetime) or not isinstance(end, datetime):
            continue
        intervals.append(Interval(start, end, event))
    intervals.sort()
    return intervals


def gaps_between(intervals: Sequence[Interval], day_start: datetime, day_end: datetime) -> List[Interval]:
    """
    Free intervals inside [day_start, day_end] not covered by any busy interval.

    Single sweep with a cursor; busy intervals may overlap or nest.
    """
    gaps = []
    cursor = day_start
    for interval in sorted(intervals):
        if interval.start >= day_end:
            break
        if interval.start > cursor:
            gaps.append(Interval(cursor, interval.start))
        cursor = max(cursor, interval.end)
    if cursor < day_end:
        gaps.append(Interval(cursor, day_end))
    return gaps


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open overlap test; touching ranges do not overlap."""
    return a_start < b_end and b_start < a_end


def intervals_on_day(intervals: Sequence[Interval], day_start: datetime, day_end: datetime) -> List[Interval]:
    """Intervals that overlap the given window, in order."""
    return [i for i in intervals if overlaps(i.start, i.end, day_start, day_end)]


def localize(value: datetime, tzinfo) -> datetime:
    """
    Attach `tzinfo` to a naive datetime; aware datetimes are returned as is.
    pytz zones are localized so the UTC offset matches that date.
    """
    if value.tzinfo is not None or tzinfo is None:
        return value
    if hasattr(tzinfo, "localize"):
        return tzinfo.localize(value)
    return value.replace(tzinfo=tzinfo)


def at_time(day: date, hour: int, minute: int = 0, tzinfo=None) -> datetime:
    """Wall-clock datetime on `day`, in `tzinfo` when one is given."""
    return localize(datetime.combine(day, time(hour, minute)), tzinfo)


def day_window(day: date, start_hour: int, end_hour: int, tzinfo=None) -> Tuple[datetime, datetime]:
    return at_time(day, start_hour, tzinfo=tzinfo), at_time(day, end_hour, tzinfo=tzinfo)


def next_business_days(now: datetime, count: int) -> List[date]:
    """The next `count` Monday-Friday dates after `now`'s date."""
    days = []
    current = now.date()
    while len(days) < count:
        current += timedelta(days=1)
        if current.weekday() < 5:
            days.append(current)
    return days


def zone_of(now: datetime) -> Optional[object]:
    """
    Timezone to build day windows in. For pytz the zone object is recovered
    so that later dates are localized with their own offset.
    """
    tzinfo = now.tzinfo
    if tzinfo is None:
        return None
    zone = getattr(tzinfo, "zone", None)
    if zone:
        return pytz.timezone(zone)
    return tzinfo
