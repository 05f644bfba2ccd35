"""
Workload analysis over a day, week or month horizon.
"""

import math
from datetime import datetime, timedelta
from typing import Dict, Sequence, Tuple
from dateutil.relativedelta import relativedelta
from ..core.interval import Interval
from ..core.errors import InvalidInputError
from ..core.constants import (
    AVERAGE_DENOMINATORS, RISK_THRESHOLDS, RISK_MESSAGES, MEETINGS_PER_SUGGESTED_BREAK, MIN_BREAK_GAP_MINUTES
)
from ...models import Horizon, TimeUnit, RiskLevel
from ...schemas import WorkloadAnalysis


def coerce_horizon(horizon) -> Horizon:
    if isinstance(horizon, Horizon):
        return horizon
    try:
        return Horizon(str(horizon).lower())
    except ValueError:
        raise InvalidInputError(f"Unknown horizon {horizon!r}, expected day, week or month")


def horizon_window(horizon, now: datetime) -> Tuple[datetime, datetime]:
    """
    Time range to analyse for a horizon, starting at `now`:
    the rest of today, the next seven days, or the next calendar month.
    """
    horizon = coerce_horizon(horizon)
    if horizon == Horizon.MONTH:
        return now, now + relativedelta(months=1)
    if horizon == Horizon.WEEK:
        return now, now + timedelta(days=7)
    return now, now.replace(hour=23, minute=59, second=59, microsecond=0)


def analyze_workload(intervals: Sequence[Interval], horizon) -> WorkloadAnalysis:
    """
    Bucket meetings by hour (day horizon) or by date (week/month horizon) and
    derive totals, the busiest bucket, the average per unit and a risk verdict.
    """
    horizon = coerce_horizon(horizon)
    ordered = sorted(intervals)
    time_unit = TimeUnit.HOUR if horizon == Horizon.DAY else TimeUnit.DAY

    meeting_count = len(ordered)
    total_hours = sum(i.duration_hours() for i in ordered)

    buckets: Dict[str, float] = {}
    for interval in ordered:
        if time_unit == TimeUnit.HOUR:
            # Hourly buckets weigh meetings by duration
            key = str(interval.start_hour)
            buckets[key] = buckets.get(key, 0.0) + interval.duration_hours()
        else:
            key = interval.start.date().isoformat()
            buckets[key] = buckets.get(key, 0.0) + 1

    busiest_bucket = None
    busiest_value = 0.0
    for key, value in buckets.items():
        if value > busiest_value:
            busiest_bucket, busiest_value = key, value

    average_per_unit = meeting_count / AVERAGE_DENOMINATORS[horizon]
    risk_level = calculate_risk_level(total_hours, horizon)

    break_count = count_breaks(ordered)
    suggested_breaks = math.ceil(meeting_count / MEETINGS_PER_SUGGESTED_BREAK)
    break_deficit = max(0, suggested_breaks - break_count)

    notes = [RISK_MESSAGES[horizon][risk_level]]
    if break_deficit > 0:
        notes.append(f"Need {break_deficit} more break{'s' if break_deficit > 1 else ''}")

    return WorkloadAnalysis(
        horizon=horizon,
        time_unit=time_unit,
        meeting_count=meeting_count,
        total_hours=total_hours,
        buckets=buckets,
        busiest_bucket=busiest_bucket,
        busiest_label=_bucket_label(busiest_bucket, time_unit),
        busiest_value=busiest_value,
        average_per_unit=average_per_unit,
        risk_level=risk_level,
        break_count=break_count,
        suggested_breaks=suggested_breaks,
        break_deficit=break_deficit,
        notes=notes,
    )


def calculate_risk_level(total_hours: float, horizon: Horizon) -> RiskLevel:
    high, moderate = RISK_THRESHOLDS[horizon]
    if total_hours > high:
        return RiskLevel.HIGH
    if total_hours > moderate:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def count_breaks(ordered: Sequence[Interval]) -> int:
    """Gaps of 30+ minutes between consecutive meetings."""
    breaks = 0
    last_end = None
    for interval in ordered:
        if last_end is not None:
            gap_minutes = (interval.start - last_end).total_seconds() / 60
            if gap_minutes >= MIN_BREAK_GAP_MINUTES:
                breaks += 1
        last_end = interval.end
    return breaks


def _bucket_label(key, time_unit: TimeUnit):
    if key is None:
        return None
    if time_unit == TimeUnit.HOUR:
        hour = int(key)
        return f"{hour}:00 - {hour + 1}:00"
    return datetime.strptime(key, "%Y-%m-%d").strftime("%A")
