"""
Constants shared by the scheduling and analytics engine.
"""

from datetime import timedelta

from ...models import Horizon, RiskLevel

# Working day used by the slot finder and focus-time search: [09:00, 18:00)
WORK_DAY_START_HOUR = 9
WORK_DAY_END_HOUR = 18

# Core hours used by the team grid, break validation and work-life balance
CORE_HOURS_START = 9
CORE_HOURS_END = 17

BUSINESS_DAYS_AHEAD = 5

# Burnout scorer
BACK_TO_BACK_THRESHOLD = timedelta(minutes=15)
AFTER_HOURS_START_BEFORE = 9
AFTER_HOURS_START_AFTER = 18
LONG_STREAK_HOURS = 4
BURNOUT_ALERT_THRESHOLD = 60

# Workload analyzer
# Fixed denominators, not the number of populated buckets.
AVERAGE_DENOMINATORS = {
    Horizon.DAY: 24,
    Horizon.WEEK: 7,
    Horizon.MONTH: 30,
}

# (high-risk hours, moderate-risk hours); strictly greater than
RISK_THRESHOLDS = {
    Horizon.DAY: (6, 4),
    Horizon.WEEK: (30, 20),
    Horizon.MONTH: (120, 80),
}

RISK_MESSAGES = {
    Horizon.DAY: {
        RiskLevel.HIGH: "High risk of burnout. Too many meetings today.",
        RiskLevel.MODERATE: "Moderate risk of burnout. Consider taking breaks.",
        RiskLevel.LOW: "Low risk of burnout. Your daily schedule looks good.",
    },
    Horizon.WEEK: {
        RiskLevel.HIGH: "High risk of burnout. Consider rescheduling some meetings.",
        RiskLevel.MODERATE: "Moderate risk of burnout. Try to schedule some breaks.",
        RiskLevel.LOW: "Low risk of burnout. Your weekly schedule looks manageable.",
    },
    Horizon.MONTH: {
        RiskLevel.HIGH: "High risk of burnout. Consider reducing monthly meeting load.",
        RiskLevel.MODERATE: "Moderate risk of burnout. Try to spread meetings more evenly.",
        RiskLevel.LOW: "Low risk of burnout. Your monthly schedule looks manageable.",
    },
}

MEETINGS_PER_SUGGESTED_BREAK = 3

# Breaks
BREAK_LENGTH = timedelta(minutes=30)
MIN_BREAK_GAP_MINUTES = 30
HIGH_PRIORITY_GAP_MINUTES = 60
LONG_GAP_MINUTES = 90
LONG_MEETING_MINUTES = 90

# Health scorer
WORKING_DAY_HOURS = 9
HEALTH_BUFFER_MINUTES = 15
HEALTH_PENALTY = 0.1
HEALTH_GOOD_THRESHOLD = 0.8
FOCUS_GOOD_THRESHOLD = 0.5

# Team availability
TEAM_GRID_MINUTES = 30
TEAM_TOP_K = 3

# Slot finder
SLOT_TOP_K = 5

# Focus time
FOCUS_BLOCK_MIN_MINUTES = 120
