import enum

# Enums

class Horizon(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def from_text(cls, text: str) -> "Horizon":
        """Pick the horizon mentioned in free text, defaulting to a single day."""
        text = (text or "").lower()
        if "month" in text:
            return cls.MONTH
        if "week" in text:
            return cls.WEEK
        return cls.DAY

class TimeUnit(str, enum.Enum):
    HOUR = "hour"
    DAY = "day"

class RiskLevel(str, enum.Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

class BreakType(str, enum.Enum):
    GAP = "gap"
    RECOVERY = "recovery"

class BreakPriority(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"

class RecommendationType(str, enum.Enum):
    WARNING = "warning"
    SUGGESTION = "suggestion"
    OPTIMIZATION = "optimization"

class RecommendationPriority(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
