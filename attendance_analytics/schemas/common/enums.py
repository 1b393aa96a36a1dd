"""
All enumeration types used across the analytics engine.
"""

from enum import Enum

__all__ = [
    "AnalyticsType",
    "RiskLevel",
    "RecordStatus",
    "TimeRangePreset",
    "TrendDirection",
    "PerformanceTrend",
    "SeriesMetric",
    "BucketKind",
    "StreakType",
    "DrillDownLevel",
    "FilterSource",
    "ExportFormat",
]


class AnalyticsType(str, Enum):
    """Population the analytics describe."""

    INSTRUCTOR = "instructor"
    STUDENT = "student"

    @classmethod
    def from_label(cls, value) -> "AnalyticsType":
        """Map a label onto a member; unrecognised labels read as STUDENT."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.STUDENT


class RiskLevel(str, Enum):
    """Attendance risk classification."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RecordStatus(str, Enum):
    """Active/inactive status of a person."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class TimeRangePreset(str, Enum):
    """Time window presets offered by the dashboard."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"


class TrendDirection(str, Enum):
    """Direction of a period-over-period change."""

    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class PerformanceTrend(str, Enum):
    """Banding of a rate against the target and warning thresholds."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class SeriesMetric(str, Enum):
    """Metric carried by a generated series."""

    ATTENDANCE_RATE = "attendance_rate"
    LATE_RATE = "late_rate"

    @property
    def chart_key(self) -> str:
        return "attendanceRate" if self is SeriesMetric.ATTENDANCE_RATE else "lateRate"

    @property
    def previous_chart_key(self) -> str:
        return "previousAttendanceRate" if self is SeriesMetric.ATTENDANCE_RATE else "previousLateRate"


class BucketKind(str, Enum):
    """Granularity of a series bucket."""

    HOUR = "hour"
    WEEKDAY = "day"
    DATE = "date"
    WEEK = "week"
    MONTH = "month"


class StreakType(str, Enum):
    """Classification of a streak run."""

    GOOD = "good"
    POOR = "poor"
    NONE = "none"


class DrillDownLevel(str, Enum):
    """Drill-down navigation levels."""

    DEPARTMENT = "department"
    INSTRUCTOR = "instructor"
    CLASS = "class"
    SESSION = "session"


class FilterSource(str, Enum):
    """Selector that produced a filter history entry."""

    DEPARTMENT = "department"
    RISK_LEVEL = "riskLevel"
    TIME_RANGE = "timeRange"


class ExportFormat(str, Enum):
    """Formats accepted by export sinks."""

    CSV = "csv"
    PDF = "pdf"
    EXCEL = "excel"
