"""
Common schemas shared across the analytics package.
"""

from attendance_analytics.schemas.common.base import BaseFilterSchema, BaseSchema, FrozenSchema
from attendance_analytics.schemas.common.enums import (
    AnalyticsType,
    BucketKind,
    DrillDownLevel,
    ExportFormat,
    FilterSource,
    PerformanceTrend,
    RecordStatus,
    RiskLevel,
    SeriesMetric,
    StreakType,
    TimeRangePreset,
    TrendDirection,
)
from attendance_analytics.schemas.common.filters import TimeRange, TimestampValue

__all__ = [
    "BaseFilterSchema",
    "BaseSchema",
    "FrozenSchema",
    "AnalyticsType",
    "BucketKind",
    "DrillDownLevel",
    "ExportFormat",
    "FilterSource",
    "PerformanceTrend",
    "RecordStatus",
    "RiskLevel",
    "SeriesMetric",
    "StreakType",
    "TimeRangePreset",
    "TrendDirection",
    "TimeRange",
    "TimestampValue",
]
