"""
Analytics schemas: snapshots, series and session state.
"""

from attendance_analytics.schemas.analytics.analytics_dashboard import AnalyticsDashboard
from attendance_analytics.schemas.analytics.analytics_export import AnalyticsExportPayload, ExportOptions
from attendance_analytics.schemas.analytics.attendance_analytics import (
    AnalyticsSnapshot,
    AnalyticsTrends,
    DataValidationResult,
    DepartmentStat,
    InstructorMetrics,
    PeriodComparison,
    RiskLevelBucket,
    StudentMetrics,
    TrendIndicator,
    WeeklyAttendance,
)
from attendance_analytics.schemas.analytics.attendance_series import (
    PatternPoint,
    SeriesPoint,
    StreakAnalysis,
    StreakPoint,
    StreakStats,
)
from attendance_analytics.schemas.analytics.session_state import (
    ALL,
    is_all,
    AnalyticsSessionState,
    ApplyCrossFilter,
    ClearFilter,
    CrossFilterState,
    DepartmentChanged,
    DrillDownState,
    DrillInto,
    FilterAction,
    FilterHistoryEntry,
    Navigate,
    ResetAll,
    RiskLevelChanged,
    TimeRangeChanged,
)

__all__ = [
    # Dashboard and export
    "AnalyticsDashboard",
    "AnalyticsExportPayload",
    "ExportOptions",
    # Snapshot
    "AnalyticsSnapshot",
    "AnalyticsTrends",
    "DataValidationResult",
    "DepartmentStat",
    "InstructorMetrics",
    "PeriodComparison",
    "RiskLevelBucket",
    "StudentMetrics",
    "TrendIndicator",
    "WeeklyAttendance",
    # Series
    "PatternPoint",
    "SeriesPoint",
    "StreakAnalysis",
    "StreakPoint",
    "StreakStats",
    # Session state
    "ALL",
    "is_all",
    "AnalyticsSessionState",
    "ApplyCrossFilter",
    "ClearFilter",
    "CrossFilterState",
    "DepartmentChanged",
    "DrillDownState",
    "DrillInto",
    "FilterAction",
    "FilterHistoryEntry",
    "Navigate",
    "ResetAll",
    "RiskLevelChanged",
    "TimeRangeChanged",
]
