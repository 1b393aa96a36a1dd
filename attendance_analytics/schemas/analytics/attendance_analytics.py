"""
Attendance analytics snapshot schemas.

Provides the aggregate view of a filtered record collection:
- Overall counts and rates
- Department and risk-level breakdowns
- Period-over-period trend indicators
- Instructor/student specific metrics
"""

from typing import Annotated, Dict, List, Optional

from pydantic import Field, computed_field

from attendance_analytics.schemas.common.base import BaseSchema
from attendance_analytics.schemas.common.enums import (
    AnalyticsType,
    PerformanceTrend,
    RiskLevel,
    TrendDirection,
)

__all__ = [
    "TrendIndicator",
    "AnalyticsTrends",
    "DepartmentStat",
    "RiskLevelBucket",
    "WeeklyAttendance",
    "InstructorMetrics",
    "StudentMetrics",
    "AnalyticsSnapshot",
    "PeriodComparison",
    "DataValidationResult",
]


# Type aliases
Percentage = Annotated[float, Field(ge=0, le=100)]
NonNegativeInt = Annotated[int, Field(ge=0)]


class TrendIndicator(BaseSchema):
    """Magnitude and direction of a change against the previous period."""

    change: Percentage = Field(0.0, description="Absolute change (percent or percentage points)")
    direction: TrendDirection = Field(TrendDirection.NEUTRAL)


class AnalyticsTrends(BaseSchema):
    """Trend indicator per tracked dashboard metric."""

    total_count: TrendIndicator = Field(default_factory=TrendIndicator)
    attendance_rate: TrendIndicator = Field(default_factory=TrendIndicator)
    departments: TrendIndicator = Field(default_factory=TrendIndicator)
    high_risk: TrendIndicator = Field(default_factory=TrendIndicator)


class DepartmentStat(BaseSchema):
    """Attendance statistics for one department."""

    key: str = Field(..., description="Department label as found on the records")
    name: str = Field(..., description="Display name")
    code: str = Field(..., description="Department code")
    count: NonNegativeInt = 0
    total_classes: NonNegativeInt = 0
    attended_classes: NonNegativeInt = 0
    attendance_rate: Percentage = 0.0
    trend: PerformanceTrend = PerformanceTrend.STABLE
    change: float = Field(0.0, description="Rate minus the department target rate")


class RiskLevelBucket(BaseSchema):
    """Number of people in a risk level."""

    level: RiskLevel
    count: NonNegativeInt = 0
    percentage: Percentage = 0.0
    color: str = Field(..., pattern="^#[0-9A-Fa-f]{6}$")
    trend: PerformanceTrend = PerformanceTrend.STABLE


class WeeklyAttendance(BaseSchema):
    """Week bucket aggregated over every record's weekly data."""

    week: str
    total_classes: NonNegativeInt = 0
    attended_classes: NonNegativeInt = 0
    absent_classes: NonNegativeInt = 0
    late_classes: NonNegativeInt = 0
    attendance_rate: Percentage = 0.0
    trend: PerformanceTrend = PerformanceTrend.STABLE
    change: float = 0.0
    compliance_score: Optional[Percentage] = None


class InstructorMetrics(BaseSchema):
    """Instructor-only aggregates."""

    total_classes_taught: NonNegativeInt = 0
    total_classes_missed: NonNegativeInt = 0
    average_compliance_score: float = 0.0
    total_notifications_sent: NonNegativeInt = 0
    substitute_required_count: NonNegativeInt = 0
    teaching_load_distribution: Dict[str, float] = Field(default_factory=dict)
    compliance_trends: List[WeeklyAttendance] = Field(default_factory=list)


class StudentMetrics(BaseSchema):
    """Student-only aggregates."""

    total_parent_notifications: NonNegativeInt = 0
    attendance_streak_data: Dict[str, int] = Field(default_factory=dict)


class AnalyticsSnapshot(BaseSchema):
    """
    Aggregate result for a filtered record collection.

    Snapshots are recomputed on every read and never persisted.
    """

    analytics_type: AnalyticsType = AnalyticsType.STUDENT
    total_count: NonNegativeInt = 0
    active_count: NonNegativeInt = 0
    inactive_count: NonNegativeInt = 0
    total_classes: NonNegativeInt = 0
    attended_classes: NonNegativeInt = 0
    absent_classes: NonNegativeInt = 0
    late_classes: NonNegativeInt = 0
    attendance_rate: Percentage = 0.0
    late_rate: Percentage = 0.0

    risk_levels: Dict[str, int] = Field(default_factory=dict)
    risk_level_data: List[RiskLevelBucket] = Field(default_factory=list)
    department_stats: List[DepartmentStat] = Field(default_factory=list)
    weekly_data: List[WeeklyAttendance] = Field(default_factory=list)
    trends: AnalyticsTrends = Field(default_factory=AnalyticsTrends)

    instructor_metrics: Optional[InstructorMetrics] = None
    student_metrics: Optional[StudentMetrics] = None

    @computed_field  # type: ignore[misc]
    @property
    def is_empty(self) -> bool:
        """True when filtering left nothing to report on."""
        return self.total_count == 0

    def department(self, key: str) -> Optional[DepartmentStat]:
        """Look up a department by label, code or display name."""
        for stat in self.department_stats:
            if key in (stat.key, stat.code, stat.name):
                return stat
        return None

    def risk_bucket(self, level: RiskLevel) -> Optional[RiskLevelBucket]:
        for bucket in self.risk_level_data:
            if bucket.level == level:
                return bucket
        return None


class PeriodComparison(BaseSchema):
    """Average of a series against its previous-period twin."""

    current_average: float = 0.0
    previous_average: Optional[float] = None
    delta: float = 0.0
    change: float = Field(0.0, ge=0)
    direction: TrendDirection = TrendDirection.NEUTRAL


class DataValidationResult(BaseSchema):
    """Outcome of a data quality check over input records."""

    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    data_quality: Percentage = 100.0
