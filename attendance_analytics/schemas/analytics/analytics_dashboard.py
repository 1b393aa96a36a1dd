"""
Dashboard bundle returned by the analytics facade.
"""

from typing import List, Optional

from pydantic import Field

from attendance_analytics.schemas.analytics.attendance_analytics import (
    AnalyticsSnapshot,
    DataValidationResult,
    PeriodComparison,
)
from attendance_analytics.schemas.analytics.attendance_series import (
    PatternPoint,
    SeriesPoint,
    StreakAnalysis,
)
from attendance_analytics.schemas.common.base import BaseSchema

__all__ = ["AnalyticsDashboard"]


class AnalyticsDashboard(BaseSchema):
    """
    Everything a dashboard renders for one session state.

    `processing_complete` is always True: the computation is synchronous
    and the flag only replaces the progress indicator of the UI.
    """

    snapshot: Optional[AnalyticsSnapshot] = None
    filtered_count: int = Field(0, ge=0)
    attendance_series: List[SeriesPoint] = Field(default_factory=list)
    late_series: List[SeriesPoint] = Field(default_factory=list)
    patterns: List[PatternPoint] = Field(default_factory=list)
    streaks: StreakAnalysis = Field(default_factory=StreakAnalysis)
    comparison: PeriodComparison = Field(default_factory=PeriodComparison)
    validation: DataValidationResult = Field(default_factory=DataValidationResult)
    processing_complete: bool = True
    is_large_dataset: bool = False
