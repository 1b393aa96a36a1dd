"""
Time-bucketed series schemas.

A series point carries an explicit bucket kind and a single bucket value
instead of a per-preset key ("hour", "day", "date", ...). Analysis stages
return annotated copies and never modify the points they are given.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from attendance_analytics.schemas.common.base import FrozenSchema
from attendance_analytics.schemas.common.enums import BucketKind, SeriesMetric, StreakType

__all__ = [
    "SeriesPoint",
    "PatternPoint",
    "StreakPoint",
    "StreakStats",
    "StreakAnalysis",
]


class SeriesPoint(FrozenSchema):
    """Single bucket of a generated series."""

    bucket_kind: BucketKind = Field(..., description="Granularity of the bucket")
    bucket_value: Union[int, str] = Field(
        ...,
        description="Hour, weekday index, ISO date, week number or month number",
    )
    label: str = Field(..., description="Human readable bucket label")
    metric: SeriesMetric = Field(SeriesMetric.ATTENDANCE_RATE)
    value: float = Field(..., ge=0, le=100)
    previous_value: Optional[float] = Field(
        None,
        ge=0,
        le=100,
        description="Previous-period value when comparison is requested",
    )

    def to_chart_row(self) -> Dict[str, Any]:
        """Row keyed the way chart widgets expect it."""
        row: Dict[str, Any] = {
            self.bucket_kind.value: self.bucket_value,
            "label": self.label,
            self.metric.chart_key: self.value,
        }
        if self.previous_value is not None:
            row[self.metric.previous_chart_key] = self.previous_value
        return row


class PatternPoint(SeriesPoint):
    """Series point annotated with moving average and extrema flags."""

    moving_average: float = Field(..., ge=0, le=100)
    is_peak: bool = False
    is_valley: bool = False

    def to_chart_row(self) -> Dict[str, Any]:
        row = super().to_chart_row()
        row.update(
            movingAverage=self.moving_average,
            isPeak=self.is_peak,
            isValley=self.is_valley,
        )
        return row


class StreakPoint(SeriesPoint):
    """Series point annotated with the running streak at that bucket."""

    current_streak: int = Field(
        ...,
        description="Positive for a good streak, negative for a poor streak",
    )
    streak_type: StreakType
    is_streak_break: bool = False

    def to_chart_row(self) -> Dict[str, Any]:
        row = super().to_chart_row()
        row.update(
            currentStreak=self.current_streak,
            streakType=self.streak_type.value,
            isStreakBreak=self.is_streak_break,
        )
        return row


class StreakStats(FrozenSchema):
    """Summary of good/poor runs across a series."""

    max_good_streak: int = Field(0, ge=0)
    max_poor_streak: int = Field(0, ge=0)
    current_streak: int = 0
    current_streak_type: StreakType = StreakType.NONE
    total_good_days: int = Field(0, ge=0)
    total_poor_days: int = Field(0, ge=0)


class StreakAnalysis(FrozenSchema):
    """Annotated points plus streak statistics."""

    points: List[StreakPoint] = Field(default_factory=list)
    stats: StreakStats = Field(default_factory=StreakStats)
