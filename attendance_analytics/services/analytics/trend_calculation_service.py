"""
Trend calculation service.

Compares the current period against a previous period and classifies
the direction of change for each tracked dashboard metric.

The previous period is simulated from the current values by
`simulate_previous_period`; replacing that single function with a real
history lookup leaves the rest of the calculation untouched.
"""

from dataclasses import dataclass
import logging
import math
from typing import Sequence

from attendance_analytics.schemas.analytics.attendance_analytics import (
    AnalyticsTrends,
    PeriodComparison,
    TrendIndicator,
)
from attendance_analytics.schemas.analytics.attendance_series import SeriesPoint
from attendance_analytics.schemas.attendance.attendance_record import AttendanceRecord
from attendance_analytics.schemas.common.enums import RiskLevel, TrendDirection
from attendance_analytics.utils.rate_utils import RateCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodMetrics:
    """Values of the tracked metrics for one period."""

    total_count: int
    attendance_rate: float
    departments: int
    high_risk: int

    @classmethod
    def from_records(cls, records: Sequence[AttendanceRecord]) -> "PeriodMetrics":
        total_classes = sum(r.total_classes for r in records)
        attended = sum(r.attended_classes for r in records)
        return cls(
            total_count=len(records),
            attendance_rate=RateCalculator.clamped_rate(attended, total_classes),
            departments=len({r.department for r in records}),
            high_risk=sum(1 for r in records if r.risk_level == RiskLevel.HIGH),
        )


def simulate_previous_period(current: PeriodMetrics) -> PeriodMetrics:
    """Derive previous-period values from the current ones by fixed offsets."""
    return PeriodMetrics(
        total_count=max(1, math.floor(current.total_count * 0.95)),
        attendance_rate=current.attendance_rate * 0.98,
        departments=max(1, current.departments - 1),
        high_risk=max(0, current.high_risk - 1),
    )


def percentage_change(current: float, previous: float) -> float:
    """
    Relative change from `previous` to `current` in percent.

    A zero previous value gives 100 when the current value is positive
    and 0 otherwise.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def direction_of(delta: float) -> TrendDirection:
    if delta > 0:
        return TrendDirection.UP
    if delta < 0:
        return TrendDirection.DOWN
    return TrendDirection.NEUTRAL


class TrendCalculationService:
    """Period-over-period trend indicators."""

    def calculate_trends(self, records: Sequence[AttendanceRecord]) -> AnalyticsTrends:
        """
        Trend per tracked metric for the current records.

        The attendance rate reports the change in percentage points; the
        count metrics report the relative change in percent.
        """
        if not records:
            return AnalyticsTrends()

        current = PeriodMetrics.from_records(records)
        previous = simulate_previous_period(current)

        trends = AnalyticsTrends(
            total_count=self._relative(current.total_count, previous.total_count),
            attendance_rate=self._absolute(current.attendance_rate, previous.attendance_rate),
            departments=self._relative(current.departments, previous.departments),
            high_risk=self._relative(current.high_risk, previous.high_risk),
        )
        logger.debug("Calculated trends for %d records", len(records))
        return trends

    def compare_periods(self, series: Sequence[SeriesPoint]) -> PeriodComparison:
        """Compare a series' average with its previous-period twin."""
        current_average = RateCalculator.mean(p.value for p in series)
        previous_values = [p.previous_value for p in series if p.previous_value is not None]
        if not previous_values:
            return PeriodComparison(current_average=round(current_average, 2))

        previous_average = RateCalculator.mean(previous_values)
        delta = current_average - previous_average
        return PeriodComparison(
            current_average=round(current_average, 2),
            previous_average=round(previous_average, 2),
            delta=round(delta, 2),
            change=round(abs(percentage_change(current_average, previous_average)), 2),
            direction=direction_of(delta),
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _relative(current: float, previous: float) -> TrendIndicator:
        return TrendIndicator(
            change=RateCalculator.clamp(abs(percentage_change(current, previous))),
            direction=direction_of(current - previous),
        )

    @staticmethod
    def _absolute(current: float, previous: float) -> TrendIndicator:
        delta = current - previous
        return TrendIndicator(
            change=RateCalculator.clamp(abs(delta)),
            direction=direction_of(delta),
        )
