"""
Attendance analytics facade.

Wires the analytics services into the operations a dashboard consumes:

- compute_snapshot: filter + aggregate + trends
- generate_series: time-bucketed series for the selected range
- analyze_patterns / analyze_streaks: secondary views over a series
- apply_filter: session state reducer
- build_dashboard: everything above for one session state

Module-level functions delegate to a shared default service instance.
"""

from datetime import datetime
from functools import lru_cache
import logging
from typing import Any, Callable, List, Optional, Sequence, Union

from attendance_analytics.config.settings import Settings, get_settings
from attendance_analytics.schemas.analytics.analytics_dashboard import AnalyticsDashboard
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
from attendance_analytics.schemas.analytics.session_state import (
    ALL,
    AnalyticsSessionState,
    FilterAction,
)
from attendance_analytics.schemas.attendance.attendance_record import AttendanceRecord
from attendance_analytics.schemas.common.enums import AnalyticsType, SeriesMetric
from attendance_analytics.schemas.common.filters import TimeRange
from attendance_analytics.services.analytics.data_validation_service import DataValidationService
from attendance_analytics.services.analytics.filter_state_service import (
    apply_filter as reduce_session_state,
)
from attendance_analytics.services.analytics.pattern_analysis_service import PatternAnalysisService
from attendance_analytics.services.analytics.record_filter_service import RecordFilterService
from attendance_analytics.services.analytics.series_generation_service import (
    SeriesGenerationService,
)
from attendance_analytics.services.analytics.streak_analysis_service import StreakAnalysisService
from attendance_analytics.services.analytics.summary_aggregation_service import (
    SummaryAggregationService,
)
from attendance_analytics.services.analytics.trend_calculation_service import (
    TrendCalculationService,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class AttendanceAnalyticsService:
    """
    Attendance analytics for a dashboard session.

    The clock is injected so that preset time ranges, which are
    recomputed from "now" on every evaluation, stay deterministic under
    test. It defaults to wall-clock time.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        config: Optional[Settings] = None,
    ) -> None:
        self.settings = config or get_settings()
        self._clock = clock or datetime.now

        self.record_filter = RecordFilterService()
        self.aggregator = SummaryAggregationService(self.settings)
        self.trends = TrendCalculationService()
        self.series = SeriesGenerationService(self.settings)
        self.patterns = PatternAnalysisService(self.settings)
        self.streaks = StreakAnalysisService(self.settings)
        self.validator = DataValidationService()

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------ #
    # Snapshot
    # ------------------------------------------------------------------ #
    def compute_snapshot(
        self,
        records: Sequence[AttendanceRecord],
        analytics_type: Union[AnalyticsType, str] = AnalyticsType.STUDENT,
        department: Any = ALL,
        risk_level: Any = ALL,
        time_range: Optional[TimeRange] = None,
        now: Optional[datetime] = None,
    ) -> Optional[AnalyticsSnapshot]:
        """
        Filter the records and aggregate them into a snapshot.

        Returns None only when `records` is empty. A collection emptied by
        filtering yields a snapshot with `is_empty` set, except for custom
        ranges, which fall back to the unfiltered collection.
        """
        if not records:
            return None

        filtered = self.record_filter.filter_with_fallback(
            records,
            department=department,
            risk_level=risk_level,
            time_range=time_range,
            now=now or self.now(),
        )
        snapshot = self.aggregator.aggregate(filtered, analytics_type)
        snapshot.trends = self.trends.calculate_trends(filtered)
        return snapshot

    # ------------------------------------------------------------------ #
    # Series and derived views
    # ------------------------------------------------------------------ #
    def generate_series(
        self,
        snapshot: Optional[AnalyticsSnapshot],
        time_range: TimeRange,
        metric: Union[SeriesMetric, str] = SeriesMetric.ATTENDANCE_RATE,
        with_comparison: bool = False,
        now: Optional[datetime] = None,
        fallback: Optional[Sequence[SeriesPoint]] = None,
    ) -> List[SeriesPoint]:
        return self.series.generate_series(
            snapshot,
            time_range,
            metric=metric,
            with_comparison=with_comparison,
            now=now or self.now(),
            fallback=fallback,
        )

    def analyze_patterns(self, series: Sequence[SeriesPoint]) -> List[PatternPoint]:
        return self.patterns.analyze_patterns(series)

    def analyze_streaks(
        self,
        series: Sequence[SeriesPoint],
        threshold: Optional[float] = None,
    ) -> StreakAnalysis:
        return self.streaks.analyze_streaks(series, threshold)

    def compare_periods(self, series: Sequence[SeriesPoint]) -> PeriodComparison:
        return self.trends.compare_periods(series)

    def validate(self, records: Sequence[AttendanceRecord]) -> DataValidationResult:
        return self.validator.validate_attendance_data(records)

    # ------------------------------------------------------------------ #
    # Session state
    # ------------------------------------------------------------------ #
    def apply_filter(
        self,
        state: AnalyticsSessionState,
        action: FilterAction,
        now: Optional[datetime] = None,
    ) -> AnalyticsSessionState:
        return reduce_session_state(state, action, now or self.now())

    # ------------------------------------------------------------------ #
    # Dashboard
    # ------------------------------------------------------------------ #
    def build_dashboard(
        self,
        records: Sequence[AttendanceRecord],
        session_state: Optional[AnalyticsSessionState] = None,
        analytics_type: Union[AnalyticsType, str] = AnalyticsType.STUDENT,
        with_comparison: bool = False,
    ) -> AnalyticsDashboard:
        """Compute every dashboard view for the given session state."""
        state = session_state or AnalyticsSessionState()
        now = self.now()

        validation = self.validate(records)
        is_large = len(records) > self.settings.LARGE_DATASET_THRESHOLD

        snapshot = self.compute_snapshot(
            records,
            analytics_type,
            department=state.selected_department,
            risk_level=state.selected_risk_level,
            time_range=state.time_range,
            now=now,
        )
        if snapshot is None:
            logger.info(
                "No attendance records supplied",
                extra={"analytics_type": AnalyticsType.from_label(analytics_type).value},
            )
            return AnalyticsDashboard(validation=validation, is_large_dataset=is_large)

        attendance_series = self.generate_series(
            snapshot, state.time_range, SeriesMetric.ATTENDANCE_RATE, with_comparison, now
        )
        late_series = self.generate_series(
            snapshot, state.time_range, SeriesMetric.LATE_RATE, with_comparison, now
        )

        dashboard = AnalyticsDashboard(
            snapshot=snapshot,
            filtered_count=snapshot.total_count,
            attendance_series=attendance_series,
            late_series=late_series,
            patterns=self.analyze_patterns(attendance_series),
            streaks=self.analyze_streaks(attendance_series),
            comparison=self.compare_periods(attendance_series),
            validation=validation,
            is_large_dataset=is_large,
        )
        logger.info(
            "Built dashboard for %d of %d records",
            snapshot.total_count,
            len(records),
            extra={
                "analytics_type": snapshot.analytics_type.value,
                "preset": state.time_range.preset.value,
                "record_count": len(records),
            },
        )
        return dashboard


@lru_cache()
def get_analytics_service() -> AttendanceAnalyticsService:
    """Shared service instance using wall-clock time"""
    return AttendanceAnalyticsService()


def compute_snapshot(
    records: Sequence[AttendanceRecord],
    analytics_type: Union[AnalyticsType, str] = AnalyticsType.STUDENT,
    department: Any = ALL,
    risk_level: Any = ALL,
    time_range: Optional[TimeRange] = None,
    now: Optional[datetime] = None,
) -> Optional[AnalyticsSnapshot]:
    return get_analytics_service().compute_snapshot(
        records, analytics_type, department, risk_level, time_range, now
    )


def generate_series(
    snapshot: Optional[AnalyticsSnapshot],
    time_range: TimeRange,
    metric: Union[SeriesMetric, str] = SeriesMetric.ATTENDANCE_RATE,
    with_comparison: bool = False,
    now: Optional[datetime] = None,
    fallback: Optional[Sequence[SeriesPoint]] = None,
) -> List[SeriesPoint]:
    return get_analytics_service().generate_series(
        snapshot, time_range, metric, with_comparison, now, fallback
    )


def analyze_patterns(series: Sequence[SeriesPoint]) -> List[PatternPoint]:
    return get_analytics_service().analyze_patterns(series)


def analyze_streaks(
    series: Sequence[SeriesPoint],
    threshold: Optional[float] = None,
) -> StreakAnalysis:
    return get_analytics_service().analyze_streaks(series, threshold)


def apply_filter(
    state: AnalyticsSessionState,
    action: FilterAction,
    now: Optional[datetime] = None,
) -> AnalyticsSessionState:
    return get_analytics_service().apply_filter(state, action, now)
