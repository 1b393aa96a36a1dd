"""
Analytics service layer.

This package turns attendance records into dashboard analytics:
filtering, aggregation, trends, series generation, pattern and streak
analysis, session filter state, data validation and export payloads.
"""

from attendance_analytics.services.analytics.analytics_export_service import (
    AnalyticsExportService,
    ExportSink,
)
from attendance_analytics.services.analytics.attendance_analytics_service import (
    AttendanceAnalyticsService,
    analyze_patterns,
    analyze_streaks,
    apply_filter,
    compute_snapshot,
    generate_series,
    get_analytics_service,
)
from attendance_analytics.services.analytics.data_validation_service import DataValidationService
from attendance_analytics.services.analytics.filter_state_service import FilterStateManager
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
    percentage_change,
    simulate_previous_period,
)

__all__ = [
    # Facade
    "AttendanceAnalyticsService",
    "get_analytics_service",
    "compute_snapshot",
    "generate_series",
    "analyze_patterns",
    "analyze_streaks",
    "apply_filter",

    # Pipeline services
    "RecordFilterService",
    "SummaryAggregationService",
    "TrendCalculationService",
    "SeriesGenerationService",
    "PatternAnalysisService",
    "StreakAnalysisService",
    "FilterStateManager",

    # Supporting services
    "DataValidationService",
    "AnalyticsExportService",
    "ExportSink",

    # Trend helpers
    "percentage_change",
    "simulate_previous_period",
]
