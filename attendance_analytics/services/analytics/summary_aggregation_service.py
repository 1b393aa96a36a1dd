"""
Summary aggregation service.

Reduces a filtered record collection into an AnalyticsSnapshot:
- Overall counts, attendance and late rates
- Department breakdown (pooled rate per department)
- Risk-level buckets with display colors
- Weekly rollup of per-record weekly data
- Instructor/student specific metrics

Trends are attached separately by the trend calculation service.
"""

from collections import OrderedDict
import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from attendance_analytics.config.settings import Settings, get_settings
from attendance_analytics.schemas.analytics.attendance_analytics import (
    AnalyticsSnapshot,
    DepartmentStat,
    InstructorMetrics,
    RiskLevelBucket,
    StudentMetrics,
    WeeklyAttendance,
)
from attendance_analytics.schemas.attendance.attendance_record import (
    AttendanceRecord,
    split_department_label,
)
from attendance_analytics.schemas.common.enums import AnalyticsType, PerformanceTrend, RecordStatus
from attendance_analytics.utils.rate_utils import RateCalculator

logger = logging.getLogger(__name__)


class SummaryAggregationService:
    """
    Build snapshot aggregates from attendance records.

    Every rate is division-safe (0 total classes gives 0%) and clamped
    into [0, 100]; the late rate is clamped to the configured ceiling.
    """

    WEEK_LABELS = tuple(f"Week {number}" for number in range(1, 9))

    def __init__(self, config: Optional[Settings] = None) -> None:
        self.settings = config or get_settings()

    # ------------------------------------------------------------------ #
    # Snapshot
    # ------------------------------------------------------------------ #
    def aggregate(
        self,
        records: Sequence[AttendanceRecord],
        analytics_type: Union[AnalyticsType, str] = AnalyticsType.STUDENT,
    ) -> AnalyticsSnapshot:
        analytics_type = AnalyticsType.from_label(analytics_type)

        total_count = len(records)
        active_count = sum(1 for r in records if r.status == RecordStatus.ACTIVE)
        total_classes = sum(r.total_classes for r in records)
        attended_classes = sum(r.attended_classes for r in records)
        absent_classes = sum(r.absent_classes for r in records)
        late_classes = sum(r.late_classes for r in records)

        risk_levels, risk_level_data = self.risk_level_breakdown(records)
        weekly_data = self.calculate_weekly_attendance(records)

        snapshot = AnalyticsSnapshot(
            analytics_type=analytics_type,
            total_count=total_count,
            active_count=active_count,
            inactive_count=total_count - active_count,
            total_classes=total_classes,
            attended_classes=attended_classes,
            absent_classes=absent_classes,
            late_classes=late_classes,
            attendance_rate=RateCalculator.clamped_rate(attended_classes, total_classes),
            late_rate=RateCalculator.clamped_rate(
                late_classes, total_classes, self.settings.LATE_RATE_CEILING
            ),
            risk_levels=risk_levels,
            risk_level_data=risk_level_data,
            department_stats=self.department_breakdown(records),
            weekly_data=weekly_data,
        )

        if analytics_type == AnalyticsType.INSTRUCTOR:
            snapshot.instructor_metrics = self.instructor_metrics(records, weekly_data)
        else:
            snapshot.student_metrics = self.student_metrics(records)

        logger.debug(
            "Aggregated %d records into snapshot",
            total_count,
            extra={"analytics_type": analytics_type.value, "record_count": total_count},
        )
        return snapshot

    # ------------------------------------------------------------------ #
    # Breakdowns
    # ------------------------------------------------------------------ #
    def department_breakdown(self, records: Sequence[AttendanceRecord]) -> List[DepartmentStat]:
        """Group by department label, in order of first appearance."""
        groups: "OrderedDict[str, Dict[str, int]]" = OrderedDict()
        for record in records:
            group = groups.setdefault(record.department, {"count": 0, "total": 0, "attended": 0})
            group["count"] += 1
            group["total"] += record.total_classes
            group["attended"] += record.attended_classes

        stats: List[DepartmentStat] = []
        for label, group in groups.items():
            code, name = split_department_label(label)
            rate = RateCalculator.clamped_rate(group["attended"], group["total"])
            stats.append(
                DepartmentStat(
                    key=label,
                    name=name,
                    code=code,
                    count=group["count"],
                    total_classes=group["total"],
                    attended_classes=group["attended"],
                    attendance_rate=rate,
                    trend=self.classify_rate(rate),
                    change=rate - self.settings.DEPARTMENT_TARGET_RATE,
                )
            )
        return stats

    def risk_level_breakdown(
        self, records: Sequence[AttendanceRecord]
    ) -> Tuple[Dict[str, int], List[RiskLevelBucket]]:
        """Count per risk level plus chart buckets, in order of first appearance."""
        counts: "OrderedDict[str, int]" = OrderedDict()
        for record in records:
            level = record.risk_level.value
            counts[level] = counts.get(level, 0) + 1

        total = len(records)
        buckets = [
            RiskLevelBucket(
                level=level,
                count=count,
                percentage=RateCalculator.clamped_rate(count, total),
                color=self.settings.risk_color(level),
                trend=self._risk_trend(count),
            )
            for level, count in counts.items()
        ]
        return dict(counts), buckets

    def calculate_weekly_attendance(
        self, records: Sequence[AttendanceRecord]
    ) -> List[WeeklyAttendance]:
        """Roll per-record weekly data up into fixed week buckets."""
        weeks: List[WeeklyAttendance] = []
        for index, label in enumerate(self.WEEK_LABELS):
            entries = [r.weekly_data[index] for r in records if len(r.weekly_data) > index]

            total = sum(e.total_classes for e in entries)
            attended = sum(e.attended_classes for e in entries)
            rate = RateCalculator.clamped_rate(attended, total)

            weeks.append(
                WeeklyAttendance(
                    week=label,
                    total_classes=total,
                    attended_classes=attended,
                    absent_classes=sum(e.absent_classes for e in entries),
                    late_classes=sum(e.late_classes for e in entries),
                    attendance_rate=rate,
                    # First week has no predecessor to compare against
                    trend=self.classify_rate(rate) if index > 0 else PerformanceTrend.STABLE,
                    change=rate - self.settings.DEPARTMENT_TARGET_RATE if index > 0 else 0.0,
                )
            )
        return weeks

    # ------------------------------------------------------------------ #
    # Type-specific metrics
    # ------------------------------------------------------------------ #
    def instructor_metrics(
        self,
        records: Sequence[AttendanceRecord],
        weekly_data: Sequence[WeeklyAttendance],
    ) -> InstructorMetrics:
        teaching_load: Dict[str, float] = {}
        for record in records:
            load = record.teaching_load or 0
            if load > 0:
                teaching_load[record.department] = teaching_load.get(record.department, 0) + load

        compliance_trends = [
            week.model_copy(
                update={
                    "compliance_score": RateCalculator.clamp(
                        100 - RateCalculator.rate(week.absent_classes, week.total_classes)
                    )
                }
            )
            for week in weekly_data
        ]

        return InstructorMetrics(
            total_classes_taught=sum(r.classes_taught or 0 for r in records),
            total_classes_missed=sum(r.classes_missed or 0 for r in records),
            average_compliance_score=RateCalculator.mean(r.compliance_score or 0 for r in records),
            total_notifications_sent=sum(r.notification_count or 0 for r in records),
            substitute_required_count=sum(1 for r in records if r.substitute_required),
            teaching_load_distribution=teaching_load,
            compliance_trends=compliance_trends,
        )

    def student_metrics(self, records: Sequence[AttendanceRecord]) -> StudentMetrics:
        streaks: Dict[str, int] = {}
        for record in records:
            key = self._streak_bucket(record.attendance_streak or 0)
            streaks[key] = streaks.get(key, 0) + 1

        return StudentMetrics(
            total_parent_notifications=sum(r.parent_notifications or 0 for r in records),
            attendance_streak_data=streaks,
        )

    # ------------------------------------------------------------------ #
    # Classification helpers
    # ------------------------------------------------------------------ #
    def classify_rate(self, rate: float) -> PerformanceTrend:
        """Band a rate against the target and warning thresholds."""
        if rate > self.settings.DEPARTMENT_TARGET_RATE:
            return PerformanceTrend.UP
        if rate < self.settings.DEPARTMENT_WARNING_RATE:
            return PerformanceTrend.DOWN
        return PerformanceTrend.STABLE

    @staticmethod
    def _risk_trend(count: int) -> PerformanceTrend:
        if count > 5:
            return PerformanceTrend.UP
        if count < 2:
            return PerformanceTrend.DOWN
        return PerformanceTrend.STABLE

    @staticmethod
    def _streak_bucket(streak: int) -> str:
        if streak > 10:
            return "10+ days"
        if streak > 5:
            return "5-10 days"
        if streak > 0:
            return "1-5 days"
        return "0 days"
