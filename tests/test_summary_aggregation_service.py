import pytest

from attendance_analytics.schemas.attendance.attendance_record import WeeklyData
from attendance_analytics.schemas.common.enums import AnalyticsType, PerformanceTrend, RiskLevel
from attendance_analytics.services.analytics.summary_aggregation_service import (
    SummaryAggregationService,
)


@pytest.fixture
def aggregator(test_settings):
    return SummaryAggregationService(test_settings)


def test_two_department_snapshot(aggregator, scenario_records):
    snapshot = aggregator.aggregate(scenario_records, AnalyticsType.STUDENT)

    assert snapshot.total_count == 2
    assert snapshot.attended_classes == 33
    assert snapshot.absent_classes == 4
    assert snapshot.late_classes == 3
    assert snapshot.attendance_rate == pytest.approx(82.5)
    assert snapshot.late_rate == pytest.approx(7.5)

    rates = {stat.key: stat.attendance_rate for stat in snapshot.department_stats}
    assert rates == {"A": pytest.approx(90.0), "B": pytest.approx(75.0)}

    assert snapshot.risk_levels == {"low": 1, "medium": 1}
    low = snapshot.risk_bucket(RiskLevel.LOW)
    medium = snapshot.risk_bucket(RiskLevel.MEDIUM)
    assert (low.count, low.color) == (1, "#3b82f6")
    assert (medium.count, medium.color) == (1, "#f59e0b")
    assert snapshot.risk_bucket(RiskLevel.HIGH) is None


def test_zero_classes_never_produce_nan(aggregator, make_record):
    records = [
        make_record(total_classes=0, attended_classes=0, absent_classes=0, late_classes=0)
        for _ in range(3)
    ]
    snapshot = aggregator.aggregate(records)

    assert snapshot.attendance_rate == 0
    assert snapshot.late_rate == 0
    assert all(stat.attendance_rate == 0 for stat in snapshot.department_stats)


def test_empty_collection_is_an_empty_snapshot(aggregator):
    snapshot = aggregator.aggregate([], AnalyticsType.STUDENT)
    assert snapshot.is_empty
    assert snapshot.total_count == 0
    assert snapshot.department_stats == []
    assert snapshot.risk_level_data == []


def test_rates_are_clamped(aggregator, make_record):
    # attended > total is bad source data, but must not leak past 100%
    record = make_record(total_classes=10, attended_classes=15, late_classes=8)
    snapshot = aggregator.aggregate([record])

    assert snapshot.attendance_rate == 100
    assert snapshot.department_stats[0].attendance_rate == 100
    assert snapshot.late_rate == 25


def test_active_and_inactive_counts(aggregator, make_record):
    records = [make_record(status="ACTIVE"), make_record(status="inactive"), make_record()]
    snapshot = aggregator.aggregate(records)
    assert (snapshot.active_count, snapshot.inactive_count) == (2, 1)


def test_department_label_is_split_into_code_and_name(aggregator, make_record):
    records = [
        make_record(department="CS - Computer Science", total_classes=10, attended_classes=9),
        make_record(department="CS - Computer Science", total_classes=30, attended_classes=21),
        make_record(department="Library", total_classes=10, attended_classes=8),
    ]
    stats = aggregator.department_breakdown(records)

    assert [(s.code, s.name, s.count) for s in stats] == [
        ("CS", "Computer Science", 2),
        ("Library", "Library", 1),
    ]
    # Pooled over the department's classes
    assert stats[0].attendance_rate == pytest.approx(75.0)
    assert stats[0].trend == PerformanceTrend.STABLE
    assert stats[0].change == pytest.approx(-10.0)
    assert stats[1].trend == PerformanceTrend.STABLE


def test_department_trend_bands(aggregator, scenario_records, make_record):
    stats = aggregator.department_breakdown(
        scenario_records + [make_record(department="C", total_classes=10, attended_classes=5)]
    )
    trends = {s.key: s.trend for s in stats}
    assert trends == {
        "A": PerformanceTrend.UP,
        "B": PerformanceTrend.STABLE,
        "C": PerformanceTrend.DOWN,
    }


def test_risk_buckets_carry_percentage_and_trend(aggregator, make_record):
    records = [make_record(risk_level="high") for _ in range(6)]
    records += [make_record(risk_level="none") for _ in range(3)]
    records.append(make_record(risk_level="low"))

    _, buckets = aggregator.risk_level_breakdown(records)
    by_level = {b.level: b for b in buckets}

    assert [b.level for b in buckets] == [RiskLevel.HIGH, RiskLevel.NONE, RiskLevel.LOW]
    assert by_level[RiskLevel.HIGH].percentage == pytest.approx(60.0)
    assert by_level[RiskLevel.HIGH].trend == PerformanceTrend.UP
    assert by_level[RiskLevel.NONE].trend == PerformanceTrend.STABLE
    assert by_level[RiskLevel.LOW].trend == PerformanceTrend.DOWN
    assert by_level[RiskLevel.NONE].color == "#10b981"
    assert by_level[RiskLevel.HIGH].color == "#ef4444"


def test_weekly_rollup(aggregator, make_record):
    first = make_record(
        weekly_data=[
            WeeklyData(week="Week 1", total_classes=5, attended_classes=5),
            WeeklyData(week="Week 2", total_classes=5, attended_classes=3, absent_classes=2),
        ]
    )
    second = make_record(
        weekly_data=[{"week": "Week 1", "total_classes": 5, "attended_classes": 4, "late_classes": 1}]
    )
    weeks = aggregator.calculate_weekly_attendance([first, second])

    assert [w.week for w in weeks] == [f"Week {n}" for n in range(1, 9)]
    assert weeks[0].total_classes == 10
    assert weeks[0].attendance_rate == pytest.approx(90.0)
    assert weeks[0].trend == PerformanceTrend.STABLE
    assert weeks[0].change == 0
    assert weeks[1].attendance_rate == pytest.approx(60.0)
    assert weeks[1].trend == PerformanceTrend.DOWN
    assert weeks[1].change == pytest.approx(-25.0)
    assert weeks[7].total_classes == 0
    assert weeks[7].attendance_rate == 0


def test_instructor_metrics(aggregator, make_record):
    records = [
        make_record(
            department="CS",
            classes_taught=10,
            classes_missed=2,
            compliance_score=90,
            notification_count=3,
            teaching_load=12,
            substitute_required=True,
            weekly_data=[{"week": "Week 1", "total_classes": 10, "absent_classes": 2}],
        ),
        make_record(department="CS", classes_taught=8, compliance_score=70, teaching_load=6),
        make_record(department="EE", teaching_load=0),
    ]
    snapshot = aggregator.aggregate(records, AnalyticsType.INSTRUCTOR)
    metrics = snapshot.instructor_metrics

    assert snapshot.student_metrics is None
    assert metrics.total_classes_taught == 18
    assert metrics.total_classes_missed == 2
    assert metrics.average_compliance_score == pytest.approx(160 / 3)
    assert metrics.total_notifications_sent == 3
    assert metrics.substitute_required_count == 1
    assert metrics.teaching_load_distribution == {"CS": 18}
    assert metrics.compliance_trends[0].compliance_score == pytest.approx(80.0)
    # Weeks without classes have nothing missed
    assert metrics.compliance_trends[1].compliance_score == 100


def test_instructor_metrics_without_records(aggregator):
    metrics = aggregator.instructor_metrics([], aggregator.calculate_weekly_attendance([]))
    assert metrics.average_compliance_score == 0


def test_student_metrics(aggregator, make_record):
    records = [
        make_record(parent_notifications=2, attendance_streak=0),
        make_record(parent_notifications=1, attendance_streak=3),
        make_record(attendance_streak=5),
        make_record(attendance_streak=6),
        make_record(attendance_streak=11),
        make_record(),
    ]
    snapshot = aggregator.aggregate(records, "student")

    assert snapshot.instructor_metrics is None
    assert snapshot.student_metrics.total_parent_notifications == 3
    assert snapshot.student_metrics.attendance_streak_data == {
        "0 days": 2,
        "1-5 days": 2,
        "5-10 days": 1,
        "10+ days": 1,
    }


@pytest.mark.parametrize("label,expected", [
    ("INSTRUCTOR", AnalyticsType.INSTRUCTOR),
    ("parent", AnalyticsType.STUDENT),
    (None, AnalyticsType.STUDENT),
])
def test_analytics_type_is_only_a_label(aggregator, scenario_records, label, expected):
    snapshot = aggregator.aggregate(scenario_records, label)
    assert snapshot.analytics_type == expected
    assert snapshot.total_count == 2
