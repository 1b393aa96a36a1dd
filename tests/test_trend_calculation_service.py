import pytest

from attendance_analytics.schemas.common.enums import TrendDirection
from attendance_analytics.services.analytics.trend_calculation_service import (
    PeriodMetrics,
    TrendCalculationService,
    percentage_change,
    simulate_previous_period,
)


@pytest.fixture
def trend_service():
    return TrendCalculationService()


class TestPercentageChange:
    def test_zero_previous_with_positive_current_is_full_change(self):
        assert percentage_change(5, 0) == 100

    def test_zero_previous_and_zero_current_is_no_change(self):
        assert percentage_change(0, 0) == 0

    def test_relative_change(self):
        assert percentage_change(110, 100) == pytest.approx(10.0)
        assert percentage_change(50, 100) == pytest.approx(-50.0)


def test_simulated_previous_period_offsets():
    previous = simulate_previous_period(
        PeriodMetrics(total_count=20, attendance_rate=80.0, departments=3, high_risk=2)
    )
    assert previous == PeriodMetrics(
        total_count=19, attendance_rate=pytest.approx(78.4), departments=2, high_risk=1
    )


def test_simulated_previous_period_floors():
    previous = simulate_previous_period(
        PeriodMetrics(total_count=0, attendance_rate=0.0, departments=0, high_risk=0)
    )
    assert (previous.total_count, previous.departments, previous.high_risk) == (1, 1, 0)


def test_trends_for_two_departments(trend_service, scenario_records):
    trends = trend_service.calculate_trends(scenario_records)

    # 2 people against a simulated 1
    assert trends.total_count.direction == TrendDirection.UP
    assert trends.total_count.change == 100
    # 82.5% against 80.85%, in percentage points
    assert trends.attendance_rate.direction == TrendDirection.UP
    assert trends.attendance_rate.change == pytest.approx(1.65)
    assert trends.departments.direction == TrendDirection.UP
    assert trends.departments.change == 100
    # No high-risk people now or before
    assert trends.high_risk.direction == TrendDirection.NEUTRAL
    assert trends.high_risk.change == 0


def test_single_record_count_is_stable(trend_service, make_record):
    trends = trend_service.calculate_trends([make_record(risk_level="high")])
    assert trends.total_count.direction == TrendDirection.NEUTRAL
    assert trends.high_risk.direction == TrendDirection.UP
    assert trends.high_risk.change == 100


def test_zero_attendance_is_neutral(trend_service, make_record):
    trends = trend_service.calculate_trends(
        [make_record(total_classes=0, attended_classes=0)]
    )
    assert trends.attendance_rate.direction == TrendDirection.NEUTRAL
    assert trends.attendance_rate.change == 0


def test_empty_input_is_all_neutral(trend_service):
    trends = trend_service.calculate_trends([])
    for indicator in (trends.total_count, trends.attendance_rate, trends.departments, trends.high_risk):
        assert indicator.direction == TrendDirection.NEUTRAL
        assert indicator.change == 0


def test_change_is_bounded(trend_service, make_record):
    records = [make_record(department=f"D{i}", risk_level="high") for i in range(50)]
    trends = trend_service.calculate_trends(records)
    for indicator in (trends.total_count, trends.attendance_rate, trends.departments, trends.high_risk):
        assert 0 <= indicator.change <= 100


class TestComparePeriods:
    def test_without_previous_values_is_neutral(self, trend_service, make_series):
        comparison = trend_service.compare_periods(make_series([80, 90]))
        assert comparison.current_average == 85
        assert comparison.previous_average is None
        assert comparison.direction == TrendDirection.NEUTRAL
        assert comparison.change == 0

    def test_with_previous_values(self, trend_service, make_series):
        series = [
            point.model_copy(update={"previous_value": previous})
            for point, previous in zip(make_series([90, 90]), [80, 80])
        ]
        comparison = trend_service.compare_periods(series)

        assert comparison.previous_average == 80
        assert comparison.delta == 10
        assert comparison.change == pytest.approx(12.5)
        assert comparison.direction == TrendDirection.UP

    def test_empty_series(self, trend_service):
        comparison = trend_service.compare_periods([])
        assert comparison.current_average == 0
        assert comparison.direction == TrendDirection.NEUTRAL
