"""
Shared fixtures for the analytics test suite.
"""

from datetime import datetime

import pytest

from attendance_analytics.config.settings import Settings
from attendance_analytics.schemas.analytics.attendance_series import SeriesPoint
from attendance_analytics.schemas.attendance.attendance_record import AttendanceRecord
from attendance_analytics.schemas.common.enums import BucketKind
from attendance_analytics.services.analytics.attendance_analytics_service import (
    AttendanceAnalyticsService,
)

# Thursday
FIXED_NOW = datetime(2025, 5, 15, 12, 0)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def test_settings():
    return Settings(ENVIRONMENT="testing", LOG_LEVEL="DEBUG")


@pytest.fixture
def analytics_service(test_settings):
    return AttendanceAnalyticsService(clock=lambda: FIXED_NOW, config=test_settings)


@pytest.fixture
def make_record():
    """Factory for attendance records with sensible defaults."""
    counter = {"next_id": 1}

    def _make(**overrides):
        values = {
            "id": counter["next_id"],
            "name": f"Person {counter['next_id']}",
            "department": "CS - Computer Science",
            "total_classes": 20,
            "attended_classes": 18,
            "absent_classes": 1,
            "late_classes": 1,
            "risk_level": "low",
            "last_attendance": "2025-05-10T09:00:00",
            "status": "active",
        }
        values.update(overrides)
        counter["next_id"] += 1
        return AttendanceRecord(**values)

    return _make


@pytest.fixture
def scenario_records(make_record):
    """Two records in departments A and B (82.5% pooled attendance)."""
    return [
        make_record(
            department="A",
            total_classes=20,
            attended_classes=18,
            late_classes=1,
            absent_classes=1,
            risk_level="low",
        ),
        make_record(
            department="B",
            total_classes=20,
            attended_classes=15,
            late_classes=2,
            absent_classes=3,
            risk_level="medium",
        ),
    ]


@pytest.fixture
def make_series():
    """Build a plain week-bucketed series from a list of values."""

    def _make(values):
        return [
            SeriesPoint(
                bucket_kind=BucketKind.WEEK,
                bucket_value=index + 1,
                label=f"Week {index + 1}",
                value=value,
            )
            for index, value in enumerate(values)
        ]

    return _make
