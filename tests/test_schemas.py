from datetime import date, datetime, time

import pydantic
import pytest

from attendance_analytics.core.exceptions import (
    ErrorCode,
    InvalidTimeRangeError,
    TimestampParseError,
)
from attendance_analytics.schemas.attendance.attendance_record import (
    AttendanceRecord,
    split_department_label,
)
from attendance_analytics.schemas.common.enums import RecordStatus, RiskLevel, TimeRangePreset
from attendance_analytics.schemas.common.filters import TimeRange


class TestAttendanceRecord:
    def test_rate_is_derived_from_counts(self):
        record = AttendanceRecord(id=1, total_classes=40, attended_classes=30)
        assert record.id == "1"
        assert record.attendance_rate == pytest.approx(75.0)

    def test_rate_without_classes_is_zero(self):
        assert AttendanceRecord(id="x").attendance_rate == 0

    def test_supplied_rate_is_kept(self):
        record = AttendanceRecord(id="x", total_classes=10, attended_classes=5, attendance_rate=62.5)
        assert record.attendance_rate == 62.5

    def test_upper_case_vocabulary(self):
        record = AttendanceRecord(id="x", risk_level="HIGH", status="INACTIVE")
        assert record.risk_level == RiskLevel.HIGH
        assert record.status == RecordStatus.INACTIVE

    def test_negative_counts_are_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            AttendanceRecord(id="x", total_classes=-1)

    def test_records_are_immutable(self):
        record = AttendanceRecord(id="x")
        with pytest.raises(pydantic.ValidationError):
            record.name = "changed"

    def test_department_properties(self):
        record = AttendanceRecord(id="x", department="EE - Electrical Engineering")
        assert record.department_code == "EE"
        assert record.department_name == "Electrical Engineering"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2025-05-10T09:00:00", datetime(2025, 5, 10, 9, 0)),
            ("2025-05-10T09:00:00+02:00", datetime(2025, 5, 10, 9, 0)),
            (date(2025, 5, 10), datetime(2025, 5, 10)),
            (None, None),
            ("", None),
        ],
    )
    def test_last_attendance_at(self, value, expected):
        assert AttendanceRecord(id="x", last_attendance=value).last_attendance_at() == expected

    def test_malformed_timestamp_is_kept_but_not_parsable(self):
        record = AttendanceRecord(id="x", last_attendance="garbage")

        assert record.last_attendance == "garbage"
        assert not record.has_parsable_timestamp()
        with pytest.raises(TimestampParseError) as excinfo:
            record.last_attendance_at()
        assert excinfo.value.error_code == ErrorCode.INVALID_TIMESTAMP


@pytest.mark.parametrize(
    "label,expected",
    [
        ("CS - Computer Science", ("CS", "Computer Science")),
        ("ME-Mechanical", ("ME", "Mechanical")),
        ("Library", ("Library", "Library")),
        ("", ("", "")),
    ],
)
def test_split_department_label(label, expected):
    assert split_department_label(label) == expected


class TestTimeRange:
    NOW = datetime(2025, 5, 15, 12, 0)

    def test_default_preset_is_month(self):
        assert TimeRange().preset == TimeRangePreset.MONTH

    @pytest.mark.parametrize(
        "preset,start",
        [
            ("today", datetime(2025, 5, 15)),
            ("week", datetime(2025, 5, 8, 12, 0)),
            ("month", datetime(2025, 5, 1)),
            ("quarter", datetime(2025, 4, 1)),
            ("year", datetime(2025, 1, 1)),
        ],
    )
    def test_presets_are_relative_to_now(self, preset, start):
        resolved = TimeRange(preset=preset, start="1999-01-01", end="1999-01-02").resolve(self.NOW)
        assert resolved == (start, self.NOW)

    def test_custom_range_covers_whole_days(self):
        resolved = TimeRange(preset="custom", start="2025-05-01", end="2025-05-03").resolve(self.NOW)
        assert resolved == (datetime(2025, 5, 1), datetime.combine(date(2025, 5, 3), time.max))

    def test_custom_single_day(self):
        start, end = TimeRange(preset="custom", start="2025-05-01", end="2025-05-01").resolve(self.NOW)
        assert start.date() == end.date()

    @pytest.mark.parametrize(
        "start,end",
        [
            (None, "2025-05-01"),
            ("2025-05-01", None),
            ("garbage", "2025-05-01"),
            ("2025-05-10", "2025-05-01"),
        ],
    )
    def test_invalid_custom_range(self, start, end):
        with pytest.raises(InvalidTimeRangeError) as excinfo:
            TimeRange(preset="custom", start=start, end=end).resolve(self.NOW)
        assert excinfo.value.error_code == ErrorCode.INVALID_DATE_RANGE
        assert set(excinfo.value.to_dict()["error"]["details"]) == {"start", "end"}
