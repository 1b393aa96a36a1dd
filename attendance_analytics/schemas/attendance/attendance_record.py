"""
Attendance record schemas.

An AttendanceRecord is the per-person input to the analytics engine,
supplied by the record source. Records are immutable once built.
"""

from datetime import datetime
import re
from typing import List, Optional, Tuple, Union

from pydantic import ConfigDict, Field, field_validator, model_validator

from attendance_analytics.core.exceptions import TimestampParseError
from attendance_analytics.schemas.common.base import BaseSchema
from attendance_analytics.schemas.common.enums import RecordStatus, RiskLevel
from attendance_analytics.schemas.common.filters import TimestampValue
from attendance_analytics.utils.datetime_utils import DateTimeHelper

__all__ = [
    "WeeklyData",
    "AttendanceRecord",
    "split_department_label",
]


# Department labels are commonly "CODE - NAME"
_DEPARTMENT_LABEL = re.compile(r"^([A-Z0-9]+)\s*-\s*(.+)$")


def split_department_label(label: str) -> Tuple[str, str]:
    """Split a department label into (code, display name)."""
    match = _DEPARTMENT_LABEL.match(label)
    if match:
        return match.group(1), match.group(2)
    return label, label


class WeeklyData(BaseSchema):
    """Per-week attendance counters attached to a record."""

    model_config = ConfigDict(frozen=True, validate_assignment=False)

    week: str = Field(..., description="Week label")
    total_classes: int = Field(0, ge=0)
    attended_classes: int = Field(0, ge=0)
    absent_classes: int = Field(0, ge=0)
    late_classes: int = Field(0, ge=0)


class AttendanceRecord(BaseSchema):
    """
    Attendance summary for a single instructor or student.

    `attendance_rate` is derived from attended/total classes when it is
    not supplied. `last_attendance` keeps unparsed strings so that a
    malformed timestamp never rejects the record.
    """

    model_config = ConfigDict(frozen=True, validate_assignment=False)

    id: str = Field(..., description="Person identifier")
    name: str = Field("", description="Display name")
    department: str = Field("", description="Department label")

    total_classes: int = Field(0, ge=0)
    attended_classes: int = Field(0, ge=0)
    absent_classes: int = Field(0, ge=0)
    late_classes: int = Field(0, ge=0)
    attendance_rate: Optional[float] = Field(
        None,
        description="Attendance rate in percent; derived when omitted",
    )

    risk_level: RiskLevel = Field(RiskLevel.NONE)
    last_attendance: TimestampValue = Field(None)
    status: RecordStatus = Field(RecordStatus.ACTIVE)
    subjects: List[str] = Field(default_factory=list)
    weekly_data: List[WeeklyData] = Field(default_factory=list)

    # Instructor-specific
    classes_taught: Optional[int] = Field(None, ge=0)
    classes_missed: Optional[int] = Field(None, ge=0)
    compliance_score: Optional[float] = None
    notification_count: Optional[int] = Field(None, ge=0)
    teaching_load: Optional[float] = None
    substitute_required: bool = False

    # Student-specific
    parent_notifications: Optional[int] = Field(None, ge=0)
    attendance_streak: Optional[int] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Union[str, int]) -> str:
        """Accept numeric identifiers from the record source."""
        return str(v) if isinstance(v, int) else v

    @field_validator("risk_level", "status", mode="before")
    @classmethod
    def lower_case_vocabulary(cls, v):
        """Source systems send upper-case vocabulary ("ACTIVE", "HIGH")."""
        return v.strip().lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def derive_attendance_rate(self):
        """Fill attendance_rate from the class counts when missing."""
        if self.attendance_rate is None:
            rate = (
                self.attended_classes / self.total_classes * 100
                if self.total_classes > 0
                else 0.0
            )
            # Frozen model: write through __dict__ during validation
            self.__dict__["attendance_rate"] = rate
        return self

    @property
    def department_code(self) -> str:
        return split_department_label(self.department)[0]

    @property
    def department_name(self) -> str:
        return split_department_label(self.department)[1]

    def last_attendance_at(self) -> Optional[datetime]:
        """
        Parsed last-attendance timestamp, or None when absent.

        Raises:
            TimestampParseError: the stored value is malformed.
        """
        if self.last_attendance is None:
            return None
        if isinstance(self.last_attendance, str) and not self.last_attendance:
            return None
        return DateTimeHelper.strip_tz(DateTimeHelper.parse_datetime(self.last_attendance))

    def has_parsable_timestamp(self) -> bool:
        try:
            return self.last_attendance_at() is not None
        except TimestampParseError:
            return False
