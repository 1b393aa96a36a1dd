"""
Attendance schemas package.

Input records consumed by the analytics engine.
"""

from attendance_analytics.schemas.attendance.attendance_record import (
    AttendanceRecord,
    WeeklyData,
    split_department_label,
)

__all__ = [
    "AttendanceRecord",
    "WeeklyData",
    "split_department_label",
]
