"""
Record filter service.

Narrows the raw record collection by department, risk level and time
range. Filtering is pure: the input list and its records are never
modified.
"""

from datetime import datetime
from enum import Enum
import logging
from typing import Any, Callable, List, Optional, Sequence

from attendance_analytics.core.exceptions import InvalidTimeRangeError, TimestampParseError
from attendance_analytics.schemas.analytics.session_state import ALL, is_all
from attendance_analytics.schemas.attendance.attendance_record import AttendanceRecord
from attendance_analytics.schemas.common.filters import TimeRange

logger = logging.getLogger(__name__)

RecordPredicate = Callable[[AttendanceRecord], bool]


def _selector_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value).strip()


class RecordFilterService:
    """
    Apply department, risk-level and time-range predicates to records.

    Time predicate:
    - Preset ranges keep a record only when its last-attendance timestamp
      parses and falls inside the window recomputed from `now`.
    - Custom ranges keep records without a timestamp and records whose
      timestamp cannot be parsed. An invalid custom range keeps every
      record.
    """

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def filter_records(
        self,
        records: Sequence[AttendanceRecord],
        department: Any = ALL,
        risk_level: Any = ALL,
        time_range: Optional[TimeRange] = None,
        now: Optional[datetime] = None,
    ) -> List[AttendanceRecord]:
        """Return the records matching every active predicate."""
        now = now or datetime.now()
        in_time_range = self._time_predicate(time_range, now)

        filtered = [
            record
            for record in records
            if self.matches_department(record, department)
            and self.matches_risk_level(record, risk_level)
            and in_time_range(record)
        ]
        logger.debug(
            "Filtered %d of %d records (department=%s, risk_level=%s)",
            len(filtered),
            len(records),
            department,
            risk_level,
            extra={
                "record_count": len(records),
                "preset": time_range.preset.value if time_range else None,
            },
        )
        return filtered

    def filter_with_fallback(
        self,
        records: Sequence[AttendanceRecord],
        department: Any = ALL,
        risk_level: Any = ALL,
        time_range: Optional[TimeRange] = None,
        now: Optional[datetime] = None,
    ) -> List[AttendanceRecord]:
        """
        Filter records, reverting to the full collection when a custom
        range leaves nothing.

        Preset ranges return the empty result so the caller can render an
        empty state.
        """
        filtered = self.filter_records(records, department, risk_level, time_range, now)
        if not filtered and records and time_range is not None and time_range.is_custom:
            logger.warning(
                "Custom range filtering produced no records; using unfiltered collection",
                extra={"record_count": len(records), "preset": time_range.preset.value},
            )
            return list(records)
        return filtered

    # ------------------------------------------------------------------ #
    # Predicates
    # ------------------------------------------------------------------ #
    @staticmethod
    def matches_department(record: AttendanceRecord, department: Any) -> bool:
        """Match the raw label, its code or its display name."""
        if is_all(department):
            return True
        selector = _selector_value(department)
        return selector in (record.department, record.department_code, record.department_name)

    @staticmethod
    def matches_risk_level(record: AttendanceRecord, risk_level: Any) -> bool:
        if is_all(risk_level):
            return True
        return record.risk_level.value == _selector_value(risk_level).lower()

    def _time_predicate(self, time_range: Optional[TimeRange], now: datetime) -> RecordPredicate:
        if time_range is None:
            return lambda record: True

        try:
            start, end = time_range.resolve(now)
        except InvalidTimeRangeError as exc:
            logger.warning(
                "Ignoring invalid custom range: %s",
                exc.message,
                extra={"preset": time_range.preset.value},
            )
            return lambda record: True

        if time_range.is_custom:
            return lambda record: self._in_custom_range(record, start, end)
        return lambda record: self._in_preset_range(record, start, end)

    @staticmethod
    def _in_preset_range(record: AttendanceRecord, start: datetime, end: datetime) -> bool:
        try:
            timestamp = record.last_attendance_at()
        except TimestampParseError:
            return False
        return timestamp is not None and start <= timestamp <= end

    @staticmethod
    def _in_custom_range(record: AttendanceRecord, start: datetime, end: datetime) -> bool:
        try:
            timestamp = record.last_attendance_at()
        except TimestampParseError:
            logger.debug("Keeping record %s with unparsable timestamp", record.id)
            return True
        if timestamp is None:
            return True
        return start <= timestamp <= end
