"""
Data validation service for attendance records.

Checks incoming records for data quality problems. Problems are reported
and logged but never reject the data set: analytics are still computed
over whatever the record source supplied.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from attendance_analytics.core.exceptions import ValidationError
from attendance_analytics.schemas.analytics.attendance_analytics import DataValidationResult
from attendance_analytics.schemas.attendance.attendance_record import AttendanceRecord

logger = logging.getLogger(__name__)

RawRecord = Union[AttendanceRecord, Mapping[str, Any]]


class DataValidationService:
    """
    Record-level data quality checks.

    Penalties against a starting quality of 100:
    - missing name: error, -10
    - attended classes above total classes: error, -15
    - attendance rate outside [0, 100]: warning, -5
    """

    MISSING_NAME_PENALTY = 10
    INVALID_COUNTS_PENALTY = 15
    RATE_RANGE_PENALTY = 5

    def validate_attendance_data(self, records: Sequence[AttendanceRecord]) -> DataValidationResult:
        errors: List[str] = []
        warnings: List[str] = []
        quality = 100

        if not records:
            errors.append("No data provided")
            quality = 0

        for index, record in enumerate(records):
            if not record.name:
                errors.append(f"Item {index}: Missing name")
                quality -= self.MISSING_NAME_PENALTY
            if record.attendance_rate is not None and not 0 <= record.attendance_rate <= 100:
                warnings.append(f"Item {index}: Attendance rate out of valid range")
                quality -= self.RATE_RANGE_PENALTY
            if record.total_classes < record.attended_classes:
                errors.append(f"Item {index}: Invalid attendance data")
                quality -= self.INVALID_COUNTS_PENALTY

        result = DataValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            data_quality=max(0, quality),
        )
        if not result.is_valid:
            logger.warning(
                "Data validation failed: %s",
                "; ".join(errors),
                extra={"record_count": len(records)},
            )
        return result

    @staticmethod
    def coerce_records(raw_records: Iterable[RawRecord]) -> List[AttendanceRecord]:
        """
        Build AttendanceRecord instances from mappings supplied by a record
        source. Records that are already models pass through unchanged.

        Raises:
            ValidationError: one or more mappings cannot be turned into a
                record; field errors are keyed by "<index>.<field>".
        """
        records: List[AttendanceRecord] = []
        field_errors: Dict[str, List[str]] = {}

        for index, raw in enumerate(raw_records):
            if isinstance(raw, AttendanceRecord):
                records.append(raw)
                continue
            try:
                records.append(AttendanceRecord.model_validate(raw))
            except PydanticValidationError as exc:
                for error in exc.errors():
                    location = ".".join(str(part) for part in error["loc"]) or "__root__"
                    field_errors.setdefault(f"{index}.{location}", []).append(error["msg"])

        if field_errors:
            raise ValidationError(
                message=f"{len(field_errors)} invalid attendance record field(s)",
                field_errors=field_errors,
            )
        return records
