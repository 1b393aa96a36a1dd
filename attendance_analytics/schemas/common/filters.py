"""
Common filter schemas used for analytics selections.
"""

from datetime import date as Date, datetime, timedelta
from typing import Tuple, Union

from pydantic import Field

from attendance_analytics.core.exceptions import InvalidTimeRangeError, TimestampParseError
from attendance_analytics.schemas.common.base import BaseFilterSchema
from attendance_analytics.schemas.common.enums import TimeRangePreset
from attendance_analytics.utils.datetime_utils import DateRangeCalculator, DateTimeHelper

__all__ = [
    "TimeRange",
    "TimestampValue",
]


# Raw strings are kept as-is and parsed lazily so that a malformed
# value degrades to a default instead of failing validation.
TimestampValue = Union[datetime, Date, str, None]


class TimeRange(BaseFilterSchema):
    """
    Time window selection.

    For every preset except `custom` the effective window is recomputed
    from the supplied clock on each evaluation and `start`/`end` are
    ignored. For `custom` the stored bounds are parsed and validated.
    """

    start: TimestampValue = Field(
        default=None,
        description="Start of a custom range (inclusive)",
    )
    end: TimestampValue = Field(
        default=None,
        description="End of a custom range (inclusive, whole day)",
    )
    preset: TimeRangePreset = Field(
        default=TimeRangePreset.MONTH,
        description="Time range preset",
    )

    @property
    def is_custom(self) -> bool:
        return self.preset is TimeRangePreset.CUSTOM

    def resolve(self, now: datetime) -> Tuple[datetime, datetime]:
        """
        Compute the effective [start, end] window.

        Raises:
            InvalidTimeRangeError: custom bounds are missing, unparsable
                or inverted.
        """
        now = DateTimeHelper.strip_tz(now)

        if self.preset is TimeRangePreset.TODAY:
            return DateTimeHelper.start_of_day(now), now
        if self.preset is TimeRangePreset.WEEK:
            return now - timedelta(days=7), now
        if self.preset is TimeRangePreset.MONTH:
            return DateRangeCalculator.month_start(now), now
        if self.preset is TimeRangePreset.QUARTER:
            return DateRangeCalculator.quarter_start(now), now
        if self.preset is TimeRangePreset.YEAR:
            return DateRangeCalculator.year_start(now), now

        if self.start is None or self.end is None:
            raise InvalidTimeRangeError(
                "Custom range requires both start and end", self.start, self.end
            )
        try:
            start = DateTimeHelper.strip_tz(DateTimeHelper.parse_datetime(self.start))
            end = DateTimeHelper.strip_tz(DateTimeHelper.parse_datetime(self.end))
        except TimestampParseError as exc:
            raise InvalidTimeRangeError(
                f"Custom range bound is not a valid timestamp: {exc.message}",
                self.start,
                self.end,
            ) from exc

        if start.date() > end.date():
            raise InvalidTimeRangeError("Custom range start is after end", self.start, self.end)

        return DateTimeHelper.start_of_day(start), DateTimeHelper.end_of_day(end)
