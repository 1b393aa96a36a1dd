"""
Date and time utility classes for the attendance analytics engine
"""

from datetime import datetime, date, time, timedelta
from typing import Any, List, Tuple
from dateutil import parser
from dateutil.relativedelta import relativedelta
import calendar

from attendance_analytics.core.exceptions import TimestampParseError


class DateTimeHelper:
    """Date and time manipulation utilities"""

    @staticmethod
    def parse_datetime(value: Any) -> datetime:
        """
        Parse a timestamp value with flexible formats.

        Accepts datetime and date instances as well as strings understood
        by the dateutil parser. Raises TimestampParseError otherwise.
        """
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time.min)
        if isinstance(value, str) and value.strip():
            try:
                return parser.parse(value)
            except (ValueError, TypeError, OverflowError) as exc:
                raise TimestampParseError(value) from exc
        raise TimestampParseError(value)

    @staticmethod
    def strip_tz(dt: datetime) -> datetime:
        """Drop tzinfo, keeping the wall-clock time"""
        return dt.replace(tzinfo=None) if dt.tzinfo is not None else dt

    @staticmethod
    def start_of_day(dt: datetime) -> datetime:
        """Midnight of the given day"""
        return datetime.combine(dt.date(), time.min)

    @staticmethod
    def end_of_day(dt: datetime) -> datetime:
        """Last representable instant of the given day"""
        return datetime.combine(dt.date(), time.max)

    @staticmethod
    def is_weekend(dt: date) -> bool:
        """Check if date falls on weekend"""
        if isinstance(dt, datetime):
            dt = dt.date()

        # 5 = Saturday, 6 = Sunday
        return dt.weekday() in (5, 6)

    @staticmethod
    def sunday_first_weekday(dt: date) -> int:
        """Weekday index with Sunday = 0 ... Saturday = 6"""
        return (dt.weekday() + 1) % 7


class DateRangeCalculator:
    """Date range calculation utilities"""

    @staticmethod
    def create_date_range(start: date, end: date, limit: int = None) -> List[date]:
        """Generate list of dates in range, optionally capped at `limit` entries"""
        date_list = []
        current_date = start

        while current_date <= end:
            if limit is not None and len(date_list) >= limit:
                break
            date_list.append(current_date)
            current_date += timedelta(days=1)

        return date_list

    @staticmethod
    def get_month_range(year: int, month: int) -> Tuple[date, date]:
        """Get first and last date of month"""
        first_day = date(year, month, 1)
        last_day_num = calendar.monthrange(year, month)[1]
        last_day = date(year, month, last_day_num)

        return (first_day, last_day)

    @staticmethod
    def quarter_start(dt: datetime) -> datetime:
        """Midnight of the first day of the quarter containing dt"""
        first_month = ((dt.month - 1) // 3) * 3 + 1
        return DateTimeHelper.start_of_day(dt) + relativedelta(month=first_month, day=1)

    @staticmethod
    def month_start(dt: datetime) -> datetime:
        """Midnight of the first day of the month containing dt"""
        return DateTimeHelper.start_of_day(dt) + relativedelta(day=1)

    @staticmethod
    def year_start(dt: datetime) -> datetime:
        """Midnight of January 1 of the year containing dt"""
        return DateTimeHelper.start_of_day(dt) + relativedelta(month=1, day=1)
