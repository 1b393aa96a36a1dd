from attendance_analytics.utils.datetime_utils import DateRangeCalculator, DateTimeHelper
from attendance_analytics.utils.rate_utils import RateCalculator

__all__ = ["DateRangeCalculator", "DateTimeHelper", "RateCalculator"]
