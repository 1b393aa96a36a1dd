"""
Series generation service.

Produces a time-bucketed series for the selected time range. Bucket
granularity and labels depend on the preset:

    today    hours 6..23            "H:00"
    week     weekdays Sun..Sat      full day name
    month    days of current month  "M/D"
    quarter  weeks 1..13            "Week N"
    year     months 1..12           three-letter month
    custom   one point per day      "M/D" (capped)

Bucket values are the snapshot's base rate plus a smooth deterministic
offset, so identical inputs always yield identical series.
"""

from datetime import date, datetime
import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from attendance_analytics.config.settings import Settings, get_settings
from attendance_analytics.core.exceptions import InvalidTimeRangeError
from attendance_analytics.schemas.analytics.attendance_analytics import AnalyticsSnapshot
from attendance_analytics.schemas.analytics.attendance_series import SeriesPoint
from attendance_analytics.schemas.common.enums import BucketKind, SeriesMetric, TimeRangePreset
from attendance_analytics.schemas.common.filters import TimeRange
from attendance_analytics.utils.datetime_utils import DateRangeCalculator, DateTimeHelper
from attendance_analytics.utils.rate_utils import RateCalculator

logger = logging.getLogger(__name__)

# (kind, value, label)
Bucket = Tuple[BucketKind, Union[int, str], str]

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

FIRST_HOUR = 6
LAST_HOUR = 23
QUARTER_WEEKS = 13

# Length of one variation cycle and its amplitude, per bucket kind
CYCLE_LENGTH = {
    BucketKind.HOUR: LAST_HOUR - FIRST_HOUR + 1,
    BucketKind.WEEKDAY: 7,
    BucketKind.DATE: 7,
    BucketKind.WEEK: QUARTER_WEEKS,
    BucketKind.MONTH: 12,
}
AMPLITUDE = {
    BucketKind.HOUR: 3.0,
    BucketKind.WEEKDAY: 2.0,
    BucketKind.DATE: 2.0,
    BucketKind.WEEK: 2.5,
    BucketKind.MONTH: 4.0,
}
WEEKEND_DIP = 5.0

# Previous-period base scaling per metric
PREVIOUS_BASE_FACTOR = {
    SeriesMetric.ATTENDANCE_RATE: 0.96,
    SeriesMetric.LATE_RATE: 1.1,
}


class SeriesGenerationService:
    """Generate chartable series from a snapshot and a time range."""

    def __init__(self, config: Optional[Settings] = None) -> None:
        self.settings = config or get_settings()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def generate_series(
        self,
        snapshot: Optional[AnalyticsSnapshot],
        time_range: TimeRange,
        metric: Union[SeriesMetric, str] = SeriesMetric.ATTENDANCE_RATE,
        with_comparison: bool = False,
        now: Optional[datetime] = None,
        fallback: Optional[Sequence[SeriesPoint]] = None,
    ) -> List[SeriesPoint]:
        """
        Build the series for `time_range`.

        An invalid custom range returns `fallback` (or an empty list)
        instead of raising.
        """
        metric = SeriesMetric(metric)
        now = DateTimeHelper.strip_tz(now or datetime.now())

        try:
            buckets = self.buckets_for(time_range, now)
        except InvalidTimeRangeError as exc:
            logger.warning(
                "Invalid custom range for series generation, using fallback: %s",
                exc.message,
                extra={"preset": time_range.preset.value},
            )
            return list(fallback or [])

        base = self._base_value(snapshot, metric)
        previous_base = base * PREVIOUS_BASE_FACTOR[metric]

        series = [
            SeriesPoint(
                bucket_kind=kind,
                bucket_value=value,
                label=label,
                metric=metric,
                value=self._synthesize(base, metric, kind, value),
                previous_value=(
                    self._synthesize(previous_base, metric, kind, value, shift=1)
                    if with_comparison
                    else None
                ),
            )
            for kind, value, label in buckets
        ]
        logger.debug(
            "Generated %d %s points",
            len(series),
            metric.value,
            extra={"preset": time_range.preset.value},
        )
        return series

    def buckets_for(self, time_range: TimeRange, now: datetime) -> List[Bucket]:
        """
        Ordered buckets for a time range.

        Raises:
            InvalidTimeRangeError: custom bounds are missing, unparsable
                or inverted.
        """
        preset = time_range.preset
        if preset is TimeRangePreset.TODAY:
            return [
                (BucketKind.HOUR, hour, f"{hour}:00")
                for hour in range(FIRST_HOUR, LAST_HOUR + 1)
            ]
        if preset is TimeRangePreset.WEEK:
            return [(BucketKind.WEEKDAY, index, name) for index, name in enumerate(DAY_NAMES)]
        if preset is TimeRangePreset.MONTH:
            first_day, last_day = DateRangeCalculator.get_month_range(now.year, now.month)
            return self._date_buckets(DateRangeCalculator.create_date_range(first_day, last_day))
        if preset is TimeRangePreset.QUARTER:
            return [
                (BucketKind.WEEK, week, f"Week {week}")
                for week in range(1, QUARTER_WEEKS + 1)
            ]
        if preset is TimeRangePreset.YEAR:
            return [
                (BucketKind.MONTH, month, MONTH_ABBREVIATIONS[month - 1])
                for month in range(1, 13)
            ]

        start, end = time_range.resolve(now)
        days = DateRangeCalculator.create_date_range(
            start.date(), end.date(), limit=self.settings.CUSTOM_RANGE_MAX_POINTS
        )
        return self._date_buckets(days)

    # ------------------------------------------------------------------ #
    # Value synthesis
    # ------------------------------------------------------------------ #
    @staticmethod
    def _base_value(snapshot: Optional[AnalyticsSnapshot], metric: SeriesMetric) -> float:
        if snapshot is None:
            return 0.0
        if metric is SeriesMetric.LATE_RATE:
            return snapshot.late_rate
        return snapshot.attendance_rate

    def _synthesize(
        self,
        base: float,
        metric: SeriesMetric,
        kind: BucketKind,
        value: Union[int, str],
        shift: int = 0,
    ) -> float:
        offset = self._offset(kind, value, shift)
        if metric is SeriesMetric.LATE_RATE:
            # Lateness moves against attendance, at a quarter of the swing
            result = RateCalculator.clamp(base - offset / 4, 0.0, self.settings.LATE_RATE_CEILING)
        else:
            result = RateCalculator.clamp(base + offset)
        return round(result, 2)

    @staticmethod
    def _offset(kind: BucketKind, value: Union[int, str], shift: int = 0) -> float:
        """Smooth periodic variation for a bucket, minus a weekend dip."""
        position, weekend = SeriesGenerationService._position(kind, value)
        cycle = CYCLE_LENGTH[kind]
        phase = ((position + shift) % cycle) / cycle
        offset = AMPLITUDE[kind] * math.sin(2 * math.pi * phase)
        if weekend:
            offset -= WEEKEND_DIP
        return offset

    @staticmethod
    def _position(kind: BucketKind, value: Union[int, str]) -> Tuple[int, bool]:
        """Zero-based position within the cycle and whether it is a weekend bucket."""
        if kind is BucketKind.HOUR:
            return int(value) - FIRST_HOUR, False
        if kind is BucketKind.WEEKDAY:
            index = int(value)
            return index, index in (0, 6)
        if kind is BucketKind.DATE:
            day = date.fromisoformat(str(value))
            return DateTimeHelper.sunday_first_weekday(day), DateTimeHelper.is_weekend(day)
        # WEEK and MONTH are 1-based
        return int(value) - 1, False

    @staticmethod
    def _date_buckets(days: Iterable[date]) -> List[Bucket]:
        return [(BucketKind.DATE, day.isoformat(), f"{day.month}/{day.day}") for day in days]
