"""
Pattern analysis service.

Annotates a series with a centered moving average and peak/valley flags.
"""

import logging
from typing import List, Optional, Sequence

from attendance_analytics.config.settings import Settings, get_settings
from attendance_analytics.schemas.analytics.attendance_series import PatternPoint, SeriesPoint
from attendance_analytics.utils.rate_utils import RateCalculator

logger = logging.getLogger(__name__)


class PatternAnalysisService:
    """
    Moving average and local extrema detection.

    For the point at index i the average covers indices
    [max(0, i - 1), min(n, i - 1 + window)), so the window shrinks at the
    edges instead of wrapping or padding. A point is a peak when its value
    is >= both neighbours and a valley when it is <= both; a missing
    neighbour counts as the point's own value. On a flat run a point is
    both.
    """

    def __init__(self, config: Optional[Settings] = None) -> None:
        self.settings = config or get_settings()

    def analyze_patterns(
        self,
        series: Sequence[SeriesPoint],
        window_size: Optional[int] = None,
    ) -> List[PatternPoint]:
        window = window_size or self.settings.PATTERN_WINDOW_SIZE
        values = [point.value for point in series]
        count = len(values)

        annotated: List[PatternPoint] = []
        for index, point in enumerate(series):
            start = max(0, index - 1)
            end = min(count, index - 1 + window)
            average = RateCalculator.mean(values[start:end]) if end > start else point.value

            previous = values[index - 1] if index > 0 else point.value
            following = values[index + 1] if index < count - 1 else point.value

            annotated.append(
                PatternPoint(
                    **point.model_dump(include=set(SeriesPoint.model_fields)),
                    moving_average=round(average, 2),
                    is_peak=point.value >= previous and point.value >= following,
                    is_valley=point.value <= previous and point.value <= following,
                )
            )

        logger.debug("Annotated %d points with patterns", count)
        return annotated
