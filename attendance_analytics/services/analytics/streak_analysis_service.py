"""
Streak analysis service.

Single forward pass over a series classifying each point as good
(value >= threshold) or poor, tracking consecutive runs.
"""

import logging
from typing import List, Optional, Sequence

from attendance_analytics.config.settings import Settings, get_settings
from attendance_analytics.schemas.analytics.attendance_series import (
    SeriesPoint,
    StreakAnalysis,
    StreakPoint,
    StreakStats,
)
from attendance_analytics.schemas.common.enums import StreakType

logger = logging.getLogger(__name__)


class StreakAnalysisService:
    """Good/poor run detection with break markers."""

    def __init__(self, config: Optional[Settings] = None) -> None:
        self.settings = config or get_settings()

    def analyze_streaks(
        self,
        series: Sequence[SeriesPoint],
        threshold: Optional[float] = None,
    ) -> StreakAnalysis:
        """
        Annotate each point with its signed running streak.

        `current_streak` is +len for a good run and -len for a poor run.
        A point is a streak break when its classification differs from the
        previous point's; the first point never is.
        """
        if threshold is None:
            threshold = self.settings.GOOD_ATTENDANCE_THRESHOLD
        if not series:
            return StreakAnalysis()

        good_streak = poor_streak = 0
        max_good = max_poor = 0
        total_good = total_poor = 0
        previous_type: Optional[StreakType] = None
        points: List[StreakPoint] = []

        for point in series:
            if point.value >= threshold:
                streak_type = StreakType.GOOD
                good_streak += 1
                poor_streak = 0
                total_good += 1
                max_good = max(max_good, good_streak)
                signed = good_streak
            else:
                streak_type = StreakType.POOR
                poor_streak += 1
                good_streak = 0
                total_poor += 1
                max_poor = max(max_poor, poor_streak)
                signed = -poor_streak

            points.append(
                StreakPoint(
                    **point.model_dump(include=set(SeriesPoint.model_fields)),
                    current_streak=signed,
                    streak_type=streak_type,
                    is_streak_break=previous_type is not None and streak_type != previous_type,
                )
            )
            previous_type = streak_type

        last = points[-1]
        stats = StreakStats(
            max_good_streak=max_good,
            max_poor_streak=max_poor,
            current_streak=last.current_streak,
            current_streak_type=last.streak_type,
            total_good_days=total_good,
            total_poor_days=total_poor,
        )
        logger.debug(
            "Streak analysis: max good %d, max poor %d over %d points",
            max_good,
            max_poor,
            len(points),
        )
        return StreakAnalysis(points=points, stats=stats)
