"""
Rate arithmetic utilities for the attendance analytics engine
"""

import statistics
from typing import Union

Number = Union[int, float]


class RateCalculator:
    """Division-safe rate calculations"""

    @staticmethod
    def rate(part: Number, whole: Number) -> float:
        """Percentage of `part` in `whole`; 0 when `whole` is 0"""
        if not whole:
            return 0.0
        return part / whole * 100

    @staticmethod
    def clamp(value: Number, lower: Number = 0.0, upper: Number = 100.0) -> float:
        """Clamp a value into [lower, upper]"""
        return float(max(lower, min(upper, value)))

    @classmethod
    def clamped_rate(cls, part: Number, whole: Number, upper: Number = 100.0) -> float:
        """Rate clamped into [0, upper]"""
        return cls.clamp(cls.rate(part, whole), 0.0, upper)

    @staticmethod
    def mean(values) -> float:
        """Arithmetic mean; 0 for an empty collection"""
        values = list(values)
        if not values:
            return 0.0
        return float(statistics.mean(values))
