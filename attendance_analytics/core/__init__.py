"""
Core Module

Foundational components shared by the analytics services.
"""

from .exceptions import (
    BaseAppException,
    ErrorCode,
    InvalidTimeRangeError,
    TimestampParseError,
    ValidationError,
)

__all__ = [
    "BaseAppException",
    "ErrorCode",
    "InvalidTimeRangeError",
    "TimestampParseError",
    "ValidationError",
]
