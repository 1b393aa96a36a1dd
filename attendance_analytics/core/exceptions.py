"""
Custom Exceptions for the Attendance Analytics Engine

This module defines the exception classes used between analytics layers
to signal malformed input. The public analytics operations catch these
and substitute documented defaults, so none of them escape the core.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the analytics engine"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_FORMAT = "INVALID_FORMAT"

    # Time handling errors
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"


class BaseAppException(Exception):
    """
    Base exception class for all analytics exceptions.

    Provides consistent error handling across the package with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details)


class InvalidTimeRangeError(BaseAppException):
    """Exception raised when a custom time range cannot be resolved"""

    def __init__(
        self,
        message: str = "Invalid time range",
        start: Any = None,
        end: Any = None,
    ):
        details = {"start": str(start) if start is not None else None,
                   "end": str(end) if end is not None else None}
        super().__init__(message, ErrorCode.INVALID_DATE_RANGE, details)


class TimestampParseError(BaseAppException):
    """Exception raised when a timestamp value cannot be parsed"""

    def __init__(self, value: Any, message: Optional[str] = None):
        if not message:
            message = f"Unable to parse timestamp: {value!r}"
        super().__init__(message, ErrorCode.INVALID_TIMESTAMP, {"value": repr(value)})

