"""
Base schema classes with common configurations.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

__all__ = [
    "BaseSchema",
    "FrozenSchema",
    "BaseFilterSchema",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    All analytics-facing schemas should inherit from this to ensure
    consistent behaviour (validation, enum handling, etc.).
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        # Keep enums as Enum instances to retain full type information;
        # callers can still access `.value` if needed.
        use_enum_values=False,
        arbitrary_types_allowed=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class FrozenSchema(BaseSchema):
    """Base schema for values that are replaced rather than mutated."""

    model_config = ConfigDict(frozen=True, validate_assignment=False)


class BaseFilterSchema(BaseSchema):
    """Base schema for filter parameters."""
    pass
