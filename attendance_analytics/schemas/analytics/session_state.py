"""
Analytics session state and the actions that transform it.

The session state bundles the cross-filter and drill-down state together
with the current selector values. Every model here is frozen: actions
produce a new state value and never modify an existing one.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from attendance_analytics.schemas.common.base import FrozenSchema
from attendance_analytics.schemas.common.enums import DrillDownLevel, FilterSource
from attendance_analytics.schemas.common.filters import TimeRange

__all__ = [
    "ALL",
    "is_all",
    "FilterHistoryEntry",
    "CrossFilterState",
    "DrillDownState",
    "AnalyticsSessionState",
    "ApplyCrossFilter",
    "ClearFilter",
    "ResetAll",
    "DrillInto",
    "Navigate",
    "DepartmentChanged",
    "RiskLevelChanged",
    "TimeRangeChanged",
    "FilterAction",
]


# Selector value meaning "no restriction"
ALL = "all"


def is_all(value: Any) -> bool:
    """True for a selector value that places no restriction (any case)."""
    if value is None:
        return True
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower() == ALL


class FilterHistoryEntry(FrozenSchema):
    """One selector change, appended to the history log."""

    timestamp: datetime
    filter: Dict[str, Any] = Field(default_factory=dict)
    source: FilterSource


class CrossFilterState(FrozenSchema):
    """Active/applied filters plus the append-only history log."""

    active_filters: Dict[str, Any] = Field(default_factory=dict)
    applied_filters: Dict[str, Any] = Field(default_factory=dict)
    filter_history: List[FilterHistoryEntry] = Field(default_factory=list)


class DrillDownState(FrozenSchema):
    """Drill-down navigation state."""

    is_active: bool = False
    level: DrillDownLevel = DrillDownLevel.DEPARTMENT
    data: Optional[Dict[str, Any]] = None
    breadcrumbs: List[str] = Field(default_factory=list)
    filters: Dict[str, str] = Field(default_factory=dict)


class AnalyticsSessionState(FrozenSchema):
    """State owned by a single analytics session."""

    cross_filter: CrossFilterState = Field(default_factory=CrossFilterState)
    drill_down: DrillDownState = Field(default_factory=DrillDownState)
    selected_department: str = ALL
    selected_risk_level: str = ALL
    time_range: TimeRange = Field(default_factory=TimeRange)


# --------------------------------------------------------------------- #
# Actions
# --------------------------------------------------------------------- #
class ApplyCrossFilter(FrozenSchema):
    filters: Dict[str, Any] = Field(default_factory=dict)


class ClearFilter(FrozenSchema):
    key: str


class ResetAll(FrozenSchema):
    pass


class DrillInto(FrozenSchema):
    """Drill into an entity; `data` carries its `name` (or `id`) as label."""

    level: Union[DrillDownLevel, str]
    data: Dict[str, Any] = Field(default_factory=dict)


class Navigate(FrozenSchema):
    """Breadcrumb navigation; -1 goes back one level."""

    index: int


class DepartmentChanged(FrozenSchema):
    value: str


class RiskLevelChanged(FrozenSchema):
    value: str


class TimeRangeChanged(FrozenSchema):
    time_range: TimeRange


FilterAction = Union[
    ApplyCrossFilter,
    ClearFilter,
    ResetAll,
    DrillInto,
    Navigate,
    DepartmentChanged,
    RiskLevelChanged,
    TimeRangeChanged,
]
