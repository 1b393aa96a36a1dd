"""
Filter state service.

Cross-filter and drill-down state for an analytics session, transformed
only through named actions. `apply_filter` is a pure reducer: it returns
a new AnalyticsSessionState and never modifies the one it is given.
Malformed actions leave the state unchanged; no action raises.
"""

from datetime import datetime
import logging
from typing import Any, Callable, Dict, Optional

from attendance_analytics.schemas.analytics.session_state import (
    ALL,
    is_all,
    AnalyticsSessionState,
    ApplyCrossFilter,
    ClearFilter,
    CrossFilterState,
    DepartmentChanged,
    DrillDownState,
    DrillInto,
    FilterAction,
    FilterHistoryEntry,
    Navigate,
    ResetAll,
    RiskLevelChanged,
    TimeRangeChanged,
)
from attendance_analytics.schemas.common.enums import DrillDownLevel, FilterSource

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


# --------------------------------------------------------------------- #
# Cross-filter actions
# --------------------------------------------------------------------- #
def _apply_cross_filter(
    state: AnalyticsSessionState, action: ApplyCrossFilter, now: datetime
) -> AnalyticsSessionState:
    if not action.filters:
        return state
    cross = state.cross_filter
    return state.model_copy(
        update={
            "cross_filter": cross.model_copy(
                update={
                    "active_filters": {**cross.active_filters, **action.filters},
                    "applied_filters": {**cross.applied_filters, **action.filters},
                }
            )
        }
    )


def _clear_filter(
    state: AnalyticsSessionState, action: ClearFilter, now: datetime
) -> AnalyticsSessionState:
    cross = state.cross_filter
    if action.key not in cross.active_filters:
        return state
    active = {k: v for k, v in cross.active_filters.items() if k != action.key}
    return state.model_copy(
        update={"cross_filter": cross.model_copy(update={"active_filters": active})}
    )


def _reset_all(
    state: AnalyticsSessionState, action: ResetAll, now: datetime
) -> AnalyticsSessionState:
    return state.model_copy(
        update={
            "cross_filter": CrossFilterState(),
            "drill_down": DrillDownState(),
            "selected_department": ALL,
            "selected_risk_level": ALL,
        }
    )


# --------------------------------------------------------------------- #
# Selector actions (recorded in history)
# --------------------------------------------------------------------- #
def _record_selection(
    state: AnalyticsSessionState,
    source: FilterSource,
    value: Any,
    now: datetime,
    update: Dict[str, Any],
) -> AnalyticsSessionState:
    key = source.value
    cross = state.cross_filter
    active = dict(cross.active_filters)
    applied = dict(cross.applied_filters)
    if is_all(value):
        active.pop(key, None)
        applied.pop(key, None)
    else:
        active[key] = value
        applied[key] = value

    entry = FilterHistoryEntry(timestamp=now, filter={key: value}, source=source)
    return state.model_copy(
        update={
            **update,
            "cross_filter": cross.model_copy(
                update={
                    "active_filters": active,
                    "applied_filters": applied,
                    "filter_history": [*cross.filter_history, entry],
                }
            ),
        }
    )


def _department_changed(
    state: AnalyticsSessionState, action: DepartmentChanged, now: datetime
) -> AnalyticsSessionState:
    return _record_selection(
        state,
        FilterSource.DEPARTMENT,
        action.value,
        now,
        {"selected_department": action.value},
    )


def _risk_level_changed(
    state: AnalyticsSessionState, action: RiskLevelChanged, now: datetime
) -> AnalyticsSessionState:
    return _record_selection(
        state,
        FilterSource.RISK_LEVEL,
        action.value,
        now,
        {"selected_risk_level": action.value},
    )


def _time_range_changed(
    state: AnalyticsSessionState, action: TimeRangeChanged, now: datetime
) -> AnalyticsSessionState:
    return _record_selection(
        state,
        FilterSource.TIME_RANGE,
        action.time_range.model_dump(mode="json"),
        now,
        {"time_range": action.time_range},
    )


# --------------------------------------------------------------------- #
# Drill-down actions
# --------------------------------------------------------------------- #
def _drill_into(
    state: AnalyticsSessionState, action: DrillInto, now: datetime
) -> AnalyticsSessionState:
    try:
        level = DrillDownLevel(action.level)
    except ValueError:
        logger.debug("Ignoring drill-down into unknown level %r", action.level)
        return state

    label = action.data.get("name") or action.data.get("id")
    if label is None or label == "":
        logger.debug("Ignoring drill-down payload without a label")
        return state
    label = str(label)

    drill = state.drill_down
    return state.model_copy(
        update={
            "drill_down": DrillDownState(
                is_active=True,
                level=level,
                data=dict(action.data),
                breadcrumbs=[*drill.breadcrumbs, label],
                filters={**drill.filters, level.value: label},
            )
        }
    )


def _navigate(
    state: AnalyticsSessionState, action: Navigate, now: datetime
) -> AnalyticsSessionState:
    drill = state.drill_down
    if action.index == -1:
        breadcrumbs = drill.breadcrumbs[:-1]
        level = DrillDownLevel.DEPARTMENT
    elif action.index >= 0:
        breadcrumbs = drill.breadcrumbs[: action.index + 1]
        level = DrillDownLevel.DEPARTMENT if len(breadcrumbs) <= 1 else DrillDownLevel.INSTRUCTOR
    else:
        return state

    return state.model_copy(
        update={"drill_down": drill.model_copy(update={"breadcrumbs": breadcrumbs, "level": level})}
    )


_HANDLERS: Dict[type, Callable[..., AnalyticsSessionState]] = {
    ApplyCrossFilter: _apply_cross_filter,
    ClearFilter: _clear_filter,
    ResetAll: _reset_all,
    DrillInto: _drill_into,
    Navigate: _navigate,
    DepartmentChanged: _department_changed,
    RiskLevelChanged: _risk_level_changed,
    TimeRangeChanged: _time_range_changed,
}


def apply_filter(
    state: AnalyticsSessionState,
    action: FilterAction,
    now: Optional[datetime] = None,
) -> AnalyticsSessionState:
    """Return the state that results from applying `action` to `state`."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        logger.debug("Ignoring unknown filter action %r", action)
        return state
    return handler(state, action, now or datetime.now())


class FilterStateManager:
    """
    Holds the current session state and applies actions to it.

    The clock is injectable so history timestamps are deterministic
    under test.
    """

    def __init__(
        self,
        state: Optional[AnalyticsSessionState] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._state = state or AnalyticsSessionState()
        self._clock = clock or datetime.now

    @property
    def state(self) -> AnalyticsSessionState:
        return self._state

    def dispatch(self, action: FilterAction) -> AnalyticsSessionState:
        self._state = apply_filter(self._state, action, self._clock())
        return self._state

    # Convenience wrappers
    def apply_cross_filter(self, filters: Dict[str, Any]) -> AnalyticsSessionState:
        return self.dispatch(ApplyCrossFilter(filters=filters))

    def clear_filter(self, key: str) -> AnalyticsSessionState:
        return self.dispatch(ClearFilter(key=key))

    def reset_all(self) -> AnalyticsSessionState:
        return self.dispatch(ResetAll())

    def drill_into(self, level: Any, data: Dict[str, Any]) -> AnalyticsSessionState:
        return self.dispatch(DrillInto(level=level, data=data))

    def navigate(self, index: int) -> AnalyticsSessionState:
        return self.dispatch(Navigate(index=index))
