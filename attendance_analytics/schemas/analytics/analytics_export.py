"""
Export payload schemas handed to export sinks.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from attendance_analytics.schemas.analytics.attendance_analytics import AnalyticsSnapshot
from attendance_analytics.schemas.attendance.attendance_record import AttendanceRecord
from attendance_analytics.schemas.common.base import BaseSchema
from attendance_analytics.schemas.common.enums import AnalyticsType, ExportFormat
from attendance_analytics.schemas.common.filters import TimeRange

__all__ = [
    "ExportOptions",
    "AnalyticsExportPayload",
]


class ExportOptions(BaseSchema):
    """How a sink should render the export."""

    format: ExportFormat = ExportFormat.CSV
    filename: str = Field(..., min_length=1)
    include_charts: bool = True
    include_filters: bool = True


class AnalyticsExportPayload(BaseSchema):
    """Everything an export sink needs; serialization is the sink's job."""

    analytics_type: AnalyticsType
    generated_at: datetime
    options: ExportOptions
    filters: Dict[str, str] = Field(default_factory=dict)
    time_range: Optional[TimeRange] = Field(
        default=None,
        description="Selected time range; omitted unless filters are included",
    )
    records: List[AttendanceRecord] = Field(default_factory=list)
    snapshot: Optional[AnalyticsSnapshot] = None
    series: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Chart rows of the exported series",
    )
