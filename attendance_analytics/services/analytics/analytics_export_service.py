"""
Analytics export service.

Assembles export payloads for analytics views and hands them to an
export sink. File formats, downloads and storage belong to the sink.
"""

from datetime import datetime
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Union

from attendance_analytics.core.exceptions import BaseAppException, ErrorCode
from attendance_analytics.schemas.analytics.analytics_export import (
    AnalyticsExportPayload,
    ExportOptions,
)
from attendance_analytics.schemas.analytics.attendance_analytics import AnalyticsSnapshot
from attendance_analytics.schemas.analytics.attendance_series import SeriesPoint
from attendance_analytics.schemas.analytics.session_state import AnalyticsSessionState
from attendance_analytics.schemas.attendance.attendance_record import AttendanceRecord
from attendance_analytics.schemas.common.enums import AnalyticsType, ExportFormat

logger = logging.getLogger(__name__)


class ExportSink(Protocol):
    """Collaborator that serializes and delivers an export."""

    def export(self, payload: AnalyticsExportPayload) -> Any:
        ...


class AnalyticsExportService:
    """
    Build analytics export payloads.

    Features:
    - Filename convention `{type}-attendance-analytics-{YYYY-MM-DD}`
    - Current selector values and time range carried as filters, on request
    - Series flattened to chart rows, on request
    - Export history tracking
    """

    def __init__(
        self,
        sink: Optional[ExportSink] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._sink = sink
        self._clock = clock or datetime.now
        self._export_history: List[Dict[str, Any]] = []

    @property
    def export_history(self) -> List[Dict[str, Any]]:
        return list(self._export_history)

    @staticmethod
    def build_filename(analytics_type: Union[AnalyticsType, str], when: datetime) -> str:
        return f"{AnalyticsType.from_label(analytics_type).value}-attendance-analytics-{when.date().isoformat()}"

    def build_payload(
        self,
        analytics_type: Union[AnalyticsType, str],
        records: Sequence[AttendanceRecord],
        session_state: AnalyticsSessionState,
        snapshot: Optional[AnalyticsSnapshot] = None,
        series: Optional[Sequence[SeriesPoint]] = None,
        fmt: Union[ExportFormat, str] = ExportFormat.CSV,
        include_charts: bool = True,
        include_filters: bool = True,
    ) -> AnalyticsExportPayload:
        analytics_type = AnalyticsType.from_label(analytics_type)
        now = self._clock()
        filters: Dict[str, str] = {}
        if include_filters:
            filters = {
                "department": session_state.selected_department,
                "riskLevel": session_state.selected_risk_level,
            }

        return AnalyticsExportPayload(
            analytics_type=analytics_type,
            generated_at=now,
            options=ExportOptions(
                format=ExportFormat(fmt),
                filename=self.build_filename(analytics_type, now),
                include_charts=include_charts,
                include_filters=include_filters,
            ),
            filters=filters,
            time_range=session_state.time_range if include_filters else None,
            records=list(records),
            snapshot=snapshot,
            series=[point.to_chart_row() for point in series or []] if include_charts else [],
        )

    def export(
        self,
        analytics_type: Union[AnalyticsType, str],
        records: Sequence[AttendanceRecord],
        session_state: AnalyticsSessionState,
        snapshot: Optional[AnalyticsSnapshot],
        series: Optional[Sequence[SeriesPoint]] = None,
        fmt: Union[ExportFormat, str] = ExportFormat.CSV,
        include_charts: bool = True,
        include_filters: bool = True,
    ) -> Any:
        """
        Build the payload and pass it to the configured sink.

        Raises:
            BaseAppException: no sink is configured or there is no
                snapshot to export.
        """
        if self._sink is None:
            raise BaseAppException("No export sink configured", ErrorCode.INVALID_REQUEST)
        if snapshot is None:
            raise BaseAppException("No data available for export", ErrorCode.INVALID_REQUEST)

        payload = self.build_payload(
            analytics_type,
            records,
            session_state,
            snapshot,
            series,
            fmt,
            include_charts=include_charts,
            include_filters=include_filters,
        )
        result = self._sink.export(payload)

        self._export_history.append(
            {
                "filename": payload.options.filename,
                "format": payload.options.format.value,
                "record_count": len(payload.records),
                "exported_at": payload.generated_at,
            }
        )
        logger.info(
            "Exported %s analytics as %s",
            payload.analytics_type.value,
            payload.options.format.value,
            extra={
                "analytics_type": payload.analytics_type.value,
                "record_count": len(payload.records),
            },
        )
        return result
