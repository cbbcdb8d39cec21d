# manager/report_controller.py

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.config import VisionConfig
from core.models.session_report import SessionReport
from core.services.report_store import ReportStore
from core.services.session_counter_service import SessionCounterService
from monitoring.base_assessment_engine import style_for


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportRow:
    """One line of the analytics list."""
    session_id: int
    title: str
    icon: str
    color: str
    focus_display: str
    date_display: str
    duration_display: str


def _format_date(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).strftime("%b %d, %I:%M %p")
    except ValueError:
        return timestamp


class ReportController:
    """
    Read side of the stored session reports, for the analytics panel.
    """

    def __init__(
        self,
        report_store: ReportStore,
        counter_service: Optional[SessionCounterService] = None,
        config: Optional[VisionConfig] = None,
    ):
        self.report_store = report_store
        self.counter_service = counter_service
        self.config = config or report_store.config

    def list_reports(self, user_id: Optional[str] = None) -> List[SessionReport]:
        reports = self.report_store.load_all()
        if user_id is not None:
            reports = [r for r in reports if r.user_id == str(user_id)]
        return reports

    def list_rows(self, user_id: Optional[str] = None) -> List[ReportRow]:
        return [self.row_for(report) for report in self.list_reports(user_id)]

    def row_for(self, report: SessionReport) -> ReportRow:
        style = style_for(report.assessment_category)
        return ReportRow(
            session_id=report.session_id,
            title=f"Session {report.session_id}",
            icon=style.icon,
            color=style.color,
            focus_display=(
                f"{report.focus_percentage}%" if report.focus_percentage is not None else "N/A"
            ),
            date_display=_format_date(report.timestamp),
            duration_display=f"{report.duration_minutes}min",
        )

    def details(self, report: SessionReport) -> Dict[str, Any]:
        """
        Return a dictionary with:
          - title
          - overview: date, duration, status, assessment
          - metrics: focus score, frame counts, detection rate
          - detector: head pose / processing time (only with MediaPipe active)
        """
        style = style_for(report.assessment_category)
        metrics = report.detector_metrics

        result: Dict[str, Any] = {
            "title": f"{style.icon} Session {report.session_id} Details",
            "color": style.color,
            "overview": {
                "date": report.timestamp,
                "duration": f"{report.duration_minutes} minutes",
                "status": "Completed" if report.completed else "Incomplete",
                "assessment": report.assessment,
            },
            "metrics": {
                "focus_score": (
                    f"{report.focus_percentage}%" if report.focus_percentage is not None else "No data"
                ),
                "total_frames": report.total_frames or "N/A",
                "focused_frames": report.focused_frames or 0,
                "detection_rate": f"{metrics.detection_rate}%" if metrics else "N/A",
            },
            "detector": None,
        }

        if metrics is not None and metrics.media_pipe_active:
            result["detector"] = {
                "head_yaw": f"{metrics.current_yaw:.1f}°" if metrics.current_yaw else "N/A",
                "head_pitch": f"{metrics.current_pitch:.1f}°" if metrics.current_pitch else "N/A",
                "processing_time": f"{metrics.avg_processing_time}ms",
            }

        return result

    def clear(self) -> None:
        self.report_store.clear()

    def export_session_data(self, user_id: Optional[str] = None) -> str:
        """
        JSON export of the saved reports and the session counter.
        """
        data = {
            "user": user_id,
            "sessionCounter": self.counter_service.get() if self.counter_service else None,
            "savedReports": self.report_store.load_raw(),
            "exportDate": datetime.now().isoformat(timespec="seconds"),
            "applicationVersion": self.config.application_version,
        }
        logger.info("[ReportController] Exported %d report(s)", len(data["savedReports"]))
        return json.dumps(data, indent=2, ensure_ascii=False)

    def export_filename(self) -> str:
        return f"vision-focus-export-{datetime.now().date().isoformat()}.json"
