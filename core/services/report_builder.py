# core/services/report_builder.py

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime
from typing import Callable, Deque, Optional, Set, Tuple

from core.errors import SessionAlreadyReportedError
from core.models.session_report import ReportDetectorMetrics, SessionReport
from core.models.session_stats import SessionStats
from monitoring.assessment_engine import AssessmentEngine
from monitoring.i_attention_detector import DetectorMetrics


logger = logging.getLogger(__name__)


class ReportBuilder:
    """
    Turns the final stats of a session into an immutable SessionReport.

    A builder remembers which (user_id, session_id) pairs it has already
    reported and refuses to build a second report for the same session.
    Only the last `max_remembered` sessions are kept.
    """

    def __init__(
        self,
        engine: Optional[AssessmentEngine] = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
        max_remembered: int = 100,
    ):
        self.engine = engine or AssessmentEngine()
        self.clock = clock
        self.max_remembered = max(1, int(max_remembered))
        self._built: Set[Tuple[str, int]] = set()
        self._built_order: Deque[Tuple[str, int]] = deque()

    def build(
        self,
        session_id: int,
        user_id: str,
        stats: SessionStats,
        elapsed_timer_seconds: float,
        detector_metrics: Optional[DetectorMetrics] = None,
        *,
        completed: bool,
    ) -> SessionReport:
        """
        Params
        ------
        elapsed_timer_seconds:
            original timer duration minus remaining seconds; used for the
            duration when no frame was ever observed.
        completed:
            True if the timer ran out naturally, False if stopped early.
        """
        key = (str(user_id), int(session_id))
        if key in self._built:
            raise SessionAlreadyReportedError(*key)

        now = self.clock()
        duration_minutes = self._duration_minutes(stats, now, elapsed_timer_seconds)
        assessment = self.engine.assess_for_report(stats)

        report = SessionReport(
            session_id=key[1],
            timestamp=now.isoformat(timespec="seconds"),
            user_id=key[0],
            duration_minutes=duration_minutes,
            completed=completed,
            focus_percentage=assessment.focus_ratio,
            total_frames=stats.total_frames,
            focused_frames=stats.focused_frames,
            distracted_frames=stats.distracted_frames,
            no_face_frames=stats.no_face_frames,
            assessment=assessment.label,
            assessment_category=assessment.category,
            detector_metrics=(
                ReportDetectorMetrics.from_detector(detector_metrics)
                if detector_metrics is not None
                else None
            ),
        )
        self._remember(key)

        logger.info(
            "[ReportBuilder] Session %s: %s (%s%%, %.1f min, completed=%s)",
            report.session_id,
            report.assessment_category.value,
            report.focus_percentage,
            report.duration_minutes,
            report.completed,
        )
        return report

    def _remember(self, key: Tuple[str, int]) -> None:
        self._built.add(key)
        self._built_order.append(key)
        while len(self._built_order) > self.max_remembered:
            self._built.discard(self._built_order.popleft())

    @staticmethod
    def _duration_minutes(stats: SessionStats, now: datetime, elapsed_timer_seconds: float) -> float:
        if stats.session_start is not None:
            seconds = max(0.0, (now - stats.session_start).total_seconds())
        else:
            # no frames observed (e.g. camera unavailable): fall back to the timer
            seconds = max(0.0, float(elapsed_timer_seconds))
        return round(seconds / 60.0, 1)
