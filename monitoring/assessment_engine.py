# monitoring/assessment_engine.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.config import VisionConfig
from core.models.session_stats import SessionStats
from monitoring.base_assessment_engine import (
    BaseAssessmentEngine,
    Category,
    CategoryStyle,
    NEUTRAL_STYLE,
    CATEGORY_STYLES,
)


GATHERING_DATA = "Gathering data..."
SESSION_COMPLETED = "Session completed"

LIVE_LABELS = {
    Category.EXCELLENT: "Excellent focus!",
    Category.GOOD: "Good focus maintained",
    Category.MODERATE: "Moderate focus",
    Category.BELOW_AVERAGE: "Below average focus",
    Category.POOR: "Poor focus - adjust position",
}

REPORT_LABELS = {
    Category.EXCELLENT: "Excellent session",
    Category.GOOD: "Good session",
    Category.MODERATE: "Moderate session",
    Category.BELOW_AVERAGE: "Below average session",
    Category.POOR: "Poor session",
}


@dataclass(frozen=True)
class Assessment:
    label: str
    category: Category
    focus_ratio: Optional[float]
    face_detection_issues: bool = False
    # False while the sample is too small for the label to mean anything
    meaningful: bool = True

    @property
    def style(self) -> CategoryStyle:
        if not self.meaningful:
            return NEUTRAL_STYLE
        return CATEGORY_STYLES[self.category]


class AssessmentEngine(BaseAssessmentEngine):
    """
    Rates a session by its focus ratio:

      >=85 EXCELLENT, >=70 GOOD, >=50 MODERATE, >=30 BELOW_AVERAGE, else POOR

    Also raises an advisory flag when more than 20% of the frames had
    no face in them. The flag never changes the category.
    """

    def __init__(self, config: Optional[VisionConfig] = None):
        self.config = config or VisionConfig()
        super().__init__(self.config.thresholds)

    def focus_ratio(self, total_frames: int, focused_frames: int) -> Optional[float]:
        if total_frames <= 0:
            return None
        return round(100.0 * focused_frames / total_frames, 1)

    def has_face_detection_issues(self, total_frames: int, no_face_frames: int) -> bool:
        return no_face_frames > self.config.no_face_warning_ratio * total_frames

    def assess(
        self,
        total_frames: int,
        focused_frames: int,
        no_face_frames: int = 0,
    ) -> Assessment:
        """
        Pure function of the counts. With no frames the category defaults
        to MODERATE and the label says data is still being gathered.
        """
        ratio = self.focus_ratio(total_frames, focused_frames)
        if ratio is None:
            return Assessment(
                label=GATHERING_DATA,
                category=Category.MODERATE,
                focus_ratio=None,
                meaningful=False,
            )

        category = self.categorize(ratio)
        return Assessment(
            label=LIVE_LABELS[category],
            category=category,
            focus_ratio=ratio,
            face_detection_issues=self.has_face_detection_issues(total_frames, no_face_frames),
        )

    def assess_for_display(self, stats: SessionStats) -> Assessment:
        """
        Live assessment. Until more than `min_display_frames` frames are in,
        the label stays "Gathering data..." but the ratio is still computed.
        """
        assessment = self.assess(stats.total_frames, stats.focused_frames, stats.no_face_frames)
        if stats.total_frames > self.config.min_display_frames:
            return assessment

        return Assessment(
            label=GATHERING_DATA,
            category=assessment.category,
            focus_ratio=assessment.focus_ratio,
            face_detection_issues=assessment.face_detection_issues,
            meaningful=False,
        )

    def assess_for_report(self, stats: SessionStats) -> Assessment:
        """
        Assessment stored in the session report. No minimum-sample guard.
        """
        assessment = self.assess(stats.total_frames, stats.focused_frames, stats.no_face_frames)
        if assessment.focus_ratio is None:
            return Assessment(
                label=SESSION_COMPLETED,
                category=Category.MODERATE,
                focus_ratio=None,
            )

        return Assessment(
            label=REPORT_LABELS[assessment.category],
            category=assessment.category,
            focus_ratio=assessment.focus_ratio,
            face_detection_issues=assessment.face_detection_issues,
        )
