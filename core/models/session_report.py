# core/models/session_report.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from monitoring.base_assessment_engine import Category
from monitoring.i_attention_detector import DetectorMetrics


@dataclass(frozen=True)
class ReportDetectorMetrics:
    """
    Analyzer metrics as persisted with a report (rounded pass-through).
    """
    avg_processing_time: float
    max_focus_streak: int
    detection_rate: float
    session_quality: float  # percent
    media_pipe_active: bool = False
    current_yaw: float = 0.0
    current_pitch: float = 0.0

    @classmethod
    def from_detector(cls, metrics: DetectorMetrics) -> "ReportDetectorMetrics":
        return cls(
            avg_processing_time=round(metrics.average_processing_time, 2),
            max_focus_streak=int(metrics.max_focus_streak),
            detection_rate=round(metrics.detection_rate, 1),
            session_quality=round(metrics.session_quality_score * 100.0, 1),
            media_pipe_active=bool(metrics.media_pipe_active),
            current_yaw=metrics.current_yaw or 0.0,
            current_pitch=metrics.current_pitch or 0.0,
        )

    def to_dict(self) -> dict:
        return {
            "avgProcessingTime": self.avg_processing_time,
            "maxFocusStreak": self.max_focus_streak,
            "detectionRate": self.detection_rate,
            "sessionQuality": self.session_quality,
            "mediaPipeActive": self.media_pipe_active,
            "currentYaw": self.current_yaw,
            "currentPitch": self.current_pitch,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReportDetectorMetrics":
        return cls(
            avg_processing_time=float(data.get("avgProcessingTime", 0.0)),
            max_focus_streak=int(data.get("maxFocusStreak", 0)),
            detection_rate=float(data.get("detectionRate", 0.0)),
            session_quality=float(data.get("sessionQuality", 0.0)),
            media_pipe_active=bool(data.get("mediaPipeActive", False)),
            current_yaw=float(data.get("currentYaw") or 0.0),
            current_pitch=float(data.get("currentPitch") or 0.0),
        )


@dataclass(frozen=True)
class SessionReport:
    session_id: int
    timestamp: str  # ISO datetime string
    user_id: str
    duration_minutes: float
    completed: bool
    focus_percentage: Optional[float]
    total_frames: int
    focused_frames: int
    distracted_frames: int
    no_face_frames: int
    assessment: str
    assessment_category: Category
    detector_metrics: Optional[ReportDetectorMetrics] = None

    def to_dict(self) -> dict:
        """JSON-ready dict, in the persisted camelCase schema."""
        return {
            "sessionId": self.session_id,
            "timestamp": self.timestamp,
            "userId": self.user_id,
            "durationMinutes": self.duration_minutes,
            "completed": self.completed,
            "focusPercentage": self.focus_percentage,
            "totalFrames": self.total_frames,
            "focusedFrames": self.focused_frames,
            "distractedFrames": self.distracted_frames,
            "noFaceFrames": self.no_face_frames,
            "assessment": self.assessment,
            "assessmentCategory": self.assessment_category.value,
            "detectorMetrics": self.detector_metrics.to_dict() if self.detector_metrics else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionReport":
        metrics = data.get("detectorMetrics")
        focus = data.get("focusPercentage")
        return cls(
            session_id=int(data["sessionId"]),
            timestamp=data["timestamp"],
            user_id=str(data["userId"]),
            duration_minutes=float(data.get("durationMinutes", 0.0)),
            completed=bool(data.get("completed", False)),
            focus_percentage=float(focus) if focus is not None else None,
            total_frames=int(data.get("totalFrames", 0)),
            focused_frames=int(data.get("focusedFrames", 0)),
            distracted_frames=int(data.get("distractedFrames", 0)),
            no_face_frames=int(data.get("noFaceFrames", 0)),
            assessment=data.get("assessment", ""),
            assessment_category=Category(data.get("assessmentCategory", Category.MODERATE.value)),
            detector_metrics=ReportDetectorMetrics.from_dict(metrics) if metrics else None,
        )

    def __repr__(self):
        return (
            f"<SessionReport id={self.session_id} user_id={self.user_id} "
            f"focus={self.focus_percentage} category={self.assessment_category.value}>"
        )
