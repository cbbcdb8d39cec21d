# core/models/session_stats.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from core.models.period import Period
from monitoring.i_attention_detector import AttentionState


@dataclass
class SessionStats:
    """
    Running statistics of one focus session.

    Counters are maintained by StatsAggregator, the period fields by
    StateTracker. Read-only once the session's report has been built.
    """
    total_frames: int = 0
    focused_frames: int = 0
    distracted_frames: int = 0
    no_face_frames: int = 0

    session_start: Optional[datetime] = None
    focus_periods: List[Period] = field(default_factory=list)
    distraction_periods: List[Period] = field(default_factory=list)

    current_state: Optional[AttentionState] = None
    state_start_time: Optional[datetime] = None

    def snapshot(self) -> dict:
        return {
            "totalFrames": self.total_frames,
            "focusedFrames": self.focused_frames,
            "distractedFrames": self.distracted_frames,
            "noFaceFrames": self.no_face_frames,
            "sessionStart": self.session_start.isoformat() if self.session_start else None,
            "focusPeriods": [p.to_dict() for p in self.focus_periods],
            "distractionPeriods": [p.to_dict() for p in self.distraction_periods],
            "currentState": self.current_state.value if self.current_state else None,
            "stateStartTime": self.state_start_time.isoformat() if self.state_start_time else None,
        }

    def __repr__(self):
        return (
            f"<SessionStats total={self.total_frames} focused={self.focused_frames} "
            f"distracted={self.distracted_frames} no_face={self.no_face_frames}>"
        )


def reset_session_stats() -> SessionStats:
    """Fresh stats for a new session."""
    return SessionStats()
