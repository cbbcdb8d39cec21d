# core/models/period.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from monitoring.i_attention_detector import AttentionState


@dataclass(frozen=True)
class Period:
    """
    A closed run of FOCUSED or DISTRACTED frames.
    Only created when a transition ends it.
    """
    state: AttentionState
    started_at: datetime
    duration_seconds: float

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "startedAt": self.started_at.isoformat(),
            "durationSeconds": self.duration_seconds,
        }
