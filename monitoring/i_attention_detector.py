# monitoring/i_attention_detector.py

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional


logger = logging.getLogger(__name__)


class AttentionState(str, Enum):
    FOCUSED = "focused"
    DISTRACTED = "distracted"
    NO_FACE = "noFace"

    @classmethod
    def parse(cls, value: Any) -> Optional["AttentionState"]:
        """
        Map an analyzer value onto a state.
        Returns None for anything that is not one of the three known states.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class ClassificationEvent:
    """One analyzed frame, as pushed by the external analyzer."""
    state: AttentionState
    timestamp: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Optional["ClassificationEvent"]:
        """
        Accepts {"state": "focused"|"distracted"|"noFace", "timestamp": ...}.
        `timestamp` may be a datetime, epoch milliseconds or an ISO string.
        Returns None (and logs) when the payload is unusable.
        """
        state = AttentionState.parse(payload.get("state"))
        if state is None:
            logger.warning("[Classification] Ignoring unknown state %r", payload.get("state"))
            return None

        raw_ts = payload.get("timestamp")
        try:
            timestamp = _parse_timestamp(raw_ts)
        except (TypeError, ValueError, OverflowError, OSError):
            logger.warning("[Classification] Unreadable timestamp %r, using session clock", raw_ts)
            timestamp = None

        return cls(state=state, timestamp=timestamp)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        dt = datetime.fromtimestamp(value / 1000.0)
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"unsupported timestamp type {type(value).__name__}")

    # session clock is naive local time
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


@dataclass(frozen=True)
class DetectorMetrics:
    """
    Performance snapshot reported by the face analyzer at session end.
    """
    average_processing_time: float  # ms
    max_focus_streak: int
    detection_rate: float  # %
    session_quality_score: float  # 0..1
    media_pipe_active: bool = False
    current_yaw: float = 0.0  # degrees
    current_pitch: float = 0.0  # degrees


class IAttentionDetector(ABC):
    """
    Interface for the external face/camera analyzer feeding a session.

    The analyzer pushes ClassificationEvents to the session on its own;
    the session only asks it whether it is active and for its metrics.
    """

    @abstractmethod
    def is_active(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_performance_metrics(self) -> Optional[DetectorMetrics]:
        """
        Metrics gathered during the session, or None if the analyzer
        never produced any.
        """
        raise NotImplementedError
