# monitoring/state_tracker.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from core.models.period import Period
from core.models.session_stats import SessionStats
from monitoring.i_attention_detector import AttentionState


logger = logging.getLogger(__name__)


class StateTracker:
    """
    Segments the classification stream into periods.

    - first observation opens a period (and marks the session start)
    - a repeated state keeps the period open
    - a different state closes the open period:
        * FOCUSED    -> stats.focus_periods
        * DISTRACTED -> stats.distraction_periods
        * NO_FACE    -> not recorded (only counted by StatsAggregator)

    The period still open when the session ends is never flushed, so the
    period lists undercount the final interval.
    """

    def __init__(self, stats: SessionStats):
        self.stats = stats

    def observe(self, state: AttentionState, now: datetime) -> Optional[Period]:
        """
        Returns the Period closed by this observation, if any.
        """
        stats = self.stats

        if stats.current_state is None:
            stats.current_state = state
            stats.state_start_time = now
            if stats.session_start is None:
                stats.session_start = now
            return None

        if state == stats.current_state:
            return None

        started_at = stats.state_start_time or now
        duration = max(0.0, (now - started_at).total_seconds())
        previous = stats.current_state

        closed: Optional[Period] = None
        if previous == AttentionState.FOCUSED:
            closed = Period(state=previous, started_at=started_at, duration_seconds=duration)
            stats.focus_periods.append(closed)
        elif previous == AttentionState.DISTRACTED:
            closed = Period(state=previous, started_at=started_at, duration_seconds=duration)
            stats.distraction_periods.append(closed)

        logger.debug(
            "[StateTracker] %s -> %s after %.1fs", previous.value, state.value, duration
        )

        stats.current_state = state
        stats.state_start_time = now
        return closed

    def open_period_seconds(self, now: datetime) -> float:
        """
        Duration of the period still in progress (display only).
        """
        if self.stats.state_start_time is None:
            return 0.0
        return max(0.0, (now - self.stats.state_start_time).total_seconds())
