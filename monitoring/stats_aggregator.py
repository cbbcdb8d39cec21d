# monitoring/stats_aggregator.py

from __future__ import annotations

from core.models.session_stats import SessionStats
from monitoring.i_attention_detector import AttentionState


class StatsAggregator:
    """
    Per-state frame counters. Called exactly once per classification,
    whether or not the state changed.
    """

    def __init__(self, stats: SessionStats):
        self.stats = stats

    def observe(self, state: AttentionState) -> None:
        self.stats.total_frames += 1

        if state == AttentionState.FOCUSED:
            self.stats.focused_frames += 1
        elif state == AttentionState.DISTRACTED:
            self.stats.distracted_frames += 1
        else:
            self.stats.no_face_frames += 1

    def percentages(self) -> tuple[float, float]:
        """
        Return (focused %, distracted %), one decimal place.
        """
        total = self.stats.total_frames
        if total == 0:
            return 0.0, 0.0
        return (
            round(100.0 * self.stats.focused_frames / total, 1),
            round(100.0 * self.stats.distracted_frames / total, 1),
        )
