from datetime import datetime, timedelta

import pytest

from core.models.session_stats import reset_session_stats
from monitoring.i_attention_detector import AttentionState
from monitoring.state_tracker import StateTracker


F = AttentionState.FOCUSED
D = AttentionState.DISTRACTED
N = AttentionState.NO_FACE

T0 = datetime(2026, 1, 5, 9, 0, 0)


def at(seconds):
    return T0 + timedelta(seconds=seconds)


@pytest.fixture
def stats():
    return reset_session_stats()


@pytest.fixture
def tracker(stats):
    return StateTracker(stats)


class TestStateTracker:

    def test_first_observation_opens_period(self, tracker, stats):
        assert tracker.observe(F, at(0)) is None

        assert stats.current_state == F
        assert stats.state_start_time == at(0)
        assert stats.session_start == at(0)
        assert stats.focus_periods == []
        assert stats.distraction_periods == []

    def test_same_state_keeps_period_open(self, tracker, stats):
        tracker.observe(F, at(0))
        tracker.observe(F, at(5))
        tracker.observe(F, at(9))

        assert stats.state_start_time == at(0)
        assert stats.focus_periods == []

    def test_transition_closes_focused_period(self, tracker, stats):
        tracker.observe(F, at(0))
        closed = tracker.observe(D, at(12.5))

        assert closed is not None
        assert closed.state == F
        assert closed.started_at == at(0)
        assert closed.duration_seconds == pytest.approx(12.5)
        assert stats.focus_periods == [closed]
        assert stats.current_state == D
        assert stats.state_start_time == at(12.5)

    def test_transition_closes_distracted_period(self, tracker, stats):
        tracker.observe(D, at(0))
        tracker.observe(F, at(3))

        assert len(stats.distraction_periods) == 1
        assert stats.distraction_periods[0].duration_seconds == pytest.approx(3)
        assert stats.focus_periods == []

    def test_no_face_period_is_not_recorded(self, tracker, stats):
        tracker.observe(N, at(0))
        closed = tracker.observe(F, at(4))

        assert closed is None
        assert stats.focus_periods == []
        assert stats.distraction_periods == []
        assert stats.current_state == F

    def test_session_start_set_only_once(self, tracker, stats):
        tracker.observe(N, at(0))
        tracker.observe(F, at(1))
        tracker.observe(D, at(2))

        assert stats.session_start == at(0)

    def test_out_of_order_time_gives_zero_duration(self, tracker, stats):
        tracker.observe(F, at(10))
        closed = tracker.observe(D, at(5))

        assert closed.duration_seconds == 0.0

    def test_open_period_is_not_flushed(self, tracker, stats):
        tracker.observe(F, at(0))
        tracker.observe(D, at(10))
        tracker.observe(F, at(20))
        # focused since 20s, still open

        assert [p.duration_seconds for p in stats.focus_periods] == [10]
        assert [p.duration_seconds for p in stats.distraction_periods] == [10]
        assert tracker.open_period_seconds(at(50)) == pytest.approx(30)

    def test_closed_durations_never_exceed_elapsed_time(self, tracker, stats):
        sequence = [F, F, D, D, D, F, N, N, F, D, F, F]
        for i, state in enumerate(sequence):
            tracker.observe(state, at(i * 2))

        end = at((len(sequence) - 1) * 2)
        elapsed = (end - stats.session_start).total_seconds()
        closed = sum(p.duration_seconds for p in stats.focus_periods + stats.distraction_periods)

        assert closed <= elapsed
        # an open focused period remains, so strictly less
        assert closed < elapsed

    def test_open_period_seconds_without_observations(self, tracker):
        assert tracker.open_period_seconds(at(100)) == 0.0
