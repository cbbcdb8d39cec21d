import dataclasses
from datetime import timedelta

import pytest

from core.errors import SessionAlreadyReportedError
from core.models.session_stats import reset_session_stats
from core.services.report_builder import ReportBuilder
from monitoring.base_assessment_engine import Category
from monitoring.i_attention_detector import AttentionState
from monitoring.state_tracker import StateTracker
from monitoring.stats_aggregator import StatsAggregator


@pytest.fixture
def builder(clock):
    return ReportBuilder(clock=clock)


def feed(stats, clock, states, step=1.0):
    tracker = StateTracker(stats)
    aggregator = StatsAggregator(stats)
    for state in states:
        aggregator.observe(state)
        tracker.observe(state, clock())
        clock.advance(step)


class TestReportBuilder:

    def test_zero_frame_session(self, builder):
        stats = reset_session_stats()

        report = builder.build(1, "user-1", stats, elapsed_timer_seconds=90, completed=True)

        assert report.focus_percentage is None
        assert report.total_frames == 0
        assert report.duration_minutes == 1.5
        assert report.assessment == "Session completed"
        assert report.assessment_category == Category.MODERATE
        assert report.detector_metrics is None

    def test_duration_from_session_start(self, builder, clock):
        stats = reset_session_stats()
        feed(stats, clock, [AttentionState.FOCUSED] * 10)
        clock.advance(590)  # 600s after the first frame

        # timer fallback must be ignored once frames exist
        report = builder.build(2, "user-1", stats, elapsed_timer_seconds=5, completed=True)

        assert report.duration_minutes == 10.0

    def test_counts_and_assessment(self, builder, clock):
        stats = reset_session_stats()
        feed(stats, clock, [AttentionState.FOCUSED] * 7 + [AttentionState.DISTRACTED] * 3)

        report = builder.build(3, "user-1", stats, elapsed_timer_seconds=10, completed=False)

        assert report.completed is False
        assert report.focus_percentage == 70.0
        assert report.assessment_category == Category.GOOD
        assert report.assessment == "Good session"
        assert (report.total_frames, report.focused_frames, report.distracted_frames, report.no_face_frames) == (
            10, 7, 3, 0,
        )

    def test_timestamp_is_build_time(self, builder, clock):
        report = builder.build(4, "user-1", reset_session_stats(), 0, completed=True)

        assert report.timestamp == clock().isoformat(timespec="seconds")

    def test_detector_metrics_pass_through(self, builder, detector_metrics):
        report = builder.build(
            5, "user-1", reset_session_stats(), 60, detector_metrics, completed=True
        )

        metrics = report.detector_metrics
        assert metrics.avg_processing_time == 12.35
        assert metrics.max_focus_streak == 42
        assert metrics.detection_rate == 97.2
        assert metrics.session_quality == 87.6
        assert metrics.media_pipe_active is True
        assert metrics.current_yaw == -3.5
        assert metrics.current_pitch == 7.25

    def test_report_is_immutable(self, builder):
        report = builder.build(6, "user-1", reset_session_stats(), 0, completed=True)

        with pytest.raises(dataclasses.FrozenInstanceError):
            report.completed = False

    def test_second_build_for_same_session_rejected(self, builder):
        stats = reset_session_stats()
        builder.build(7, "user-1", stats, 0, completed=True)

        with pytest.raises(SessionAlreadyReportedError):
            builder.build(7, "user-1", stats, 0, completed=False)

    def test_remembers_only_recent_sessions(self, clock):
        builder = ReportBuilder(clock=clock, max_remembered=2)
        stats = reset_session_stats()
        for session_id in (1, 2, 3):
            builder.build(session_id, "user-1", stats, 0, completed=True)

        assert len(builder._built) == 2
        with pytest.raises(SessionAlreadyReportedError):
            builder.build(3, "user-1", stats, 0, completed=True)
        # the oldest key was dropped
        assert builder.build(1, "user-1", stats, 0, completed=True).session_id == 1

    def test_same_session_id_other_user_allowed(self, builder):
        stats = reset_session_stats()
        builder.build(8, "user-1", stats, 0, completed=True)

        report = builder.build(8, "user-2", stats, 0, completed=True)
        assert report.user_id == "user-2"

    def test_to_dict_uses_persisted_schema(self, builder, clock, detector_metrics):
        stats = reset_session_stats()
        feed(stats, clock, [AttentionState.FOCUSED, AttentionState.NO_FACE])

        data = builder.build(9, "user-1", stats, 0, detector_metrics, completed=True).to_dict()

        assert data["sessionId"] == 9
        assert data["userId"] == "user-1"
        assert data["focusPercentage"] == 50.0
        assert data["assessmentCategory"] == "MODERATE"
        assert data["detectorMetrics"]["sessionQuality"] == 87.6
        assert set(data) == {
            "sessionId", "timestamp", "userId", "durationMinutes", "completed",
            "focusPercentage", "totalFrames", "focusedFrames", "distractedFrames",
            "noFaceFrames", "assessment", "assessmentCategory", "detectorMetrics",
        }
