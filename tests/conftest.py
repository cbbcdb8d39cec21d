"""
Shared fixtures for the focus-session tests.
"""

from datetime import datetime, timedelta

import pytest

from core.config import VisionConfig
from core.database import Database, InMemoryKeyValueStore
from core.focus_session import FocusSession
from core.services.report_store import ReportStore
from core.services.session_counter_service import SessionCounterService
from monitoring.i_attention_detector import DetectorMetrics


class FakeClock:
    """Manually advanced session clock."""

    def __init__(self, start=datetime(2026, 1, 5, 9, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    # huge tick so the timer thread never ticks on its own during a test
    return VisionConfig(tick_interval_ms=3_600_000)


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def sqlite_db(tmp_path):
    db = Database(str(tmp_path / "vision-test.db"))
    yield db
    db.close()


@pytest.fixture
def report_store(kv, config):
    return ReportStore(kv, config)


@pytest.fixture
def counter_service(kv, config):
    return SessionCounterService(kv, config)


@pytest.fixture
def detector_metrics():
    return DetectorMetrics(
        average_processing_time=12.3456,
        max_focus_streak=42,
        detection_rate=97.24,
        session_quality_score=0.876,
        media_pipe_active=True,
        current_yaw=-3.5,
        current_pitch=7.25,
    )


@pytest.fixture
def make_session(report_store, counter_service, config, clock):
    sessions = []

    def factory(**kwargs):
        kwargs.setdefault("config", config)
        kwargs.setdefault("clock", clock)
        session = FocusSession("user-1", report_store, counter_service, **kwargs)
        sessions.append(session)
        return session

    yield factory

    for session in sessions:
        session.timer.stop()
