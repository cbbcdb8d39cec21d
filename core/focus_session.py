# core/focus_session.py

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from core.config import VisionConfig
from core.errors import InvalidTimerDurationError, SessionAlreadyReportedError
from core.models.session_report import SessionReport
from core.models.session_stats import SessionStats, reset_session_stats
from core.services.report_builder import ReportBuilder
from core.services.report_store import ReportStore
from core.services.session_counter_service import SessionCounterService
from monitoring.assessment_engine import Assessment, AssessmentEngine
from monitoring.focus_timer import FocusTimer, TimerHandle
from monitoring.i_attention_detector import (
    AttentionState,
    ClassificationEvent,
    IAttentionDetector,
)
from monitoring.state_tracker import StateTracker
from monitoring.stats_aggregator import StatsAggregator


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveStats:
    """What the stats panel shows while a session runs."""
    focus_percentage: float
    distracted_percentage: float
    session_minutes: float
    total_frames: int
    assessment: Assessment
    current_state: Optional[AttentionState] = None
    current_state_seconds: float = 0.0

    @property
    def face_detection_issues(self) -> bool:
        return self.assessment.face_detection_issues


class FocusSession:
    """
    Owns one timed focus session of one user.

    - start():
        * fresh SessionStats
        * starts the FocusTimer (returns its TimerHandle)
    - on_classification(...) is called by the external analyzer once per
      analyzed frame; the same event goes to StateTracker and
      StatsAggregator.
    - when the timer runs out, or stop() is called, exactly one
      SessionReport is built and appended to the ReportStore.

    Timer ticks and classifications come from different threads, so all
    mutation of the stats and the finish transition happen under one lock.
    """

    def __init__(
        self,
        user_id: str,
        report_store: ReportStore,
        counter_service: SessionCounterService,
        *,
        config: Optional[VisionConfig] = None,
        detector: Optional[IAttentionDetector] = None,
        clock: Callable[[], datetime] = datetime.now,
        on_tick: Optional[Callable[[int], None]] = None,
        on_complete: Optional[Callable[[SessionReport], None]] = None,
    ) -> None:
        self.user_id = str(user_id)
        self.report_store = report_store
        self.counter_service = counter_service
        self.config = config or VisionConfig()
        self.detector = detector
        self.clock = clock

        self._on_tick_callback = on_tick
        self._on_complete_callback = on_complete

        self.engine = AssessmentEngine(self.config)
        self.report_builder = ReportBuilder(
            self.engine, clock=clock, max_remembered=self.config.max_reports
        )

        self._lock = threading.RLock()
        self.stats: SessionStats = reset_session_stats()
        self._state_tracker = StateTracker(self.stats)
        self._aggregator = StatsAggregator(self.stats)

        self.timer = FocusTimer(
            self.config.default_timer_seconds,
            on_tick=self._on_timer_tick,
            on_complete=self.complete,
            tick_seconds=self.config.tick_seconds,
        )
        self._handle: Optional[TimerHandle] = None

        self._started = False
        self._finished = False
        self.last_report: Optional[SessionReport] = None
        self._last_session_id = 0

    # ------------------------------------------------------------------ #
    # PUBLIC API
    # ------------------------------------------------------------------ #

    @property
    def is_running(self) -> bool:
        return self.timer.is_running

    @property
    def in_progress(self) -> bool:
        return self._started and not self._finished

    def set_duration(self, hours: int = 0, minutes: int = 0) -> int:
        """
        Change the countdown length. Only allowed while no session runs.
        """
        total = int(hours) * 3600 + int(minutes) * 60
        if total <= 0:
            raise InvalidTimerDurationError("Please set a valid timer duration.")
        if total > self.config.max_timer_seconds:
            raise InvalidTimerDurationError("Maximum timer duration is 24 hours.")
        if self.in_progress:
            raise InvalidTimerDurationError("Cannot change the duration of a running session.")

        self.timer.reset(total)
        logger.info("[FocusSession] Timer set to %d:%02d", total // 3600, (total % 3600) // 60)
        return total

    def start(self) -> TimerHandle:
        """
        Begin a new session: fresh stats, full countdown.
        """
        if self.is_running and self._handle is not None:
            logger.info("[FocusSession] Timer already running")
            return self._handle

        if self.in_progress:
            # a paused session is replaced by the new one; keep its data
            self.stop()

        self.timer.reset()
        with self._lock:
            self._reset_stats()
            self._started = True
            self._finished = False
            self.last_report = None

        active = self.detector is not None and self.detector.is_active()
        if not active:
            logger.warning("[FocusSession] No active attention detector, running timer only")

        self._handle = self.timer.start()
        logger.info(
            "[FocusSession] Session started for user %s (%ss)", self.user_id, self.timer.duration_seconds
        )
        return self._handle

    def pause(self) -> None:
        self._cancel_timer()
        logger.info("[FocusSession] Timer paused at %ss", self.timer.remaining_seconds)

    def resume(self) -> Optional[TimerHandle]:
        if not self.in_progress:
            logger.warning("[FocusSession] Nothing to resume")
            return None
        self._handle = self.timer.start()
        return self._handle

    def reset(self) -> Optional[SessionReport]:
        """
        Restore the full countdown. An unfinished session is stopped first,
        so its partial report is still saved.
        """
        report = None
        if self.in_progress:
            report = self.stop()
        self._cancel_timer()
        self.timer.reset()
        with self._lock:
            self._reset_stats()
            self._started = False
            self._finished = False
        logger.info("[FocusSession] Timer reset to %d minutes", self.timer.duration_seconds // 60)
        return report

    def on_classification(
        self,
        event: Union[ClassificationEvent, Mapping[str, Any], AttentionState, str],
    ) -> bool:
        """
        Feed one analyzed frame. Accepts an event, a raw analyzer payload,
        or a bare state. Returns False if the frame was ignored.
        """
        if isinstance(event, ClassificationEvent):
            parsed: Optional[ClassificationEvent] = event
        elif isinstance(event, Mapping):
            parsed = ClassificationEvent.from_payload(event)
        else:
            state = AttentionState.parse(event)
            if state is None:
                logger.warning("[FocusSession] Ignoring unknown state %r", event)
                return False
            parsed = ClassificationEvent(state=state)

        if parsed is None:
            return False

        with self._lock:
            if not self._started or self._finished:
                logger.debug("[FocusSession] Frame outside a running session ignored")
                return False

            now = parsed.timestamp or self.clock()
            self._aggregator.observe(parsed.state)
            self._state_tracker.observe(parsed.state, now)
        return True

    def tick(self) -> None:
        """Advance the countdown by one step (what the timer thread does)."""
        self.timer.tick()

    def complete(self) -> Optional[SessionReport]:
        """Timer reached zero."""
        return self._finish(completed=True)

    def stop(self) -> Optional[SessionReport]:
        """
        Abort the session early. Partial stats still produce a report
        with completed=False.
        """
        return self._finish(completed=False)

    def live_stats(self) -> LiveStats:
        with self._lock:
            focused_pct, distracted_pct = self._aggregator.percentages()
            now = self.clock()
            minutes = 0.0
            if self.stats.session_start is not None:
                elapsed = (now - self.stats.session_start).total_seconds()
                minutes = round(max(0.0, elapsed) / 60.0, 1)
            return LiveStats(
                focus_percentage=focused_pct,
                distracted_percentage=distracted_pct,
                session_minutes=minutes,
                total_frames=self.stats.total_frames,
                assessment=self.engine.assess_for_display(self.stats),
                current_state=self.stats.current_state,
                current_state_seconds=round(self._state_tracker.open_period_seconds(now), 1),
            )

    def get_state(self) -> dict:
        """Snapshot of timer + session, for debugging and export."""
        with self._lock:
            return {
                "user": self.user_id,
                "timer": {
                    "isRunning": self.is_running,
                    "currentSeconds": self.timer.remaining_seconds,
                    "originalSeconds": self.timer.duration_seconds,
                },
                "session": {
                    "counter": self.counter_service.get(),
                    "stats": self.stats.snapshot(),
                    "inProgress": self.in_progress,
                    "detectorActive": bool(self.detector and self.detector.is_active()),
                },
            }

    # ------------------------------------------------------------------ #
    # INTERNAL
    # ------------------------------------------------------------------ #

    def _reset_stats(self) -> None:
        self.stats = reset_session_stats()
        self._state_tracker = StateTracker(self.stats)
        self._aggregator = StatsAggregator(self.stats)

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        else:
            self.timer.stop()

    def _next_session_id(self) -> int:
        """
        Persisted counter + 1. A failing counter store must not cost the
        session its report, so fall back to the last id this session saw.
        """
        try:
            session_id = self.counter_service.increment()
        except Exception:
            logger.exception("[FocusSession] Session counter unavailable")
            try:
                session_id = self.counter_service.get() + 1
            except Exception:
                session_id = self._last_session_id + 1
        self._last_session_id = session_id
        return session_id

    def _on_timer_tick(self, remaining: int) -> None:
        if self._on_tick_callback is not None:
            self._on_tick_callback(remaining)

    def _finish(self, *, completed: bool) -> Optional[SessionReport]:
        with self._lock:
            if not self._started:
                logger.warning("[FocusSession] No session to finish")
                return None
            if self._finished:
                logger.warning("[FocusSession] Session already finished, report not rebuilt")
                return None
            self._finished = True

        self._cancel_timer()

        with self._lock:
            metrics = None
            if self.detector is not None:
                try:
                    metrics = self.detector.get_performance_metrics()
                except Exception:
                    logger.exception("[FocusSession] Detector metrics unavailable")

            session_id = self._next_session_id()
            try:
                report = self.report_builder.build(
                    session_id,
                    self.user_id,
                    self.stats,
                    self.timer.elapsed_seconds,
                    metrics,
                    completed=completed,
                )
            except SessionAlreadyReportedError as e:
                logger.error("[FocusSession] %s", e)
                return None

            self.last_report = report

        try:
            self.report_store.append(report)
        except Exception:
            # keep the report in memory; the hosting app decides what to do
            logger.exception("[FocusSession] Failed to save report %s", report.session_id)

        if self._on_complete_callback is not None:
            try:
                self._on_complete_callback(report)
            except Exception:
                logger.exception("[FocusSession] on_complete callback failed")

        return report
