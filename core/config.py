# core/config.py

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional


_BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@dataclass(frozen=True)
class AssessmentThresholds:
    """
    Lower bounds (inclusive) of the focus-ratio categories, in percent.
    Anything below `below_average` is POOR.
    """
    excellent: float = 85.0
    good: float = 70.0
    moderate: float = 50.0
    below_average: float = 30.0


@dataclass(frozen=True)
class VisionConfig:
    # storage keys (key/value store)
    reports_key: str = "sessionReports"
    session_counter_key: str = "sessionCounter"

    # timer
    tick_interval_ms: int = 1000
    default_minutes: int = 2
    max_timer_seconds: int = 24 * 60 * 60

    # assessment
    thresholds: AssessmentThresholds = field(default_factory=AssessmentThresholds)
    min_display_frames: int = 30
    no_face_warning_ratio: float = 0.2

    # analytics
    max_reports: int = 50
    application_version: str = "2.1.0"

    db_path: str = os.path.join(_BASE_DIR, "vision.db")
    log_level: str = "INFO"

    @property
    def tick_seconds(self) -> float:
        return self.tick_interval_ms / 1000.0

    @property
    def default_timer_seconds(self) -> int:
        return self.default_minutes * 60


def load_config(environ: Optional[Mapping[str, str]] = None) -> VisionConfig:
    """
    Build the config, applying VISION_* environment overrides:

        VISION_DB_PATH, VISION_DEFAULT_MINUTES,
        VISION_MAX_REPORTS, VISION_LOG_LEVEL
    """
    env = os.environ if environ is None else environ
    config = VisionConfig()

    overrides = {}
    if env.get("VISION_DB_PATH"):
        overrides["db_path"] = env["VISION_DB_PATH"]
    if env.get("VISION_DEFAULT_MINUTES"):
        overrides["default_minutes"] = int(env["VISION_DEFAULT_MINUTES"])
    if env.get("VISION_MAX_REPORTS"):
        overrides["max_reports"] = int(env["VISION_MAX_REPORTS"])
    if env.get("VISION_LOG_LEVEL"):
        overrides["log_level"] = env["VISION_LOG_LEVEL"].upper()

    if overrides:
        config = replace(config, **overrides)
    return config


def setup_logging(config: Optional[VisionConfig] = None) -> None:
    """Configure the root logger once for the application."""
    config = config or load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
