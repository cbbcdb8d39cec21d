# core/services/session_counter_service.py

from __future__ import annotations

import logging
from typing import Optional

from core.config import VisionConfig
from core.database import IKeyValueStore


logger = logging.getLogger(__name__)


class SessionCounterService:
    """Persistent count of finished sessions; its value numbers the reports."""

    def __init__(self, kv: IKeyValueStore, config: Optional[VisionConfig] = None):
        self.kv = kv
        self.config = config or VisionConfig()

    def get(self) -> int:
        value = self.kv.get(self.config.session_counter_key)
        if value is None:
            return 0
        try:
            return int(value)
        except ValueError:
            logger.warning("[SessionCounter] Invalid stored counter %r, starting from 0", value)
            return 0

    def increment(self) -> int:
        counter = self.get() + 1
        self.kv.replace(self.config.session_counter_key, str(counter))
        return counter
