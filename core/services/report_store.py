# core/services/report_store.py

from __future__ import annotations

import json
import logging
from typing import List, Optional

from core.config import VisionConfig
from core.database import IKeyValueStore
from core.errors import ReportStoreError
from core.models.session_report import SessionReport


logger = logging.getLogger(__name__)


class ReportStore:
    """
    Newest-first list of session reports kept under one key of a
    key/value store, capped at `config.max_reports` entries.
    """

    def __init__(self, kv: IKeyValueStore, config: Optional[VisionConfig] = None):
        self.kv = kv
        self.config = config or VisionConfig()

    @property
    def key(self) -> str:
        return self.config.reports_key

    def append(self, report: SessionReport) -> bool:
        """
        Prepend `report` and drop the oldest entries past the cap.

        Returns False (and stores nothing) if a report for the same
        (user_id, session_id) is already stored or the stored list
        cannot be read.
        """
        try:
            raw_reports = self._read_raw()
        except ReportStoreError:
            logger.error("[ReportStore] Stored reports unreadable, not saving session %s", report.session_id)
            return False

        for raw in raw_reports:
            if str(raw.get("userId")) == report.user_id and raw.get("sessionId") == report.session_id:
                logger.warning(
                    "[ReportStore] Session %s of user %s already stored, ignoring duplicate",
                    report.session_id,
                    report.user_id,
                )
                return False

        raw_reports.insert(0, report.to_dict())
        dropped = len(raw_reports) - self.config.max_reports
        if dropped > 0:
            raw_reports = raw_reports[: self.config.max_reports]
            logger.debug("[ReportStore] Dropped %d oldest report(s)", dropped)

        self.kv.replace(self.key, json.dumps(raw_reports))
        logger.info("[ReportStore] Report saved: Session %s", report.session_id)
        return True

    def load_all(self) -> List[SessionReport]:
        """Stored reports, newest first. Unreadable data yields []."""
        try:
            raw_reports = self._read_raw()
        except ReportStoreError as e:
            logger.error("[ReportStore] Failed to load reports: %s", e)
            return []

        reports: List[SessionReport] = []
        for raw in raw_reports:
            try:
                reports.append(SessionReport.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("[ReportStore] Skipping malformed report %r: %s", raw, e)
        return reports

    def load_raw(self) -> List[dict]:
        """Stored reports as plain dicts (export)."""
        try:
            return self._read_raw()
        except ReportStoreError as e:
            logger.error("[ReportStore] Failed to load reports: %s", e)
            return []

    def clear(self) -> None:
        self.kv.delete(self.key)
        logger.info("[ReportStore] All reports cleared")

    def _read_raw(self) -> List[dict]:
        value = self.kv.get(self.key)
        if not value:
            return []
        try:
            data = json.loads(value)
        except ValueError as e:
            raise ReportStoreError(f"invalid JSON under {self.key!r}") from e
        if not isinstance(data, list):
            raise ReportStoreError(f"expected a list under {self.key!r}")
        return [item for item in data if isinstance(item, dict)]
