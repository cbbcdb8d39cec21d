# core/errors.py


class VisionFocusError(Exception):
    """Base class for errors raised by the focus-session core."""


class InvalidTimerDurationError(VisionFocusError):
    """Timer duration outside (0, max_timer_seconds]."""


class SessionAlreadyReportedError(VisionFocusError):
    """A report was already built for this (user_id, session_id)."""

    def __init__(self, user_id: str, session_id: int):
        super().__init__(f"session {session_id} of user {user_id} already reported")
        self.user_id = user_id
        self.session_id = session_id


class ReportStoreError(VisionFocusError):
    """Stored reports could not be read or written."""
