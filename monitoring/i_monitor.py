# monitoring/i_monitor.py

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class IMonitor(ABC):
    """
    Base interface for background components driving a focus session.
    Examples:
      - FocusTimer
    """

    @abstractmethod
    def start(self) -> Any:
        """Start the background loop; may return a handle to cancel it."""
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        """Stop the loop. Safe to call when not running."""
        raise NotImplementedError

    @property
    @abstractmethod
    def is_running(self) -> bool:
        raise NotImplementedError
