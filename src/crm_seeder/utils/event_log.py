"""
Narrative event log returned to callers alongside every workflow result.

Each workflow step records a (severity, message) event. The events are kept
in order, rendered as emoji-prefixed lines for the JSON ``logs`` array, and
mirrored to the structured process logger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from crm_seeder.utils.logging_config import get_logger


class Severity(str, Enum):
    """How a narrative line should be read."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    FAILURE = "failure"
    EXCEPTION = "exception"


DEFAULT_MARKERS = {
    Severity.INFO: "📋",
    Severity.SUCCESS: "✅",
    Severity.WARNING: "⚠️",
    Severity.FAILURE: "❌",
    Severity.EXCEPTION: "💥",
}

_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.FAILURE: logging.ERROR,
    Severity.EXCEPTION: logging.ERROR,
}


@dataclass(frozen=True)
class LogEvent:
    severity: Severity
    message: str
    marker: str

    def render(self) -> str:
        return f"{self.marker} {self.message}"


class EventLog:
    """Ordered sink of narrative events for a single workflow run."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self._events: List[LogEvent] = []
        self._subscribers: List[Callable[[LogEvent], None]] = []
        self._logger = logger or get_logger(__name__)
        self.correlation_id = correlation_id

    def record(
        self, severity: Severity, message: str, marker: Optional[str] = None
    ) -> LogEvent:
        event = LogEvent(severity, message, marker or DEFAULT_MARKERS[severity])
        self._events.append(event)
        self._logger.log(
            _LEVELS[severity],
            message,
            extra={"severity": severity.value, "correlation_id": self.correlation_id},
        )
        for callback in self._subscribers:
            callback(event)
        return event

    def info(self, message: str, marker: Optional[str] = None) -> LogEvent:
        return self.record(Severity.INFO, message, marker)

    def success(self, message: str) -> LogEvent:
        return self.record(Severity.SUCCESS, message)

    def warning(self, message: str) -> LogEvent:
        return self.record(Severity.WARNING, message)

    def failure(self, message: str) -> LogEvent:
        return self.record(Severity.FAILURE, message)

    def exception(self, message: str) -> LogEvent:
        return self.record(Severity.EXCEPTION, message)

    def subscribe(self, callback: Callable[[LogEvent], None]) -> None:
        """Forward every subsequent event to ``callback``."""
        self._subscribers.append(callback)

    def events(self, *severities: Severity) -> List[LogEvent]:
        """Return recorded events, optionally only those of the given severities."""
        if not severities:
            return list(self._events)
        return [e for e in self._events if e.severity in severities]

    def lines(self) -> List[str]:
        return [event.render() for event in self._events]

    def __len__(self) -> int:
        return len(self._events)
