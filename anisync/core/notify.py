"""User-facing notification sinks."""

import logging
from enum import StrEnum
from typing import Protocol

from anisync import log

__all__ = ["LogNotifier", "Notifier", "Severity"]


class Severity(StrEnum):
    """How prominently a notification should be presented."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


class Notifier(Protocol):
    """Anything able to show a transient notification to the user."""

    def notify(
        self, title: str, message: str, severity: Severity, duration_ms: int
    ) -> None:
        """Show a notification."""
        ...


class LogNotifier:
    """Notifier that writes notifications to the application log.

    Used when no UI is attached, e.g. from the command line.
    """

    LEVELS = {
        Severity.INFO: logging.INFO,
        Severity.SUCCESS: log.SUCCESS,
        Severity.WARNING: logging.WARNING,
        Severity.DANGER: logging.ERROR,
    }

    def notify(
        self, title: str, message: str, severity: Severity, duration_ms: int
    ) -> None:
        """Log the notification at a level matching its severity."""
        log.log(
            self.LEVELS.get(Severity(severity), logging.INFO),
            f"{title}: {message}",
        )
