"""
User feedback sinks: transient notifications and navigation requests.

Screens render whatever these hold. Controllers only append to them, so a
test can observe exactly what the user would have seen.
"""

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_notification_ids = itertools.count(1)


@dataclass(frozen=True)
class Notification:
    """A dismissible message shown to the user."""

    message: str
    severity: Severity
    id: int = field(default_factory=lambda: next(_notification_ids))


class Notifier:
    """Collects notifications until they are dismissed."""

    def __init__(self) -> None:
        self._active: list[Notification] = []
        self.history: list[Notification] = []

    def notify(self, message: str, severity: Severity = Severity.INFO) -> Notification:
        notification = Notification(message=message, severity=severity)
        self._active.append(notification)
        self.history.append(notification)
        logger.debug("Notification [%s]: %s", severity.value, message)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(message, Severity.SUCCESS)

    def warning(self, message: str) -> Notification:
        return self.notify(message, Severity.WARNING)

    def error(self, message: str) -> Notification:
        return self.notify(message, Severity.ERROR)

    def dismiss(self, notification_id: int) -> bool:
        """Dismiss an active notification. Returns False if it was not active."""
        for index, notification in enumerate(self._active):
            if notification.id == notification_id:
                del self._active[index]
                return True
        return False

    def clear(self) -> None:
        self._active.clear()

    @property
    def active(self) -> list[Notification]:
        return list(self._active)

    @property
    def latest(self) -> Notification | None:
        return self._active[-1] if self._active else None

    def messages(self, severity: Severity | None = None) -> list[str]:
        """Messages of every notification shown so far, oldest first."""
        return [n.message for n in self.history if severity is None or n.severity is severity]


class Navigator:
    """Records where the user was sent."""

    def __init__(self, initial_route: str = "/") -> None:
        self.current = initial_route
        self.history: list[str] = [initial_route]

    def navigate(self, route: str) -> None:
        logger.info("Navigating to %s", route)
        self.current = route
        self.history.append(route)
