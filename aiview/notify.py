from __future__ import annotations

import logging
from typing import List, Protocol

from .types import Notification, NotificationLevel

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Fire-and-forget toast channel."""

    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Notifier for headless runs: toasts go to the log."""

    def success(self, message: str) -> None:
        logger.info("Notification: %s", message)

    def error(self, message: str) -> None:
        logger.warning("Notification: %s", message)


class RecordingNotifier:
    """Keeps every toast so a caller can hand them to the UI."""

    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    def success(self, message: str) -> None:
        self.notifications.append(Notification(level=NotificationLevel.SUCCESS, message=message))

    def error(self, message: str) -> None:
        self.notifications.append(Notification(level=NotificationLevel.ERROR, message=message))

    def drain(self) -> List[Notification]:
        drained, self.notifications = self.notifications, []
        return drained
