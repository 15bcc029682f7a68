"""User-facing notifications.

Notifications are fire-and-forget messages for the person who triggered
the clip, separate from diagnostic logging.
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Abstract sink for user-facing messages."""

    @abstractmethod
    def notify(self, message: str) -> None:
        pass


class LoggingNotifier(Notifier):
    """Emit notifications through the logging system."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def notify(self, message: str) -> None:
        logger.log(self.level, message)


class CollectingNotifier(Notifier):
    """Keep notifications in memory, in the order they were sent."""

    def __init__(self):
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)
