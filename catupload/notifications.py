"""User-facing notifications mirrored from session outcomes."""
import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class NotificationVariant(Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    """A toast: short title plus description."""
    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT

    @property
    def is_destructive(self) -> bool:
        return self.variant == NotificationVariant.DESTRUCTIVE


class LoggingNotifier:
    """Notifier that writes notifications to the log. Used when no UI is attached."""

    def notify(self, notification: Notification) -> None:
        if notification.is_destructive:
            logger.warning(f"{notification.title}: {notification.description}")
        else:
            logger.info(f"{notification.title}: {notification.description}")
