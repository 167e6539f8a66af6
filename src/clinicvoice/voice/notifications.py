"""
User-facing notifications (toasts) raised by capture sessions and forms.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List

from ..core.structured_logger import get_logger
from .errors import VoiceCaptureError

logger = get_logger(__name__)


class NotificationLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    code: str
    message: str


Notifier = Callable[[Notification], None]

LISTENING_STARTED = Notification(NotificationLevel.SUCCESS, "LISTENING_STARTED", "Voice recognition started - Speak now")
FORM_AUTO_FILLED = Notification(NotificationLevel.SUCCESS, "FORM_AUTO_FILLED", "Form auto-filled")
AI_PROCESSING_FAILED = Notification(NotificationLevel.ERROR, "EXTRACTION_FAILED", "AI processing failed")


def from_error(error: VoiceCaptureError) -> Notification:
    return Notification(NotificationLevel.ERROR, error.error_code, error.user_message)


def log_notification(notification: Notification) -> None:
    """Default notifier: write the notification to the log."""
    logger.info(
        notification.message,
        notification_level=notification.level.value,
        notification_code=notification.code,
    )


class NotificationLog:
    """Notifier that keeps every notification, newest last."""

    def __init__(self) -> None:
        self.items: List[Notification] = []

    def __call__(self, notification: Notification) -> None:
        self.items.append(notification)

    @property
    def codes(self) -> List[str]:
        return [n.code for n in self.items]

    @property
    def messages(self) -> List[str]:
        return [n.message for n in self.items]

    def clear(self) -> None:
        self.items.clear()
