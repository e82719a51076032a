"""User-facing notification surfaces for the client session layer."""

from typing import List, Protocol, Tuple
import logging


class NotificationSink(Protocol):
    def notify_error(self, message: str) -> None: ...

    def notify_success(self, message: str) -> None: ...


class LoggingNotificationSink:
    """Default sink: notifications go to the ``clinicsync.notifications`` log."""

    def __init__(self, name: str = "clinicsync.notifications"):
        self.logger = logging.getLogger(name)

    def notify_error(self, message: str) -> None:
        self.logger.error(message)

    def notify_success(self, message: str) -> None:
        self.logger.info(message)


class RecordingNotificationSink:
    """Keeps every notification in order, for inspection by the caller."""

    def __init__(self):
        self.events: List[Tuple[str, str]] = []

    def notify_error(self, message: str) -> None:
        self.events.append(("error", message))

    def notify_success(self, message: str) -> None:
        self.events.append(("success", message))

    @property
    def errors(self) -> List[str]:
        return [message for level, message in self.events if level == "error"]

    @property
    def successes(self) -> List[str]:
        return [message for level, message in self.events if level == "success"]

    def clear(self) -> None:
        self.events.clear()
