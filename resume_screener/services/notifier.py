from typing import Protocol

from resume_screener.utils.logging_config import get_logger


class Notifier(Protocol):
    def notify_error(self, message: str) -> None: ...

    def notify_success(self, message: str) -> None: ...


class LoggingNotifier:
    """Sends user-facing notifications to the application log"""

    def __init__(self, name: str = "notifications"):
        self.logger = get_logger(name)

    def notify_error(self, message: str) -> None:
        self.logger.error(message)

    def notify_success(self, message: str) -> None:
        self.logger.info(message)
