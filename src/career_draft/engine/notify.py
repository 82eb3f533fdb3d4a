"""Side channel for user-facing notices (toasts in the web UI)."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    """Default notifier: notices go to the log."""

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.warning(message)


class RecordingNotifier:
    """Keeps notices in order, as (level, message) pairs."""

    def __init__(self) -> None:
        self.notices: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.notices.append(("success", message))

    def error(self, message: str) -> None:
        self.notices.append(("error", message))

    @property
    def errors(self) -> list[str]:
        return [message for level, message in self.notices if level == "error"]

    @property
    def successes(self) -> list[str]:
        return [message for level, message in self.notices if level == "success"]

    def clear(self) -> None:
        self.notices.clear()
