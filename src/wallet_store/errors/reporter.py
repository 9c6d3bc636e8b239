"""Error reporting capability injected into every component that can fail."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class ErrorReporter(Protocol):
    """Fire-and-forget sink for caught failures (crash reporting, logs)."""

    def report(self, message: str, error: BaseException) -> None: ...


class LoggingReporter:
    """Default reporter: writes caught failures to the ``logging`` tree."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def report(self, message: str, error: BaseException) -> None:
        self._log.error(message, exc_info=error)
