"""Contract for runtime telemetry plus the logging setup used by the CLI."""

from __future__ import annotations

import logging
from typing import Protocol

from rich.logging import RichHandler


class Telemetry(Protocol):
    """Reports operational events such as completed ticks."""

    def emit(self, event_name: str, payload: dict) -> None:
        """Publish telemetry event to the configured sink."""


class LoggingTelemetry:
    """Telemetry sink that writes events through a standard logger."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG) -> None:
        self._logger = logger or logging.getLogger("strategery.telemetry")
        self._level = level
        self.events_emitted = 0

    def emit(self, event_name: str, payload: dict) -> None:
        self.events_emitted += 1
        self._logger.log(self._level, event_name, extra={"payload": payload})


def configure_logging(level: str = "INFO") -> None:
    """Route ``strategery`` loggers to a rich console handler."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
