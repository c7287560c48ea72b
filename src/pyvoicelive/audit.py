"""Append-only audit trail of session activity."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

_logger = logging.getLogger(__name__)


class LogCategory(enum.StrEnum):
    INFO = "info"
    ERROR = "error"
    TOOL = "tool"


_LEVELS: dict[LogCategory, int] = {
    LogCategory.INFO: logging.INFO,
    LogCategory.TOOL: logging.DEBUG,
    LogCategory.ERROR: logging.WARNING,
}


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=datetime.now)
    message: str
    category: LogCategory = LogCategory.INFO

    def format(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] {self.category.value.upper():5} {self.message}"


class AuditLog:
    """Observational record; nothing in the library reads it back."""

    def __init__(self, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self._entries: list[LogEntry] = []
        self._clock = clock
        self._listeners: list[Callable[[LogEntry], None]] = []

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def subscribe(self, listener: Callable[[LogEntry], None]) -> None:
        self._listeners.append(listener)

    def add(self, message: str, category: LogCategory = LogCategory.INFO) -> LogEntry:
        entry = LogEntry(timestamp=self._clock(), message=message, category=category)
        self._entries.append(entry)
        _logger.log(_LEVELS[category], "%s", message)
        for listener in list(self._listeners):
            try:
                listener(entry)
            except Exception:
                _logger.debug("Audit listener failed", exc_info=True)
        return entry

    def info(self, message: str) -> LogEntry:
        return self.add(message, LogCategory.INFO)

    def error(self, message: str) -> LogEntry:
        return self.add(message, LogCategory.ERROR)

    def tool(self, message: str) -> LogEntry:
        return self.add(message, LogCategory.TOOL)
