"""Logging service.

Keeps the most recent log records in a bounded ring buffer so a diagnostics
panel can show, for example, why an autosave was skipped. Each captured
record is also published as ``AppEvent.LOG_RECORD_ADDED`` when an event bus
is registered in the service locator.

Records can come from any thread (the Bible load runs on a ``QThread``).
Publishing is relayed through a Qt signal, so bus handlers always run on the
thread that created the service; records from other threads are delivered
once that thread's event loop runs.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import asdict, dataclass
from threading import RLock
from typing import IO, Any, Deque, Dict, List, Optional

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from .event_bus import AppEvent, EventBus
from .service_locator import services

__all__ = [
    "LogEntry",
    "LoggingService",
    "configure_logging",
    "get_logging_service",
]

LOG_FORMAT = "%(asctime)s [%(levelname)5s] %(name)s: %(message)s"

_console_handler: Optional[logging.Handler] = None


def configure_logging(debug: bool = False, stream: Optional[IO[str]] = None) -> logging.Handler:
    """Install (or replace) the console handler on the root logger.

    The level lives on the handler, so ``LoggingService.attach_root`` lowering
    the root logger to DEBUG does not leak debug records to the console.
    """
    global _console_handler
    root = logging.getLogger()
    if _console_handler is not None:
        root.removeHandler(_console_handler)
    handler = logging.StreamHandler(stream)
    handler.setLevel(logging.DEBUG if debug else logging.INFO)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    if root.level == logging.NOTSET or root.level > handler.level:
        root.setLevel(handler.level)
    _console_handler = handler
    return handler


@dataclass(frozen=True)
class LogEntry:
    level: str
    name: str
    message: str
    created: float

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class _BufferHandler(logging.Handler):
    def __init__(self, svc: "LoggingService") -> None:
        super().__init__(level=logging.DEBUG)
        self._svc = svc

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._svc._capture(record)
        except Exception:  # noqa: BLE001
            self.handleError(record)


class _RecordRelay(QObject):
    """Hands captured records to the event bus on the thread owning the relay."""

    record_added = pyqtSignal(object)

    def __init__(self) -> None:
        super().__init__()
        self.record_added.connect(self._publish)

    @pyqtSlot(object)
    def _publish(self, payload: Dict[str, Any]) -> None:
        bus = services.try_get("event_bus")
        if isinstance(bus, EventBus):
            bus.publish(AppEvent.LOG_RECORD_ADDED, payload)


class LoggingService:
    def __init__(self, capacity: int = 500) -> None:
        self._lock = RLock()
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._handler = _BufferHandler(self)
        self._attached = False
        self._relay = _RecordRelay()

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def attach_root(self) -> None:
        if self._attached:
            return
        root = logging.getLogger()
        root.addHandler(self._handler)
        if root.level > logging.DEBUG:
            root.setLevel(logging.DEBUG)
        self._attached = True

    def detach_root(self) -> None:
        if self._attached:
            logging.getLogger().removeHandler(self._handler)
            self._attached = False

    def _capture(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
        )
        with self._lock:
            self._entries.append(entry)
        self._relay.record_added.emit(entry.as_dict())

    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def filter(self, *, level: str | None = None, name_contains: str | None = None) -> List[LogEntry]:
        return [
            e
            for e in self.recent()
            if (not level or e.level == level) and (not name_contains or name_contains in e.name)
        ]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def get_logging_service() -> LoggingService:
    return services.get_typed("logging_service", LoggingService)
