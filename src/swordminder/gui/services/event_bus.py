"""EventBus core.

Lightweight synchronous publish/subscribe mechanism used to republish
coordinator state changes (player, leaderboard, Bible readiness, autosave
outcomes) to any interested panel without a Qt dependency.

 - One failing handler never breaks the publish cycle; the error is recorded.
 - ``once`` subscriptions remove themselves after their first successful call.
 - Handlers run outside the lock so they may (un)subscribe re-entrantly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Dict, List, Protocol

__all__ = [
    "AppEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
]


class AppEvent(str, Enum):
    STARTUP_COMPLETE = "startup_complete"
    PLAYER_CHANGED = "player_changed"
    LEADERBOARD_CHANGED = "leaderboard_changed"
    BIBLE_LOADED = "bible_loaded"
    BIBLE_LOAD_FAILED = "bible_load_failed"
    DOCUMENT_SAVED = "document_saved"
    DOCUMENT_SAVE_FAILED = "document_save_failed"
    LOG_RECORD_ADDED = "log_record_added"


@dataclass
class Event:
    name: str
    payload: Any
    timestamp: float


class EventHandler(Protocol):  # noqa: D401 - protocol signature docs implicit
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


def _key(name: str | AppEvent) -> str:
    return name.value if isinstance(name, AppEvent) else name


class EventBus:
    """Synchronous event dispatcher."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: List[tuple[Event, BaseException]] = []

    def subscribe(
        self, name: str | AppEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        sub = Subscription(event=_key(name), handler=handler, once=once)
        with self._lock:
            self._subs.setdefault(sub.event, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        sub.active = False
        with self._lock:
            bucket = [s for s in self._subs.get(sub.event, ()) if s is not sub]
            if bucket:
                self._subs[sub.event] = bucket
            else:
                self._subs.pop(sub.event, None)

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()
            self._errors.clear()

    def publish(self, name: str | AppEvent, payload: Any = None) -> Event:
        key = _key(name)
        evt = Event(name=key, payload=payload, timestamp=perf_counter())
        with self._lock:
            subs = list(self._subs.get(key, ()))
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(evt)
            except Exception as exc:  # noqa: BLE001 - isolate handler failures
                with self._lock:
                    self._errors.append((evt, exc))
                continue
            if sub.once:
                self.unsubscribe(sub)
        return evt

    def subscriber_count(self, name: str | AppEvent) -> int:
        with self._lock:
            return len(self._subs.get(_key(name), ()))

    @property
    def errors(self) -> list[tuple[Event, BaseException]]:
        with self._lock:
            return list(self._errors)
