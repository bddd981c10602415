"""Background worker threads used by the SwordMinder view model."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from PyQt6.QtCore import QThread, pyqtSignal

_log = logging.getLogger(__name__)


class BibleLoadWorker(QThread):
    """Runs ``bible.load()`` on its own asyncio loop off the UI thread."""

    finished_ok = pyqtSignal()
    failed = pyqtSignal(str)

    def __init__(self, bible: Any):
        super().__init__()
        self._bible = bible
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task] = None
        self._cancel_requested = False

    def run(self) -> None:  # type: ignore[override]
        loop = asyncio.new_event_loop()
        self._loop = loop
        try:
            self._task = loop.create_task(self._bible.load())
            if self._cancel_requested:
                self._task.cancel()
            loop.run_until_complete(self._task)
        except asyncio.CancelledError:
            _log.info("Bible load cancelled")
            self.failed.emit("cancelled")
        except Exception as e:  # noqa: BLE001 - reported through the failed signal
            _log.warning("Bible load failed: %s", e, exc_info=True)
            self.failed.emit(str(e))
        else:
            self.finished_ok.emit()
        finally:
            self._task = None
            self._loop = None
            loop.close()

    def cancel(self) -> None:
        self._cancel_requested = True
        loop, task = self._loop, self._task
        if loop is None or task is None:
            return
        try:
            loop.call_soon_threadsafe(task.cancel)
        except RuntimeError:
            # loop closed between the check and the call; nothing left to cancel
            pass
