"""Application bootstrap for SwordMinder.

Creates (or reuses) the Qt application object, registers the shared services
and builds the SwordMinder view model. ``headless=True`` uses a
``QCoreApplication`` so tests and tooling run without a display.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from PyQt6.QtCore import QCoreApplication

from swordminder.bible import Translation
from swordminder.gui.app.autosave import AutosaveLocations
from swordminder.gui.services.event_bus import AppEvent, EventBus
from swordminder.gui.services.logging_service import LoggingService, configure_logging
from swordminder.gui.services.service_locator import ServiceLocator, services
from swordminder.gui.viewmodels.sword_minder_viewmodel import SwordMinderViewModel

__all__ = ["AppContext", "create_app"]

_log = logging.getLogger(__name__)


@dataclass
class AppContext:
    """References created during bootstrap.

    Attributes
    ----------
    qt_app: The QCoreApplication / QApplication instance in use.
    headless: Whether headless bootstrap was used.
    services: Global service locator after registration.
    view_model: The SwordMinder coordinator.
    started_at: Monotonic timestamp when bootstrap started.
    duration_s: Total elapsed seconds for bootstrap.
    """

    qt_app: Any
    headless: bool
    services: ServiceLocator
    view_model: SwordMinderViewModel
    started_at: float
    duration_s: float
    metadata: dict[str, Any] = field(default_factory=dict)


def _qt_app(headless: bool) -> Any:
    existing = QCoreApplication.instance()
    if existing is not None:
        return existing
    if headless:
        return QCoreApplication(sys.argv[:1])
    from PyQt6.QtWidgets import QApplication

    return QApplication(sys.argv[:1])


def create_app(
    *,
    headless: bool = True,
    storage_root: str | Path | None = None,
    translation: Translation = Translation.KJV,
    load_bible: bool = True,
    debug: bool = False,
) -> AppContext:
    started = time.perf_counter()
    configure_logging(debug)
    qt_app = _qt_app(headless)
    qt_app.setApplicationName("SwordMinder")
    qt_app.setOrganizationDomain("thedigitalpath.org")

    bus = EventBus()
    services.register("event_bus", bus, allow_override=True)
    logging_service = LoggingService()
    logging_service.attach_root()
    services.register("logging_service", logging_service, allow_override=True)

    locations: Optional[AutosaveLocations] = (
        AutosaveLocations.at(storage_root) if storage_root is not None else None
    )
    view_model = SwordMinderViewModel(
        translation, locations=locations, event_bus=bus, load_bible=load_bible
    )
    services.register("sword_minder", view_model, allow_override=True)

    duration = time.perf_counter() - started
    bus.publish(AppEvent.STARTUP_COMPLETE, {"duration_s": duration})
    _log.info("SwordMinder started in %.3fs (headless=%s)", duration, headless)
    return AppContext(
        qt_app=qt_app,
        headless=headless,
        services=services,
        view_model=view_model,
        started_at=started,
        duration_s=duration,
        metadata={"translation": translation.value},
    )
