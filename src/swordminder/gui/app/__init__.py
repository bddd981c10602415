"""Application layer: autosave persistence and bootstrap.

``bootstrap`` is imported explicitly (``from swordminder.gui.app.bootstrap
import create_app``) because it depends on the view model, which in turn
depends on ``autosave``.
"""

from .autosave import (  # noqa: F401
    AutosaveLocations,
    SaveOutcome,
    SaveResult,
    restore_document,
    save_document,
)

__all__ = [
    "AutosaveLocations",
    "SaveOutcome",
    "SaveResult",
    "restore_document",
    "save_document",
]
