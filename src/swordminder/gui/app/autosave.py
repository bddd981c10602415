"""Autosave persistence for the Player and Leaderboard documents.

Each document lives at a fixed location:

    <app support root>/org.thedigitalpath.swordminder/Player.swordminder
    <app support root>/org.thedigitalpath.swordminder/Leaderboard.swordminder

Design principles:
- The storage root is an injected capability (``AutosaveLocations``) so tests
  can redirect it to a temporary directory.
- Saving never raises. Every attempt produces a ``SaveResult`` that is logged
  and handed to observers; the in-memory state stays authoritative.
- Restoring never raises either: a missing, unreadable or corrupt file yields
  the caller-supplied default.
- Each save rewrites the whole document. No diffing, no backups, no schema
  version field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, TypeVar

from swordminder.config import settings
from swordminder.core import filesystem
from swordminder.domain.documents import (
    DocumentDecodingError,
    DocumentEncodingError,
    PersistedDocument,
)

__all__ = [
    "AutosaveDirectoryError",
    "AutosaveLocations",
    "SaveOutcome",
    "SaveResult",
    "default_app_support_root",
    "ensure_folder",
    "save_document",
    "restore_document",
]

_log = logging.getLogger(__name__)

T = TypeVar("T")
DirectoryResolver = Callable[[], Optional[Path]]


class AutosaveDirectoryError(OSError):
    """Raised when the app folder cannot be created."""


def default_app_support_root() -> Path | None:
    """Return the per-user application-support directory, or None.

    ``SWORDMINDER_APP_SUPPORT_DIR`` wins when set; otherwise Qt's generic data
    location is used (``~/Library/Application Support`` on macOS).
    """
    if settings.APP_SUPPORT_DIR:
        return Path(settings.APP_SUPPORT_DIR)
    from PyQt6.QtCore import QStandardPaths

    location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.GenericDataLocation)
    return Path(location) if location else None


@dataclass(frozen=True)
class AutosaveLocations:
    resolver: DirectoryResolver = default_app_support_root
    folder_name: str = settings.APP_FOLDER_NAME

    @classmethod
    def at(cls, root: str | Path) -> "AutosaveLocations":
        path = Path(root)
        return cls(resolver=lambda: path)

    @classmethod
    def disabled(cls) -> "AutosaveLocations":
        return cls(resolver=lambda: None)

    def folder(self) -> Path | None:
        root = self.resolver()
        return root / self.folder_name if root is not None else None

    def _file(self, name: str) -> Path | None:
        folder = self.folder()
        return folder / name if folder is not None else None

    def player_path(self) -> Path | None:
        return self._file(settings.PLAYER_FILENAME)

    def leaderboard_path(self) -> Path | None:
        return self._file(settings.LEADERBOARD_FILENAME)

    def cache_dir(self) -> Path | None:
        return self._file(settings.CACHE_FOLDER_NAME)


class SaveOutcome(str, Enum):
    SAVED = "saved"
    SKIPPED = "skipped"
    DIRECTORY_FAILED = "directory_failed"
    ENCODING_FAILED = "encoding_failed"
    WRITE_FAILED = "write_failed"


@dataclass(frozen=True)
class SaveResult:
    document: str
    outcome: SaveOutcome
    path: Optional[Path] = None
    message: str = field(default="", compare=False)

    @property
    def ok(self) -> bool:
        return self.outcome is SaveOutcome.SAVED


def ensure_folder(folder: Path) -> None:
    try:
        filesystem.ensure_dir(folder)
    except OSError as e:
        raise AutosaveDirectoryError(f"Could not create {folder}: {e}") from e


def save_document(document: PersistedDocument, path: Path | None, *, name: str) -> SaveResult:
    """Encode ``document`` and replace the file at ``path`` with it."""
    if path is None:
        _log.debug("No application support directory; %s not saved", name)
        return SaveResult(name, SaveOutcome.SKIPPED)
    try:
        ensure_folder(path.parent)
        data = document.json()
        filesystem.write_bytes(path, data)
    except DocumentEncodingError as e:
        _log.error("couldn't encode %s as JSON because %s", name, e)
        return SaveResult(name, SaveOutcome.ENCODING_FAILED, path, str(e))
    except AutosaveDirectoryError as e:
        _log.error("couldn't save %s: %s", name, e)
        return SaveResult(name, SaveOutcome.DIRECTORY_FAILED, path, str(e))
    except Exception as e:  # noqa: BLE001
        _log.error("couldn't save %s to %s: %s", name, path, e)
        return SaveResult(name, SaveOutcome.WRITE_FAILED, path, str(e))
    _log.debug("Saved %s to %s (%d bytes)", name, path, len(data))
    return SaveResult(name, SaveOutcome.SAVED, path)


def restore_document(decode: Callable[[bytes], T], path: Path | None, default: T) -> T:
    """Decode the document stored at ``path`` or fall back to ``default``."""
    if path is None or not path.exists():
        return default
    try:
        return decode(filesystem.read_bytes(path))
    except (DocumentDecodingError, OSError) as e:
        _log.warning("Ignoring unreadable save file %s: %s", path, e)
        return default
