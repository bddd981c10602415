"""Filesystem utility helpers."""

from __future__ import annotations

from pathlib import Path


def ensure_dir(path: Path) -> Path:
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
    return path


def write_bytes(path: Path, data: bytes) -> None:
    """Replace the contents of ``path`` with ``data``.

    The bytes land in a sibling ``.tmp`` file first so a reader never sees a
    half-written document.
    """
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_bytes(data)
    tmp.replace(path)


def read_bytes(path: Path) -> bytes:
    return path.read_bytes()
