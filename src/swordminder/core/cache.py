"""Simple filesystem cache for downloaded text resources."""

from __future__ import annotations

import hashlib
import time
from pathlib import Path
from typing import Optional

DEFAULT_TTL = 3600  # 1 hour


def _key(url: str) -> str:
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


def _path(cache_dir: Path, url: str) -> Path:
    return cache_dir / (_key(url) + ".cache")


def get(cache_dir: Path, url: str, ttl: int = DEFAULT_TTL) -> Optional[str]:
    p = _path(cache_dir, url)
    if not p.exists():
        return None
    try:
        if time.time() - p.stat().st_mtime > ttl:
            return None
        return p.read_text(encoding="utf-8")
    except OSError:
        return None


def set(cache_dir: Path, url: str, content: str) -> None:
    cache_dir.mkdir(parents=True, exist_ok=True)
    _path(cache_dir, url).write_text(content, encoding="utf-8")
