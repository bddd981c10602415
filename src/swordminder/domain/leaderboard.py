"""High-score leaderboard for the SwordMinder mini games."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from .documents import (
    DocumentDecodingError,
    decode_json,
    encode_json,
    read_document_bytes,
)

__all__ = ["Entry", "Leaderboard"]


@dataclass(slots=True)
class Entry:
    app: str
    score: int
    date: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: uuid4().hex)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "app": self.app,
            "score": self.score,
            "date": self.date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        return cls(
            app=str(data["app"]),
            score=int(data["score"]),
            date=datetime.fromisoformat(data["date"]),
            id=str(data["id"]),
        )


@dataclass
class Leaderboard:
    """Collection of high-score entries, at most one per app name."""

    entries: List[Entry] = field(default_factory=list)

    def index_of(self, app: str) -> Optional[int]:
        for i, entry in enumerate(self.entries):
            if entry.app == app:
                return i
        return None

    def update(self, index: int, score: int, at: Optional[datetime] = None) -> None:
        entry = self.entries[index]
        entry.score = score
        entry.date = at or datetime.now()

    def add(self, app: str, score: int, at: Optional[datetime] = None) -> Entry:
        if not app or not app.strip():
            raise ValueError("Leaderboard app name must not be empty")
        entry = Entry(app=app, score=score, date=at or datetime.now())
        self.entries.append(entry)
        return entry

    def to_dict(self) -> Dict[str, Any]:
        return {"entries": [e.to_dict() for e in self.entries]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Leaderboard":
        return cls(entries=[Entry.from_dict(e) for e in data.get("entries", [])])

    def json(self) -> bytes:
        return encode_json(self.to_dict(), "Leaderboard")

    @classmethod
    def from_json(cls, data: bytes) -> "Leaderboard":
        raw = decode_json(data, "Leaderboard")
        try:
            return cls.from_dict(raw)
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise DocumentDecodingError(f"Malformed Leaderboard data: {e}") from e

    @classmethod
    def from_path(cls, path: str | Path) -> "Leaderboard":
        return cls.from_json(read_document_bytes(path))
