"""Bible passage value type."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from uuid import uuid4

__all__ = ["Passage"]


def _new_id() -> str:
    return uuid4().hex


@dataclass(frozen=True, slots=True)
class Passage:
    """A contiguous run of verses inside one chapter.

    Attributes
    ----------
    book: Book name as shown to the user (e.g. "John").
    chapter: 1-based chapter number.
    start_verse: First verse of the passage.
    end_verse: Last verse (inclusive) or None for a single verse.
    id: Stable identifier used to key review history.
    """

    book: str
    chapter: int
    start_verse: int
    end_verse: Optional[int] = None
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        if not self.book or not self.book.strip():
            raise ValueError("Passage book must not be empty")
        if self.chapter < 1:
            raise ValueError(f"Invalid chapter {self.chapter}")
        if self.start_verse < 1:
            raise ValueError(f"Invalid start verse {self.start_verse}")
        if self.end_verse is not None and self.end_verse < self.start_verse:
            raise ValueError(
                f"End verse {self.end_verse} precedes start verse {self.start_verse}"
            )

    @property
    def last_verse(self) -> int:
        return self.end_verse if self.end_verse is not None else self.start_verse

    @property
    def reference(self) -> str:
        verses = str(self.start_verse)
        if self.end_verse is not None and self.end_verse != self.start_verse:
            verses += f"-{self.end_verse}"
        return f"{self.book} {self.chapter}:{verses}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "book": self.book,
            "chapter": self.chapter,
            "start_verse": self.start_verse,
            "end_verse": self.end_verse,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Passage":
        end = data.get("end_verse")
        return cls(
            book=str(data["book"]),
            chapter=int(data["chapter"]),
            start_verse=int(data["start_verse"]),
            end_verse=int(end) if end is not None else None,
            id=str(data.get("id") or _new_id()),
        )

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.reference
