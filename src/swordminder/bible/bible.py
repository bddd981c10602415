"""Scripture text provider.

Downloads one translation as JSON (a list of books, each holding chapters as
lists of verse strings) and answers passage lookups once loaded. Loading is a
coroutine so the coordinator can run it off the UI thread; ``is_loaded`` only
flips to True after the whole translation parsed successfully.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

import httpx

from swordminder.config import settings
from swordminder.core import async_http
from swordminder.domain.passage import Passage

__all__ = ["Translation", "Book", "Bible", "BibleNotLoadedError"]

_log = logging.getLogger(__name__)


class BibleNotLoadedError(RuntimeError):
    """Raised when text is requested before the translation finished loading."""


class Translation(str, Enum):
    KJV = "kjv"
    BBE = "bbe"

    @property
    def display_name(self) -> str:
        return {
            Translation.KJV: "King James Version",
            Translation.BBE: "Bible in Basic English",
        }[self]

    @property
    def source_code(self) -> str:
        return f"en_{self.value}"


@dataclass(slots=True)
class Book:
    name: str
    abbreviation: str
    chapters: List[List[str]] = field(default_factory=list)


def _parse_books(text: str) -> List[Book]:
    raw = json.loads(text.lstrip("\ufeff"))
    if not isinstance(raw, list):
        raise ValueError("Bible data must be a list of books")
    books: List[Book] = []
    for obj in raw:
        abbrev = str(obj["abbrev"])
        chapters = [[str(v) for v in chapter] for chapter in obj["chapters"]]
        books.append(Book(name=str(obj.get("name") or abbrev), abbreviation=abbrev, chapters=chapters))
    return books


class Bible:
    def __init__(
        self,
        translation: Translation = Translation.KJV,
        *,
        source_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        cache_dir: Path | None = None,
    ) -> None:
        self.translation = translation
        self._source_url = source_url or settings.BIBLE_SOURCE_URL
        self._client = client
        self._cache_dir = cache_dir
        self._books: Dict[str, Book] = {}
        self._order: List[str] = []
        self._is_loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._is_loaded

    @property
    def url(self) -> str:
        return self._source_url.format(code=self.translation.source_code)

    async def load(self) -> None:
        text = await async_http.fetch(
            self.url,
            client=self._client,
            cache_dir=self._cache_dir,
            cache_ttl=settings.BIBLE_CACHE_TTL,
        )
        books = _parse_books(text)
        self._books = {}
        for book in books:
            self._books[book.name.casefold()] = book
            self._books.setdefault(book.abbreviation.casefold(), book)
        self._order = [b.name for b in books]
        self._is_loaded = True
        _log.info("Loaded %s (%d books)", self.translation.display_name, len(books))

    # Queries ------------------------------------------------------------
    @property
    def books(self) -> List[str]:
        return list(self._order)

    def _book(self, name: str) -> Book:
        if not self._is_loaded:
            raise BibleNotLoadedError(f"{self.translation.display_name} is not loaded yet")
        try:
            return self._books[name.casefold()]
        except KeyError:
            raise KeyError(f"Unknown book {name!r}") from None

    def chapter_count(self, book: str) -> int:
        return len(self._book(book).chapters)

    def verse_count(self, book: str, chapter: int) -> int:
        return len(self._chapter(book, chapter))

    def _chapter(self, book: str, chapter: int) -> List[str]:
        chapters = self._book(book).chapters
        if not 1 <= chapter <= len(chapters):
            raise KeyError(f"{book} has no chapter {chapter}")
        return chapters[chapter - 1]

    def verses(self, passage: Passage) -> List[str]:
        verses = self._chapter(passage.book, passage.chapter)
        return verses[passage.start_verse - 1 : passage.last_verse]

    def text(self, passage: Passage) -> str:
        return " ".join(self.verses(passage))

    def find(self, name: str) -> Optional[Book]:
        if not self._is_loaded:
            return None
        return self._books.get(name.casefold())
