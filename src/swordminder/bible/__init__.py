from .bible import Bible, BibleNotLoadedError, Book, Translation  # noqa: F401

__all__ = ["Bible", "BibleNotLoadedError", "Book", "Translation"]
