"""Domain models persisted by the SwordMinder coordinator."""

from .documents import (  # noqa: F401
    DocumentError,
    DocumentEncodingError,
    DocumentDecodingError,
    PersistedDocument,
)
from .passage import Passage  # noqa: F401
from .player import Armor, ArmorPiece, Player, Reward  # noqa: F401
from .leaderboard import Entry, Leaderboard  # noqa: F401

__all__ = [
    "DocumentError",
    "DocumentEncodingError",
    "DocumentDecodingError",
    "PersistedDocument",
    "Passage",
    "Armor",
    "ArmorPiece",
    "Player",
    "Reward",
    "Entry",
    "Leaderboard",
]
