"""Player profile: armor progression, gem economy and passage review history.

The player earns gems by completing tasks, but only on days when they have
engaged with scripture: at least one selected passage must have been reviewed
``MIN_DAILY_REVIEWS`` times since local midnight. Gems are spent to raise the
six pieces of the Armor of God from level 1 up to ``MAX_ARMOR_LEVEL``.

All time-dependent operations accept an optional ``now``/``at`` argument so
callers (and tests) control the clock; it defaults to ``datetime.now()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .documents import (
    DocumentDecodingError,
    decode_json,
    encode_json,
    read_document_bytes,
)
from .passage import Passage

__all__ = [
    "ArmorPiece",
    "Armor",
    "Reward",
    "Player",
    "MIN_ARMOR_LEVEL",
    "MAX_ARMOR_LEVEL",
    "MIN_TASK_DIFFICULTY",
    "MAX_TASK_DIFFICULTY",
    "MIN_DAILY_REVIEWS",
    "DAILY_GEM_LIMIT",
    "GEMS_PER_LEVEL",
]

MIN_ARMOR_LEVEL = 1
MAX_ARMOR_LEVEL = 40
MIN_TASK_DIFFICULTY = 1
MAX_TASK_DIFFICULTY = 5
MIN_DAILY_REVIEWS = 2
DAILY_GEM_LIMIT = 25
GEMS_PER_LEVEL = 5


class ArmorPiece(str, Enum):
    BELT = "belt"
    BREASTPLATE = "breastplate"
    SHOES = "shoes"
    SHIELD = "shield"
    HELMET = "helmet"
    SWORD = "sword"

    @property
    def display_name(self) -> str:
        return _ARMOR_TITLES[self]


_ARMOR_TITLES = {
    ArmorPiece.BELT: "Belt of Truth",
    ArmorPiece.BREASTPLATE: "Breastplate of Righteousness",
    ArmorPiece.SHOES: "Shoes of the Gospel of Peace",
    ArmorPiece.SHIELD: "Shield of Faith",
    ArmorPiece.HELMET: "Helmet of Salvation",
    ArmorPiece.SWORD: "Sword of the Spirit",
}


def _clamp_level(level: int) -> int:
    return max(MIN_ARMOR_LEVEL, min(MAX_ARMOR_LEVEL, int(level)))


def _midnight(now: datetime) -> datetime:
    return datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)


def _local_timestamp(value: str) -> datetime:
    """Parse an ISO timestamp as naive local time; offsets are converted away."""
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return ts


@dataclass(slots=True)
class Armor:
    piece: ArmorPiece
    level: int = MIN_ARMOR_LEVEL

    def __post_init__(self) -> None:
        self.level = _clamp_level(self.level)

    def to_dict(self) -> Dict[str, Any]:
        return {"piece": self.piece.value, "level": self.level}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Armor":
        return cls(piece=ArmorPiece(data["piece"]), level=int(data.get("level", MIN_ARMOR_LEVEL)))


@dataclass(frozen=True, slots=True)
class Reward:
    at: datetime
    gems: int

    def to_dict(self) -> Dict[str, Any]:
        return {"at": self.at.isoformat(), "gems": self.gems}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reward":
        return cls(at=_local_timestamp(data["at"]), gems=int(data["gems"]))


@dataclass
class Player:
    """Serializable player profile.

    Attributes
    ----------
    gems: Current gem balance.
    armor: Armor pieces the player has levelled; absent pieces are level 1.
    passages: Passages selected for study, in display order.
    reviews: Review timestamps keyed by passage id.
    rewards: Gems granted per completed task (drives the daily limit).
    """

    gems: int = 0
    armor: List[Armor] = field(default_factory=list)
    passages: List[Passage] = field(default_factory=list)
    reviews: Dict[str, List[datetime]] = field(default_factory=dict)
    rewards: List[Reward] = field(default_factory=list)

    # Eligibility / rewards ------------------------------------------------
    def gems_earned_today(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.now()
        start = _midnight(now)
        return sum(r.gems for r in self.rewards if start <= r.at <= now)

    def is_eligible(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        if self.gems_earned_today(now) >= DAILY_GEM_LIMIT:
            return False
        return any(self.passage_reviewed_today(p, now) for p in self.passages)

    def reward(self, gems: int, now: Optional[datetime] = None) -> int:
        """Grant gems for a completed task and return how many were granted.

        Amounts outside MIN_TASK_DIFFICULTY..MAX_TASK_DIFFICULTY are ignored, as
        are rewards while the player is not eligible. Grants are capped by the
        remaining daily allowance.
        """
        if not MIN_TASK_DIFFICULTY <= gems <= MAX_TASK_DIFFICULTY:
            return 0
        now = now or datetime.now()
        if not self.is_eligible(now):
            return 0
        granted = min(gems, DAILY_GEM_LIMIT - self.gems_earned_today(now))
        self.gems += granted
        self.rewards.append(Reward(at=now, gems=granted))
        return granted

    # Armor ------------------------------------------------------------------
    def _armor_for(self, piece: ArmorPiece) -> Optional[Armor]:
        return next((a for a in self.armor if a.piece == piece), None)

    def armor_level(self, piece: ArmorPiece) -> int:
        found = self._armor_for(piece)
        return found.level if found is not None else MIN_ARMOR_LEVEL

    def upgrade_cost(self, piece: ArmorPiece) -> int:
        return GEMS_PER_LEVEL * self.armor_level(piece)

    def upgrade_armor(self, piece: ArmorPiece) -> bool:
        level = self.armor_level(piece)
        if level >= MAX_ARMOR_LEVEL:
            return False
        cost = self.upgrade_cost(piece)
        if self.gems < cost:
            return False
        self.gems -= cost
        found = self._armor_for(piece)
        if found is None:
            self.armor.append(Armor(piece=piece, level=level + 1))
        else:
            found.level = level + 1
        return True

    # Passages ---------------------------------------------------------------
    def has_passage(self, passage: Passage) -> bool:
        return any(p.id == passage.id for p in self.passages)

    def add_passage(self, passage: Passage) -> None:
        self.passages.append(passage)

    def remove_passages(self, offsets: Iterable[int]) -> None:
        """Remove the passages at ``offsets``.

        Every offset is checked before anything is removed, so an invalid offset
        leaves the list untouched.
        """
        unique = sorted(set(offsets), reverse=True)
        size = len(self.passages)
        for offset in unique:
            if not 0 <= offset < size:
                raise IndexError(f"Passage offset {offset} out of range (0..{size - 1})")
        for offset in unique:
            removed = self.passages.pop(offset)
            if not self.has_passage(removed):
                self.reviews.pop(removed.id, None)

    def review_passage(self, passage: Passage, at: Optional[datetime] = None) -> bool:
        if not self.has_passage(passage):
            return False
        self.reviews.setdefault(passage.id, []).append(at or datetime.now())
        return True

    def reviews_today(self, passage: Passage, now: Optional[datetime] = None) -> int:
        now = now or datetime.now()
        start = _midnight(now)
        return sum(1 for ts in self.reviews.get(passage.id, ()) if start <= ts <= now)

    def passage_reviewed_today(self, passage: Passage, now: Optional[datetime] = None) -> bool:
        return self.reviews_today(passage, now) >= MIN_DAILY_REVIEWS

    # Serialization ----------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "gems": self.gems,
            "armor": [a.to_dict() for a in self.armor],
            "passages": [p.to_dict() for p in self.passages],
            "reviews": {
                pid: [ts.isoformat() for ts in stamps] for pid, stamps in self.reviews.items()
            },
            "rewards": [r.to_dict() for r in self.rewards],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        return cls(
            gems=int(data.get("gems", 0)),
            armor=[Armor.from_dict(a) for a in data.get("armor", [])],
            passages=[Passage.from_dict(p) for p in data.get("passages", [])],
            reviews={
                str(pid): [_local_timestamp(ts) for ts in stamps]
                for pid, stamps in data.get("reviews", {}).items()
            },
            rewards=[Reward.from_dict(r) for r in data.get("rewards", [])],
        )

    def json(self) -> bytes:
        return encode_json(self.to_dict(), "Player")

    @classmethod
    def from_json(cls, data: bytes) -> "Player":
        raw = decode_json(data, "Player")
        try:
            return cls.from_dict(raw)
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
            raise DocumentDecodingError(f"Malformed Player data: {e}") from e

    @classmethod
    def from_path(cls, path: str | Path) -> "Player":
        return cls.from_json(read_document_bytes(path))
