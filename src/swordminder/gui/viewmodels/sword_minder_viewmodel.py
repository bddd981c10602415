"""SwordMinderViewModel: the coordinating object behind every SwordMinder screen.

Owns the Bible text provider, the Player and the Leaderboard. Views call the
intent methods below; each mutating intent funnels through ``_commit_player``
or ``_commit_leaderboard``, which notify observers (Qt signals plus the event
bus) and then autosave the affected document synchronously.

Construction restores any previously saved Player / Leaderboard (falling back
to the supplied defaults) and then starts loading the Bible on a background
worker. The view model is usable immediately; ``is_loaded`` reports False until
that load completes.

Threading: intents must be called from the thread owning this object (the Qt
UI thread). Only the Bible load runs elsewhere.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from swordminder.bible import Bible, BibleNotLoadedError, Translation
from swordminder.domain import ArmorPiece, Entry, Leaderboard, Passage, Player
from swordminder.gui.app.autosave import (
    AutosaveLocations,
    SaveResult,
    restore_document,
    save_document,
)
from swordminder.gui.services.event_bus import AppEvent, EventBus
from swordminder.gui.services.service_locator import services
from swordminder.gui.workers import BibleLoadWorker

__all__ = ["SwordMinderViewModel"]

_log = logging.getLogger(__name__)


class SwordMinderViewModel(QObject):
    player_changed = pyqtSignal(object)
    leaderboard_changed = pyqtSignal(object)
    bible_loaded = pyqtSignal()
    bible_load_failed = pyqtSignal(str)
    save_finished = pyqtSignal(object)  # SaveResult

    def __init__(
        self,
        translation: Translation = Translation.KJV,
        player: Player | None = None,
        leaderboard: Leaderboard | None = None,
        *,
        locations: AutosaveLocations | None = None,
        bible: Bible | None = None,
        event_bus: EventBus | None = None,
        clock: Callable[[], datetime] = datetime.now,
        load_bible: bool = True,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._locations = locations or AutosaveLocations()
        self._event_bus = event_bus
        self._clock = clock
        self._player: Player = restore_document(
            Player.from_json, self._locations.player_path(), player or Player()
        )
        self._leaderboard: Leaderboard = restore_document(
            Leaderboard.from_json, self._locations.leaderboard_path(), leaderboard or Leaderboard()
        )
        self._bible = bible or Bible(translation, cache_dir=self._locations.cache_dir())
        self._load_worker: BibleLoadWorker | None = None
        if load_bible:
            self.start_bible_load()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def bible(self) -> Bible:
        return self._bible

    @property
    def is_loaded(self) -> bool:
        return self._bible.is_loaded

    @property
    def player(self) -> Player:
        return self._player

    @player.setter
    def player(self, value: Player) -> None:
        self._player = value
        self._commit_player()

    @property
    def leaderboard(self) -> Leaderboard:
        return self._leaderboard

    @leaderboard.setter
    def leaderboard(self, value: Leaderboard) -> None:
        self._leaderboard = value
        self._commit_leaderboard()

    # ------------------------------------------------------------------
    # Change notification + autosave
    # ------------------------------------------------------------------
    def _bus(self) -> EventBus | None:
        if self._event_bus is not None:
            return self._event_bus
        bus = services.try_get("event_bus")
        return bus if isinstance(bus, EventBus) else None

    def _publish(self, event: AppEvent, payload: object = None) -> None:
        bus = self._bus()
        if bus is not None:
            bus.publish(event, payload)

    def _commit_player(self) -> None:
        self.player_changed.emit(self._player)
        self._publish(AppEvent.PLAYER_CHANGED, self._player)
        self._report(save_document(self._player, self._locations.player_path(), name="Player"))

    def _commit_leaderboard(self) -> None:
        self.leaderboard_changed.emit(self._leaderboard)
        self._publish(AppEvent.LEADERBOARD_CHANGED, self._leaderboard)
        self._report(
            save_document(self._leaderboard, self._locations.leaderboard_path(), name="Leaderboard")
        )

    def _report(self, result: SaveResult) -> None:
        self.save_finished.emit(result)
        if result.ok:
            self._publish(AppEvent.DOCUMENT_SAVED, result)
        elif result.message:
            self._publish(AppEvent.DOCUMENT_SAVE_FAILED, result)

    # ------------------------------------------------------------------
    # Bible bootstrap
    # ------------------------------------------------------------------
    def start_bible_load(self) -> None:
        if self._load_worker is not None and self._load_worker.isRunning():
            return
        worker = BibleLoadWorker(self._bible)
        worker.finished_ok.connect(self._on_bible_loaded)
        worker.failed.connect(self._on_bible_load_failed)
        self._load_worker = worker
        worker.start()

    def cancel_bible_load(self) -> None:
        if self._load_worker is not None:
            self._load_worker.cancel()

    def _on_bible_loaded(self) -> None:
        self.bible_loaded.emit()
        self._publish(AppEvent.BIBLE_LOADED, self._bible.translation.value)

    def _on_bible_load_failed(self, message: str) -> None:
        self.bible_load_failed.emit(message)
        self._publish(AppEvent.BIBLE_LOAD_FAILED, message)

    # ------------------------------------------------------------------
    # Player intent
    # ------------------------------------------------------------------
    @property
    def task_eligible(self) -> bool:
        """Whether the player may currently be rewarded for completing a task."""
        return self._player.is_eligible(self._clock())

    def complete_task(self, difficulty: int) -> int:
        """Reward the player for a task of ``difficulty`` (1 to 5).

        Returns the number of gems granted; out-of-range difficulties and
        ineligible players earn nothing.
        """
        granted = self._player.reward(difficulty, now=self._clock())
        _log.debug("complete_task(difficulty=%s) granted %d gems", difficulty, granted)
        self._commit_player()
        return granted

    def armor_level(self, piece: ArmorPiece) -> int:
        """Level (1 to 40) of ``piece``; pieces the player never upgraded are level 1."""
        return self._player.armor_level(piece)

    def upgrade_armor(self, piece: ArmorPiece) -> bool:
        upgraded = self._player.upgrade_armor(piece)
        if upgraded:
            self._commit_player()
        return upgraded

    @property
    def passages(self) -> List[Passage]:
        return list(self._player.passages)

    def add_passage(self, passage: Passage) -> None:
        self._player.add_passage(passage)
        self._commit_player()

    def remove_passages(self, offsets: Iterable[int]) -> None:
        """Remove selected passages at ``offsets`` (indices into ``passages``)."""
        self._player.remove_passages(offsets)
        self._commit_player()

    def review_passage(self, passage: Passage) -> None:
        if not self._player.review_passage(passage, at=self._clock()):
            _log.info("Ignoring review of unselected passage %s", passage.reference)
            return
        self._commit_player()

    def is_passage_reviewed_today(self, passage: Passage) -> bool:
        return self._player.passage_reviewed_today(passage, now=self._clock())

    def passage_text(self, passage: Passage) -> Optional[str]:
        if not self.is_loaded:
            return None
        try:
            return self._bible.text(passage)
        except (KeyError, BibleNotLoadedError) as e:
            _log.info("No text for %s: %s", passage.reference, e)
            return None

    # ------------------------------------------------------------------
    # Leaderboard intent
    # ------------------------------------------------------------------
    @property
    def high_score_entries(self) -> List[Entry]:
        """Entries sorted by score, highest first; ties keep insertion order."""
        return sorted(self._leaderboard.entries, key=lambda e: e.score, reverse=True)

    def high_score(self, app: str, score: int) -> None:
        """Record ``score`` for ``app``, replacing the app's previous entry if any."""
        index = self._leaderboard.index_of(app)
        if index is not None:
            self._leaderboard.update(index, score, at=self._clock())
        else:
            self._leaderboard.add(app, score, at=self._clock())
        self._commit_leaderboard()
