"""Intent-surface tests for SwordMinderViewModel."""

import json
import random

import pytest

from swordminder.domain import Armor, ArmorPiece, Leaderboard, Passage, Player
from swordminder.domain.player import GEMS_PER_LEVEL, MIN_DAILY_REVIEWS
from swordminder.gui.services.event_bus import AppEvent, EventBus
from tests.factories import john_3_16, psalm_23


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def _make_eligible(vm, passage=None):
    passage = passage or john_3_16()
    vm.add_passage(passage)
    for _ in range(MIN_DAILY_REVIEWS):
        vm.review_passage(passage)
    return passage


def test_defaults_used_when_nothing_saved(make_view_model):
    player = Player(gems=9, armor=[Armor(ArmorPiece.SWORD, 3)])
    board = Leaderboard()
    board.add("Quiz", 4)
    vm = make_view_model(player=player, leaderboard=board)
    assert vm.player == player
    assert vm.leaderboard == board


def test_fresh_defaults_when_none_given(make_view_model):
    vm = make_view_model()
    assert vm.player == Player()
    assert vm.leaderboard == Leaderboard()


def test_construction_does_not_write_files(make_view_model, locations):
    make_view_model(player=Player(gems=1))
    assert not locations.player_path().exists()
    assert not locations.leaderboard_path().exists()


def test_task_not_eligible_without_reviews(make_view_model, locations):
    vm = make_view_model()
    assert vm.task_eligible is False
    assert vm.complete_task(3) == 0
    assert vm.player.gems == 0


def test_complete_task_rewards_once(make_view_model, locations):
    vm = make_view_model()
    _make_eligible(vm)
    assert vm.task_eligible is True
    before = vm.player.gems
    assert vm.complete_task(3) == 3
    assert vm.player.gems == before + 3
    assert len(vm.player.rewards) == 1
    assert _read(locations.player_path())["gems"] == before + 3


def test_complete_task_out_of_range_is_passed_through(make_view_model):
    vm = make_view_model()
    _make_eligible(vm)
    assert vm.complete_task(9) == 0
    assert vm.complete_task(0) == 0
    assert vm.player.gems == 0


def test_armor_level_default_and_stored(make_view_model):
    vm = make_view_model(player=Player(armor=[Armor(ArmorPiece.BREASTPLATE, 12)]))
    assert vm.armor_level(ArmorPiece.BREASTPLATE) == 12
    assert vm.armor_level(ArmorPiece.HELMET) == 1


def test_upgrade_armor_saves_player(make_view_model, locations):
    vm = make_view_model(player=Player(gems=GEMS_PER_LEVEL))
    assert vm.upgrade_armor(ArmorPiece.SHIELD) is True
    assert vm.armor_level(ArmorPiece.SHIELD) == 2
    assert _read(locations.player_path())["armor"] == [{"piece": "shield", "level": 2}]
    assert vm.upgrade_armor(ArmorPiece.SHIELD) is False


def test_add_and_remove_passages(make_view_model, locations):
    vm = make_view_model()
    first, second = john_3_16(), psalm_23()
    vm.add_passage(first)
    vm.add_passage(second)
    assert vm.passages == [first, second]
    vm.remove_passages([0])
    assert vm.passages == [second]
    assert first not in vm.passages
    saved = _read(locations.player_path())
    assert [p["id"] for p in saved["passages"]] == [second.id]


def test_passages_returns_a_copy(make_view_model):
    vm = make_view_model()
    vm.add_passage(john_3_16())
    vm.passages.clear()
    assert len(vm.passages) == 1


def test_remove_passages_with_stale_offset_raises(make_view_model):
    vm = make_view_model()
    vm.add_passage(john_3_16())
    with pytest.raises(IndexError):
        vm.remove_passages([3])
    assert len(vm.passages) == 1


def test_review_twice_then_next_day(make_view_model, clock):
    vm = make_view_model()
    p = john_3_16()
    vm.add_passage(p)
    vm.review_passage(p)
    assert vm.is_passage_reviewed_today(p) is (MIN_DAILY_REVIEWS <= 1)
    vm.review_passage(p)
    assert vm.is_passage_reviewed_today(p) is True
    clock.advance(days=1)
    assert vm.is_passage_reviewed_today(p) is False


def test_task_eligibility_follows_injected_clock(make_view_model, clock):
    vm = make_view_model()
    _make_eligible(vm)
    assert vm.task_eligible is True
    clock.advance(days=1)
    assert vm.task_eligible is False


def test_review_unknown_passage_does_not_save(make_view_model, locations):
    vm = make_view_model()
    vm.review_passage(Passage("Jude", 1, 24))
    assert not locations.player_path().exists()


def test_high_score_upsert(make_view_model, locations):
    vm = make_view_model()
    vm.high_score("Quiz", 10)
    vm.high_score("Quiz", 25)
    entries = [e for e in vm.leaderboard.entries if e.app == "Quiz"]
    assert len(entries) == 1
    assert entries[0].score == 25
    saved = _read(locations.leaderboard_path())
    assert [(e["app"], e["score"]) for e in saved["entries"]] == [("Quiz", 25)]


def test_high_score_may_lower_existing_score(make_view_model):
    vm = make_view_model()
    vm.high_score("Memory", 40)
    vm.high_score("Memory", 5)
    assert vm.high_score_entries[0].score == 5


def test_random_high_score_sequences_keep_one_entry_per_app(make_view_model):
    vm = make_view_model()
    rng = random.Random(7)
    latest = {}
    for _ in range(60):
        app = rng.choice(["Quiz", "Memory", "Scramble", "Fill In"])
        score = rng.randint(-5, 500)
        vm.high_score(app, score)
        latest[app] = score
    apps = [e.app for e in vm.leaderboard.entries]
    assert sorted(apps) == sorted(set(apps))
    assert {e.app: e.score for e in vm.leaderboard.entries} == latest
    scores = [e.score for e in vm.high_score_entries]
    assert scores == sorted(scores, reverse=True)


def test_high_score_entries_ties_keep_insertion_order(make_view_model):
    vm = make_view_model()
    vm.high_score("A", 5)
    vm.high_score("B", 9)
    vm.high_score("C", 5)
    assert [e.app for e in vm.high_score_entries] == ["B", "A", "C"]


def test_high_score_rejects_empty_app(make_view_model, locations):
    vm = make_view_model()
    with pytest.raises(ValueError):
        vm.high_score("", 3)
    assert vm.leaderboard.entries == []


def test_assigning_player_triggers_save_and_signal(make_view_model, locations, qtbot):
    vm = make_view_model()
    with qtbot.waitSignal(vm.player_changed, timeout=1000) as blocker:
        vm.player = Player(gems=77)
    assert blocker.args[0].gems == 77
    assert _read(locations.player_path())["gems"] == 77


def test_assigning_leaderboard_triggers_save(make_view_model, locations):
    vm = make_view_model()
    board = Leaderboard()
    board.add("Scramble", 3)
    vm.leaderboard = board
    assert _read(locations.leaderboard_path())["entries"][0]["app"] == "Scramble"


def test_changes_are_published_on_event_bus(make_view_model):
    bus = EventBus()
    seen = []
    for event in (AppEvent.PLAYER_CHANGED, AppEvent.LEADERBOARD_CHANGED, AppEvent.DOCUMENT_SAVED):
        bus.subscribe(event, lambda e: seen.append(e.name))
    vm = make_view_model(event_bus=bus)
    vm.add_passage(john_3_16())
    vm.high_score("Quiz", 1)
    assert seen == [
        "player_changed",
        "document_saved",
        "leaderboard_changed",
        "document_saved",
    ]


def test_passage_text_requires_loaded_bible(make_view_model):
    from tests.factories import FakeBible

    bible = FakeBible()
    vm = make_view_model(bible=bible, load_bible=False)
    assert vm.passage_text(john_3_16()) is None
    vm.start_bible_load()
    vm._load_worker.wait(2000)
    assert vm.passage_text(john_3_16()) == "text of John 3:16"
