"""
Tests for the monster codex.
"""

import pytest

from skirmish.bestiary.codex import Codex
from skirmish.character.monster import MonsterTemplate


@pytest.fixture
def troll():
    return MonsterTemplate(id="troll", name="Cave Troll", hp=84, ac=15, is_boss=True)


def test_unknown_monster_reveals_nothing(codex, goblin):
    assert not codex.has_encountered("goblin")
    assert not codex.is_ac_known("goblin")
    assert not codex.is_hp_revealed("goblin")
    assert codex.get("goblin") is None


def test_first_defeat_creates_entry_and_reveals_hp(codex, goblin):
    entry = codex.record_defeat(goblin, False, ["potion"])
    assert codex.has_encountered("goblin")
    assert codex.is_hp_revealed("goblin")
    assert not codex.is_ac_known("goblin")
    assert (entry.name, entry.hp, entry.ac) == ("Goblin", 15, 12)
    assert entry.items_dropped == ["potion"]


def test_ac_flag_never_turns_off(codex, goblin):
    """Once discovered, later victories without a discovery keep it known."""
    codex.record_defeat(goblin, True, [])
    codex.record_defeat(goblin, False, [])
    assert codex.is_ac_known("goblin")
    assert codex.get("goblin").times_defeated == 2


def test_drops_are_merged_without_duplicates(codex, goblin):
    codex.record_defeat(goblin, False, ["potion", "dagger"])
    codex.record_defeat(goblin, False, ["dagger", "ether"])
    assert codex.get("goblin").items_dropped == ["potion", "dagger", "ether"]


def test_ac_discovered_mid_combat_before_any_victory(codex, goblin):
    """Discovering the armor class creates the entry but does not reveal HP."""
    codex.discover_ac(goblin)
    assert codex.is_ac_known("goblin")
    assert not codex.is_hp_revealed("goblin")
    assert codex.get("goblin").times_defeated == 0


def test_sorted_entries_put_bosses_last(codex, goblin, troll):
    slime = MonsterTemplate(id="slime", name="slime", hp=8, ac=8)
    for monster in (troll, goblin, slime):
        codex.record_defeat(monster, False, [])
    assert [e.monster_id for e in codex.sorted_entries()] == ["goblin", "slime", "troll"]


def test_codex_round_trips_through_json(codex, goblin):
    codex.record_defeat(goblin, True, ["potion"])
    restored = Codex.model_validate_json(codex.model_dump_json())
    assert restored == codex
