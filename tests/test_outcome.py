"""
Tests for victory rewards, defeat recovery and experience progression.
"""

import pytest

from skirmish.character.monster import MonsterTemplate
from skirmish.character.player import PlayerCharacter, Position
from skirmish.combat.outcome import OutcomeEngine
from skirmish.progression import award_xp, xp_for_level


@pytest.fixture
def engine(dice, content):
    return OutcomeEngine(dice, content)


@pytest.fixture
def wolf():
    return MonsterTemplate(
        id="wolf",
        name="Wolf",
        hp=11,
        ac=13,
        xp_reward=80,
        gold_reward=12,
        drops=(
            {"item_id": "potion", "chance": 0.4},
            {"item_id": "dagger", "chance": 0.4},
        ),
    )


def test_xp_thresholds():
    assert [xp_for_level(level) for level in (1, 2, 3, 5)] == [100, 400, 900, 2500]


def test_award_xp_counts_every_threshold_crossed():
    """1000 XP at level 1 crosses the level 2 (400) and level 3 (900) thresholds."""
    player = PlayerCharacter(name="Ivo", hp=10, max_hp=10)
    assert award_xp(player, 1000) == 2
    assert player.pending_levels == 2
    assert player.level == 1
    assert award_xp(player, 10) == 0


def test_negative_xp_is_rejected():
    player = PlayerCharacter(name="Ivo", hp=10, max_hp=10)
    with pytest.raises(ValueError):
        award_xp(player, -5)
    assert player.xp == 0


def test_loot_rolls_each_entry_independently(engine, rng, wolf):
    rng.push_chances(0.3, 0.5)
    assert engine.roll_loot(wolf) == ["potion"]


def test_victory_grants_gold_xp_and_loot(engine, rng, fighter, wolf, codex):
    rng.push_chances(0.1, 0.2)
    report = engine.on_victory(fighter, wolf, codex, ac_discovered=True)

    assert report.dropped_item_ids == ("potion", "dagger")
    assert [item.id for item in fighter.inventory] == ["potion", "dagger"]
    assert (fighter.gold, fighter.xp) == (112, 80)
    assert report.boss_defeated is None

    entry = codex.get("wolf")
    assert entry.times_defeated == 1
    assert entry.ac_discovered
    assert entry.items_dropped == ["potion", "dagger"]


def test_victory_reports_new_pending_levels(engine, fighter, codex):
    ogre = MonsterTemplate(id="ogre", name="Ogre", hp=59, ac=11, xp_reward=450)
    report = engine.on_victory(fighter, ogre, codex, ac_discovered=False)
    assert report.pending_levels == 1
    assert fighter.pending_levels == 1


def test_boss_victory_is_reported(engine, fighter, codex):
    dragon = MonsterTemplate(id="dragon", name="Red Dragon", hp=178, ac=19, is_boss=True)
    report = engine.on_victory(fighter, dragon, codex, ac_discovered=False)
    assert report.boss_defeated == "dragon"


def test_codex_merges_drops_across_victories(engine, rng, fighter, wolf, codex):
    rng.push_chances(0.1, 0.9)
    engine.on_victory(fighter, wolf, codex, ac_discovered=False)
    rng.push_chances(0.1, 0.1)
    engine.on_victory(fighter, wolf, codex, ac_discovered=False)

    entry = codex.get("wolf")
    assert entry.times_defeated == 2
    assert entry.items_dropped == ["potion", "dagger"]
    assert not entry.ac_discovered


def test_defeat_recovery(engine):
    """maxHp 40, maxMp 20 and 100 gold become 20 HP, 10 MP and 70 gold."""
    town = Position(x=5, y=7, chunk_x=2, chunk_y=3)
    player = PlayerCharacter(
        name="Ash",
        hp=0,
        max_hp=40,
        mp=3,
        max_mp=20,
        gold=100,
        position=Position(x=40, y=40, in_dungeon=True, dungeon_id="crypt"),
        last_town=town,
        defending=True,
    )
    report = engine.on_defeat(player)

    assert (player.hp, player.mp, player.gold) == (20, 10, 70)
    assert report.gold_lost == 30
    assert player.position == town
    assert report.respawn == town
    assert not player.defending


def test_defeat_rounds_down(engine):
    player = PlayerCharacter(name="Ash", hp=0, max_hp=31, mp=0, max_mp=7, gold=15)
    engine.on_defeat(player)
    assert (player.hp, player.mp, player.gold) == (15, 3, 10)
