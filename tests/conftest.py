"""
Shared fixtures for the resolver tests.

Every test rolls through a `ScriptedRandom`: d20 and damage rolls are served
from a queue, so each test spells out exactly which numbers come up.
"""

import pytest

from skirmish.bestiary.codex import Codex
from skirmish.character.monster import MonsterTemplate
from skirmish.character.player import PlayerCharacter
from skirmish.character.stats import AbilityScores
from skirmish.combat.encounter import Encounter
from skirmish.combat.events import EventBus
from skirmish.core.content import ContentRepository
from skirmish.core.dice import Dice
from skirmish.core.error_handling import ErrorHandler
from skirmish.items import Consumable, Shield, Weapon


class ScriptedRandom:
    """
    A random source that replays queued values.

    `randint` pops from `rolls` and fails loudly once the queue is empty;
    `random` pops from `chances` and answers 0.99 (nothing triggers) when empty.
    """

    def __init__(self, rolls=(), chances=()):
        self.rolls = list(rolls)
        self.chances = list(chances)

    def push(self, *rolls: int) -> None:
        self.rolls.extend(rolls)

    def push_chances(self, *chances: float) -> None:
        self.chances.extend(chances)

    def randint(self, a: int, b: int) -> int:
        if not self.rolls:
            raise AssertionError(f"Ran out of scripted rolls (asked for {a}..{b})")
        value = self.rolls.pop(0)
        assert a <= value <= b, f"Scripted roll {value} outside {a}..{b}"
        return value

    def random(self) -> float:
        if not self.chances:
            return 0.99
        return self.chances.pop(0)


LONG_SWORD = Weapon(id="longSword", name="Long Sword", damage_count=1, damage_die=8)
SCIMITAR = Weapon(id="scimitar", name="Scimitar", damage_count=1, damage_die=8, light=True)
SHORT_SWORD = Weapon(id="shortSword", name="Short Sword", damage_count=1, damage_die=6, light=True)
DAGGER = Weapon(id="dagger", name="Dagger", damage_count=1, damage_die=4, light=True)
GREAT_AXE = Weapon(id="greatAxe", name="Great Axe", damage_count=1, damage_die=12, two_handed=True)
WOODEN_SHIELD = Shield(id="woodenShield", name="Wooden Shield", damage_reduction=1)
POTION = Consumable(id="potion", name="Potion", restores="hp", amount=10)
ETHER = Consumable(id="ether", name="Ether", restores="mp", amount=10)


@pytest.fixture
def rng():
    return ScriptedRandom()


@pytest.fixture
def dice(rng):
    return Dice(rng=rng)


@pytest.fixture
def content():
    return ContentRepository()


@pytest.fixture
def fighter():
    """STR 16 (+3), DEX 14 (+2), INT 12 (+1), level 1 (+2 proficiency), AC 12."""
    return PlayerCharacter(
        name="Brom",
        scores=AbilityScores(strength=16, dexterity=14, intelligence=12),
        hp=30,
        max_hp=30,
        mp=10,
        max_mp=10,
        gold=100,
        main_hand=LONG_SWORD,
        known_spells=["fireBolt", "cureWounds", "magicMissile", "healingWord", "teleport"],
        known_abilities=["shieldBash", "secondWind", "cunningStrike"],
    )


@pytest.fixture
def dual_wielder():
    """STR 16 (+3), scimitar (1d8) in the main hand, short sword (1d6) in the off hand."""
    return PlayerCharacter(
        name="Vex",
        scores=AbilityScores(strength=16, dexterity=14),
        hp=30,
        max_hp=30,
        main_hand=SCIMITAR,
        off_hand=SHORT_SWORD,
    )


@pytest.fixture
def goblin():
    return MonsterTemplate(
        id="goblin",
        name="Goblin",
        hp=15,
        ac=12,
        attack_bonus=3,
        damage_count=1,
        damage_die=6,
        xp_reward=50,
        gold_reward=10,
    )


@pytest.fixture
def codex():
    return Codex()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def error_handler():
    return ErrorHandler()


@pytest.fixture
def start_encounter(rng, dice, content, codex, bus, error_handler):
    """
    Builds an encounter and rolls initiative so that the player acts first,
    unless explicit initiative rolls are given.
    """

    def _start(player, monster, initiative=(20, 1), **kwargs):
        rng.push(*initiative)
        encounter = Encounter(
            player,
            monster,
            codex=kwargs.pop("codex", codex),
            dice=dice,
            bus=bus,
            content=content,
            error_handler=error_handler,
            **kwargs,
        )
        encounter.start()
        return encounter

    return _start
