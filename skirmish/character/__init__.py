"""
Character package for the resolver.

Contains the player character and the monster templates and instances that
take part in an encounter.
"""

from .monster import LootEntry, MonsterAbility, MonsterInstance, MonsterTemplate
from .player import PlayerCharacter, Position
from .stats import AbilityScores

__all__ = [
    "AbilityScores",
    "LootEntry",
    "MonsterAbility",
    "MonsterInstance",
    "MonsterTemplate",
    "PlayerCharacter",
    "Position",
]
