"""
Core system module for the resolver.

This module contains the fundamental components the rest of the package is
built on: rule constants and enumerations, dice rolling, logging, error
handling and content loading.
"""

from .constants import (
    DEFEND_AC_BONUS,
    FLEE_DIFFICULTY,
    MAX_ITEMS_PER_TURN,
    MONSTER_DEFEND_CHANCE,
    ActionClass,
    BattlePhase,
    EffectType,
    ResourceType,
    StatKey,
    WeatherType,
)
from .dice import Dice, ability_modifier, get_default_dice, proficiency_bonus, set_default_dice
from .error_handling import ERROR_HANDLER, CombatError, ErrorHandler, ErrorSeverity, GameException

__all__ = [
    "ActionClass",
    "BattlePhase",
    "CombatError",
    "DEFEND_AC_BONUS",
    "Dice",
    "ERROR_HANDLER",
    "EffectType",
    "ErrorHandler",
    "ErrorSeverity",
    "FLEE_DIFFICULTY",
    "GameException",
    "MAX_ITEMS_PER_TURN",
    "MONSTER_DEFEND_CHANCE",
    "ResourceType",
    "StatKey",
    "WeatherType",
    "ability_modifier",
    "get_default_dice",
    "proficiency_bonus",
    "set_default_dice",
]
