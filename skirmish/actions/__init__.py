"""
Actions package for the resolver.

Contains the definitions of the spells and abilities a player can use.
"""

from .definitions import AbilityDefinition, BaseActionDefinition, SpellDefinition

__all__ = [
    "AbilityDefinition",
    "BaseActionDefinition",
    "SpellDefinition",
]
