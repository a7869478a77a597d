"""
Ability scores module for the resolver.
"""

from pydantic import BaseModel, Field

from skirmish.core.constants import StatKey
from skirmish.core.dice import ability_modifier


class AbilityScores(BaseModel):
    """The six ability scores of a character, each between 1 and 30."""

    strength: int = Field(default=10, ge=1, le=30)
    dexterity: int = Field(default=10, ge=1, le=30)
    constitution: int = Field(default=10, ge=1, le=30)
    intelligence: int = Field(default=10, ge=1, le=30)
    wisdom: int = Field(default=10, ge=1, le=30)
    charisma: int = Field(default=10, ge=1, le=30)

    def score(self, stat: StatKey) -> int:
        return getattr(self, stat.value)

    def modifier(self, stat: StatKey) -> int:
        """Returns the modifier of the given ability score."""
        return ability_modifier(self.score(stat))

    @property
    def DEX(self) -> int:
        return self.modifier(StatKey.DEXTERITY)
