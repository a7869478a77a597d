"""
Monster decision policy.

Monsters follow a fixed priority: a small chance to take a defensive stance,
then the first special ability whose activation roll succeeds, in the order
the abilities are declared, and a basic attack otherwise.
"""

from typing import Literal

from pydantic import BaseModel, Field

from skirmish.character.monster import MonsterAbility, MonsterInstance
from skirmish.core.constants import MONSTER_DEFEND_CHANCE
from skirmish.core.dice import Dice


class MonsterDecision(BaseModel):
    """What the monster does on its turn."""

    kind: Literal["defend", "ability", "attack"] = Field(
        description="The chosen kind of action.",
    )
    ability: MonsterAbility | None = Field(
        default=None,
        description="The ability to use, when kind is 'ability'.",
    )


def choose_monster_action(
    monster: MonsterInstance,
    dice: Dice,
    defend_chance: float = MONSTER_DEFEND_CHANCE,
) -> MonsterDecision:
    """
    Picks the monster's action for this turn.

    Args:
        monster (MonsterInstance): The acting monster.
        dice (Dice): The random source for the activation rolls.
        defend_chance (float): Probability of taking a defensive stance.

    Returns:
        MonsterDecision: The chosen action.

    """
    if dice.chance(defend_chance):
        return MonsterDecision(kind="defend")
    for ability in monster.template.abilities:
        if dice.chance(ability.chance):
            return MonsterDecision(kind="ability", ability=ability)
    return MonsterDecision(kind="attack")
