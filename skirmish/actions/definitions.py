"""
Action definitions module for the resolver.

Defines the spells and martial abilities a player can learn. Both are plain
data: the resolver decides how they roll, and the encounter decides which
slot of the turn economy they spend.
"""

from typing import Any

from pydantic import BaseModel, Field

from skirmish.core.constants import ActionClass, EffectType, StatKey


class BaseActionDefinition(BaseModel):
    """Fields shared by spells and abilities."""

    id: str = Field(
        description="Unique identifier of the action.",
    )
    name: str = Field(
        description="Name of the action.",
    )
    description: str = Field(
        default="No description.",
        description="Description of the action.",
    )
    mp_cost: int = Field(
        default=0,
        ge=0,
        description="Mana paid when the action is used.",
    )
    level_required: int = Field(
        default=1,
        ge=1,
        description="Character level at which the action can be learned.",
    )
    damage_count: int = Field(
        default=0,
        ge=0,
        description="Number of damage (or healing) dice.",
    )
    damage_die: int = Field(
        default=0,
        ge=0,
        description="Number of sides of each damage (or healing) die.",
    )
    effect: EffectType = Field(
        description="Whether the action deals damage, heals, or is a utility.",
    )
    auto_hit: bool = Field(
        default=False,
        description="Damage that lands without an attack roll.",
    )
    bonus_action: bool = Field(
        default=False,
        description="Spends the bonus action instead of the turn action.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.id or not self.name:
            raise ValueError("Action id and name must be non-empty strings")
        if self.effect != EffectType.UTILITY and (
            self.damage_count <= 0 or self.damage_die <= 0
        ):
            raise ValueError(
                f"Action '{self.id}' needs damage dice for effect {self.effect}"
            )

    @property
    def action_class(self) -> ActionClass:
        """The slot of the turn economy this action spends."""
        return ActionClass.BONUS if self.bonus_action else ActionClass.STANDARD

    @property
    def rolls_to_hit(self) -> bool:
        """Only damaging, non auto-hit actions make an attack roll."""
        return self.effect == EffectType.DAMAGE and not self.auto_hit

    @property
    def usable_in_combat(self) -> bool:
        return self.effect != EffectType.UTILITY


class SpellDefinition(BaseActionDefinition):
    """A spell, cast with INT."""

    @property
    def stat(self) -> StatKey:
        return StatKey.INTELLIGENCE

    @property
    def colored_name(self) -> str:
        return f"[bold magenta]{self.name}[/]"


class AbilityDefinition(BaseActionDefinition):
    """A martial ability, driven by STR or DEX."""

    stat: StatKey = Field(
        default=StatKey.STRENGTH,
        description="Ability score driving the attack roll.",
    )

    @property
    def colored_name(self) -> str:
        return f"[bold yellow]{self.name}[/]"
