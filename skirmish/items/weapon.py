"""
Weapon module for the resolver.

Defines the weapons a player can wield in the main hand or the off hand.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from skirmish.core.constants import UNARMED_DAMAGE_COUNT, UNARMED_DAMAGE_DIE


class Weapon(BaseModel):
    """
    Represents a weapon that can be wielded by the player.

    A weapon rolls `damage_count` dice of `damage_die` sides on a hit, adds
    its `attack_bonus` to the attack modifier, and carries the handling
    properties the dual-wield and shield rules depend on.
    """

    item_type: Literal["weapon"] = "weapon"

    id: str = Field(
        description="Unique identifier of the weapon.",
    )
    name: str = Field(
        description="The name of the weapon.",
    )
    description: str = Field(
        default="",
        description="A description of the weapon.",
    )
    damage_count: int = Field(
        default=1,
        ge=1,
        description="Number of damage dice rolled on a hit.",
    )
    damage_die: int = Field(
        ge=2,
        description="Number of sides of each damage die.",
    )
    attack_bonus: int = Field(
        default=0,
        description="Equipment bonus added to the attack modifier.",
    )
    light: bool = Field(
        default=False,
        description="Light weapons can be paired with a light off-hand weapon.",
    )
    two_handed: bool = Field(
        default=False,
        description="Two-handed weapons leave no hand free for a shield or off-hand.",
    )
    cost: int = Field(
        default=0,
        ge=0,
        description="Value of the weapon in gold.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.id or not self.name:
            raise ValueError("Weapon id and name must be non-empty strings")
        if self.light and self.two_handed:
            raise ValueError(f"Weapon '{self.id}' cannot be both light and two-handed")

    @property
    def damage_expr(self) -> str:
        """Returns the damage dice in NdM notation."""
        return f"{self.damage_count}d{self.damage_die}"

    @property
    def colored_name(self) -> str:
        return f"[bold blue]{self.name}[/]"


UNARMED_STRIKE = Weapon(
    id="unarmed",
    name="Unarmed Strike",
    description="Fists, feet and whatever is at hand.",
    damage_count=UNARMED_DAMAGE_COUNT,
    damage_die=UNARMED_DAMAGE_DIE,
)
