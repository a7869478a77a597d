"""
Armor module for the resolver.

Defines body armor, which raises the wearer's armor class, and shields,
which soak damage while the bearer holds a defensive stance.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class Armor(BaseModel):
    """
    Represents a suit of armor.

    The armor bonus is added on top of 10 + DEX modifier to form the
    wearer's armor class.
    """

    item_type: Literal["armor"] = "armor"

    id: str = Field(
        description="Unique identifier of the armor.",
    )
    name: str = Field(
        description="The name of the armor.",
    )
    description: str = Field(
        default="",
        description="A brief description of the armor.",
    )
    ac_bonus: int = Field(
        ge=0,
        description="Armor Class bonus provided by this armor.",
    )
    cost: int = Field(
        default=0,
        ge=0,
        description="Value of the armor in gold.",
    )

    def model_post_init(self, _: Any) -> None:
        assert self.id and self.name, "Armor id and name must not be empty."

    @property
    def colored_name(self) -> str:
        return f"[bold cyan]{self.name}[/]"


class Shield(BaseModel):
    """
    Represents a shield carried in the off hand.

    A shield only helps while its bearer is defending: each incoming hit is
    reduced by `damage_reduction`, never below zero.
    """

    item_type: Literal["shield"] = "shield"

    id: str = Field(
        description="Unique identifier of the shield.",
    )
    name: str = Field(
        description="The name of the shield.",
    )
    description: str = Field(
        default="",
        description="A brief description of the shield.",
    )
    damage_reduction: int = Field(
        default=1,
        ge=0,
        description="Damage soaked from each hit while defending.",
    )
    cost: int = Field(
        default=0,
        ge=0,
        description="Value of the shield in gold.",
    )

    @property
    def colored_name(self) -> str:
        return f"[bold cyan]{self.name}[/]"
