"""
Consumable module for the resolver.

Defines potions and other single-use items that restore HP or MP.
"""

from typing import Literal

from pydantic import BaseModel, Field

from skirmish.core.constants import ResourceType


class Consumable(BaseModel):
    """A single-use item that restores hit points or mana."""

    item_type: Literal["consumable"] = "consumable"

    id: str = Field(
        description="Unique identifier of the consumable.",
    )
    name: str = Field(
        description="The name of the consumable.",
    )
    description: str = Field(
        default="",
        description="A brief description of the consumable.",
    )
    restores: ResourceType = Field(
        description="The pool restored when the item is used (HP or MP).",
    )
    amount: int = Field(
        ge=1,
        description="How much of the pool is restored.",
    )
    cost: int = Field(
        default=0,
        ge=0,
        description="Value of the consumable in gold.",
    )

    @property
    def colored_name(self) -> str:
        return f"[bold green]{self.name}[/]"
