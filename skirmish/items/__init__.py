"""
Items package for the resolver.

Contains the equipment and consumables a player can carry into an encounter.
"""

from typing import Annotated, TypeAlias, Union

from pydantic import Field

from .armor import Armor, Shield
from .consumable import Consumable
from .weapon import UNARMED_STRIKE, Weapon

Item: TypeAlias = Annotated[
    Union[Weapon, Armor, Shield, Consumable],
    Field(discriminator="item_type"),
]

__all__ = [
    "Armor",
    "Consumable",
    "Item",
    "Shield",
    "UNARMED_STRIKE",
    "Weapon",
]
