"""
Player character module for the resolver.

The player is carried over from the overworld into each encounter. HP, MP,
gold, XP and inventory persist beyond the encounter and are mutated in place
by the encounter and its outcome engine; the defending flag is encounter
scoped.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from skirmish.character.stats import AbilityScores
from skirmish.core.constants import ResourceType, StatKey
from skirmish.core.dice import proficiency_bonus
from skirmish.core.logging import get_logger
from skirmish.items import UNARMED_STRIKE, Armor, Consumable, Item, Shield, Weapon

logger = get_logger(__name__)


class Position(BaseModel):
    """Overworld location of the player."""

    x: int = 0
    y: int = 0
    chunk_x: int = 0
    chunk_y: int = 0
    in_dungeon: bool = False
    dungeon_id: str = ""


class PlayerCharacter(BaseModel):
    """
    Represents the player character.

    Equipment invariants are checked on construction and by every equip
    method:
    - an off-hand weapon requires a light, one-handed main hand weapon and
      must be light itself;
    - a shield requires a main hand weapon that is not two-handed;
    - a shield and an off-hand weapon cannot be carried together.
    """

    name: str = Field(
        description="The name of the player character.",
    )
    scores: AbilityScores = Field(
        default_factory=AbilityScores,
        description="The six ability scores.",
    )
    level: int = Field(
        default=1,
        ge=1,
        description="Character level.",
    )
    xp: int = Field(
        default=0,
        ge=0,
        description="Experience points accumulated so far.",
    )
    pending_levels: int = Field(
        default=0,
        ge=0,
        description="Level-ups earned but not yet applied (done outside combat).",
    )
    hp: int = Field(
        ge=0,
        description="Current hit points.",
    )
    max_hp: int = Field(
        ge=1,
        description="Maximum hit points.",
    )
    mp: int = Field(
        default=0,
        ge=0,
        description="Current mana points.",
    )
    max_mp: int = Field(
        default=0,
        ge=0,
        description="Maximum mana points.",
    )
    gold: int = Field(
        default=0,
        ge=0,
        description="Gold carried.",
    )
    inventory: list[Item] = Field(
        default_factory=list,
        description="Items carried, in pickup order.",
    )
    main_hand: Weapon | None = Field(
        default=None,
        description="Weapon wielded in the main hand (unarmed when empty).",
    )
    off_hand: Weapon | None = Field(
        default=None,
        description="Light weapon wielded in the off hand.",
    )
    shield: Shield | None = Field(
        default=None,
        description="Shield carried in the off hand.",
    )
    armor: Armor | None = Field(
        default=None,
        description="Armor worn.",
    )
    known_spells: list[str] = Field(
        default_factory=list,
        description="Identifiers of the spells the player knows.",
    )
    known_abilities: list[str] = Field(
        default_factory=list,
        description="Identifiers of the abilities the player knows.",
    )
    defending: bool = Field(
        default=False,
        description="Whether the player currently holds a defensive stance.",
    )
    position: Position = Field(
        default_factory=Position,
        description="Current overworld position.",
    )
    last_town: Position = Field(
        default_factory=lambda: Position(x=2, y=2, chunk_x=1, chunk_y=1),
        description="Last safe town visited, where the player wakes after a defeat.",
    )

    @model_validator(mode="after")
    def _validate_state(self) -> "PlayerCharacter":
        if self.hp > self.max_hp:
            raise ValueError(f"hp ({self.hp}) cannot exceed max_hp ({self.max_hp})")
        if self.mp > self.max_mp:
            raise ValueError(f"mp ({self.mp}) cannot exceed max_mp ({self.max_mp})")
        self._check_loadout(self.main_hand, self.off_hand, self.shield)
        return self

    @staticmethod
    def _check_loadout(
        main_hand: Weapon | None,
        off_hand: Weapon | None,
        shield: Shield | None,
    ) -> None:
        if off_hand is not None:
            if main_hand is None or not main_hand.light or main_hand.two_handed:
                raise ValueError(
                    "An off-hand weapon requires a light, one-handed main hand weapon"
                )
            if not off_hand.light:
                raise ValueError(f"Off-hand weapon '{off_hand.id}' must be light")
            if shield is not None:
                raise ValueError("Cannot carry a shield and an off-hand weapon together")
        if shield is not None and main_hand is not None and main_hand.two_handed:
            raise ValueError("Cannot carry a shield with a two-handed weapon")

    # ============================================================================
    # DERIVED STATS
    # ============================================================================

    @property
    def weapon(self) -> Weapon:
        """The main hand weapon, or an unarmed strike."""
        return self.main_hand if self.main_hand is not None else UNARMED_STRIKE

    @property
    def proficiency_bonus(self) -> int:
        return proficiency_bonus(self.level)

    @property
    def armor_class(self) -> int:
        """10 + DEX modifier + armor bonus."""
        armor_bonus = self.armor.ac_bonus if self.armor else 0
        return 10 + self.scores.DEX + armor_bonus

    @property
    def shield_reduction(self) -> int:
        """Damage soaked while defending, 0 without a usable shield."""
        if self.shield is None or self.weapon.two_handed:
            return 0
        return self.shield.damage_reduction

    def modifier(self, stat: StatKey) -> int:
        return self.scores.modifier(stat)

    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def colored_name(self) -> str:
        return f"[bold blue]{self.name}[/]"

    # ============================================================================
    # EQUIPMENT
    # ============================================================================

    def equip_main_hand(self, weapon: Weapon | None) -> None:
        """Wield a weapon in the main hand, keeping the loadout valid."""
        self._check_loadout(weapon, self.off_hand, self.shield)
        self.main_hand = weapon

    def equip_off_hand(self, weapon: Weapon | None) -> None:
        """Wield a light weapon in the off hand."""
        self._check_loadout(self.main_hand, weapon, self.shield)
        self.off_hand = weapon

    def equip_shield(self, shield: Shield | None) -> None:
        self._check_loadout(self.main_hand, self.off_hand, shield)
        self.shield = shield

    def equip_armor(self, armor: Armor | None) -> None:
        self.armor = armor

    # ============================================================================
    # RESOURCES
    # ============================================================================

    def take_damage(self, amount: int) -> int:
        """
        Reduces HP, never below 0.

        Returns:
            int: The damage actually applied.

        """
        applied = max(0, min(amount, self.hp))
        self.hp -= applied
        return applied

    def heal(self, amount: int) -> int:
        """Restores HP up to the maximum and returns the amount restored."""
        restored = max(0, min(amount, self.max_hp - self.hp))
        self.hp += restored
        return restored

    def restore_mp(self, amount: int) -> int:
        restored = max(0, min(amount, self.max_mp - self.mp))
        self.mp += restored
        return restored

    def spend_mp(self, amount: int) -> None:
        if amount > self.mp:
            raise ValueError(f"Cannot spend {amount} MP with only {self.mp} left")
        self.mp -= amount

    def consumable_at(self, index: int) -> Consumable | None:
        """Returns the consumable stored at the given inventory index, if any."""
        if 0 <= index < len(self.inventory):
            item = self.inventory[index]
            if isinstance(item, Consumable):
                return item
        return None

    def use_consumable(self, index: int) -> tuple[Consumable, int]:
        """
        Consumes the item at the given inventory index.

        Returns:
            tuple[Consumable, int]: The item used and the amount restored.

        Raises:
            ValueError: If there is no consumable at that index.

        """
        item = self.consumable_at(index)
        if item is None:
            raise ValueError(
                f"No consumable at inventory index {index} "
                f"(inventory size: {len(self.inventory)})"
            )
        if item.restores == ResourceType.HP:
            restored = self.heal(item.amount)
        else:
            restored = self.restore_mp(item.amount)
        del self.inventory[index]
        logger.debug(f"{self.name} used {item.name}, restoring {restored}")
        return item, restored

    def model_post_init(self, _: Any) -> None:
        assert self.name, "Player name must not be empty."
