"""
Monster module for the resolver.

Monsters are read-only templates loaded from content; each encounter spawns
a `MonsterInstance` that tracks the mutable hit points and stance alongside
the untouched template.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from skirmish.core.constants import EffectType, WeatherType


class MonsterAbility(BaseModel):
    """A special ability a monster may use instead of its basic attack."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        description="Name of the ability.",
    )
    chance: float = Field(
        ge=0.0,
        le=1.0,
        description="Probability of using this ability on a given turn.",
    )
    damage_count: int = Field(
        ge=1,
        description="Number of damage (or healing) dice.",
    )
    damage_die: int = Field(
        ge=2,
        description="Number of sides of each die.",
    )
    effect: EffectType = Field(
        default=EffectType.DAMAGE,
        description="Whether the ability damages the player or heals the monster.",
    )
    self_heal: bool = Field(
        default=False,
        description="A damaging ability that also heals the monster for the damage dealt.",
    )

    def model_post_init(self, _: Any) -> None:
        if self.effect == EffectType.UTILITY:
            raise ValueError(f"Monster ability '{self.name}' must damage or heal")


class LootEntry(BaseModel):
    """An item a monster may drop, rolled independently on defeat."""

    model_config = ConfigDict(frozen=True)

    item_id: str = Field(
        description="Identifier of the dropped item.",
    )
    chance: float = Field(
        ge=0.0,
        le=1.0,
        description="Probability the item drops.",
    )


class MonsterTemplate(BaseModel):
    """The fixed stat block of a monster species."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="Unique identifier of the species.",
    )
    name: str = Field(
        description="Display name of the species.",
    )
    hp: int = Field(
        ge=1,
        description="Maximum hit points.",
    )
    ac: int = Field(
        ge=0,
        description="Armor class.",
    )
    attack_bonus: int = Field(
        default=0,
        description="Bonus added to the monster's attack and initiative rolls.",
    )
    damage_count: int = Field(
        default=1,
        ge=1,
        description="Number of damage dice of the basic attack.",
    )
    damage_die: int = Field(
        default=4,
        ge=2,
        description="Number of sides of each damage die.",
    )
    xp_reward: int = Field(
        default=0,
        ge=0,
        description="Experience granted on defeat.",
    )
    gold_reward: int = Field(
        default=0,
        ge=0,
        description="Gold granted on defeat.",
    )
    is_boss: bool = Field(
        default=False,
        description="Bosses cannot be fled from.",
    )
    abilities: tuple[MonsterAbility, ...] = Field(
        default=(),
        description="Special abilities, tried in declaration order.",
    )
    drops: tuple[LootEntry, ...] = Field(
        default=(),
        description="Loot table.",
    )
    weather_affinity: tuple[WeatherType, ...] = Field(
        default=(),
        description="Weather in which the monster fights at its best.",
    )

    @property
    def colored_name(self) -> str:
        color = "bold magenta" if self.is_boss else "bold red"
        return f"[{color}]{self.name}[/]"


class MonsterInstance(BaseModel):
    """A monster spawned for one encounter."""

    template: MonsterTemplate = Field(
        description="The read-only species template.",
    )
    current_hp: int = Field(
        ge=0,
        description="Hit points left in this encounter.",
    )
    defending: bool = Field(
        default=False,
        description="Whether the monster currently holds a defensive stance.",
    )

    @classmethod
    def spawn(cls, template: MonsterTemplate) -> "MonsterInstance":
        """Creates a fresh instance at full health."""
        return cls(template=template, current_hp=template.hp)

    @property
    def id(self) -> str:
        return self.template.id

    @property
    def name(self) -> str:
        return self.template.name

    @property
    def max_hp(self) -> int:
        return self.template.hp

    def is_alive(self) -> bool:
        return self.current_hp > 0

    def take_damage(self, amount: int) -> int:
        """Reduces HP, never below 0, and returns the damage applied."""
        applied = max(0, min(amount, self.current_hp))
        self.current_hp -= applied
        return applied

    def heal(self, amount: int) -> int:
        """Restores HP up to the template maximum and returns the amount restored."""
        restored = max(0, min(amount, self.max_hp - self.current_hp))
        self.current_hp += restored
        return restored
