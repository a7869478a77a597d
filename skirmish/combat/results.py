"""
Action result module for the resolver.

Every resolved action produces exactly one immutable result record. The
records form a discriminated union on `kind`: results of attack-like actions
carry an `AttackRoll`, while auto-hit effects, monster abilities, stances and
items carry none, so "this field only exists for rolled actions" holds by
construction.
"""

from typing import Annotated, Literal, TypeAlias, Union

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class AttackRoll(_Frozen):
    """A d20 attack roll classified against a target armor class."""

    natural: int = Field(
        ge=1,
        le=20,
        description="The natural d20 roll.",
    )
    modifier: int = Field(
        description="The sum of all bonuses and penalties applied to the roll.",
    )
    total: int = Field(
        description="natural + modifier.",
    )
    target_ac: int = Field(
        description="The target's effective armor class, stance included.",
    )
    hit: bool = Field(
        description="Whether the attack connects.",
    )
    critical: bool = Field(
        default=False,
        description="Natural 20: always a hit, dice damage doubled.",
    )
    fumble: bool = Field(
        default=False,
        description="Natural 1: always a miss.",
    )

    @property
    def informative(self) -> bool:
        """Rolls decided by the natural die carry no armor class information."""
        return not (self.critical or self.fumble)

    @property
    def outcome_label(self) -> str:
        if self.critical:
            return "CRIT"
        if self.fumble:
            return "FUMBLE"
        return "HIT" if self.hit else "MISS"

    def describe(self, reveal_ac: bool = False) -> str:
        """Formats the roll as `(d20: 14 +5 = 19 vs AC 15)`."""
        text = f"d20: {self.natural} {self.modifier:+d} = {self.total}"
        if reveal_ac:
            text += f" vs AC {self.target_ac}"
        return f"({text})"


class AttackResult(_Frozen):
    """A player weapon attack, main hand or off hand."""

    kind: Literal["attack"] = "attack"
    weapon_id: str
    off_hand: bool = False
    roll: AttackRoll
    damage: int = Field(default=0, ge=0)
    mp_cost: int = 0
    message: str


class SpellResult(_Frozen):
    """A damaging spell resolved with a spell attack roll."""

    kind: Literal["spell"] = "spell"
    spell_id: str
    roll: AttackRoll
    damage: int = Field(default=0, ge=0)
    mp_cost: int = Field(default=0, ge=0)
    message: str


class AbilityResult(_Frozen):
    """A damaging martial ability resolved with an attack roll."""

    kind: Literal["ability"] = "ability"
    ability_id: str
    roll: AttackRoll
    damage: int = Field(default=0, ge=0)
    mp_cost: int = Field(default=0, ge=0)
    message: str


class AutoEffectResult(_Frozen):
    """A spell or ability that lands without a roll: healing or auto-hit damage."""

    kind: Literal["auto_effect"] = "auto_effect"
    source: Literal["spell", "ability"]
    source_id: str
    damage: int = Field(default=0, ge=0)
    healing: int = Field(default=0, ge=0)
    mp_cost: int = Field(default=0, ge=0)
    message: str


class MonsterAttackResult(_Frozen):
    """A monster's basic attack against the player."""

    kind: Literal["monster_attack"] = "monster_attack"
    monster_id: str
    roll: AttackRoll
    damage: int = Field(default=0, ge=0)
    damage_reduced: int = Field(
        default=0,
        ge=0,
        description="Damage soaked by the player's shield.",
    )
    message: str


class MonsterAbilityResult(_Frozen):
    """A monster special ability; bypasses armor class."""

    kind: Literal["monster_ability"] = "monster_ability"
    monster_id: str
    ability_name: str
    damage: int = Field(default=0, ge=0)
    healing: int = Field(default=0, ge=0)
    message: str


class DefendResult(_Frozen):
    """A combatant takes a defensive stance."""

    kind: Literal["defend"] = "defend"
    actor: Literal["player", "monster"]
    message: str


class ItemResult(_Frozen):
    """The player uses a consumable."""

    kind: Literal["item"] = "item"
    item_id: str
    restored: int = Field(default=0, ge=0)
    message: str


class FleeResult(_Frozen):
    """A DEX check to escape the encounter."""

    kind: Literal["flee"] = "flee"
    natural: int = Field(ge=1, le=20)
    modifier: int
    total: int
    difficulty: int
    success: bool
    message: str


class InitiativeResult(_Frozen):
    """Opposed initiative rolls deciding who acts first."""

    kind: Literal["initiative"] = "initiative"
    player_roll: int
    monster_roll: int
    player_first: bool
    message: str


ActionResult: TypeAlias = Annotated[
    Union[
        AttackResult,
        SpellResult,
        AbilityResult,
        AutoEffectResult,
        MonsterAttackResult,
        MonsterAbilityResult,
        DefendResult,
        ItemResult,
        FleeResult,
        InitiativeResult,
    ],
    Field(discriminator="kind"),
]


class ActionReport(_Frozen):
    """
    What a player command returns to its caller.

    Rejected commands carry a message and no results; accepted commands carry
    every result produced, in order.
    """

    accepted: bool
    message: str = ""
    results: tuple[ActionResult, ...] = ()

    @classmethod
    def rejected(cls, message: str) -> "ActionReport":
        return cls(accepted=False, message=message)
