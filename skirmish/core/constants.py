"""
Constants and enumerations for the resolver.

Defines the rule constants of the encounter (stance bonus, flee difficulty,
item budget, defeat penalties), and the enumerations for phases, action
kinds, action classes, weather and ability scores used throughout the
package.
"""

from enum import Enum

# Effective armor class granted by a defensive stance.
DEFEND_AC_BONUS = 2

# Difficulty of the DEX check used to escape an encounter.
FLEE_DIFFICULTY = 10

# Chance that a monster takes a defensive stance instead of acting.
MONSTER_DEFEND_CHANCE = 0.08

# Maximum number of items a player may use in one turn.
MAX_ITEMS_PER_TURN = 2

# Fraction of gold kept after a defeat, expressed as numerator/denominator.
DEFEAT_GOLD_KEPT_NUMERATOR = 7
DEFEAT_GOLD_KEPT_DENOMINATOR = 10

# Damage dice of an unarmed strike.
UNARMED_DAMAGE_COUNT = 1
UNARMED_DAMAGE_DIE = 6


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").lower().capitalize()


class BattlePhase(NiceEnum):
    """The phases an encounter moves through."""

    INIT = "init"
    PLAYER_TURN = "player_turn"
    MONSTER_TURN = "monster_turn"
    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"

    @property
    def is_terminal(self) -> bool:
        """Returns True for phases that end the encounter."""
        return self in (BattlePhase.VICTORY, BattlePhase.DEFEAT, BattlePhase.FLED)

    @property
    def color(self) -> str:
        return {
            BattlePhase.PLAYER_TURN: "bold blue",
            BattlePhase.MONSTER_TURN: "bold red",
            BattlePhase.VICTORY: "bold green",
            BattlePhase.DEFEAT: "bold magenta",
            BattlePhase.FLED: "bold yellow",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return f"[{self.color}]{self.display_name}[/]"


class ActionClass(NiceEnum):
    """Defines which slot of the turn economy an action spends."""

    NONE = "NONE"
    STANDARD = "STANDARD"
    BONUS = "BONUS"


class EffectType(NiceEnum):
    """What a spell, ability or monster ability does."""

    DAMAGE = "damage"
    HEAL = "heal"
    UTILITY = "utility"


class StatKey(NiceEnum):
    """The six ability scores."""

    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    INTELLIGENCE = "intelligence"
    WISDOM = "wisdom"
    CHARISMA = "charisma"


class ResourceType(NiceEnum):
    """The pool a consumable restores."""

    HP = "hp"
    MP = "mp"


class WeatherType(NiceEnum):
    """Weather conditions an encounter can take place in."""

    CLEAR = "clear"
    RAIN = "rain"
    SNOW = "snow"
    SANDSTORM = "sandstorm"
    STORM = "storm"
    FOG = "fog"

    @property
    def emoji(self) -> str:
        return {
            WeatherType.CLEAR: "☀️",
            WeatherType.RAIN: "🌧️",
            WeatherType.SNOW: "❄️",
            WeatherType.SANDSTORM: "🏜️",
            WeatherType.STORM: "⛈️",
            WeatherType.FOG: "🌫️",
        }.get(self, "❔")
