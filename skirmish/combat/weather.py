"""
Weather modifiers for the resolver.

Bad weather makes every attack harder to land, and monsters fighting in
their preferred weather get a boost to initiative and attack rolls.
"""

from pydantic import BaseModel, ConfigDict, Field

from skirmish.character.monster import MonsterTemplate
from skirmish.core.constants import WeatherType

WEATHER_ACCURACY_PENALTY: dict[WeatherType, int] = {
    WeatherType.CLEAR: 0,
    WeatherType.RAIN: 1,
    WeatherType.SNOW: 1,
    WeatherType.SANDSTORM: 2,
    WeatherType.STORM: 2,
    WeatherType.FOG: 3,
}


class WeatherBoost(BaseModel):
    """Stat deltas a monster receives from favourable weather."""

    model_config = ConfigDict(frozen=True)

    initiative_bonus: int = Field(default=0)
    attack_bonus: int = Field(default=0)


NO_BOOST = WeatherBoost()
ACTIVE_BOOST = WeatherBoost(initiative_bonus=2, attack_bonus=1)


def accuracy_penalty(weather: WeatherType) -> int:
    """Returns the attack roll penalty for the given weather (higher is worse)."""
    return WEATHER_ACCURACY_PENALTY[weather]


def monster_weather_boost(monster: MonsterTemplate, weather: WeatherType) -> WeatherBoost:
    """Returns the boost the monster gets in the given weather."""
    if weather in monster.weather_affinity:
        return ACTIVE_BOOST
    return NO_BOOST


class Situation(BaseModel):
    """
    Situational modifiers fed into the resolver for one encounter.

    The penalty applies to every attack roll, the monster's own; the boost
    only to the monster's rolls.
    """

    model_config = ConfigDict(frozen=True)

    weather: WeatherType = WeatherType.CLEAR
    accuracy_penalty: int = Field(default=0, ge=0)
    monster_boost: WeatherBoost = Field(default_factory=WeatherBoost)

    @classmethod
    def for_encounter(cls, weather: WeatherType, monster: MonsterTemplate) -> "Situation":
        return cls(
            weather=weather,
            accuracy_penalty=accuracy_penalty(weather),
            monster_boost=monster_weather_boost(monster, weather),
        )
