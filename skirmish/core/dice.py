"""
Dice module for the resolver.

Provides the dice roller used by every rule in the package. All randomness
flows through a `Dice` instance wrapping a random source, so tests can swap
in a scripted sequence of rolls instead of the global generator.
"""

from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    """The subset of `random.Random` the dice roller relies on."""

    def randint(self, a: int, b: int) -> int: ...

    def random(self) -> float: ...


class Dice:
    """
    Dice roller wrapper so you can:
    - seed for reproducible runs
    - inject a scripted source in tests
    """

    def __init__(
        self,
        seed: int | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self._rng: RandomSource = rng if rng is not None else random.Random(seed)

    def roll(self, sides: int) -> int:
        """Roll 1..sides."""
        if sides <= 0:
            raise ValueError("sides must be > 0")
        return self._rng.randint(1, sides)

    def roll_dice(self, count: int, sides: int) -> list[int]:
        """
        Roll `count` dice with `sides` sides.

        Returns:
            list[int]: The individual rolls, empty when count is 0.

        """
        if count < 0:
            raise ValueError("count must be >= 0")
        return [self.roll(sides) for _ in range(count)]

    def d20(self) -> int:
        return self.roll(20)

    def chance(self, probability: float) -> bool:
        """Returns True with the given probability (0..1)."""
        return self._rng.random() < probability


def ability_modifier(score: int) -> int:
    """
    Calculates the ability score modifier.

    Args:
        score (int): The ability score.

    Returns:
        int: The modifier for the given ability score.

    """
    return (score - 10) // 2


def proficiency_bonus(level: int) -> int:
    """
    Calculates the proficiency bonus for a character level.

    Args:
        level (int): The character level (1 or higher).

    Returns:
        int: +2 at levels 1-4, +3 at 5-8 and so on.

    """
    return (level - 1) // 4 + 2


_default_dice = Dice()


def get_default_dice() -> Dice:
    """Returns the process-wide dice roller."""
    return _default_dice


def set_default_dice(dice: Dice) -> None:
    """Replaces the process-wide dice roller."""
    global _default_dice
    _default_dice = dice
