"""
Armor class inference.

The player never sees a monster's armor class up front. Every informative
attack total narrows a bracket: the lowest total that hit and the highest
total that missed. Once the two are adjacent the armor class is known.
"""

import math

from skirmish.combat.results import AttackRoll


class ArmorClassTracker:
    """Narrows down an unknown armor class from observed hit and miss totals."""

    def __init__(self, already_known: bool = False) -> None:
        self.lowest_hit_total: float = math.inf
        self.highest_miss_total: int = 0
        self._discovered: bool = already_known
        self._already_known: bool = already_known

    @property
    def discovered(self) -> bool:
        return self._discovered

    @property
    def already_known(self) -> bool:
        """True when the armor class was known before the encounter started."""
        return self._already_known

    @property
    def known_ac(self) -> int | None:
        """The inferred armor class, once the bracket has closed."""
        if self._already_known or not self._discovered:
            return None
        return int(self.lowest_hit_total)

    def observe(self, total: int, hit: bool) -> bool:
        """
        Records an attack total against the tracked armor class.

        Args:
            total (int): The attack total (natural roll + modifier).
            hit (bool): Whether the attack connected.

        Returns:
            bool: True only on the call that discovers the armor class.

        """
        if self._discovered:
            return False
        if hit:
            self.lowest_hit_total = min(self.lowest_hit_total, total)
        else:
            self.highest_miss_total = max(self.highest_miss_total, total)
        if self.lowest_hit_total == self.highest_miss_total + 1:
            self._discovered = True
            return True
        return False

    def observe_roll(self, roll: AttackRoll, defend_bonus: int = 0) -> bool:
        """
        Records a classified attack roll.

        Criticals and fumbles are ignored since the natural die decided them.
        The target's temporary stance bonus is taken off the total so that the
        bracket always describes the base armor class.
        """
        if not roll.informative:
            return False
        return self.observe(roll.total - defend_bonus, roll.hit)

    def bracket_text(self) -> str:
        """Human readable summary of what is known so far, e.g. `AC 12-15`."""
        if self._discovered and not self._already_known:
            return f"AC {self.known_ac}"
        if self._already_known:
            return "AC known"
        low = self.highest_miss_total + 1
        if math.isinf(self.lowest_hit_total):
            return f"AC ≥ {low}" if self.highest_miss_total else "AC ?"
        return f"AC {low}-{int(self.lowest_hit_total)}"
