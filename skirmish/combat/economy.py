"""
Turn economy for the player's side of an encounter.

Tracks which action classes (standard, bonus) have been spent this turn and
how many items were used. The encounter owns the only mutable instance and
hands out frozen snapshots to everybody else.
"""

from pydantic import BaseModel, ConfigDict, Field

from skirmish.core.constants import MAX_ITEMS_PER_TURN, ActionClass


class TurnEconomySnapshot(BaseModel):
    """Read-only copy of the turn economy."""

    model_config = ConfigDict(frozen=True)

    turn_action_used: bool
    bonus_action_used: bool
    items_used: int


class TurnEconomy(BaseModel):
    """
    Per-turn action budget.

    Attributes:
        turn_action_used (bool): Whether the standard (turn) action was spent.
        bonus_action_used (bool): Whether the bonus action was spent.
        items_used (int): Items used this turn, at most `MAX_ITEMS_PER_TURN`.

    """

    turn_action_used: bool = Field(
        default=False,
        description="Whether the turn action was spent.",
    )
    bonus_action_used: bool = Field(
        default=False,
        description="Whether the bonus action was spent.",
    )
    items_used: int = Field(
        default=0,
        ge=0,
        le=MAX_ITEMS_PER_TURN,
        description="Items used this turn.",
    )

    def reset(self) -> None:
        """Makes every action class available again."""
        self.turn_action_used = False
        self.bonus_action_used = False
        self.items_used = 0

    def can_use(self, action_class: ActionClass) -> bool:
        """
        Check whether an action class is still available this turn.

        Args:
            action_class (ActionClass): The class of action to check.

        Returns:
            bool: True if the action class is available, False otherwise.

        """
        if action_class == ActionClass.STANDARD:
            return not self.turn_action_used
        if action_class == ActionClass.BONUS:
            return not self.bonus_action_used
        return True

    def spend(self, action_class: ActionClass) -> None:
        """
        Mark an action class as used for the current turn.

        Raises:
            ValueError: If the action class was already spent.

        """
        if not self.can_use(action_class):
            raise ValueError(f"{action_class.display_name} action already used this turn")
        if action_class == ActionClass.STANDARD:
            self.turn_action_used = True
        elif action_class == ActionClass.BONUS:
            self.bonus_action_used = True

    def item_slot(self) -> ActionClass | None:
        """
        Returns the slot the next item use would consume.

        The first item rides on the bonus action; a second one eats the turn
        action. None means no item may be used.
        """
        if self.items_used >= MAX_ITEMS_PER_TURN:
            return None
        if not self.bonus_action_used:
            return ActionClass.BONUS
        if not self.turn_action_used:
            return ActionClass.STANDARD
        return None

    def spend_item(self) -> ActionClass:
        """
        Spends the slot for an item use.

        Returns:
            ActionClass: The slot that was consumed.

        Raises:
            ValueError: If no slot is left for an item.

        """
        slot = self.item_slot()
        if slot is None:
            raise ValueError("No action left to use an item this turn")
        self.spend(slot)
        self.items_used += 1
        return slot

    def snapshot(self) -> TurnEconomySnapshot:
        return TurnEconomySnapshot(
            turn_action_used=self.turn_action_used,
            bonus_action_used=self.bonus_action_used,
            items_used=self.items_used,
        )
