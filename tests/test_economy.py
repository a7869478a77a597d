"""
Tests for the per-turn action budget.
"""

import pytest
from pydantic import ValidationError

from skirmish.combat.economy import TurnEconomy
from skirmish.core.constants import ActionClass


def test_fresh_economy_has_every_slot():
    economy = TurnEconomy()
    assert economy.can_use(ActionClass.STANDARD)
    assert economy.can_use(ActionClass.BONUS)
    assert economy.item_slot() == ActionClass.BONUS


def test_each_slot_can_be_spent_once():
    """A second spend of the same action class is refused."""
    economy = TurnEconomy()
    economy.spend(ActionClass.STANDARD)
    economy.spend(ActionClass.BONUS)
    with pytest.raises(ValueError):
        economy.spend(ActionClass.STANDARD)
    with pytest.raises(ValueError):
        economy.spend(ActionClass.BONUS)


def test_items_take_bonus_then_turn_slot():
    """The first item rides on the bonus action, the second on the turn action, a third is refused."""
    economy = TurnEconomy()
    assert economy.spend_item() == ActionClass.BONUS
    assert economy.spend_item() == ActionClass.STANDARD
    assert economy.items_used == 2
    assert economy.item_slot() is None
    with pytest.raises(ValueError):
        economy.spend_item()


def test_item_after_bonus_action_takes_turn_slot():
    """With the bonus action gone, even the first item costs the turn action."""
    economy = TurnEconomy()
    economy.spend(ActionClass.BONUS)
    assert economy.spend_item() == ActionClass.STANDARD
    assert economy.item_slot() is None


def test_reset_restores_the_budget():
    economy = TurnEconomy()
    economy.spend_item()
    economy.spend(ActionClass.STANDARD)
    economy.reset()
    assert economy.snapshot().model_dump() == {
        "turn_action_used": False,
        "bonus_action_used": False,
        "items_used": 0,
    }


def test_snapshot_is_read_only():
    """Snapshots are frozen copies that do not follow later changes."""
    economy = TurnEconomy()
    snapshot = economy.snapshot()
    economy.spend(ActionClass.STANDARD)
    assert snapshot.turn_action_used is False
    with pytest.raises(ValidationError):
        snapshot.turn_action_used = True
