"""
Tests for the player character: loadout rules, derived stats and resources.
"""

import pytest
from conftest import DAGGER, ETHER, GREAT_AXE, LONG_SWORD, POTION, SHORT_SWORD, WOODEN_SHIELD
from pydantic import ValidationError

from skirmish.character.player import PlayerCharacter
from skirmish.character.stats import AbilityScores
from skirmish.items import Armor


def _player(**kwargs):
    kwargs.setdefault("hp", 20)
    kwargs.setdefault("max_hp", 20)
    return PlayerCharacter(name="Kit", **kwargs)


def test_armor_class_from_dex_and_armor():
    player = _player(scores=AbilityScores(dexterity=14))
    assert player.armor_class == 12
    player.equip_armor(Armor(id="chainMail", name="Chain Mail", ac_bonus=3))
    assert player.armor_class == 15


def test_unarmed_player_strikes_with_fists():
    weapon = _player().weapon
    assert weapon.id == "unarmed"
    assert weapon.damage_expr == "1d6"


def test_hp_cannot_exceed_maximum():
    with pytest.raises(ValidationError):
        _player(hp=25)


def test_off_hand_needs_light_main_hand():
    with pytest.raises(ValidationError):
        _player(main_hand=LONG_SWORD, off_hand=DAGGER)
    player = _player(main_hand=SHORT_SWORD)
    player.equip_off_hand(DAGGER)
    assert player.off_hand == DAGGER


def test_off_hand_must_be_light():
    player = _player(main_hand=SHORT_SWORD)
    with pytest.raises(ValueError):
        player.equip_off_hand(LONG_SWORD)
    assert player.off_hand is None


def test_shield_and_off_hand_exclude_each_other():
    player = _player(main_hand=SHORT_SWORD, off_hand=DAGGER)
    with pytest.raises(ValueError):
        player.equip_shield(WOODEN_SHIELD)


def test_two_handed_weapon_leaves_no_room_for_a_shield():
    player = _player(main_hand=LONG_SWORD, shield=WOODEN_SHIELD)
    assert player.shield_reduction == 1
    with pytest.raises(ValueError):
        player.equip_main_hand(GREAT_AXE)
    assert player.main_hand == LONG_SWORD


def test_damage_and_healing_are_clamped():
    player = _player(hp=5)
    assert player.take_damage(12) == 5
    assert player.hp == 0
    assert not player.is_alive()
    assert player.heal(50) == 20
    assert player.hp == 20


def test_spending_more_mana_than_available_fails():
    player = _player(mp=2, max_mp=10)
    with pytest.raises(ValueError):
        player.spend_mp(3)
    player.spend_mp(2)
    assert player.mp == 0


def test_consumables_restore_their_pool_and_disappear():
    player = _player(hp=15, mp=8, max_mp=10, inventory=[POTION, DAGGER, ETHER])
    item, restored = player.use_consumable(0)
    assert (item.id, restored, player.hp) == ("potion", 5, 20)

    assert player.consumable_at(0) is None
    with pytest.raises(ValueError):
        player.use_consumable(0)

    item, restored = player.use_consumable(1)
    assert (item.id, restored, player.mp) == ("ether", 2, 10)
    assert [i.id for i in player.inventory] == ["dagger"]
