"""
Tests for the content repository and the shipped game data.
"""

import json
import shutil

import pytest

from skirmish.actions.definitions import SpellDefinition
from skirmish.core.constants import ActionClass, EffectType
from skirmish.core.content import DATA_DIR, ContentRepository, _keyed_loader, _load_json_file
from skirmish.items import Consumable, Weapon


def test_repository_is_a_singleton(content):
    assert ContentRepository() is content


def test_passing_a_directory_reloads_the_shared_repository(content, tmp_path):
    """The shared instance is reloaded from a different directory, not silently reused."""
    for source in DATA_DIR.glob("*.json"):
        shutil.copy(source, tmp_path / source.name)
    monsters = json.loads((tmp_path / "monsters.json").read_text(encoding="utf-8"))
    for monster in monsters:
        if monster["id"] == "goblin":
            monster["name"] = "Goblin Chief"
    (tmp_path / "monsters.json").write_text(json.dumps(monsters), encoding="utf-8")

    try:
        assert ContentRepository(data_dir=tmp_path) is content
        assert content.data_dir == tmp_path
        assert content.get_monster("goblin").name == "Goblin Chief"
    finally:
        ContentRepository(data_dir=DATA_DIR)
    assert content.get_monster("goblin").name == "Goblin"


def test_same_directory_does_not_reload(content):
    spells = content.spells
    assert ContentRepository(data_dir=DATA_DIR) is content
    assert content.spells is spells


def test_shipped_content_loads(content):
    assert {"fireBolt", "cureWounds", "magicMissile", "teleport"} <= set(content.spells)
    assert {"shieldBash", "secondWind"} <= set(content.abilities)
    assert {"slime", "goblin", "troll", "dragon"} <= set(content.monsters)


def test_spell_properties(content):
    assert content.get_spell("magicMissile").rolls_to_hit is False
    assert content.get_spell("fireBolt").rolls_to_hit is True
    assert content.get_spell("healingWord").action_class == ActionClass.BONUS
    teleport = content.get_spell("teleport")
    assert teleport.effect == EffectType.UTILITY
    assert not teleport.usable_in_combat


def test_typed_getters_filter_by_item_kind(content):
    assert isinstance(content.get_weapon("dagger"), Weapon)
    assert isinstance(content.get_consumable("potion"), Consumable)
    assert content.get_shield("woodenShield").damage_reduction == 1
    assert content.get_armor("plateArmor").ac_bonus == 5
    assert content.get_weapon("potion") is None
    assert content.get_item("nothing") is None


def test_bosses_and_loot_tables(content):
    assert content.get_monster("troll").is_boss
    assert not content.get_monster("goblin").is_boss
    for monster in content.monsters.values():
        for drop in monster.drops:
            assert content.get_item(drop.item_id) is not None


def test_duplicate_ids_are_rejected():
    load = _keyed_loader(SpellDefinition.model_validate)
    entry = {
        "id": "fireBolt",
        "name": "Fire Bolt",
        "damage_count": 1,
        "damage_die": 10,
        "effect": "damage",
    }
    with pytest.raises(ValueError):
        load([entry, entry])


def test_missing_file_is_reported(tmp_path):
    with pytest.raises(ValueError):
        _load_json_file(tmp_path / "spells.json", lambda data: {}, "spells")


def test_malformed_file_is_reported(tmp_path):
    path = tmp_path / "spells.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        _load_json_file(path, lambda data: {}, "spells")


def test_invalid_entry_is_reported(tmp_path):
    path = tmp_path / "spells.json"
    path.write_text(json.dumps([{"id": "broken"}]), encoding="utf-8")
    with pytest.raises(ValueError):
        _load_json_file(path, _keyed_loader(SpellDefinition.model_validate), "spells")
