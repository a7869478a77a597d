"""
Content repository for the resolver.

Loads spells, abilities, items and monsters from JSON into pydantic models
and offers fast by-id access to them.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from catchery import log_warning
from pydantic import TypeAdapter, ValidationError

from skirmish.actions.definitions import AbilityDefinition, SpellDefinition
from skirmish.character.monster import MonsterTemplate
from skirmish.core.logging import get_logger
from skirmish.core.utils import Singleton
from skirmish.items import Armor, Consumable, Item, Shield, Weapon

logger = get_logger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

_ITEM_ADAPTER: TypeAdapter[Item] = TypeAdapter(Item)


class ContentRepository(metaclass=Singleton):
    """
    One-stop registry for every game asset that needs fast by-id access.
    """

    spells: dict[str, SpellDefinition]
    abilities: dict[str, AbilityDefinition]
    items: dict[str, Item]
    monsters: dict[str, MonsterTemplate]
    data_dir: Path

    def __init__(self, data_dir: Path | None = None) -> None:
        """
        Initialize the ContentRepository.

        Args:
            data_dir (Path | None):
                The directory containing data files to load. Defaults to the
                content shipped with the package. Passing a different
                directory to the shared instance reloads it from there.

        """
        target = Path(data_dir) if data_dir is not None else DATA_DIR
        if getattr(self, "data_dir", None) == target:
            return
        self.reload(target)

    def reload(self, root: Path) -> None:
        """
        (Re)load all JSON assets from disk.

        Args:
            root (Path):
                The directory containing data files to load.

        Raises:
            ValueError: If a file is missing, malformed or holds duplicate ids.

        """
        self.data_dir = root
        self.spells = _load_json_file(
            root / "spells.json",
            _keyed_loader(SpellDefinition.model_validate),
            "spells",
        )
        self.abilities = _load_json_file(
            root / "abilities.json",
            _keyed_loader(AbilityDefinition.model_validate),
            "abilities",
        )
        self.items = _load_json_file(
            root / "items.json",
            _keyed_loader(_ITEM_ADAPTER.validate_python),
            "items",
        )
        self.monsters = _load_json_file(
            root / "monsters.json",
            _keyed_loader(MonsterTemplate.model_validate),
            "monsters",
        )
        self._check_loot_tables()

    def _check_loot_tables(self) -> None:
        for monster in self.monsters.values():
            for drop in monster.drops:
                if drop.item_id not in self.items:
                    raise ValueError(
                        f"Monster '{monster.id}' drops unknown item '{drop.item_id}'"
                    )

    def _get_from_collection(
        self,
        collection_name: str,
        entry_id: str,
        expected_type: type | tuple[type, ...] | None = None,
    ) -> Any | None:
        """
        Generic helper to get an entry from any collection with optional type checking.

        Args:
            collection_name (str):
                Name of the collection attribute (e.g., 'items', 'spells').
            entry_id (str):
                Identifier of the entry to retrieve.
            expected_type (type, optional):
                Expected type for the isinstance check.

        Returns:
            Any | None:
                The entry if found and its type matches, None otherwise.

        """
        collection = getattr(self, collection_name, None)
        if collection is None:
            log_warning(
                f"Collection '{collection_name}' not found in ContentRepository.",
                {"collection_name": collection_name, "entry_id": entry_id},
            )
            return None
        entry = collection.get(entry_id)
        if entry is not None and expected_type and not isinstance(entry, expected_type):
            log_warning(
                f"Entry '{entry_id}' in collection '{collection_name}' has an unexpected type.",
                {
                    "collection_name": collection_name,
                    "entry_id": entry_id,
                    "actual_type": type(entry).__name__,
                },
            )
            return None
        return entry

    def get_spell(self, spell_id: str) -> SpellDefinition | None:
        """Get a spell by id, or None if not found."""
        return self._get_from_collection("spells", spell_id, SpellDefinition)

    def get_ability(self, ability_id: str) -> AbilityDefinition | None:
        """Get an ability by id, or None if not found."""
        return self._get_from_collection("abilities", ability_id, AbilityDefinition)

    def get_item(self, item_id: str) -> Item | None:
        return self._get_from_collection("items", item_id)

    def get_weapon(self, item_id: str) -> Weapon | None:
        return self._get_from_collection("items", item_id, Weapon)

    def get_armor(self, item_id: str) -> Armor | None:
        return self._get_from_collection("items", item_id, Armor)

    def get_shield(self, item_id: str) -> Shield | None:
        return self._get_from_collection("items", item_id, Shield)

    def get_consumable(self, item_id: str) -> Consumable | None:
        return self._get_from_collection("items", item_id, Consumable)

    def get_monster(self, monster_id: str) -> MonsterTemplate | None:
        """Get a monster template by id, or None if not found."""
        return self._get_from_collection("monsters", monster_id, MonsterTemplate)


def _keyed_loader(
    build: Callable[[dict], Any],
) -> Callable[[list[dict]], dict[str, Any]]:
    """Builds a loader that validates every entry and keys it by its id."""

    def load(data: list[dict]) -> dict[str, Any]:
        entries: dict[str, Any] = {}
        for entry_data in data:
            entry = build(entry_data)
            if entry.id in entries:
                raise ValueError(f"Duplicate id: {entry.id}")
            entries[entry.id] = entry
        return entries

    return load


def _load_json_file(
    filepath: Path,
    loader_func: Callable[[list[dict]], dict[str, Any]],
    description: str,
) -> dict[str, Any]:
    """Helper to load and validate JSON files."""
    try:
        logger.debug(f"Loading {description} from {filepath}")
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        if not filepath.is_file():
            raise ValueError(f"Not a file: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not data:
            raise ValueError(f"Empty data list in {filepath}")
        if not isinstance(data, list):
            raise ValueError(f"Expected list in {filepath}, got {type(data).__name__}")
        return loader_func(data)
    except (json.JSONDecodeError, FileNotFoundError, ValidationError, ValueError) as e:
        raise ValueError(f"File {filepath} raised an error: {e}") from e
