"""
Monster codex.

Tracks what the player has learned about each monster species: how often it
was defeated, whether its armor class has been worked out, and which items
it has been seen dropping. Stats are only revealed as they are discovered.
"""

from pydantic import BaseModel, Field

from skirmish.character.monster import MonsterTemplate


class CodexEntry(BaseModel):
    """Everything known about one monster species."""

    monster_id: str = Field(
        description="Identifier of the species.",
    )
    name: str = Field(
        description="Display name of the species.",
    )
    is_boss: bool = Field(
        default=False,
        description="Whether the species is a boss.",
    )
    ac: int = Field(
        description="True armor class; only shown once discovered.",
    )
    hp: int = Field(
        description="Maximum hit points; only shown once defeated.",
    )
    times_defeated: int = Field(
        default=0,
        ge=0,
        description="Number of victories against this species.",
    )
    ac_discovered: bool = Field(
        default=False,
        description="Whether the player deduced the armor class in combat.",
    )
    items_dropped: list[str] = Field(
        default_factory=list,
        description="Item ids the species has been seen dropping, first-seen order.",
    )

    @classmethod
    def for_monster(cls, monster: MonsterTemplate) -> "CodexEntry":
        return cls(
            monster_id=monster.id,
            name=monster.name,
            is_boss=monster.is_boss,
            ac=monster.ac,
            hp=monster.hp,
        )

    @property
    def hp_revealed(self) -> bool:
        return self.times_defeated > 0


class Codex(BaseModel):
    """The player's bestiary, keyed by monster id."""

    entries: dict[str, CodexEntry] = Field(
        default_factory=dict,
        description="Codex entries keyed by monster id.",
    )

    def _entry_for(self, monster: MonsterTemplate) -> CodexEntry:
        entry = self.entries.get(monster.id)
        if entry is None:
            entry = CodexEntry.for_monster(monster)
            self.entries[monster.id] = entry
        return entry

    def record_defeat(
        self,
        monster: MonsterTemplate,
        ac_discovered: bool,
        dropped_item_ids: list[str],
    ) -> CodexEntry:
        """
        Records a victory against a monster, adding the entry on first sight.

        The AC flag only ever turns on, and dropped items are merged into the
        set of seen drops; recording an item that was already seen is a no-op.

        Args:
            monster (MonsterTemplate): The defeated species.
            ac_discovered (bool): Whether the armor class was worked out.
            dropped_item_ids (list[str]): Items dropped in this victory.

        Returns:
            CodexEntry: The updated entry.

        """
        entry = self._entry_for(monster)
        entry.times_defeated += 1
        if ac_discovered:
            entry.ac_discovered = True
        for item_id in dropped_item_ids:
            if item_id not in entry.items_dropped:
                entry.items_dropped.append(item_id)
        return entry

    def discover_ac(self, monster: MonsterTemplate) -> CodexEntry:
        """Marks the armor class of a species as discovered (can happen mid-combat)."""
        entry = self._entry_for(monster)
        entry.ac_discovered = True
        return entry

    def get(self, monster_id: str) -> CodexEntry | None:
        return self.entries.get(monster_id)

    def has_encountered(self, monster_id: str) -> bool:
        return monster_id in self.entries

    def is_ac_known(self, monster_id: str) -> bool:
        entry = self.entries.get(monster_id)
        return entry is not None and entry.ac_discovered

    def is_hp_revealed(self, monster_id: str) -> bool:
        entry = self.entries.get(monster_id)
        return entry is not None and entry.hp_revealed

    def sorted_entries(self) -> list[CodexEntry]:
        """All entries, bosses last, then alphabetical."""
        return sorted(self.entries.values(), key=lambda e: (e.is_boss, e.name.lower()))
