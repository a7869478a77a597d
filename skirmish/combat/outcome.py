"""
Encounter outcome engine.

Applies the consequences of a finished encounter to the persistent player
state: loot, gold and experience on victory, recovery penalties on defeat.
The encounter guarantees each method runs at most once per encounter.
"""

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field

from skirmish.bestiary.codex import Codex
from skirmish.character.monster import MonsterTemplate
from skirmish.character.player import PlayerCharacter, Position
from skirmish.core.constants import (
    DEFEAT_GOLD_KEPT_DENOMINATOR,
    DEFEAT_GOLD_KEPT_NUMERATOR,
)
from skirmish.core.content import ContentRepository
from skirmish.core.dice import Dice, get_default_dice
from skirmish.core.logging import get_logger
from skirmish.progression import award_xp

logger = get_logger(__name__)


class VictoryReport(BaseModel):
    """What the player gained from a victory."""

    model_config = ConfigDict(frozen=True)

    monster_id: str
    gold: int = Field(ge=0)
    xp: int = Field(ge=0)
    dropped_item_ids: tuple[str, ...] = ()
    pending_levels: int = Field(
        default=0,
        ge=0,
        description="Level-ups earned by this victory.",
    )
    boss_defeated: str | None = Field(
        default=None,
        description="Id of the defeated boss, if the monster was one.",
    )
    ac_discovered: bool = False


class DefeatReport(BaseModel):
    """How the player was patched up after a defeat."""

    model_config = ConfigDict(frozen=True)

    hp: int
    mp: int
    gold: int
    gold_lost: int
    respawn: Position


class OutcomeEngine:
    """Applies victory rewards and defeat penalties."""

    def __init__(
        self,
        dice: Dice | None = None,
        content: ContentRepository | None = None,
    ) -> None:
        self.dice: Dice = dice if dice is not None else get_default_dice()
        self._content = content

    @property
    def content(self) -> ContentRepository:
        if self._content is None:
            self._content = ContentRepository()
        return self._content

    def roll_loot(self, monster: MonsterTemplate) -> list[str]:
        """Rolls every loot entry independently and returns the dropped item ids."""
        return [drop.item_id for drop in monster.drops if self.dice.chance(drop.chance)]

    def on_victory(
        self,
        player: PlayerCharacter,
        monster: MonsterTemplate,
        codex: Codex,
        ac_discovered: bool,
    ) -> VictoryReport:
        """
        Awards loot, gold and experience, and records the defeat in the codex.

        Args:
            player (PlayerCharacter): The victorious player.
            monster (MonsterTemplate): The defeated species.
            codex (Codex): The player's codex.
            ac_discovered (bool): Whether the armor class was worked out.

        Returns:
            VictoryReport: Summary of the rewards.

        """
        dropped: list[str] = []
        for item_id in self.roll_loot(monster):
            item = self.content.get_item(item_id)
            if item is None:
                log_warning(
                    f"Loot item '{item_id}' is not a known item, skipping it.",
                    {"monster": monster.id, "item_id": item_id},
                )
                continue
            player.inventory.append(item.model_copy())
            dropped.append(item_id)

        player.gold += monster.gold_reward
        pending = award_xp(player, monster.xp_reward)
        codex.record_defeat(monster, ac_discovered, dropped)

        logger.info(
            f"{player.name} defeated {monster.name}: "
            f"+{monster.xp_reward} XP, +{monster.gold_reward} gold, loot {dropped}"
        )
        return VictoryReport(
            monster_id=monster.id,
            gold=monster.gold_reward,
            xp=monster.xp_reward,
            dropped_item_ids=tuple(dropped),
            pending_levels=pending,
            boss_defeated=monster.id if monster.is_boss else None,
            ac_discovered=ac_discovered,
        )

    def on_defeat(self, player: PlayerCharacter) -> DefeatReport:
        """
        Restores half HP and MP, takes a share of the gold, and sends the
        player back to the last safe town.
        """
        player.hp = player.max_hp // 2
        player.mp = player.max_mp // 2
        kept = player.gold * DEFEAT_GOLD_KEPT_NUMERATOR // DEFEAT_GOLD_KEPT_DENOMINATOR
        lost = player.gold - kept
        player.gold = kept
        player.defending = False
        player.position = player.last_town.model_copy()

        logger.info(
            f"{player.name} was defeated: wakes in town with "
            f"{player.hp} HP, {player.mp} MP, lost {lost} gold"
        )
        return DefeatReport(
            hp=player.hp,
            mp=player.mp,
            gold=player.gold,
            gold_lost=lost,
            respawn=player.position.model_copy(),
        )
