"""
Encounter module for the resolver.

The `Encounter` is the turn and action-economy state machine of a single
fight between the player and one monster. It checks every command against
the current phase and the turn economy, asks the `ActionResolver` for a
result, applies that result to the combatants, feeds attack rolls to the
armor class tracker and advances the phase.

Phases:

    init -> player_turn | monster_turn        (initiative, once)
    player_turn -> monster_turn                (turn action spent)
    monster_turn -> player_turn                (after any monster action)
    * -> victory | defeat | fled               (terminal)

Every command runs behind an error boundary: an unexpected fault is logged,
the combat state is restored to what it was before the command, the events
it emitted are never sent, and the caller gets a non-fatal "Something went
wrong" report.
"""

import copy
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field

from skirmish.bestiary.codex import Codex
from skirmish.character.monster import MonsterInstance, MonsterTemplate
from skirmish.character.player import PlayerCharacter
from skirmish.combat.ac_tracker import ArmorClassTracker
from skirmish.combat.economy import TurnEconomy, TurnEconomySnapshot
from skirmish.combat.events import (
    ActionRejected,
    ActionResolved,
    ArmorClassDiscovered,
    EncounterFled,
    EncounterLost,
    EncounterWon,
    EventBus,
    PhaseChanged,
)
from skirmish.combat.monster_ai import choose_monster_action
from skirmish.combat.outcome import DefeatReport, OutcomeEngine, VictoryReport
from skirmish.combat.resolver import ActionResolver
from skirmish.combat.results import (
    AbilityResult,
    ActionReport,
    ActionResult,
    AttackResult,
    AutoEffectResult,
    DefendResult,
    ItemResult,
    MonsterAbilityResult,
    MonsterAttackResult,
    SpellResult,
)
from skirmish.combat.weather import Situation
from skirmish.core.constants import (
    DEFEND_AC_BONUS,
    MAX_ITEMS_PER_TURN,
    ActionClass,
    BattlePhase,
    ResourceType,
    StatKey,
    WeatherType,
)
from skirmish.core.content import ContentRepository
from skirmish.core.dice import Dice, get_default_dice
from skirmish.core.error_handling import ERROR_HANDLER, ErrorHandler, ErrorSeverity
from skirmish.core.logging import get_logger

logger = get_logger(__name__)

SOMETHING_WENT_WRONG = "Something went wrong"


class MonsterStatus(BaseModel):
    """What the presentation layer is allowed to show about the monster."""

    name: str
    is_boss: bool
    defending: bool
    hp: int | None = Field(
        default=None,
        description="Current HP, only once the species has been defeated before.",
    )
    max_hp: int | None = Field(
        default=None,
        description="Maximum HP, only once the species has been defeated before.",
    )
    ac: int | None = Field(
        default=None,
        description="Armor class, only once it has been discovered.",
    )
    ac_hint: str = Field(
        default="AC ?",
        description="What is known so far about the armor class.",
    )
    weather_boosted: bool = False


class Encounter:
    """
    Runs one encounter between the player and a monster.

    Attributes:
        player (PlayerCharacter): The player; its persistent fields are
            mutated in place.
        monster (MonsterInstance): The monster spawned for this encounter.
        codex (Codex): The player's codex.
        situation (Situation): Weather modifiers of this encounter.
        phase (BattlePhase): The current phase.
        log (list[str]): Plain-text combat log.

    """

    def __init__(
        self,
        player: PlayerCharacter,
        monster: MonsterTemplate,
        codex: Codex | None = None,
        weather: WeatherType = WeatherType.CLEAR,
        dice: Dice | None = None,
        bus: EventBus | None = None,
        content: ContentRepository | None = None,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self.dice: Dice = dice if dice is not None else get_default_dice()
        self.player: PlayerCharacter = player
        self.monster: MonsterInstance = MonsterInstance.spawn(monster)
        self.codex: Codex = codex if codex is not None else Codex()
        self.situation: Situation = Situation.for_encounter(weather, monster)
        self.bus: EventBus = bus if bus is not None else EventBus()
        self.resolver = ActionResolver(self.dice)
        self.outcome = OutcomeEngine(self.dice, content)
        self.error_handler: ErrorHandler = error_handler or ERROR_HANDLER
        self._content = content

        self.phase: BattlePhase = BattlePhase.INIT
        self._economy = TurnEconomy()
        self.ac_tracker = ArmorClassTracker(
            already_known=self.codex.is_ac_known(monster.id)
        )
        self.log: list[str] = []
        self.victory_report: VictoryReport | None = None
        self.defeat_report: DefeatReport | None = None
        self._outcome_applied = False

        self.player.defending = False

    # ============================================================================
    # READ-ONLY VIEWS
    # ============================================================================

    @property
    def content(self) -> ContentRepository:
        if self._content is None:
            self._content = ContentRepository()
        return self._content

    @property
    def economy(self) -> TurnEconomySnapshot:
        """A read-only copy of the current turn economy."""
        return self._economy.snapshot()

    @property
    def is_over(self) -> bool:
        return self.phase.is_terminal

    def monster_status(self) -> MonsterStatus:
        """
        Returns what may be shown about the monster: the armor class only once
        it is known, the hit points only once the species was defeated before.
        """
        template = self.monster.template
        hp_revealed = self.codex.is_hp_revealed(template.id)
        ac_known = self.ac_tracker.discovered
        return MonsterStatus(
            name=template.name,
            is_boss=template.is_boss,
            defending=self.monster.defending,
            hp=self.monster.current_hp if hp_revealed else None,
            max_hp=template.hp if hp_revealed else None,
            ac=template.ac if ac_known else None,
            ac_hint=f"AC {template.ac}" if ac_known else self.ac_tracker.bracket_text(),
            weather_boosted=self.situation.monster_boost.attack_bonus > 0,
        )

    # ============================================================================
    # ENCOUNTER FLOW
    # ============================================================================

    def start(self) -> ActionReport:
        """Rolls initiative and enters the first turn. Only valid in `init`."""
        return self._guarded("start", self._do_start)

    def _do_start(self) -> ActionReport:
        if self.phase != BattlePhase.INIT:
            return self._reject("start", "The battle has already started.")
        monster_modifier = (
            self.monster.template.attack_bonus
            + self.situation.monster_boost.initiative_bonus
        )
        result = self.resolver.roll_initiative(
            self.player.modifier(StatKey.DEXTERITY), monster_modifier
        )
        results: list[ActionResult] = []
        self._record(result, results)
        if result.player_first:
            self._log("You act first!")
            self._set_phase(BattlePhase.PLAYER_TURN)
        else:
            self._log(f"{self.monster.name} acts first!")
            self._set_phase(BattlePhase.MONSTER_TURN)
        return ActionReport(accepted=True, message=result.message, results=tuple(results))

    def check_battle_end(self) -> BattlePhase:
        """
        Moves the encounter to its terminal phase when a combatant is down.

        Rewards and penalties are applied on the transition only, so calling
        this again once the encounter is over does nothing.

        Returns:
            BattlePhase: The phase after the check.

        """
        if self.phase.is_terminal:
            return self.phase
        if not self.monster.is_alive():
            self._finish_victory()
        elif not self.player.is_alive():
            self._finish_defeat()
        return self.phase

    def _finish_victory(self) -> None:
        self._set_phase(BattlePhase.VICTORY)
        if self._outcome_applied:
            return
        self._outcome_applied = True
        self._log(f"{self.monster.name} is defeated!")
        report = self.outcome.on_victory(
            self.player,
            self.monster.template,
            self.codex,
            self.ac_tracker.discovered and not self.ac_tracker.already_known,
        )
        self.victory_report = report
        self._log(f"+{report.xp} XP, +{report.gold} gold")
        for item_id in report.dropped_item_ids:
            self._log(f"Found {item_id}!")
        if report.pending_levels:
            plural = "s" if report.pending_levels > 1 else ""
            self._log(f"{report.pending_levels} level-up{plural} pending! Rest to level up.")
        self.bus.emit(EncounterWon(monster_id=self.monster.id, report=report))

    def _finish_defeat(self) -> None:
        self._set_phase(BattlePhase.DEFEAT)
        if self._outcome_applied:
            return
        self._outcome_applied = True
        self._log("You have been defeated...")
        report = self.outcome.on_defeat(self.player)
        self.defeat_report = report
        self._log(f"You wake up in town. Lost {report.gold_lost} gold.")
        self.bus.emit(EncounterLost(monster_id=self.monster.id, report=report))

    # ============================================================================
    # PLAYER COMMANDS
    # ============================================================================

    def attack(self) -> ActionReport:
        """
        Attacks with the main hand weapon (turn action).

        With a light off-hand weapon equipped, a hit that leaves the monster
        standing is followed by an off-hand attack on the unused bonus action.
        """
        return self._guarded("attack", self._do_attack)

    def _do_attack(self) -> ActionReport:
        reason = self._turn_rejection(ActionClass.STANDARD)
        if reason:
            return self._reject("attack", reason)

        self._begin_player_action()
        self._economy.spend(ActionClass.STANDARD)
        results: list[ActionResult] = []

        main = self.resolver.resolve_attack(self.player, self.monster, self.situation)
        self._record(main, results)
        self.monster.take_damage(main.damage)

        if (
            main.roll.hit
            and self.monster.is_alive()
            and self.player.off_hand is not None
            and self._economy.can_use(ActionClass.BONUS)
        ):
            self._economy.spend(ActionClass.BONUS)
            self._off_hand_attack(results)

        return self._finish_player_action(results)

    def dual_attack(self) -> ActionReport:
        """
        Attacks with both weapons, spending the turn and the bonus action.

        The off-hand attack follows whenever the monster is still standing.
        """
        return self._guarded("dual_attack", self._do_dual_attack)

    def _do_dual_attack(self) -> ActionReport:
        reason = self._turn_rejection(ActionClass.STANDARD) or self._turn_rejection(
            ActionClass.BONUS
        )
        if reason:
            return self._reject("dual_attack", reason)
        if self.player.off_hand is None:
            return self._reject("dual_attack", "You have no off-hand weapon.")

        self._begin_player_action()
        self._economy.spend(ActionClass.STANDARD)
        self._economy.spend(ActionClass.BONUS)
        results: list[ActionResult] = []

        main = self.resolver.resolve_attack(self.player, self.monster, self.situation)
        self._record(main, results)
        self.monster.take_damage(main.damage)
        if self.monster.is_alive():
            self._off_hand_attack(results)

        return self._finish_player_action(results)

    def _off_hand_attack(self, results: list[ActionResult]) -> AttackResult:
        off = self.resolver.resolve_off_hand_attack(self.player, self.monster, self.situation)
        self._record(off, results)
        self.monster.take_damage(off.damage)
        return off

    def defend(self) -> ActionReport:
        """Takes a defensive stance until the monster's next action (turn action)."""
        return self._guarded("defend", self._do_defend)

    def _do_defend(self) -> ActionReport:
        reason = self._turn_rejection(ActionClass.STANDARD)
        if reason:
            return self._reject("defend", reason)

        self._begin_player_action()
        self._economy.spend(ActionClass.STANDARD)
        self.player.defending = True
        message = f"{self.player.name} takes a defensive stance! (+{DEFEND_AC_BONUS} AC)"
        if self.player.shield_reduction:
            message += f" Shield raised (-{self.player.shield_reduction} damage)"
        results: list[ActionResult] = []
        self._record(DefendResult(actor="player", message=message), results)
        return self._finish_player_action(results)

    def cast_spell(self, spell_id: str) -> ActionReport:
        """Casts a known spell, paying its mana cost."""
        return self._guarded("cast_spell", lambda: self._do_cast_spell(spell_id))

    def _do_cast_spell(self, spell_id: str) -> ActionReport:
        reason = self._turn_rejection()
        if reason:
            return self._reject("cast_spell", reason)
        spell = self.content.get_spell(spell_id)
        if spell is None:
            return self._reject("cast_spell", f"Unknown spell '{spell_id}'.")
        if spell_id not in self.player.known_spells:
            return self._reject("cast_spell", f"You don't know {spell.name}.")
        if not spell.usable_in_combat:
            return self._reject("cast_spell", f"{spell.name} can't be used in battle.")
        reason = self._turn_rejection(spell.action_class)
        if reason:
            return self._reject("cast_spell", reason)
        if self.player.mp < spell.mp_cost:
            return self._reject("cast_spell", f"Not enough MP! ({spell.mp_cost} needed)")

        self._begin_player_action()
        self._economy.spend(spell.action_class)
        result = self.resolver.cast_spell(self.player, spell, self.monster, self.situation)
        return self._apply_player_effect(result)

    def use_ability(self, ability_id: str) -> ActionReport:
        """Uses a known ability, paying its mana cost."""
        return self._guarded("use_ability", lambda: self._do_use_ability(ability_id))

    def _do_use_ability(self, ability_id: str) -> ActionReport:
        reason = self._turn_rejection()
        if reason:
            return self._reject("use_ability", reason)
        ability = self.content.get_ability(ability_id)
        if ability is None:
            return self._reject("use_ability", f"Unknown ability '{ability_id}'.")
        if ability_id not in self.player.known_abilities:
            return self._reject("use_ability", f"You don't know {ability.name}.")
        if not ability.usable_in_combat:
            return self._reject("use_ability", f"{ability.name} can't be used in battle.")
        reason = self._turn_rejection(ability.action_class)
        if reason:
            return self._reject("use_ability", reason)
        if self.player.mp < ability.mp_cost:
            return self._reject("use_ability", f"Not enough MP! ({ability.mp_cost} needed)")

        self._begin_player_action()
        self._economy.spend(ability.action_class)
        result = self.resolver.use_ability(self.player, ability, self.monster, self.situation)
        return self._apply_player_effect(result)

    def _apply_player_effect(
        self,
        result: SpellResult | AbilityResult | AutoEffectResult,
    ) -> ActionReport:
        self.player.spend_mp(result.mp_cost)
        results: list[ActionResult] = []
        self._record(result, results)
        self.monster.take_damage(result.damage)
        if isinstance(result, AutoEffectResult) and result.healing:
            self.player.heal(result.healing)
        return self._finish_player_action(results)

    def use_item(self, index: int) -> ActionReport:
        """
        Uses the consumable at the given inventory index.

        The first item of a turn spends the bonus action, a second one the
        turn action; a third is refused.
        """
        return self._guarded("use_item", lambda: self._do_use_item(index))

    def _do_use_item(self, index: int) -> ActionReport:
        reason = self._turn_rejection()
        if reason:
            return self._reject("use_item", reason)
        if self.player.consumable_at(index) is None:
            return self._reject("use_item", "No usable item in that slot.")
        if self._economy.item_slot() is None:
            if self._economy.items_used >= MAX_ITEMS_PER_TURN:
                return self._reject(
                    "use_item", f"You can't use more than {MAX_ITEMS_PER_TURN} items per turn."
                )
            return self._reject("use_item", "No actions left to use an item.")

        self._begin_player_action()
        self._economy.spend_item()
        item, restored = self.player.use_consumable(index)
        resource = "HP" if item.restores == ResourceType.HP else "MP"
        results: list[ActionResult] = []
        self._record(
            ItemResult(
                item_id=item.id,
                restored=restored,
                message=f"Used {item.name}! Restored {restored} {resource}.",
            ),
            results,
        )
        return self._finish_player_action(results)

    def flee(self) -> ActionReport:
        """Tries to escape (turn action). Bosses cannot be fled from."""
        return self._guarded("flee", self._do_flee)

    def _do_flee(self) -> ActionReport:
        reason = self._turn_rejection(ActionClass.STANDARD)
        if reason:
            return self._reject("flee", reason)
        if self.monster.template.is_boss:
            return self._reject("flee", "You can't flee from a boss!")

        self._begin_player_action()
        self._economy.spend(ActionClass.STANDARD)
        result = self.resolver.attempt_flee(self.player.modifier(StatKey.DEXTERITY))
        results: list[ActionResult] = []
        self._record(result, results)
        if result.success:
            self._set_phase(BattlePhase.FLED)
            self.bus.emit(EncounterFled(monster_id=self.monster.id))
            return ActionReport(accepted=True, message=result.message, results=tuple(results))
        return self._finish_player_action(results)

    # ============================================================================
    # MONSTER TURN
    # ============================================================================

    def monster_turn(self) -> ActionReport:
        """
        Lets the monster act, then hands the turn back to the player (or ends
        the encounter in defeat).
        """
        return self._guarded("monster_turn", self._do_monster_turn)

    def _do_monster_turn(self) -> ActionReport:
        if self.phase.is_terminal:
            return self._reject("monster_turn", "The battle is over.")
        if self.phase != BattlePhase.MONSTER_TURN:
            return self._reject("monster_turn", "It's not the monster's turn.")

        results: list[ActionResult] = []
        decision = choose_monster_action(self.monster, self.dice)
        if decision.kind == "defend":
            self.monster.defending = True
            self._record(
                DefendResult(
                    actor="monster",
                    message=f"{self.monster.name} takes a defensive stance!",
                ),
                results,
            )
        else:
            self.monster.defending = False
            if decision.kind == "ability" and decision.ability is not None:
                ability_result = self.resolver.monster_use_ability(
                    self.monster, decision.ability, self.player
                )
                self._record(ability_result, results)
                self._apply_monster_result(ability_result)
            else:
                attack_result = self.resolver.monster_attack(
                    self.monster, self.player, self.situation
                )
                self._record(attack_result, results)
                self._apply_monster_result(attack_result)

        self.player.defending = False
        if self.check_battle_end() == BattlePhase.MONSTER_TURN:
            self._set_phase(BattlePhase.PLAYER_TURN)
        return ActionReport(
            accepted=True,
            message=" ".join(r.message for r in results),
            results=tuple(results),
        )

    def _apply_monster_result(self, result: MonsterAttackResult | MonsterAbilityResult) -> None:
        self.player.take_damage(result.damage)
        if isinstance(result, MonsterAbilityResult) and result.healing:
            self.monster.heal(result.healing)

    # ============================================================================
    # INTERNALS
    # ============================================================================

    def _turn_rejection(self, action_class: ActionClass = ActionClass.NONE) -> str | None:
        """Returns why the player cannot act with the given action class, if so."""
        if self.phase.is_terminal:
            return "The battle is over."
        if self.phase != BattlePhase.PLAYER_TURN:
            return "It's not your turn."
        if not self._economy.can_use(action_class):
            if action_class == ActionClass.BONUS:
                return "You've already used your bonus action this turn."
            return "You've already used your action this turn."
        return None

    def _begin_player_action(self) -> None:
        # A defensive stance only lasts until the defender acts again.
        self.player.defending = False

    def _finish_player_action(self, results: list[ActionResult]) -> ActionReport:
        phase = self.check_battle_end()
        if phase == BattlePhase.PLAYER_TURN and self._economy.turn_action_used:
            self._set_phase(BattlePhase.MONSTER_TURN)
        return ActionReport(
            accepted=True,
            message=" ".join(r.message for r in results),
            results=tuple(results),
        )

    def _set_phase(self, phase: BattlePhase) -> None:
        if phase == self.phase:
            return
        previous = self.phase
        self.phase = phase
        if phase == BattlePhase.PLAYER_TURN:
            self._economy.reset()
        logger.debug(f"Phase {previous.value} -> {phase.value}")
        self.bus.emit(PhaseChanged(monster_id=self.monster.id, previous=previous, current=phase))

    def _record(self, result: ActionResult, results: list[ActionResult]) -> None:
        results.append(result)
        self._log(result.message)
        self.bus.emit(ActionResolved(monster_id=self.monster.id, result=result))
        if isinstance(result, (AttackResult, SpellResult, AbilityResult)):
            self._observe_player_roll(result)

    def _observe_player_roll(self, result: AttackResult | SpellResult | AbilityResult) -> None:
        if self.ac_tracker.discovered:
            return
        defend_bonus = DEFEND_AC_BONUS if self.monster.defending else 0
        if self.ac_tracker.observe_roll(result.roll, defend_bonus):
            template = self.monster.template
            self.codex.discover_ac(template)
            self._log(f"You've figured out {template.name}'s AC: {self.ac_tracker.known_ac}!")
            self.bus.emit(
                ArmorClassDiscovered(
                    monster_id=template.id,
                    armor_class=self.ac_tracker.known_ac,
                )
            )

    def _reject(self, command: str, reason: str) -> ActionReport:
        logger.debug(f"Rejected {command}: {reason}")
        self.bus.emit(ActionRejected(monster_id=self.monster.id, command=command, reason=reason))
        return ActionReport.rejected(reason)

    def _log(self, message: str) -> None:
        self.log.append(message)
        logger.debug(message)

    # ============================================================================
    # ERROR BOUNDARY
    # ============================================================================

    def _guarded(self, command: str, operation: Callable[[], ActionReport]) -> ActionReport:
        snapshot = self._snapshot()
        try:
            # Events of a command that fails are dropped along with its state.
            with self.bus.deferred():
                return operation()
        except Exception as e:
            self.error_handler.handle(
                f"Unexpected error during {command}: {e!s}",
                ErrorSeverity.HIGH,
                {
                    "command": command,
                    "phase": self.phase.value,
                    "monster": self.monster.id,
                },
                e,
            )
            self._restore(snapshot)
            self._log(SOMETHING_WENT_WRONG)
            return ActionReport.rejected(SOMETHING_WENT_WRONG)

    def _snapshot(self) -> dict[str, Any]:
        return {
            "player": self.player.model_copy(deep=True),
            "monster": self.monster.model_copy(deep=True),
            "codex": self.codex.model_copy(deep=True),
            "economy": self._economy.model_copy(),
            "tracker": copy.deepcopy(self.ac_tracker),
            "phase": self.phase,
            "log_size": len(self.log),
            "outcome_applied": self._outcome_applied,
            "victory_report": self.victory_report,
            "defeat_report": self.defeat_report,
        }

    def _restore(self, snapshot: dict[str, Any]) -> None:
        # The player and codex are shared with the caller, restore them in place.
        _restore_fields(self.player, snapshot["player"])
        _restore_fields(self.codex, snapshot["codex"])
        self.monster = snapshot["monster"]
        self._economy = snapshot["economy"]
        self.ac_tracker = snapshot["tracker"]
        self.phase = snapshot["phase"]
        del self.log[snapshot["log_size"]:]
        self._outcome_applied = snapshot["outcome_applied"]
        self.victory_report = snapshot["victory_report"]
        self.defeat_report = snapshot["defeat_report"]


def _restore_fields(target: BaseModel, source: BaseModel) -> None:
    for name in type(target).model_fields:
        setattr(target, name, getattr(source, name))
