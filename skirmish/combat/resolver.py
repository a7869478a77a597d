"""
Action resolver module.

Computes the outcome of a single action as a self-contained, immutable
result record. The resolver reads combatant state but never mutates it:
applying damage, healing and mana costs is the encounter's job, and the
encounter is also responsible for rejecting illegal actions (unknown spell,
missing mana, wrong phase) before the resolver is called.

Every attack-like action follows the same steps:

1. roll the natural d20;
2. sum the modifier (ability + proficiency + equipment/weather bonuses,
   minus the weather accuracy penalty);
3. total = natural + modifier;
4. compare against the target's armor class plus its stance bonus;
5. natural 20 is a critical hit, natural 1 a fumble, otherwise hit iff
   total >= armor class;
6. roll damage dice (doubled on a critical hit) plus the flat modifier,
   floored at 0.
"""

from catchery import log_debug

from skirmish.actions.definitions import AbilityDefinition, BaseActionDefinition, SpellDefinition
from skirmish.character.monster import MonsterAbility, MonsterInstance
from skirmish.character.player import PlayerCharacter
from skirmish.combat.results import (
    AbilityResult,
    AttackResult,
    AttackRoll,
    AutoEffectResult,
    FleeResult,
    InitiativeResult,
    MonsterAbilityResult,
    MonsterAttackResult,
    SpellResult,
)
from skirmish.combat.weather import Situation
from skirmish.core.constants import DEFEND_AC_BONUS, FLEE_DIFFICULTY, EffectType, StatKey
from skirmish.core.dice import Dice, get_default_dice
from skirmish.core.error_handling import CombatError


def classify_attack(natural: int, modifier: int, target_ac: int) -> AttackRoll:
    """
    Classifies a natural d20 roll against an armor class.

    Args:
        natural (int): The natural d20 roll.
        modifier (int): The total modifier applied to the roll.
        target_ac (int): The effective armor class of the target.

    Returns:
        AttackRoll: The classified roll.

    """
    total = natural + modifier
    if natural == 20:
        return AttackRoll(
            natural=natural,
            modifier=modifier,
            total=total,
            target_ac=target_ac,
            hit=True,
            critical=True,
        )
    if natural == 1:
        return AttackRoll(
            natural=natural,
            modifier=modifier,
            total=total,
            target_ac=target_ac,
            hit=False,
            fumble=True,
        )
    return AttackRoll(
        natural=natural,
        modifier=modifier,
        total=total,
        target_ac=target_ac,
        hit=total >= target_ac,
    )


def effective_ac(base_ac: int, defending: bool) -> int:
    """Armor class including the defensive stance bonus."""
    return base_ac + (DEFEND_AC_BONUS if defending else 0)


class ActionResolver:
    """Resolves player and monster actions into `ActionResult` records."""

    def __init__(self, dice: Dice | None = None) -> None:
        self.dice: Dice = dice if dice is not None else get_default_dice()

    # ============================================================================
    # SHARED MECHANICS
    # ============================================================================

    def _roll_to_hit(self, modifier: int, target_ac: int) -> AttackRoll:
        return classify_attack(self.dice.d20(), modifier, target_ac)

    def _roll_damage(
        self,
        count: int,
        die: int,
        critical: bool,
        flat_bonus: int = 0,
    ) -> int:
        """Rolls damage dice, doubling the dice (not the flat bonus) on a critical hit."""
        dice_count = count * 2 if critical else count
        return max(0, sum(self.dice.roll_dice(dice_count, die)) + flat_bonus)

    def _player_modifier(
        self,
        player: PlayerCharacter,
        stat: StatKey,
        situation: Situation,
        equipment_bonus: int = 0,
    ) -> int:
        return (
            player.modifier(stat)
            + player.proficiency_bonus
            + equipment_bonus
            - situation.accuracy_penalty
        )

    # ============================================================================
    # PLAYER WEAPON ATTACKS
    # ============================================================================

    def resolve_attack(
        self,
        player: PlayerCharacter,
        monster: MonsterInstance,
        situation: Situation,
    ) -> AttackResult:
        """
        Resolves a main hand weapon attack.

        Args:
            player (PlayerCharacter): The attacker.
            monster (MonsterInstance): The target.
            situation (Situation): Weather modifiers of the encounter.

        Returns:
            AttackResult: The classified roll and the damage dealt.

        """
        weapon = player.weapon
        strength = player.modifier(StatKey.STRENGTH)
        modifier = self._player_modifier(
            player, StatKey.STRENGTH, situation, weapon.attack_bonus
        )
        roll = self._roll_to_hit(modifier, effective_ac(monster.template.ac, monster.defending))

        damage = 0
        if roll.hit:
            damage = self._roll_damage(
                weapon.damage_count, weapon.damage_die, roll.critical, strength
            )

        if roll.fumble:
            message = f"Critical miss! {player.name}'s attack goes wild!"
        elif roll.critical:
            message = f"CRITICAL HIT! {player.name} strikes for {damage} damage!"
        elif roll.hit:
            message = f"{player.name} hits for {damage} damage!"
        else:
            message = f"{player.name} misses!"

        log_debug(
            "Player attack",
            {
                "weapon": weapon.id,
                "natural": roll.natural,
                "modifier": roll.modifier,
                "total": roll.total,
                "target_ac": roll.target_ac,
                "outcome": roll.outcome_label,
                "damage": damage,
            },
        )
        return AttackResult(
            weapon_id=weapon.id,
            roll=roll,
            damage=damage,
            message=message,
        )

    def resolve_off_hand_attack(
        self,
        player: PlayerCharacter,
        monster: MonsterInstance,
        situation: Situation,
    ) -> AttackResult:
        """
        Resolves an off-hand attack.

        The attack roll uses the same modifier as the main hand, but the
        damage adds the ability modifier only when it is negative.

        Raises:
            CombatError: If the player has no off-hand weapon.

        """
        weapon = player.off_hand
        if weapon is None:
            raise CombatError(
                "Off-hand attack without an off-hand weapon",
                {"player": player.name},
            )
        strength = player.modifier(StatKey.STRENGTH)
        modifier = self._player_modifier(
            player, StatKey.STRENGTH, situation, weapon.attack_bonus
        )
        roll = self._roll_to_hit(modifier, effective_ac(monster.template.ac, monster.defending))

        damage = 0
        if roll.hit:
            damage = self._roll_damage(
                weapon.damage_count, weapon.damage_die, roll.critical, min(0, strength)
            )

        if roll.fumble:
            message = f"{player.name}'s off-hand swing goes wide!"
        elif roll.critical:
            message = f"CRITICAL HIT! {player.name}'s off-hand strikes for {damage} damage!"
        elif roll.hit:
            message = f"{player.name}'s off-hand hits for {damage} damage!"
        else:
            message = f"{player.name}'s off-hand misses!"

        log_debug(
            "Player off-hand attack",
            {
                "weapon": weapon.id,
                "natural": roll.natural,
                "total": roll.total,
                "target_ac": roll.target_ac,
                "outcome": roll.outcome_label,
                "damage": damage,
            },
        )
        return AttackResult(
            weapon_id=weapon.id,
            off_hand=True,
            roll=roll,
            damage=damage,
            message=message,
        )

    # ============================================================================
    # SPELLS AND ABILITIES
    # ============================================================================

    def _resolve_auto_effect(
        self,
        player: PlayerCharacter,
        action: BaseActionDefinition,
        source: str,
        verb: str,
    ) -> AutoEffectResult:
        """Resolves a heal or an auto-hit damage effect: no roll, always succeeds."""
        amount = sum(self.dice.roll_dice(action.damage_count, action.damage_die))
        if action.effect == EffectType.HEAL:
            healing = max(0, min(amount, player.max_hp - player.hp))
            return AutoEffectResult(
                source=source,
                source_id=action.id,
                healing=healing,
                mp_cost=action.mp_cost,
                message=f"{player.name} {verb} {action.name}! Healed {healing} HP!",
            )
        return AutoEffectResult(
            source=source,
            source_id=action.id,
            damage=amount,
            mp_cost=action.mp_cost,
            message=f"{player.name} {verb} {action.name}! {amount} damage!",
        )

    def cast_spell(
        self,
        player: PlayerCharacter,
        spell: SpellDefinition,
        monster: MonsterInstance,
        situation: Situation,
    ) -> SpellResult | AutoEffectResult:
        """
        Resolves a spell cast. The caller has already checked mana.

        Healing and auto-hit spells skip the attack roll; damaging spells use
        INT + proficiency against the monster's armor class.

        Raises:
            CombatError: If the spell cannot be used in combat.

        """
        if not spell.usable_in_combat:
            raise CombatError(
                f"{spell.name} cannot be used in battle",
                {"spell": spell.id},
            )
        if not spell.rolls_to_hit:
            return self._resolve_auto_effect(player, spell, "spell", "casts")

        intelligence = player.modifier(spell.stat)
        modifier = self._player_modifier(player, spell.stat, situation)
        roll = self._roll_to_hit(modifier, effective_ac(monster.template.ac, monster.defending))

        damage = 0
        if roll.hit:
            damage = self._roll_damage(
                spell.damage_count, spell.damage_die, roll.critical, intelligence
            )
        if roll.hit:
            prefix = "CRITICAL! " if roll.critical else ""
            message = f"{prefix}{player.name} casts {spell.name}! {damage} damage!"
        else:
            message = f"{player.name} casts {spell.name} but it misses!"

        log_debug(
            "Player spell",
            {
                "spell": spell.id,
                "natural": roll.natural,
                "total": roll.total,
                "target_ac": roll.target_ac,
                "outcome": roll.outcome_label,
                "damage": damage,
                "mp_cost": spell.mp_cost,
            },
        )
        return SpellResult(
            spell_id=spell.id,
            roll=roll,
            damage=damage,
            mp_cost=spell.mp_cost,
            message=message,
        )

    def use_ability(
        self,
        player: PlayerCharacter,
        ability: AbilityDefinition,
        monster: MonsterInstance,
        situation: Situation,
    ) -> AbilityResult | AutoEffectResult:
        """
        Resolves a martial ability. The caller has already checked mana.

        Raises:
            CombatError: If the ability cannot be used in combat.

        """
        if not ability.usable_in_combat:
            raise CombatError(
                f"{ability.name} cannot be used in battle",
                {"ability": ability.id},
            )
        if not ability.rolls_to_hit:
            return self._resolve_auto_effect(player, ability, "ability", "uses")

        stat_modifier = player.modifier(ability.stat)
        modifier = self._player_modifier(player, ability.stat, situation)
        roll = self._roll_to_hit(modifier, effective_ac(monster.template.ac, monster.defending))

        damage = 0
        if roll.hit:
            damage = self._roll_damage(
                ability.damage_count, ability.damage_die, roll.critical, stat_modifier
            )
        if roll.fumble:
            message = f"{player.name} uses {ability.name} but fumbles!"
        elif roll.hit:
            prefix = "CRITICAL! " if roll.critical else ""
            message = f"{prefix}{player.name} uses {ability.name}! {damage} damage!"
        else:
            message = f"{player.name} uses {ability.name} but misses!"

        log_debug(
            "Player ability",
            {
                "ability": ability.id,
                "natural": roll.natural,
                "total": roll.total,
                "target_ac": roll.target_ac,
                "outcome": roll.outcome_label,
                "damage": damage,
                "mp_cost": ability.mp_cost,
            },
        )
        return AbilityResult(
            ability_id=ability.id,
            roll=roll,
            damage=damage,
            mp_cost=ability.mp_cost,
            message=message,
        )

    # ============================================================================
    # MONSTER ACTIONS
    # ============================================================================

    def monster_attack(
        self,
        monster: MonsterInstance,
        player: PlayerCharacter,
        situation: Situation,
    ) -> MonsterAttackResult:
        """
        Resolves a monster's basic attack.

        A defending player adds the stance bonus to its armor class, and a
        usable shield soaks part of a hit's damage.
        """
        template = monster.template
        modifier = (
            template.attack_bonus
            + situation.monster_boost.attack_bonus
            - situation.accuracy_penalty
        )
        roll = self._roll_to_hit(modifier, effective_ac(player.armor_class, player.defending))

        damage = 0
        reduced = 0
        if roll.hit:
            damage = self._roll_damage(template.damage_count, template.damage_die, roll.critical)
            if player.defending:
                reduced = min(player.shield_reduction, damage)
                damage -= reduced

        if roll.fumble:
            message = f"{template.name} stumbles and misses!"
        elif roll.critical:
            message = f"CRITICAL! {template.name} savages you for {damage} damage!"
        elif roll.hit:
            message = f"{template.name} hits you for {damage} damage!"
        else:
            message = f"{template.name} misses!"
        if reduced:
            message += f" (shield absorbs {reduced})"

        log_debug(
            "Monster attack",
            {
                "monster": template.id,
                "natural": roll.natural,
                "modifier": roll.modifier,
                "total": roll.total,
                "target_ac": roll.target_ac,
                "outcome": roll.outcome_label,
                "damage": damage,
                "player_defending": player.defending,
            },
        )
        return MonsterAttackResult(
            monster_id=template.id,
            roll=roll,
            damage=damage,
            damage_reduced=reduced,
            message=message,
        )

    def monster_use_ability(
        self,
        monster: MonsterInstance,
        ability: MonsterAbility,
        player: PlayerCharacter,
    ) -> MonsterAbilityResult:
        """
        Resolves a monster special ability. Abilities bypass armor class.
        """
        template = monster.template
        amount = sum(self.dice.roll_dice(ability.damage_count, ability.damage_die))
        missing = template.hp - monster.current_hp

        if ability.effect == EffectType.HEAL:
            healing = min(amount, missing)
            return MonsterAbilityResult(
                monster_id=template.id,
                ability_name=ability.name,
                healing=healing,
                message=f"{template.name} uses {ability.name}! Recovers {healing} HP!",
            )

        message = f"{template.name} uses {ability.name}! {amount} damage!"
        healing = 0
        if ability.self_heal:
            healing = min(amount, player.hp, missing)
            message += f" {template.name} absorbs the life force!"
        return MonsterAbilityResult(
            monster_id=template.id,
            ability_name=ability.name,
            damage=amount,
            healing=healing,
            message=message,
        )

    # ============================================================================
    # FLEE AND INITIATIVE
    # ============================================================================

    def attempt_flee(self, dex_modifier: int) -> FleeResult:
        """Rolls 1d20 + DEX modifier against the flee difficulty."""
        natural = self.dice.d20()
        total = natural + dex_modifier
        success = total >= FLEE_DIFFICULTY
        if success:
            message = f"Escaped! (rolled {total})"
        else:
            message = f"Failed to escape! (rolled {total}, needed {FLEE_DIFFICULTY})"
        return FleeResult(
            natural=natural,
            modifier=dex_modifier,
            total=total,
            difficulty=FLEE_DIFFICULTY,
            success=success,
            message=message,
        )

    def roll_initiative(self, player_modifier: int, monster_modifier: int) -> InitiativeResult:
        """
        Rolls initiative for both sides. Ties go to the player.

        Args:
            player_modifier (int): The player's DEX modifier.
            monster_modifier (int): The monster's attack bonus plus weather boost.

        """
        player_roll = self.dice.d20() + player_modifier
        monster_roll = self.dice.d20() + monster_modifier
        player_first = player_roll >= monster_roll
        return InitiativeResult(
            player_roll=player_roll,
            monster_roll=monster_roll,
            player_first=player_first,
            message=f"You rolled {player_roll} for initiative.",
        )
