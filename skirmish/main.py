"""
Main entry point for the resolver demo.

Loads the bundled content, equips a sample adventurer and auto-plays one
encounter against a chosen monster, printing the combat log with rich.

    python -m skirmish --monster goblin --weather fog --seed 7
"""

import argparse
import logging

from skirmish.bestiary.codex import Codex
from skirmish.character.player import PlayerCharacter
from skirmish.character.stats import AbilityScores
from skirmish.combat.encounter import Encounter
from skirmish.combat.events import (
    ActionResolved,
    ArmorClassDiscovered,
    CombatEvent,
    EventBus,
    PhaseChanged,
)
from skirmish.core.constants import BattlePhase, ResourceType, WeatherType
from skirmish.core.content import ContentRepository
from skirmish.core.dice import Dice
from skirmish.core.error_handling import ERROR_HANDLER, ErrorSeverity
from skirmish.core.logging import setup_logging
from skirmish.core.utils import cprint, crule, make_bar
from skirmish.items import Consumable

# Turns (player and monster) after which the demo gives up on a stalemate.
MAX_TURNS = 100


def build_adventurer(repo: ContentRepository) -> PlayerCharacter:
    """Creates a level 3 dual-wielding rogue with a couple of potions."""
    player = PlayerCharacter(
        name="Aria",
        scores=AbilityScores(strength=14, dexterity=16, intelligence=12),
        level=3,
        hp=28,
        max_hp=28,
        mp=8,
        max_mp=8,
        gold=50,
        known_spells=["cureWounds", "fireBolt"],
        known_abilities=["sneakAttack", "cunningStrike"],
    )
    player.equip_main_hand(repo.get_weapon("shortSword"))
    player.equip_off_hand(repo.get_weapon("dagger"))
    player.equip_armor(repo.get_armor("leatherArmor"))
    for _ in range(2):
        potion = repo.get_consumable("potion")
        if potion is not None:
            player.inventory.append(potion.model_copy())
    return player


def print_loadout(player: PlayerCharacter, repo: ContentRepository) -> None:
    """Prints the equipment, items and known actions of the player."""
    gear = [f"{player.weapon.colored_name} ({player.weapon.damage_expr})"]
    if player.off_hand is not None:
        gear.append(f"{player.off_hand.colored_name} ({player.off_hand.damage_expr})")
    if player.shield is not None:
        gear.append(player.shield.colored_name)
    if player.armor is not None:
        gear.append(player.armor.colored_name)
    cprint(f"Gear: {', '.join(gear)}")
    if player.inventory:
        cprint(f"Items: {', '.join(item.colored_name for item in player.inventory)}")
    actions = [repo.get_spell(spell_id) for spell_id in player.known_spells]
    actions += [repo.get_ability(ability_id) for ability_id in player.known_abilities]
    known = [action.colored_name for action in actions if action is not None]
    if known:
        cprint(f"Actions: {', '.join(known)}")


def _potion_index(player: PlayerCharacter) -> int | None:
    for index, item in enumerate(player.inventory):
        if isinstance(item, Consumable) and item.restores == ResourceType.HP:
            return index
    return None


def play_player_turn(encounter: Encounter) -> None:
    """A simple policy: drink a potion when hurt, then fight."""
    player = encounter.player
    if player.hp * 3 < player.max_hp:
        index = _potion_index(player)
        if index is not None:
            encounter.use_item(index)
    if encounter.phase != BattlePhase.PLAYER_TURN:
        return
    if player.off_hand is not None and not encounter.economy.bonus_action_used:
        encounter.dual_attack()
    else:
        encounter.attack()


def print_event(event: CombatEvent) -> None:
    if isinstance(event, PhaseChanged):
        crule(event.current.colored_name, style="dim")
        return
    if isinstance(event, ActionResolved):
        roll = getattr(event.result, "roll", None)
        detail = f" [dim]{roll.describe()}[/]" if roll is not None else ""
        cprint(f"  {event.result.message}{detail}")
    elif isinstance(event, ArmorClassDiscovered):
        cprint(f"  [bold yellow]AC discovered: {event.armor_class}[/]")


def run_demo(monster_id: str, weather: WeatherType, seed: int | None) -> BattlePhase:
    repo = ERROR_HANDLER.safe_execute(
        ContentRepository,
        None,
        "Failed to load game content",
        ErrorSeverity.CRITICAL,
    )
    if repo is None:
        raise SystemExit("Could not load the game content.")
    template = repo.get_monster(monster_id)
    if template is None:
        raise SystemExit(f"Unknown monster '{monster_id}'. Known: {sorted(repo.monsters)}")

    player = build_adventurer(repo)
    bus = EventBus()
    bus.subscribe(print_event)
    encounter = Encounter(
        player,
        template,
        codex=Codex(),
        weather=weather,
        dice=Dice(seed=seed),
        bus=bus,
        content=repo,
    )

    crule(f":crossed_swords:  {player.colored_name} vs {template.colored_name}", style="bold green")
    cprint(f"Weather: {weather.emoji} {weather.display_name}")
    print_loadout(player, repo)
    encounter.start()

    turns = 0
    while not encounter.is_over and turns < MAX_TURNS:
        turns += 1
        if encounter.phase == BattlePhase.PLAYER_TURN:
            play_player_turn(encounter)
        elif encounter.phase == BattlePhase.MONSTER_TURN:
            encounter.monster_turn()
        status = encounter.monster_status()
        cprint(
            f"    {player.colored_name} "
            f"{make_bar(player.hp, player.max_hp, color='green')} {player.hp}/{player.max_hp}"
            f"  |  {template.colored_name} {status.ac_hint}"
        )

    crule(f"Result: {encounter.phase.colored_name}", style="bold green")
    if encounter.victory_report is not None:
        report = encounter.victory_report
        cprint(f"+{report.xp} XP, +{report.gold} gold, loot: {list(report.dropped_item_ids)}")
    if encounter.defeat_report is not None:
        report_lost = encounter.defeat_report
        cprint(f"Woke up in town with {report_lost.hp} HP, lost {report_lost.gold_lost} gold")
    return encounter.phase


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Auto-play one encounter.")
    parser.add_argument("--monster", default="goblin", help="Monster id to fight.")
    parser.add_argument(
        "--weather",
        default=WeatherType.CLEAR.value,
        choices=[weather.value for weather in WeatherType],
        help="Weather during the encounter.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs.")
    parser.add_argument("--debug", action="store_true", help="Show roll details.")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.debug else logging.WARNING)
    try:
        run_demo(args.monster, WeatherType(args.weather), args.seed)
    except KeyboardInterrupt:
        cprint("")
        crule(":crossed_swords:  Combat Interrupted", style="bold red")


if __name__ == "__main__":
    main()
