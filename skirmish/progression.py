"""
Experience and level progression.

Combat only banks experience; the level-ups it earns are recorded as pending
and applied later, outside of combat.
"""

from catchery import log_debug

from skirmish.character.player import PlayerCharacter


def xp_for_level(level: int) -> int:
    """Total experience needed to reach the given level."""
    return level * level * 100


def award_xp(player: PlayerCharacter, amount: int) -> int:
    """
    Adds experience to the player and records any level-ups it earns.

    Args:
        player (PlayerCharacter): The player receiving experience.
        amount (int): Experience to add.

    Returns:
        int: The number of level-ups newly earned by this award.

    Raises:
        ValueError: If the amount is negative.

    """
    if amount < 0:
        raise ValueError(f"Invalid XP amount {amount}")
    player.xp += amount
    earned = 0
    while player.xp >= xp_for_level(player.level + player.pending_levels + 1):
        player.pending_levels += 1
        earned += 1
    if earned:
        log_debug(
            "Level-ups pending",
            {
                "player": player.name,
                "xp": player.xp,
                "level": player.level,
                "pending_levels": player.pending_levels,
            },
        )
    return earned
