"""
Skirmish: a dice-driven encounter resolver for turn-based role-playing games.

Given a player character, a monster and the current weather, the resolver
decides whether actions hit, how much damage or healing they produce, and
enforces the turn structure and action economy of the encounter.
"""

__version__ = "0.1.0"
