"""
Bestiary package: the player's codex of monster species.
"""

from .codex import Codex, CodexEntry

__all__ = ["Codex", "CodexEntry"]
