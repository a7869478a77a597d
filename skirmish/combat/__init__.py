"""
Combat system module for the resolver.

This module handles all combat mechanics: action resolution, the turn and
action-economy state machine, armor class inference, monster behaviour and
the rewards or penalties that close an encounter.
"""
