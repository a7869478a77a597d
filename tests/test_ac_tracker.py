"""
Tests for armor class inference from observed attack totals.
"""

import pytest

from skirmish.combat.ac_tracker import ArmorClassTracker
from skirmish.combat.resolver import classify_attack


@pytest.fixture
def tracker():
    return ArmorClassTracker()


def test_nothing_known_before_any_roll(tracker):
    assert not tracker.discovered
    assert tracker.known_ac is None
    assert tracker.bracket_text() == "AC ?"


def test_adjacent_miss_and_hit_discover_the_armor_class(tracker):
    """A miss on 11 and a hit on 12 can only mean AC 12."""
    assert tracker.observe(11, hit=False) is False
    assert tracker.observe(12, hit=True) is True
    assert tracker.discovered
    assert tracker.known_ac == 12
    assert tracker.bracket_text() == "AC 12"


def test_bracket_narrows_until_discovery(tracker):
    tracker.observe(9, hit=False)
    assert tracker.bracket_text() == "AC ≥ 10"
    tracker.observe(16, hit=True)
    assert tracker.bracket_text() == "AC 10-16"
    tracker.observe(13, hit=True)
    tracker.observe(11, hit=False)
    assert tracker.bracket_text() == "AC 12-13"
    assert tracker.observe(12, hit=True) is True
    assert tracker.known_ac == 12


def test_only_the_discovering_call_reports_true(tracker):
    tracker.observe(14, hit=False)
    assert tracker.observe(15, hit=True)
    assert not tracker.observe(15, hit=True)
    assert not tracker.observe(3, hit=False)
    assert tracker.known_ac == 15


def test_natural_twenty_and_one_are_ignored(tracker):
    """Rolls decided by the die say nothing about the armor class."""
    critical = classify_attack(20, 5, 30)
    fumble = classify_attack(1, 5, 3)
    assert critical.hit and fumble.hit is False
    assert tracker.observe_roll(critical) is False
    assert tracker.observe_roll(fumble) is False
    assert tracker.bracket_text() == "AC ?"


def test_defend_bonus_is_removed_from_totals(tracker):
    """Against a defending target (+2) a miss on 13 means a base miss on 11."""
    miss = classify_attack(8, 5, 14)
    tracker.observe_roll(miss, defend_bonus=2)
    assert tracker.highest_miss_total == 11

    hit = classify_attack(7, 5, 12)
    assert tracker.observe_roll(hit) is True
    assert tracker.known_ac == 12


def test_already_known_armor_class(tracker):
    known = ArmorClassTracker(already_known=True)
    assert known.discovered
    assert known.already_known
    assert known.known_ac is None
    assert known.observe(12, hit=True) is False
    assert known.bracket_text() == "AC known"
