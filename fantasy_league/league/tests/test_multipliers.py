"""
Tests for captaincy and chip multipliers.
"""

from django.test import SimpleTestCase
from league.rules.multipliers import (
    BENCH_BOOST,
    NONE,
    TRIPLE_CAPTAIN,
    TWO_CAPTAINS,
    WILDCARD,
    apply_chip,
    played,
)

CAPTAIN, VICE = 1, 2
# 11 starters: captain 10 pts, vice 6 pts, nine others 2 pts each -> base 34
STARTER_POINTS = {CAPTAIN: 10, VICE: 6}
STARTER_POINTS.update({i: 2 for i in range(3, 12)})
BENCH_POINTS = {12: 1, 13: 0, 14: 3, 15: 2}
BASE = 34


def total(chip, captain_played=True, vice_played=True, captain_id=CAPTAIN, vice_id=VICE):
    return apply_chip(
        STARTER_POINTS, BENCH_POINTS, captain_id, vice_id, captain_played, vice_played, chip
    )


class ApplyChipTests(SimpleTestCase):
    """Tests for apply_chip"""

    def test_default_doubles_captain(self):
        result = total(NONE)
        self.assertEqual(result.total, BASE + 10)
        self.assertEqual(result.captain_bonus, 10)
        self.assertEqual(result.bench_points, 0)

    def test_default_falls_back_to_vice(self):
        self.assertEqual(total(NONE, captain_played=False).total, BASE + 6)

    def test_default_no_bonus_when_neither_played(self):
        self.assertEqual(total(NONE, captain_played=False, vice_played=False).total, BASE)

    def test_wildcard_scores_like_default(self):
        self.assertEqual(total(WILDCARD), total(NONE))
        self.assertEqual(total(WILDCARD, captain_played=False), total(NONE, captain_played=False))

    def test_triple_captain(self):
        """Captain counted three times"""
        result = total(TRIPLE_CAPTAIN)
        self.assertEqual(result.total, BASE + 20)
        self.assertEqual(result.captain_bonus, 20)

    def test_triple_captain_falls_back_to_doubled_vice(self):
        """Vice is doubled once, not tripled"""
        self.assertEqual(total(TRIPLE_CAPTAIN, captain_played=False).total, BASE + 6)

    def test_two_captains_doubles_both(self):
        self.assertEqual(total(TWO_CAPTAINS).total, BASE + 10 + 6)

    def test_two_captains_has_no_fallback(self):
        """A non-playing armband simply earns nothing"""
        self.assertEqual(total(TWO_CAPTAINS, captain_played=False).total, BASE + 6)
        self.assertEqual(total(TWO_CAPTAINS, vice_played=False).total, BASE + 10)
        self.assertEqual(total(TWO_CAPTAINS, captain_played=False, vice_played=False).total, BASE)

    def test_bench_boost_adds_bench(self):
        result = total(BENCH_BOOST)
        self.assertEqual(result.bench_points, 6)
        self.assertEqual(result.total, BASE + 6 + 10)

    def test_no_armbands(self):
        result = total(NONE, captain_played=False, vice_played=False, captain_id=None, vice_id=None)
        self.assertEqual(result.total, BASE)
        self.assertEqual(result.captain_bonus, 0)

    def test_negative_captain_points_are_doubled(self):
        points = dict(STARTER_POINTS)
        points[CAPTAIN] = -3
        result = apply_chip(points, BENCH_POINTS, CAPTAIN, VICE, True, True, NONE)
        self.assertEqual(result.total, BASE - 13 - 3)


class PlayedTests(SimpleTestCase):
    """Tests for played"""

    def test_requires_starter_with_minutes(self):
        starters = [1, 2, 3]
        minutes = {1: 90, 2: 0, 4: 90}
        self.assertTrue(played(1, starters, minutes))
        self.assertFalse(played(2, starters, minutes))
        self.assertFalse(played(3, starters, minutes))
        self.assertFalse(played(4, starters, minutes))
        self.assertFalse(played(None, starters, minutes))
