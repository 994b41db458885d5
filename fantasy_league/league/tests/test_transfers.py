"""
Tests for squad validation and the free-transfer ledger.
"""

from decimal import Decimal
from django.test import SimpleTestCase
from league.rules.transfers import (
    AthleteInfo,
    compute_transfers,
    count_transfers,
    lineup_violations,
    next_free_transfers,
    pair_transfers,
    squad_violations,
    transfer_penalty,
    validate_squad,
)

POSITION_OF = {1: 'GK', 2: 'GK'}
POSITION_OF.update({i: 'DEF' for i in range(3, 8)})
POSITION_OF.update({i: 'MID' for i in range(8, 13)})
POSITION_OF.update({i: 'FWD' for i in range(13, 16)})
PRICE_OF = {'GK': Decimal('4.5'), 'DEF': Decimal('5.0'), 'MID': Decimal('7.0'), 'FWD': Decimal('8.0')}

# Squad 1-15 from five clubs of three; spares 16-20 from club 9
CATALOGUE = {
    i: AthleteInfo(id=i, position=pos, club_id=(i - 1) // 3, price=PRICE_OF[pos])
    for i, pos in POSITION_OF.items()
}
for spare_id, pos in [(16, 'GK'), (17, 'DEF'), (18, 'MID'), (19, 'FWD'), (20, 'FWD')]:
    CATALOGUE[spare_id] = AthleteInfo(id=spare_id, position=pos, club_id=9, price=Decimal('5.0'))

SQUAD = list(range(1, 16))
POSITIONS = {i: info.position for i, info in CATALOGUE.items()}


class SquadValidationTests(SimpleTestCase):
    """Tests for squad_violations and validate_squad"""

    def test_valid_squad(self):
        self.assertEqual(squad_violations(SQUAD, CATALOGUE), [])
        self.assertIsNone(validate_squad(SQUAD, CATALOGUE))

    def test_wrong_size(self):
        codes = [v.code for v in squad_violations(SQUAD[:14], CATALOGUE)]
        self.assertEqual(codes[0], 'squad_size')

    def test_duplicates(self):
        candidate = SQUAD[:14] + [1]
        codes = [v.code for v in squad_violations(candidate, CATALOGUE)]
        self.assertIn('duplicate_athletes', codes)

    def test_unknown_athlete(self):
        candidate = SQUAD[:14] + [999]
        violations = squad_violations(candidate, CATALOGUE)
        self.assertEqual(violations[0].code, 'unknown_athletes')
        self.assertIn('999', violations[0].message)

    def test_position_counts(self):
        """Swapping a keeper for a forward breaks both counts"""
        candidate = [i for i in SQUAD if i != 2] + [19]
        violations = squad_violations(candidate, CATALOGUE)
        self.assertEqual([v.code for v in violations], ['position_count', 'position_count'])
        self.assertEqual(violations[0].message, 'Invalid GK count: 1/2')
        self.assertEqual(violations[1].message, 'Invalid FWD count: 4/3')

    def test_club_limit(self):
        catalogue = dict(CATALOGUE)
        catalogue[4] = AthleteInfo(id=4, position='DEF', club_id=0, price=Decimal('5.0'))
        violation = validate_squad(SQUAD, catalogue)
        self.assertEqual(violation.code, 'club_limit')
        self.assertEqual(violation.message, 'Too many from club 0: 4/3')

    def test_each_club_over_limit_reported(self):
        """Every offending club gets its own violation naming the club"""
        catalogue = dict(CATALOGUE)
        catalogue[4] = AthleteInfo(id=4, position='DEF', club_id=0, price=Decimal('5.0'))
        catalogue[10] = AthleteInfo(id=10, position='MID', club_id=2, price=Decimal('7.0'))
        messages = [v.message for v in squad_violations(SQUAD, catalogue) if v.code == 'club_limit']
        self.assertEqual(messages, ['Too many from club 0: 4/3', 'Too many from club 2: 4/3'])

    def test_budget(self):
        catalogue = dict(CATALOGUE)
        catalogue[13] = AthleteInfo(id=13, position='FWD', club_id=4, price=Decimal('15.1'))
        violation = validate_squad(SQUAD, catalogue)
        self.assertEqual(violation.code, 'budget')
        self.assertEqual(violation.message, 'Budget exceeded: 100.1 / 100.0')

    def test_budget_exactly_at_ceiling_is_allowed(self):
        catalogue = dict(CATALOGUE)
        catalogue[13] = AthleteInfo(id=13, position='FWD', club_id=4, price=Decimal('15.0'))
        self.assertIsNone(validate_squad(SQUAD, catalogue))

    def test_all_violations_reported_in_order(self):
        """Position, club and budget problems are all listed, first one first"""
        catalogue = dict(CATALOGUE)
        catalogue[1] = AthleteInfo(id=1, position='FWD', club_id=1, price=Decimal('40.0'))
        codes = [v.code for v in squad_violations(SQUAD, catalogue)]
        self.assertEqual(codes, ['position_count', 'position_count', 'club_limit', 'budget'])
        self.assertEqual(validate_squad(SQUAD, catalogue).code, 'position_count')


class LineupValidationTests(SimpleTestCase):
    """Tests for lineup_violations"""

    STARTERS = [1, 3, 4, 5, 6, 8, 9, 10, 11, 13, 14]
    BENCH = [2, 7, 12, 15]

    def codes(self, starters=None, bench=None, captain=8, vice=13):
        return [
            v.code for v in lineup_violations(
                starters or self.STARTERS, bench or self.BENCH, captain, vice, SQUAD, POSITIONS
            )
        ]

    def test_valid_lineup(self):
        self.assertEqual(self.codes(), [])

    def test_formation(self):
        starters = [1, 3, 4, 5, 6, 7, 8, 9, 10, 11, 13]
        bench = [2, 12, 14, 15]
        self.assertEqual(self.codes(starters, bench), ['formation'])

    def test_two_keepers_on_bench(self):
        starters = [3, 4, 5, 6, 7, 8, 9, 10, 11, 13, 14]
        bench = [1, 2, 12, 15]
        self.assertEqual(self.codes(starters, bench), ['formation', 'bench_goalkeeper'])

    def test_armbands(self):
        self.assertEqual(self.codes(captain=8, vice=8), ['armband_duplicate'])
        self.assertEqual(self.codes(captain=None), ['armband_missing'])
        self.assertEqual(self.codes(captain=12), ['armband_not_starter'])

    def test_athletes_must_match_squad(self):
        starters = self.STARTERS[:-1] + [19]
        self.assertIn('lineup_athletes', self.codes(starters))


class TransferLedgerTests(SimpleTestCase):
    """Tests for transfer counting, penalties and free-transfer banking"""

    def test_three_transfers_one_free(self):
        """3 changes with 1 free: 3 made, 8 point hit, 1 free next round"""
        candidate = [i for i in SQUAD if i not in (3, 8, 13)] + [17, 18, 19]
        outcome = compute_transfers(SQUAD, candidate, current_free=1)
        self.assertEqual(outcome.transfers_made, 3)
        self.assertEqual(outcome.point_penalty, 8)
        self.assertEqual(outcome.next_free_transfers, 1)

    def test_wildcard_waives_penalty_only(self):
        candidate = [i for i in SQUAD if i not in (3, 8, 13)] + [17, 18, 19]
        outcome = compute_transfers(SQUAD, candidate, current_free=1, chip='wildcard')
        self.assertEqual(outcome.point_penalty, 0)
        self.assertEqual(outcome.next_free_transfers, 1)

    def test_other_chips_do_not_waive_penalty(self):
        candidate = [i for i in SQUAD if i not in (3, 8)] + [17, 18]
        for chip in ('none', 'bench_boost', 'triple_captain', 'two_captains'):
            self.assertEqual(compute_transfers(SQUAD, candidate, 1, chip).point_penalty, 4)

    def test_unused_transfer_is_banked(self):
        outcome = compute_transfers(SQUAD, list(reversed(SQUAD)), current_free=2)
        self.assertEqual(outcome.transfers_made, 0)
        self.assertEqual(outcome.next_free_transfers, 3)

    def test_new_entrant_has_no_transfers(self):
        outcome = compute_transfers([], SQUAD, current_free=1)
        self.assertEqual((outcome.transfers_made, outcome.point_penalty, outcome.next_free_transfers), (0, 0, 2))

    def test_outgoing_and_incoming_in_squad_order(self):
        candidate = [17 if i == 5 else 18 if i == 9 else i for i in SQUAD]
        outcome = compute_transfers(SQUAD, candidate, current_free=2)
        self.assertEqual(outcome.outgoing, (5, 9))
        self.assertEqual(outcome.incoming, (17, 18))
        self.assertEqual(outcome.point_penalty, 0)

    def test_count_uses_larger_side(self):
        self.assertEqual(count_transfers([1, 2, 3], [1, 4, 5, 6]), 3)

    def test_balance_always_within_bounds(self):
        for current in range(1, 6):
            for made in range(0, 16):
                balance = next_free_transfers(current, made)
                self.assertGreaterEqual(balance, 1)
                self.assertLessEqual(balance, 5)

    def test_balance_caps_at_five(self):
        self.assertEqual(next_free_transfers(5, 0), 5)
        self.assertEqual(next_free_transfers(4, 0), 5)

    def test_penalty_only_for_extra_transfers(self):
        self.assertEqual(transfer_penalty(2, 2), 0)
        self.assertEqual(transfer_penalty(5, 2), 12)
        self.assertEqual(transfer_penalty(5, 2, 'wildcard'), 0)


class PairTransfersTests(SimpleTestCase):
    """Tests for pair_transfers"""

    def test_pairs_by_position(self):
        pairs = pair_transfers([3, 13], [19, 17], POSITIONS)
        self.assertEqual(pairs, [(3, 17), (13, 19)])

    def test_unmatched_paired_in_order(self):
        pairs = pair_transfers([3, 8], [19, 17], POSITIONS)
        self.assertEqual(pairs, [(3, 17), (8, 19)])
