"""
Tests for chip availability, selection and usage recording.
"""

from django.test import TestCase
from league.exceptions import RosterValidationError
from league.models import ChipUsageRecord, Roster
from league.processing.chips import chip_availability, record_chip_usage, select_chip
from league.tests.processing.test_base import LeagueDataMixin


class ChipAvailabilityTests(LeagueDataMixin, TestCase):
    """Tests for chip_availability"""

    def test_all_available_initially(self):
        statuses = chip_availability(self.participant)

        self.assertEqual(
            [s.chip for s in statuses],
            ['bench_boost', 'triple_captain', 'two_captains', 'wildcard']
        )
        self.assertTrue(all(s.available for s in statuses))

    def test_used_chip_reports_round(self):
        ChipUsageRecord.objects.create(participant=self.participant, chip='triple_captain', round=self.round1)

        statuses = {s.chip: s for s in chip_availability(self.participant)}

        self.assertFalse(statuses['triple_captain'].available)
        self.assertEqual(statuses['triple_captain'].used_in_round, 1)
        self.assertIn('GW1', statuses['triple_captain'].reason)
        self.assertTrue(statuses['wildcard'].available)


class SelectChipTests(LeagueDataMixin, TestCase):
    """Tests for select_chip"""

    def setUp(self):
        super().setUp()
        self.make_roster(self.participant, self.round1)
        self.roster2 = self.make_roster(self.participant, self.round2)

    def test_selects_chip(self):
        roster = select_chip(self.participant, self.round2, 'bench_boost')

        self.assertEqual(roster.chip, 'bench_boost')
        self.assertEqual(Roster.objects.get(id=self.roster2.id).chip, 'bench_boost')

    def test_none_clears_selection(self):
        select_chip(self.participant, self.round2, 'bench_boost')
        select_chip(self.participant, self.round2, 'none')

        self.assertEqual(Roster.objects.get(id=self.roster2.id).chip, 'none')

    def test_chip_used_in_earlier_round_rejected(self):
        ChipUsageRecord.objects.create(participant=self.participant, chip='bench_boost', round=self.round1)

        with self.assertRaises(RosterValidationError) as ctx:
            select_chip(self.participant, self.round2, 'bench_boost')

        self.assertEqual(ctx.exception.codes, ['chip_used'])
        self.assertIn('GW1', str(ctx.exception))
        self.assertEqual(Roster.objects.get(id=self.roster2.id).chip, 'none')

    def test_chip_used_in_same_round_accepted(self):
        """Re-selecting after this round was settled is not a second use"""
        ChipUsageRecord.objects.create(participant=self.participant, chip='bench_boost', round=self.round2)

        roster = select_chip(self.participant, self.round2, 'bench_boost')

        self.assertEqual(roster.chip, 'bench_boost')

    def test_unknown_chip_rejected(self):
        with self.assertRaises(RosterValidationError) as ctx:
            select_chip(self.participant, self.round2, 'free_hit')

        self.assertEqual(ctx.exception.codes, ['invalid_chip'])


class RecordChipUsageTests(LeagueDataMixin, TestCase):
    """Tests for record_chip_usage"""

    def test_insert_if_absent(self):
        """Second call returns the first record untouched"""
        record, created = record_chip_usage(self.participant, 'wildcard', self.round1)
        again, created_again = record_chip_usage(self.participant, 'wildcard', self.round2)

        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(record.id, again.id)
        self.assertEqual(again.round, self.round1)
        self.assertEqual(ChipUsageRecord.objects.count(), 1)

    def test_none_never_recorded(self):
        self.assertEqual(record_chip_usage(self.participant, 'none', self.round1), (None, False))
        self.assertFalse(ChipUsageRecord.objects.exists())
