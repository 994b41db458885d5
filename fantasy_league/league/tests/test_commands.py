"""
Unit tests for the open_round and settle_round management commands.

settle_round is tested with the flow mocked; the flow itself is covered in
processing/test_flows.py.
"""

from unittest import mock
from io import StringIO
from django.test import TestCase
from django.core.management import call_command
from django.core.management.base import CommandError
from league.models import FreeTransferBalance, Participant, Roster
from league.tests.processing.test_base import LeagueDataMixin


def summary(**overrides):
    result = {
        'round_number': 1,
        'participants_found': 2,
        'participants_settled': 2,
        'participants_failed': 0,
        'failures': [],
        'status': 'complete',
        'duration_seconds': 0.4,
    }
    result.update(overrides)
    return result


class OpenRoundCommandTests(LeagueDataMixin, TestCase):
    """Tests for open_round command"""

    def test_creates_missing_rosters(self):
        """Existing rosters are kept; everyone else gets one carried forward"""
        self.make_roster(self.participant, self.round1)
        bob = Participant.objects.create(name='bob')
        out = StringIO()

        call_command('open_round', '--round', '2', stdout=out)

        alice_roster = Roster.objects.get(participant=self.participant, round=self.round2)
        self.assertEqual(alice_roster.picks.count(), 15)
        self.assertEqual(alice_roster.free_transfers_available, 2)

        bob_roster = Roster.objects.get(participant=bob, round=self.round2)
        self.assertEqual(bob_roster.picks.count(), 0)
        self.assertEqual(bob_roster.free_transfers_available, 1)
        self.assertTrue(FreeTransferBalance.objects.filter(participant=bob).exists())

        self.assertIn('2 rosters created, 0 already existed', out.getvalue())

    def test_rerun_leaves_existing_rosters(self):
        call_command('open_round', '--round', '1', stdout=StringIO())
        out = StringIO()

        call_command('open_round', '--round', '1', stdout=out)

        self.assertEqual(Roster.objects.filter(round=self.round1).count(), 1)
        self.assertIn('0 rosters created, 1 already existed', out.getvalue())

    def test_unknown_round(self):
        with self.assertRaises(CommandError):
            call_command('open_round', '--round', '9', stdout=StringIO())


class SettleRoundCommandTests(TestCase):
    """Tests for settle_round command"""

    @mock.patch('league.management.commands.settle_round.settle_round_flow')
    def test_runs_flow_and_prints_summary(self, mock_flow):
        mock_flow.return_value = summary()
        out = StringIO()

        call_command('settle_round', '--round', '1', stdout=out)

        mock_flow.assert_called_once_with(round_number=1, notify=False)
        output = out.getvalue()
        self.assertIn('Round Settlement - Round 1', output)
        self.assertIn('Status: COMPLETE', output)

    @mock.patch('league.management.commands.settle_round.settle_round_flow')
    def test_notify_flag(self, mock_flow):
        mock_flow.return_value = summary()

        call_command('settle_round', '--round', '3', '--notify', stdout=StringIO())

        mock_flow.assert_called_once_with(round_number=3, notify=True)

    @mock.patch('league.management.commands.settle_round.settle_round_flow')
    def test_lists_failures(self, mock_flow):
        mock_flow.return_value = summary(
            participants_settled=1,
            participants_failed=1,
            failures=[{'participant_id': None, 'roster_id': 8, 'status': 'skipped', 'error': 'Roster 8 has 14 picks'}],
        )
        out = StringIO()

        call_command('settle_round', '--round', '1', stdout=out)

        output = out.getvalue()
        self.assertIn('Roster 8 (skipped): Roster 8 has 14 picks', output)
        self.assertIn('COMPLETE WITH FAILURES', output)

    @mock.patch('league.management.commands.settle_round.settle_round_flow')
    def test_failed_run_raises(self, mock_flow):
        mock_flow.return_value = summary(status='failed', error='Round matching query does not exist.')

        with self.assertRaises(CommandError):
            call_command('settle_round', '--round', '1', stdout=StringIO())
