"""
Management command to settle a round.

Runs the settlement flow: loads the round's stats, settles every roster
(auto-subs, scoring, chips, transfer penalties) and writes one total per
participant. Safe to re-run; totals are overwritten, never accumulated.

Usage:
    python manage.py settle_round --round 3

    # With Slack notification
    python manage.py settle_round --round 3 --notify
"""

from django.core.management.base import BaseCommand, CommandError
from league.flows.settle_round import settle_round_flow


class Command(BaseCommand):
    help = 'Settle all participant rosters for a round'

    def add_arguments(self, parser):
        parser.add_argument(
            '--round',
            type=int,
            required=True,
            help='Round number to settle'
        )
        parser.add_argument(
            '--notify',
            action='store_true',
            help='Send Slack notification on completion'
        )

    def handle(self, *args, **options):
        round_number = options['round']
        notify = options.get('notify', False)

        self.stdout.write(self.style.SUCCESS(f'\n{"="*80}'))
        self.stdout.write(self.style.SUCCESS(f'Round Settlement - Round {round_number}'))
        if notify:
            self.stdout.write(self.style.SUCCESS('Notifications: Enabled'))
        self.stdout.write(self.style.SUCCESS(f'{"="*80}\n'))

        summary = settle_round_flow(round_number=round_number, notify=notify)

        self.stdout.write(f'\nSummary:')
        self.stdout.write(f'  Participants:         {summary["participants_found"]}')
        self.stdout.write(f'  Settled:              {summary["participants_settled"]}')
        self.stdout.write(f'  Failed:               {summary["participants_failed"]}')
        self.stdout.write(f'  Duration:             {summary.get("duration_seconds", 0):.1f}s')
        self.stdout.write('')

        for failure in summary['failures']:
            self.stdout.write(self.style.WARNING(
                f'  Roster {failure["roster_id"]} ({failure["status"]}): {failure["error"]}'
            ))

        if summary['status'] == 'failed':
            raise CommandError(f'Settlement failed: {summary.get("error", "unknown error")}')

        if summary['participants_failed']:
            self.stdout.write(self.style.WARNING('⚠️  Status: COMPLETE WITH FAILURES'))
        else:
            self.stdout.write(self.style.SUCCESS('✅ Status: COMPLETE'))
