"""
Management command to open a round for selection.

Creates each participant's roster for the round, carrying over their
previous squad and lineup and snapshotting the free transfers they have
for the round. Participants who already have a roster are left alone.

Usage:
    python manage.py open_round --round 4
"""

from django.core.management.base import BaseCommand, CommandError
from league.models import Participant, Roster, Round
from league.processing.selection import open_round_roster


class Command(BaseCommand):
    help = "Carry every participant's roster into a round"

    def add_arguments(self, parser):
        parser.add_argument(
            '--round',
            type=int,
            required=True,
            help='Round number to open'
        )

    def handle(self, *args, **options):
        round_number = options['round']

        try:
            round_obj = Round.objects.get(number=round_number)
        except Round.DoesNotExist:
            raise CommandError(f'Round {round_number} does not exist')

        existing = set(Roster.objects.filter(round=round_obj).values_list('participant_id', flat=True))
        created = 0

        for participant in Participant.objects.order_by('name'):
            if participant.id in existing:
                continue
            roster = open_round_roster(participant, round_obj)
            created += 1
            self.stdout.write(
                f'  {participant.name}: {roster.picks.count()} picks, '
                f'{roster.free_transfers_available} free transfers'
            )

        self.stdout.write(self.style.SUCCESS(
            f'✅ Opened {round_obj}: {created} rosters created, {len(existing)} already existed'
        ))
