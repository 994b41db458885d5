"""
Settlement models.

Outputs of the round settlement pipeline and its bookkeeping:
- RoundPointTotal: the authoritative points for a participant in a round
- ChipUsageRecord: append-only ledger of consumed chips
- RoundSettlement: state machine record for a round's settlement run
"""

from django.db import models
from .base import Participant, Round
from .squads import Chip


class RoundPointTotal(models.Model):
    """
    Points for one participant in one round.

    Upserted by settlement; re-running settlement overwrites rather than
    accumulates. Components are kept alongside the total for display.
    """
    participant = models.ForeignKey(Participant, on_delete=models.CASCADE, related_name='round_totals')
    round = models.ForeignKey(Round, on_delete=models.CASCADE, related_name='point_totals')
    points = models.IntegerField(help_text="Final points after chip effects and transfer penalty")
    base_points = models.IntegerField(default=0, help_text="Sum over the final starting eleven")
    captain_bonus = models.IntegerField(default=0)
    bench_points = models.IntegerField(default=0, help_text="Bench points counted by the bench boost chip")
    transfer_penalty = models.IntegerField(default=0)
    chip = models.CharField(max_length=20, choices=Chip.choices, default=Chip.NONE)
    settled_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['round__number', '-points']
        unique_together = [['participant', 'round']]
        indexes = [
            models.Index(fields=['round', '-points'], name='league_roun_round_i_b81d4a_idx'),
        ]
        verbose_name = 'Round Point Total'
        verbose_name_plural = 'Round Point Totals'

    def __str__(self):
        return f"{self.participant} - {self.round}: {self.points} pts"


class ChipUsageRecord(models.Model):
    """
    A chip consumed by a participant. One row per (participant, chip), never updated.
    """
    participant = models.ForeignKey(Participant, on_delete=models.CASCADE, related_name='used_chips')
    chip = models.CharField(max_length=20, choices=Chip.choices)
    round = models.ForeignKey(Round, on_delete=models.CASCADE, related_name='chip_usages')
    used_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['participant', 'round__number']
        unique_together = [['participant', 'chip']]
        verbose_name = 'Chip Usage Record'
        verbose_name_plural = 'Chip Usage Records'

    def __str__(self):
        return f"{self.participant} used {self.get_chip_display()} in {self.round}"


class RoundSettlement(models.Model):
    """
    Tracks a round's settlement run.

    NOT_STARTED -> STATS_LOADED -> SETTLING -> FINALIZED

    Settlement is re-runnable; a new run starts back at STATS_LOADED.
    Per-participant failures are recorded in `failures` and do not stop the run.
    """

    class State(models.TextChoices):
        NOT_STARTED = 'not_started', 'Not Started'
        STATS_LOADED = 'stats_loaded', 'Stats Loaded'
        SETTLING = 'settling', 'Settling'
        FINALIZED = 'finalized', 'Finalized'

    round = models.OneToOneField(Round, on_delete=models.CASCADE, related_name='settlement')
    state = models.CharField(max_length=20, choices=State.choices, default=State.NOT_STARTED)
    started_at = models.DateTimeField(null=True, blank=True)
    stats_loaded_at = models.DateTimeField(null=True, blank=True)
    finished_at = models.DateTimeField(null=True, blank=True)
    runs = models.PositiveIntegerField(default=0, help_text="Number of settlement runs for this round")
    participants_settled = models.PositiveIntegerField(default=0)
    participants_failed = models.PositiveIntegerField(default=0)

    # Example structure:
    # [
    #     {'participant_id': 4, 'roster_id': 17, 'status': 'skipped', 'error': 'Roster has 14 picks'},
    # ]
    failures = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ['round__number']
        verbose_name = 'Round Settlement'
        verbose_name_plural = 'Round Settlements'

    def __str__(self):
        return f"{self.round} - {self.get_state_display()}"

    @property
    def is_finalized(self):
        return self.state == self.State.FINALIZED

    def mark_stats_loaded(self, timestamp=None):
        """Start a run: stats are in memory, participants not yet settled"""
        from django.utils import timezone as django_timezone

        if timestamp is None:
            timestamp = django_timezone.now()

        self.state = self.State.STATS_LOADED
        self.started_at = timestamp
        self.stats_loaded_at = timestamp
        self.finished_at = None
        self.runs += 1
        self.participants_settled = 0
        self.participants_failed = 0
        self.failures = []
        self.save()

    def mark_settling(self):
        self.state = self.State.SETTLING
        self.save(update_fields=['state'])

    def record_result(self, result):
        """Count one participant's settlement result"""
        if result['status'] == 'success':
            self.participants_settled += 1
        else:
            self.participants_failed += 1
            self.failures.append({
                'participant_id': result.get('participant_id'),
                'roster_id': result.get('roster_id'),
                'status': result['status'],
                'error': result.get('error', ''),
            })
        self.save(update_fields=['participants_settled', 'participants_failed', 'failures'])

    def mark_finalized(self, timestamp=None):
        from django.utils import timezone as django_timezone

        self.state = self.State.FINALIZED
        self.finished_at = timestamp or django_timezone.now()
        self.save(update_fields=['state', 'finished_at'])
