"""
Participant squad models.

These models represent user-authored selections (squad, lineup, chip) and
the transfer ledger that goes with them. Settlement never edits the
authored slot/armband fields; the lineup it repairs is written to the
auto_* fields of RosterPick instead.
"""

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from .base import Participant, Round, Athlete

STARTER_SLOTS = range(1, 12)
BENCH_SLOTS = range(12, 16)


class Chip(models.TextChoices):
    NONE = 'none', 'None'
    BENCH_BOOST = 'bench_boost', 'Bench Boost'
    TRIPLE_CAPTAIN = 'triple_captain', 'Triple Captain'
    TWO_CAPTAINS = 'two_captains', 'Two Captains'
    WILDCARD = 'wildcard', 'Wildcard'


class Roster(models.Model):
    """
    A participant's 15 athletes for one round.

    Transfer fields are filled when the squad is saved:
    - free_transfers_available: balance at the start of this round
    - transfers_made: changes versus the previous round's squad
    Settlement looks these up instead of re-diffing squads.
    """
    participant = models.ForeignKey(Participant, on_delete=models.CASCADE, related_name='rosters')
    round = models.ForeignKey(Round, on_delete=models.CASCADE, related_name='rosters')
    chip = models.CharField(max_length=20, choices=Chip.choices, default=Chip.NONE)
    transfers_made = models.PositiveSmallIntegerField(default=0)
    free_transfers_available = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['round__number', 'participant__name']
        unique_together = [['participant', 'round']]
        indexes = [
            models.Index(fields=['round', 'participant'], name='league_rost_round_i_6a9c0b_idx'),
        ]

    def __str__(self):
        return f"{self.participant} - {self.round}"

    def ordered_picks(self):
        return list(self.picks.select_related('athlete').order_by('slot'))

    @property
    def athlete_ids(self):
        return [pick.athlete_id for pick in self.ordered_picks()]

    def lineup(self, resolved=False):
        """
        Starters, bench and armbands as athlete ids.

        Args:
            resolved: Use the lineup repaired by settlement when one exists

        Returns:
            dict with 'starters', 'bench', 'captain_id', 'vice_id'
        """
        picks = self.ordered_picks()
        use_auto = resolved and picks and all(p.auto_slot for p in picks)
        if use_auto:
            picks = sorted(picks, key=lambda p: p.auto_slot)

        def slot_of(pick):
            return pick.auto_slot if use_auto else pick.slot

        captain = next((p for p in picks if (p.auto_captain if use_auto else p.is_captain)), None)
        vice = next((p for p in picks if (p.auto_vice if use_auto else p.is_vice)), None)
        return {
            'starters': [p.athlete_id for p in picks if slot_of(p) in STARTER_SLOTS],
            'bench': [p.athlete_id for p in picks if slot_of(p) in BENCH_SLOTS],
            'captain_id': captain.athlete_id if captain else None,
            'vice_id': vice.athlete_id if vice else None,
        }


class RosterPick(models.Model):
    """
    One athlete in a roster.

    Slots 1-11 are the starters in order, 12-15 the bench in order
    (slot 12 is bench position 1).
    """
    roster = models.ForeignKey(Roster, on_delete=models.CASCADE, related_name='picks')
    athlete = models.ForeignKey(Athlete, on_delete=models.PROTECT, related_name='picks')
    slot = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(15)])
    is_captain = models.BooleanField(default=False)
    is_vice = models.BooleanField(default=False)

    # Written by settlement after auto-substitution
    auto_slot = models.PositiveSmallIntegerField(null=True, blank=True)
    auto_captain = models.BooleanField(default=False)
    auto_vice = models.BooleanField(default=False)

    class Meta:
        ordering = ['roster', 'slot']
        unique_together = [['roster', 'athlete'], ['roster', 'slot']]
        verbose_name = 'Roster Pick'
        verbose_name_plural = 'Roster Picks'

    def __str__(self):
        role = 'C' if self.is_captain else 'VC' if self.is_vice else ''
        return f"{self.roster}: #{self.slot} {self.athlete.name} {role}".rstrip()


class FreeTransferBalance(models.Model):
    """
    Banked free transfers for a participant's next round, always in [1, 5]
    """
    participant = models.OneToOneField(
        Participant,
        on_delete=models.CASCADE,
        related_name='free_transfer_balance'
    )
    free_transfers = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Free Transfer Balance'
        verbose_name_plural = 'Free Transfer Balances'

    def __str__(self):
        return f"{self.participant}: {self.free_transfers} free"


class TransferRecord(models.Model):
    """
    Audit row for one athlete swapped out of a squad during a round.
    Rebuilt whenever the squad for the round is saved again.
    """
    participant = models.ForeignKey(Participant, on_delete=models.CASCADE, related_name='transfers')
    round = models.ForeignKey(Round, on_delete=models.CASCADE, related_name='transfers')
    athlete_out = models.ForeignKey(Athlete, on_delete=models.PROTECT, related_name='transfers_out')
    athlete_in = models.ForeignKey(Athlete, on_delete=models.PROTECT, related_name='transfers_in')
    price_diff = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['round__number', 'participant', 'id']
        indexes = [
            models.Index(fields=['participant', 'round'], name='league_tran_partici_3e7f52_idx'),
        ]

    def __str__(self):
        return f"{self.participant} {self.round}: {self.athlete_out.name} -> {self.athlete_in.name}"
