"""
Base models shared across the league.

Clubs, athletes, participants and the round/fixture calendar. These are
maintained by external admin actions; the rules engine only reads them.
"""

from django.db import models
from django.core.validators import MinValueValidator


class Club(models.Model):
    """
    Real-world club - an athlete belongs to exactly one
    """
    name = models.CharField(max_length=100, unique=True)
    short_name = models.CharField(max_length=10, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Athlete(models.Model):
    """
    A real athlete that can be picked into a squad.

    Position is fixed for the season; price and status change through admin edits.
    """

    class Position(models.TextChoices):
        GOALKEEPER = 'GK', 'Goalkeeper'
        DEFENDER = 'DEF', 'Defender'
        MIDFIELDER = 'MID', 'Midfielder'
        FORWARD = 'FWD', 'Forward'

    class Status(models.TextChoices):
        AVAILABLE = 'available', 'Available'
        DOUBTFUL = 'doubtful', 'Doubtful'
        INJURED = 'injured', 'Injured'
        SUSPENDED = 'suspended', 'Suspended'
        UNAVAILABLE = 'unavailable', 'Unavailable'

    name = models.CharField(max_length=200)
    club = models.ForeignKey(Club, on_delete=models.PROTECT, related_name='athletes')
    position = models.CharField(max_length=3, choices=Position.choices)
    price = models.DecimalField(
        max_digits=4,
        decimal_places=1,
        validators=[MinValueValidator(0)],
        help_text="Price in millions (e.g., 7.5)"
    )
    status = models.CharField(max_length=12, choices=Status.choices, default=Status.AVAILABLE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['club__name', 'position', '-price']
        indexes = [
            models.Index(fields=['position'], name='league_athl_positio_5c1a2e_idx'),
            models.Index(fields=['club', 'position'], name='league_athl_club_id_8f3b7d_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.club.short_name or self.club.name}, {self.position})"


class Participant(models.Model):
    """
    A competition entrant. Authentication lives outside the rules engine,
    so this only carries identity.
    """
    name = models.CharField(max_length=150, unique=True)
    email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Round(models.Model):
    """
    A gameweek: one scoring period containing a batch of fixtures
    """
    number = models.PositiveIntegerField(unique=True)
    name = models.CharField(max_length=50, blank=True, help_text="e.g., 'GW1'")
    deadline = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['number']

    def __str__(self):
        return self.name or f"GW{self.number}"


class Fixture(models.Model):
    """
    A real-world match inside a round
    """
    round = models.ForeignKey(Round, on_delete=models.CASCADE, related_name='fixtures')
    home_club = models.ForeignKey(Club, on_delete=models.PROTECT, related_name='home_fixtures')
    away_club = models.ForeignKey(Club, on_delete=models.PROTECT, related_name='away_fixtures')
    kickoff = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['round__number', 'kickoff', 'id']

    def __str__(self):
        return f"{self.round}: {self.home_club} v {self.away_club}"
