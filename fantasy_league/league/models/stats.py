"""
Match statistics entered per athlete per fixture.

Rows are created by external data entry and may be overwritten until the
round is settled. Settlement aggregates them per athlete for the round.
"""

from django.db import models
from django.core.validators import MaxValueValidator
from .base import Athlete, Fixture

STAT_FIELDS = [
    'minutes',
    'goals',
    'assists',
    'clean_sheet',
    'goals_conceded',
    'penalties_saved',
    'penalties_missed',
    'yellow_cards',
    'red_cards',
    'own_goals',
    'man_of_the_match',
]


class MatchStatLine(models.Model):
    """
    One athlete's statistics in one fixture
    """
    athlete = models.ForeignKey(Athlete, on_delete=models.CASCADE, related_name='stat_lines')
    fixture = models.ForeignKey(Fixture, on_delete=models.CASCADE, related_name='stat_lines')

    minutes = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(130)])
    goals = models.PositiveSmallIntegerField(default=0)
    assists = models.PositiveSmallIntegerField(default=0)
    clean_sheet = models.BooleanField(default=False)
    goals_conceded = models.PositiveSmallIntegerField(default=0)
    penalties_saved = models.PositiveSmallIntegerField(default=0)
    penalties_missed = models.PositiveSmallIntegerField(default=0)
    yellow_cards = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(2)])
    red_cards = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(1)])
    own_goals = models.PositiveSmallIntegerField(default=0)
    man_of_the_match = models.BooleanField(default=False)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['fixture', 'athlete']
        unique_together = [['athlete', 'fixture']]
        indexes = [
            models.Index(fields=['fixture', 'athlete'], name='league_matc_fixture_2d4e61_idx'),
        ]
        verbose_name = 'Match Stat Line'
        verbose_name_plural = 'Match Stat Lines'

    def __str__(self):
        return f"{self.athlete.name} - {self.fixture} ({self.minutes}')"
