"""
Exception taxonomy for the rules engine.

- RosterValidationError: a proposed squad, lineup or chip breaks the rules.
  Raised at selection time, nothing is persisted.
- DataIntegrityError: stored data the engine depends on is missing or
  malformed. Settlement skips the affected participant and reports it.
- InvariantViolation: auto-substitution produced an invalid lineup from a
  valid one. Treated as a bug signal; the prior round total is kept.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Violation:
    """A single broken rule, e.g. Violation('club_limit', 'Too many from club 7: 4/3')"""
    code: str
    message: str

    def __str__(self):
        return self.message


class LeagueError(Exception):
    """Base class for rules engine errors"""
    pass


class RosterValidationError(LeagueError):
    """Proposed squad/lineup/chip rejected at selection time"""

    def __init__(self, violations: List[Violation]):
        self.violations = list(violations)
        message = '; '.join(v.message for v in self.violations) or 'Invalid selection'
        super().__init__(message)

    @property
    def codes(self):
        return [v.code for v in self.violations]


class DataIntegrityError(LeagueError):
    """Referenced data is missing or malformed (skip participant, keep going)"""
    pass


class InvariantViolation(LeagueError):
    """Auto-substitution broke a lineup predicate (should be unreachable)"""
    pass
