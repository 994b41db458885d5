"""
League models module.

This __init__.py imports all models so code can use:
from league.models import Athlete, Roster, RoundPointTotal, etc.

Model organization:
- base.py: Core entities (Club, Athlete, Participant, Round, Fixture)
- stats.py: Per-fixture athlete statistics (MatchStatLine)
- squads.py: User-authored selections and the transfer ledger (Roster, RosterPick, FreeTransferBalance, TransferRecord)
- settlement.py: Settlement outputs and bookkeeping (RoundPointTotal, ChipUsageRecord, RoundSettlement)
"""

# Import base models
from .base import (
    Club,
    Athlete,
    Participant,
    Round,
    Fixture,
)

# Import stat models
from .stats import (
    MatchStatLine,
    STAT_FIELDS,
)

# Import squad models
from .squads import (
    Chip,
    Roster,
    RosterPick,
    FreeTransferBalance,
    TransferRecord,
    STARTER_SLOTS,
    BENCH_SLOTS,
)

# Import settlement models
from .settlement import (
    RoundPointTotal,
    ChipUsageRecord,
    RoundSettlement,
)

# Explicit exports for clarity
__all__ = [
    # Base models (base.py)
    'Club',
    'Athlete',
    'Participant',
    'Round',
    'Fixture',
    # Stat models (stats.py)
    'MatchStatLine',
    'STAT_FIELDS',
    # Squad models (squads.py)
    'Chip',
    'Roster',
    'RosterPick',
    'FreeTransferBalance',
    'TransferRecord',
    'STARTER_SLOTS',
    'BENCH_SLOTS',
    # Settlement models (settlement.py)
    'RoundPointTotal',
    'ChipUsageRecord',
    'RoundSettlement',
]
