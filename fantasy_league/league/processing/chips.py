"""
Chip usage tracking.

Each chip can be consumed once per season. Selecting a chip only stores it on
the round's roster; the chip is consumed (ChipUsageRecord) when the round is
settled, so a participant can change their mind until then.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from django.db import IntegrityError, transaction

from league.exceptions import RosterValidationError, Violation
from league.models import Chip, ChipUsageRecord, Roster
from league.rules.multipliers import CHIPS, NONE

logger = logging.getLogger(__name__)


@dataclass
class ChipStatus:
    chip: str
    available: bool
    reason: str = ''
    used_in_round: Optional[int] = None


def chip_availability(participant) -> List[ChipStatus]:
    """
    Availability of every chip for a participant.

    Returns:
        One ChipStatus per chip, in the order of CHIPS
    """
    used = {
        record.chip: record
        for record in ChipUsageRecord.objects.filter(participant=participant).select_related('round')
    }

    statuses = []
    for chip in CHIPS:
        record = used.get(chip)
        if record is None:
            statuses.append(ChipStatus(chip=chip, available=True))
        else:
            statuses.append(ChipStatus(
                chip=chip,
                available=False,
                reason=f"Already used in {record.round}",
                used_in_round=record.round.number,
            ))
    return statuses


def select_chip(participant, round, chip: str) -> Roster:
    """
    Set the active chip on the participant's roster for a round.

    'none' clears the selection. A chip consumed in an earlier round is
    rejected; one consumed in this same round (a settled round being
    re-edited) is accepted.

    Raises:
        RosterValidationError: Unknown chip, no roster, or chip already used
    """
    if chip not in Chip.values:
        raise RosterValidationError([Violation('invalid_chip', f"Invalid chip: {chip}")])

    if chip != NONE:
        usage = ChipUsageRecord.objects.filter(participant=participant, chip=chip).select_related('round').first()
        if usage is not None and usage.round_id != round.id:
            raise RosterValidationError([Violation(
                'chip_used', f"{Chip(chip).label} chip has already been used in {usage.round}"
            )])

    roster = Roster.objects.filter(participant=participant, round=round).first()
    if roster is None:
        raise RosterValidationError([Violation('no_roster', f"No squad for {round}")])

    roster.chip = chip
    roster.save(update_fields=['chip', 'updated_at'])
    logger.info(f"{participant} selected chip {chip} for {round}")
    return roster


def record_chip_usage(participant, chip: str, round) -> Tuple[Optional[ChipUsageRecord], bool]:
    """
    Consume a chip. Insert-if-absent, so repeated settlement runs are no-ops.

    Returns:
        (record, created). 'none' is never recorded and returns (None, False).
    """
    if not chip or chip == NONE:
        return None, False

    try:
        with transaction.atomic():
            return ChipUsageRecord.objects.get_or_create(
                participant=participant,
                chip=chip,
                defaults={'round': round},
            )
    except IntegrityError:
        # Lost a race with another writer; the row exists now
        return ChipUsageRecord.objects.get(participant=participant, chip=chip), False
