"""
Selection-time operations: rosters, squad saves and lineup saves.

Every write here happens before a round's deadline and is validated with the
pure rules in league.rules.transfers. Nothing is persisted when validation
fails; RosterValidationError carries every broken rule.

Free transfers:
    Roster.free_transfers_available is the balance at the start of the round,
    derived from the previous roster when the round's roster is opened.
    Roster.transfers_made is recomputed from the previous roster on every
    squad save, so saving twice in a round never double counts.
    FreeTransferBalance holds the projected balance for the next round.
"""

from typing import Dict, Iterable, Optional, Sequence
import logging

from django.db import transaction

from config.rules import FANTASY_RULES
from league.exceptions import RosterValidationError, Violation
from league.models import (
    Athlete,
    FreeTransferBalance,
    Roster,
    RosterPick,
    TransferRecord,
)
from league.rules import POSITIONS
from league.rules.transfers import (
    AthleteInfo,
    TransferOutcome,
    compute_transfers,
    lineup_violations,
    next_free_transfers,
    pair_transfers,
    squad_violations,
)

logger = logging.getLogger(__name__)

TRANSFERS = FANTASY_RULES['transfers']


def load_catalogue(athlete_ids: Optional[Iterable[int]] = None) -> Dict[int, AthleteInfo]:
    """Athlete id -> AthleteInfo, limited to the given ids when provided"""
    queryset = Athlete.objects.all()
    if athlete_ids is not None:
        queryset = queryset.filter(id__in=list(athlete_ids))
    return {
        athlete.id: AthleteInfo(id=athlete.id, position=athlete.position, club_id=athlete.club_id, price=athlete.price)
        for athlete in queryset
    }


def previous_roster(participant, round) -> Optional[Roster]:
    """The participant's most recent roster before this round"""
    return (
        Roster.objects
        .filter(participant=participant, round__number__lt=round.number)
        .order_by('-round__number')
        .first()
    )


def _upsert_balance(participant, free_transfers: int):
    FreeTransferBalance.objects.update_or_create(
        participant=participant,
        defaults={'free_transfers': free_transfers},
    )


def _write_picks(roster, starters, bench, captain_id=None, vice_id=None):
    """Replace a roster's picks with the given lineup"""
    roster.picks.all().delete()
    ordered = list(starters) + list(bench)
    RosterPick.objects.bulk_create([
        RosterPick(
            roster=roster,
            athlete_id=athlete_id,
            slot=slot,
            is_captain=athlete_id == captain_id,
            is_vice=athlete_id == vice_id,
        )
        for slot, athlete_id in enumerate(ordered, start=1)
    ])


def default_lineup(athlete_ids: Sequence[int], positions: Dict[int, str]):
    """
    Starting lineup for a brand new squad.

    Takes the first athletes of each position in squad order up to the
    default formation (1-4-4-2); the rest go to the bench, one per position.

    Returns:
        (starters, bench) as lists of athlete ids
    """
    wanted = dict(FANTASY_RULES['lineup']['default_starters'])
    starters, bench = [], []
    for pos in POSITIONS:
        for athlete_id in athlete_ids:
            if positions.get(athlete_id) != pos:
                continue
            if wanted[pos] > 0:
                starters.append(athlete_id)
                wanted[pos] -= 1
            else:
                bench.append(athlete_id)
    return starters, bench


def open_round_roster(participant, round) -> Roster:
    """
    Get or create the participant's roster for a round.

    A new roster carries over the previous roster's picks and armbands and
    snapshots the free transfers available this round. A participant with no
    earlier roster starts with the minimum balance and an empty squad.
    """
    roster = Roster.objects.filter(participant=participant, round=round).first()
    if roster is not None:
        return roster

    previous = previous_roster(participant, round)
    if previous is not None:
        free = next_free_transfers(previous.free_transfers_available, previous.transfers_made)
    else:
        free = TRANSFERS['free_transfers_min']

    with transaction.atomic():
        roster = Roster.objects.create(
            participant=participant,
            round=round,
            free_transfers_available=free,
        )
        if previous is not None:
            RosterPick.objects.bulk_create([
                RosterPick(
                    roster=roster,
                    athlete_id=pick.athlete_id,
                    slot=pick.slot,
                    is_captain=pick.is_captain,
                    is_vice=pick.is_vice,
                )
                for pick in previous.picks.all()
            ])
        _upsert_balance(participant, next_free_transfers(free, 0))

    logger.info(f"Opened {round} roster for {participant} ({free} free transfers)")
    return roster


def save_squad(participant, round, athlete_ids: Sequence[int], chip: Optional[str] = None) -> TransferOutcome:
    """
    Validate and store a participant's 15 athletes for a round.

    Args:
        participant: Participant saving the squad
        round: Round being edited
        athlete_ids: The proposed 15 athlete ids
        chip: Optional chip to select in the same save ('none' clears it)

    Returns:
        TransferOutcome with the transfers made, projected penalty and
        next round's free transfers

    Raises:
        RosterValidationError: With every squad rule the proposal breaks
    """
    athlete_ids = [int(athlete_id) for athlete_id in athlete_ids]
    catalogue = load_catalogue(athlete_ids)

    violations = squad_violations(athlete_ids, catalogue)
    if violations:
        logger.info(f"Rejected squad for {participant} in {round}: {[v.code for v in violations]}")
        raise RosterValidationError(violations)

    with transaction.atomic():
        roster = open_round_roster(participant, round)
        if chip is not None:
            # Imported here to avoid a circular import
            from league.processing.chips import select_chip
            roster = select_chip(participant, round, chip)

        previous = previous_roster(participant, round)
        previous_ids = previous.athlete_ids if previous else []
        outcome = compute_transfers(previous_ids, athlete_ids, roster.free_transfers_available, roster.chip)

        current = roster.lineup()
        current_ids = current['starters'] + current['bench']
        positions = {athlete_id: info.position for athlete_id, info in catalogue.items()}

        if len(current_ids) != FANTASY_RULES['squad']['size']:
            starters, bench = default_lineup(athlete_ids, positions)
            _write_picks(roster, starters, bench)
        elif set(current_ids) != set(athlete_ids):
            positions.update(
                Athlete.objects.filter(id__in=current_ids).values_list('id', 'position')
            )
            candidate_set, current_set = set(athlete_ids), set(current_ids)
            swaps = dict(pair_transfers(
                [i for i in current_ids if i not in candidate_set],
                [i for i in athlete_ids if i not in current_set],
                positions,
            ))
            _write_picks(
                roster,
                [swaps.get(i, i) for i in current['starters']],
                [swaps.get(i, i) for i in current['bench']],
                swaps.get(current['captain_id'], current['captain_id']),
                swaps.get(current['vice_id'], current['vice_id']),
            )

        roster.transfers_made = outcome.transfers_made
        roster.save(update_fields=['transfers_made', 'updated_at'])

        TransferRecord.objects.filter(participant=participant, round=round).delete()
        if outcome.outgoing or outcome.incoming:
            prices = dict(
                Athlete.objects.filter(id__in=outcome.outgoing + outcome.incoming).values_list('id', 'price')
            )
            positions.update(
                Athlete.objects.filter(id__in=outcome.outgoing).values_list('id', 'position')
            )
            TransferRecord.objects.bulk_create([
                TransferRecord(
                    participant=participant,
                    round=round,
                    athlete_out_id=out_id,
                    athlete_in_id=in_id,
                    price_diff=prices[in_id] - prices[out_id],
                )
                for out_id, in_id in pair_transfers(outcome.outgoing, outcome.incoming, positions)
            ])

        _upsert_balance(participant, outcome.next_free_transfers)

    logger.info(
        f"Saved squad for {participant} in {round}: {outcome.transfers_made} transfers, "
        f"projected hit -{outcome.point_penalty}, next free {outcome.next_free_transfers}"
    )
    return outcome


def save_lineup(participant, round, starters, bench, captain_id, vice_id) -> Roster:
    """
    Store the starting eleven, bench order and armbands for a round.

    Raises:
        RosterValidationError: No squad for the round, or the lineup breaks
            the formation, bench or armband rules
    """
    roster = Roster.objects.filter(participant=participant, round=round).first()
    if roster is None:
        raise RosterValidationError([Violation('no_roster', f"No squad for {round}")])

    starters = [int(i) for i in starters]
    bench = [int(i) for i in bench]
    captain_id = int(captain_id) if captain_id is not None else None
    vice_id = int(vice_id) if vice_id is not None else None

    squad_ids = roster.athlete_ids
    positions = dict(Athlete.objects.filter(id__in=squad_ids).values_list('id', 'position'))

    violations = lineup_violations(starters, bench, captain_id, vice_id, squad_ids, positions)
    if violations:
        raise RosterValidationError(violations)

    with transaction.atomic():
        _write_picks(roster, starters, bench, captain_id, vice_id)
        roster.save(update_fields=['updated_at'])

    logger.info(f"Saved lineup for {participant} in {round}")
    return roster
