"""
Squad validation and the free-transfer ledger.

Squad rules (FANTASY_RULES['squad']):
    15 unique athletes, 2 GK / 5 DEF / 5 MID / 3 FWD, at most 3 from one club,
    total price within the budget.

Banking (FANTASY_RULES['transfers']):
    next = clamp(current - made + 1, 1, 5)
    penalty = 4 * max(0, made - current), waived by the wildcard chip
"""

from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Mapping, Optional, Sequence, Tuple

from config.rules import FANTASY_RULES
from league.exceptions import Violation
from league.rules.autosubs import is_valid_formation, position_counts
from league.rules.multipliers import WILDCARD

SQUAD = FANTASY_RULES['squad']
LINEUP = FANTASY_RULES['lineup']
TRANSFERS = FANTASY_RULES['transfers']


@dataclass(frozen=True)
class AthleteInfo:
    """What squad validation needs to know about an athlete"""
    id: int
    position: str
    club_id: int
    price: Decimal


@dataclass(frozen=True)
class TransferOutcome:
    transfers_made: int
    next_free_transfers: int
    point_penalty: int
    outgoing: Tuple[int, ...] = ()
    incoming: Tuple[int, ...] = ()


def squad_violations(candidate_ids: Sequence[int], catalogue: Mapping[int, AthleteInfo]) -> List[Violation]:
    """
    Check a proposed 15-athlete squad.

    The four checks (size/uniqueness, positions, club cap, budget) are all
    evaluated so a caller can show every problem at once; the list keeps
    that order, so the first entry is the first violation.
    """
    violations = []

    if len(candidate_ids) != SQUAD['size']:
        violations.append(Violation(
            'squad_size', f"You must submit exactly {SQUAD['size']} players ({len(candidate_ids)} given)."
        ))
    if len(set(candidate_ids)) != len(candidate_ids):
        violations.append(Violation('duplicate_athletes', 'Players must be unique.'))

    unique_ids = list(dict.fromkeys(candidate_ids))
    unknown = [athlete_id for athlete_id in unique_ids if athlete_id not in catalogue]
    if unknown:
        violations.append(Violation(
            'unknown_athletes', f"One or more players not found: {', '.join(str(i) for i in unknown)}"
        ))

    athletes = [catalogue[athlete_id] for athlete_id in unique_ids if athlete_id in catalogue]

    by_position = Counter(a.position for a in athletes)
    for pos, required in SQUAD['positions'].items():
        if by_position[pos] != required:
            violations.append(Violation('position_count', f"Invalid {pos} count: {by_position[pos]}/{required}"))

    by_club = Counter(a.club_id for a in athletes)
    for club_id, count in sorted(by_club.items()):
        if count > SQUAD['max_per_club']:
            violations.append(Violation(
                'club_limit', f"Too many from club {club_id}: {count}/{SQUAD['max_per_club']}"
            ))

    cost = sum((Decimal(a.price) for a in athletes), Decimal('0'))
    budget = Decimal(str(SQUAD['budget']))
    if cost > budget:
        violations.append(Violation('budget', f"Budget exceeded: {cost:.1f} / {budget:.1f}"))

    return violations


def validate_squad(candidate_ids: Sequence[int], catalogue: Mapping[int, AthleteInfo]) -> Optional[Violation]:
    """First violation for the squad, or None when it is valid"""
    violations = squad_violations(candidate_ids, catalogue)
    return violations[0] if violations else None


def lineup_violations(
    starters: Sequence[int],
    bench: Sequence[int],
    captain_id: Optional[int],
    vice_id: Optional[int],
    squad_ids: Sequence[int],
    positions: Mapping[int, str],
) -> List[Violation]:
    """Check a starters/bench split and armbands against the saved squad"""
    violations = []

    if len(starters) != SQUAD['starters']:
        violations.append(Violation('starters_size', f"Need exactly {SQUAD['starters']} starters"))
    if len(bench) != SQUAD['bench']:
        violations.append(Violation('bench_size', f"Bench must have {SQUAD['bench']} players"))

    everyone = list(starters) + list(bench)
    if len(set(everyone)) != len(everyone) or set(everyone) != set(squad_ids):
        violations.append(Violation('lineup_athletes', 'Starters + Bench must be the 15 players in the squad'))

    if not is_valid_formation(starters, positions):
        minimums = ', '.join(f"≥{n} {pos}" for pos, n in LINEUP['min_starters'].items())
        violations.append(Violation('formation', f"Formation invalid: need {minimums} in starters"))

    bench_goalkeepers = position_counts(bench, positions)['GK']
    if bench_goalkeepers != LINEUP['bench_goalkeepers']:
        violations.append(Violation('bench_goalkeeper', 'Bench must include exactly 1 GK'))

    if captain_id is None or vice_id is None:
        violations.append(Violation('armband_missing', 'Pick a captain and a vice-captain'))
    elif captain_id == vice_id:
        violations.append(Violation('armband_duplicate', 'Captain and Vice must be different'))
    if (captain_id is not None and captain_id not in starters) or (vice_id is not None and vice_id not in starters):
        violations.append(Violation('armband_not_starter', 'C and VC must be among starters'))

    return violations


def count_transfers(previous_ids: Sequence[int], candidate_ids: Sequence[int]) -> int:
    """Athletes changed between two squads"""
    previous, candidate = set(previous_ids), set(candidate_ids)
    return max(len(previous - candidate), len(candidate - previous))


def next_free_transfers(current_free: int, transfers_made: int) -> int:
    """Bank one transfer per round, spend what was used, stay within [1, 5]"""
    banked = current_free - transfers_made + TRANSFERS['free_transfers_per_round']
    return max(TRANSFERS['free_transfers_min'], min(TRANSFERS['free_transfers_max'], banked))


def transfer_penalty(transfers_made: int, current_free: int, chip: Optional[str] = None) -> int:
    """Points deducted for transfers beyond the free allowance"""
    if chip == WILDCARD:
        return 0
    return TRANSFERS['penalty_per_extra_transfer'] * max(0, transfers_made - current_free)


def compute_transfers(
    previous_ids: Sequence[int],
    candidate_ids: Sequence[int],
    current_free: int,
    chip: Optional[str] = None,
) -> TransferOutcome:
    """
    Diff two squads and settle the free-transfer ledger for the round.

    Args:
        previous_ids: Squad at the end of the previous round (empty for a new entrant)
        candidate_ids: Proposed squad
        current_free: Free transfers available this round
        chip: Active chip; the wildcard waives the penalty only

    Returns:
        TransferOutcome with the count, next balance, penalty and the
        outgoing/incoming athletes in squad order
    """
    if not previous_ids:
        return TransferOutcome(0, next_free_transfers(current_free, 0), 0)

    candidate_set, previous_set = set(candidate_ids), set(previous_ids)
    outgoing = tuple(i for i in previous_ids if i not in candidate_set)
    incoming = tuple(i for i in candidate_ids if i not in previous_set)
    made = count_transfers(previous_ids, candidate_ids)

    return TransferOutcome(
        transfers_made=made,
        next_free_transfers=next_free_transfers(current_free, made),
        point_penalty=transfer_penalty(made, current_free, chip),
        outgoing=outgoing,
        incoming=incoming,
    )


def pair_transfers(
    outgoing: Sequence[int],
    incoming: Sequence[int],
    positions: Mapping[int, str],
) -> List[Tuple[int, int]]:
    """
    Match each outgoing athlete with an incoming one of the same position.

    A valid squad always has equal counts per position, so every pair is
    like-for-like and the lineup formation survives the swap. Anything left
    over is paired in order.
    """
    remaining = list(incoming)
    pairs = []
    leftovers = []
    for out_id in outgoing:
        match = next((in_id for in_id in remaining if positions.get(in_id) == positions.get(out_id)), None)
        if match is None:
            leftovers.append(out_id)
            continue
        remaining.remove(match)
        pairs.append((out_id, match))
    pairs.extend(zip(leftovers, remaining))
    return pairs
