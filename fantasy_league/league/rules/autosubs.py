"""
Auto-substitution resolver.

When a starter records zero minutes in a round, try to bring on a bench
athlete who played without breaking the lineup rules:

- Formation: at least 1 GK, 3 DEF, 3 MID and 2 FWD among the starters
  (FANTASY_RULES['lineup']['min_starters'])
- Bench: exactly 4 athletes, exactly 1 goalkeeper

The scan is greedy and order-sensitive. Starters are visited in their stored
order; for each non-playing starter the bench is scanned slot 1 to 4 and the
first playing athlete whose swap keeps both rules valid comes on. There is no
backtracking, so the result is a first-fit repair, not an optimal one.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from config.rules import FANTASY_RULES

LINEUP = FANTASY_RULES['lineup']
BENCH_SIZE = FANTASY_RULES['squad']['bench']


@dataclass(frozen=True)
class AutoSubResult:
    """Repaired lineup and armbands"""
    starters: Tuple[int, ...]
    bench: Tuple[int, ...]
    captain_id: Optional[int]
    vice_id: Optional[int]
    substitutions: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def changed(self):
        return bool(self.substitutions)


def position_counts(ids: Sequence[int], positions: Mapping[int, str]) -> Dict[str, int]:
    counts = {pos: 0 for pos in LINEUP['min_starters']}
    for athlete_id in ids:
        pos = positions.get(athlete_id)
        if pos in counts:
            counts[pos] += 1
    return counts


def is_valid_formation(ids: Sequence[int], positions: Mapping[int, str]) -> bool:
    """Starters meet the minimum count for every position"""
    counts = position_counts(ids, positions)
    return all(counts[pos] >= minimum for pos, minimum in LINEUP['min_starters'].items())


def is_valid_bench(ids: Sequence[int], positions: Mapping[int, str]) -> bool:
    """Bench holds exactly 4 athletes, one of them a goalkeeper"""
    if len(ids) != BENCH_SIZE:
        return False
    goalkeepers = sum(1 for athlete_id in ids if positions.get(athlete_id) == 'GK')
    return goalkeepers == LINEUP['bench_goalkeepers']


def _first_played(starters, minutes, exclude=None) -> Optional[int]:
    for athlete_id in starters:
        if athlete_id != exclude and minutes.get(athlete_id, 0) > 0:
            return athlete_id
    return None


def resolve_armbands(
    starters: Sequence[int],
    minutes: Mapping[int, int],
    captain_id: Optional[int],
    vice_id: Optional[int],
) -> Tuple[Optional[int], Optional[int]]:
    """
    Decide the captain and vice-captain for the final starters.

    A captain who played keeps the armband; otherwise a vice who played is
    promoted; otherwise the first starter who played becomes captain. The vice
    is kept if they played, else it falls to the next starter who played.
    Both are None when no starter played.
    """
    starter_set = set(starters)

    def plays(athlete_id):
        return athlete_id is not None and athlete_id in starter_set and minutes.get(athlete_id, 0) > 0

    if plays(captain_id):
        if plays(vice_id) and vice_id != captain_id:
            return captain_id, vice_id
        return captain_id, _first_played(starters, minutes, exclude=captain_id)

    if plays(vice_id):
        return vice_id, _first_played(starters, minutes, exclude=vice_id)

    new_captain = _first_played(starters, minutes)
    if new_captain is None:
        return None, None
    return new_captain, _first_played(starters, minutes, exclude=new_captain)


def resolve_auto_subs(
    starters: Sequence[int],
    bench: Sequence[int],
    positions: Mapping[int, str],
    minutes: Mapping[int, int],
    captain_id: Optional[int],
    vice_id: Optional[int],
) -> AutoSubResult:
    """
    Repair a lineup whose starters did not all play.

    Args:
        starters: 11 athlete ids in stored order
        bench: 4 athlete ids, bench slot 1 first
        positions: athlete id -> 'GK' / 'DEF' / 'MID' / 'FWD'
        minutes: athlete id -> minutes played in the round (missing = 0)
        captain_id: Captain before resolution
        vice_id: Vice-captain before resolution

    Returns:
        AutoSubResult with new starters/bench tuples, resolved armbands and
        the (out, in) pairs in the order they were made
    """
    current_starters = tuple(starters)
    current_bench = tuple(bench)
    substitutions = []

    for index in range(len(current_starters)):
        starter_id = current_starters[index]
        if minutes.get(starter_id, 0) > 0:
            continue

        for slot, bench_id in enumerate(current_bench):
            if minutes.get(bench_id, 0) <= 0:
                continue

            next_starters = current_starters[:index] + (bench_id,) + current_starters[index + 1:]
            next_bench = current_bench[:slot] + (starter_id,) + current_bench[slot + 1:]

            if is_valid_formation(next_starters, positions) and is_valid_bench(next_bench, positions):
                current_starters, current_bench = next_starters, next_bench
                substitutions.append((starter_id, bench_id))
                break

    new_captain, new_vice = resolve_armbands(current_starters, minutes, captain_id, vice_id)

    return AutoSubResult(
        starters=current_starters,
        bench=current_bench,
        captain_id=new_captain,
        vice_id=new_vice,
        substitutions=substitutions,
    )
