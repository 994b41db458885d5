"""
Captaincy and chip multipliers.

Turns per-athlete points for the final lineup into the round's pre-penalty
total. Exactly one mode applies per round:

- none / wildcard: captain doubled; vice doubled instead if the captain did not play
- triple_captain: captain tripled; falls back to a doubled vice if the captain did not play
- two_captains: captain and vice each doubled if they played, no fallback
- bench_boost: bench points added to the starters', armbands as default
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

NONE = 'none'
BENCH_BOOST = 'bench_boost'
TRIPLE_CAPTAIN = 'triple_captain'
TWO_CAPTAINS = 'two_captains'
WILDCARD = 'wildcard'

CHIPS = (BENCH_BOOST, TRIPLE_CAPTAIN, TWO_CAPTAINS, WILDCARD)


@dataclass(frozen=True)
class ChipResult:
    total: int
    base_points: int
    captain_bonus: int
    bench_points: int


def played(athlete_id: Optional[int], starters: Sequence[int], minutes: Mapping[int, int]) -> bool:
    """An armband only counts for a starter with minutes"""
    return athlete_id is not None and athlete_id in starters and minutes.get(athlete_id, 0) > 0


def _default_bonus(captain_points, vice_points, captain_played, vice_played):
    if captain_played:
        return captain_points
    if vice_played:
        return vice_points
    return 0


def apply_chip(
    starter_points: Mapping[int, int],
    bench_points: Mapping[int, int],
    captain_id: Optional[int],
    vice_id: Optional[int],
    captain_played: bool,
    vice_played: bool,
    chip: Optional[str] = NONE,
) -> ChipResult:
    """
    Compute the round total before transfer penalties.

    Args:
        starter_points: athlete id -> points for the 11 final starters
        bench_points: athlete id -> points for the 4 bench athletes
        captain_id: Resolved captain (None when no armband applies)
        vice_id: Resolved vice-captain
        captain_played: Captain is a starter with minutes
        vice_played: Vice is a starter with minutes
        chip: Active chip ('none' when unset)

    Returns:
        ChipResult with the total and its components
    """
    base = sum(starter_points.values())
    captain_points = starter_points.get(captain_id, 0) if captain_id is not None else 0
    vice_points = starter_points.get(vice_id, 0) if vice_id is not None else 0

    bench_total = 0
    if chip == BENCH_BOOST:
        bench_total = sum(bench_points.values())

    if chip == TRIPLE_CAPTAIN and captain_played:
        bonus = 2 * captain_points
    elif chip == TWO_CAPTAINS:
        bonus = (captain_points if captain_played else 0) + (vice_points if vice_played else 0)
    else:
        bonus = _default_bonus(captain_points, vice_points, captain_played, vice_played)

    return ChipResult(
        total=base + bench_total + bonus,
        base_points=base,
        captain_bonus=bonus,
        bench_points=bench_total,
    )
