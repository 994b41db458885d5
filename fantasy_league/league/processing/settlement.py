"""
Round settlement tasks.

Composes the pure rules into one authoritative total per participant:

    stats (aggregated per athlete) -> auto-subs (unless bench boost)
      -> scoring -> captaincy/chip multiplier -> transfer penalty

An athlete's stat lines for the round are always summed before scoring.
The scoring table is additive, so this equals scoring each fixture and
summing, but it is the one rule applied everywhere (settlement and preview).

Persistence per participant is a single atomic block: the repaired lineup on
RosterPick.auto_*, the chip usage (insert-if-absent) and the RoundPointTotal
upsert. Authored picks are never edited, so a re-run starts from the same
input and produces the same total.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

import pandas as pd
from django.db import transaction
from prefect import task, get_run_logger
from prefect.cache_policies import NONE

from league.exceptions import DataIntegrityError, InvariantViolation
from league.models import (
    STAT_FIELDS,
    Chip,
    ChipUsageRecord,
    MatchStatLine,
    Roster,
    RosterPick,
    Round,
    RoundPointTotal,
)
from league.processing.chips import record_chip_usage
from league.rules import POSITIONS
from league.rules.autosubs import is_valid_bench, is_valid_formation, resolve_auto_subs
from league.rules.multipliers import BENCH_BOOST, NONE as NO_CHIP, TRIPLE_CAPTAIN, TWO_CAPTAINS, apply_chip, played
from league.rules.scoring import StatLine, points_breakdown, points_for
from league.rules.transfers import transfer_penalty

BOOLEAN_STATS = ['clean_sheet', 'man_of_the_match']
NUMERIC_STATS = [name for name in STAT_FIELDS if name not in BOOLEAN_STATS]


@dataclass(frozen=True)
class RoundStats:
    """Per-athlete totals for a round, keyed by athlete id"""
    round_number: int
    minutes: Dict[int, int] = field(default_factory=dict)
    stat_lines: Dict[int, StatLine] = field(default_factory=dict)


@dataclass(frozen=True)
class RosterSnapshot:
    """Everything settlement needs from a stored roster"""
    roster_id: int
    participant_id: int
    round_id: int
    starters: Tuple[int, ...]
    bench: Tuple[int, ...]
    captain_id: Optional[int]
    vice_id: Optional[int]
    chip: str
    transfers_made: int
    free_transfers_available: int
    positions: Dict[int, str]


@dataclass(frozen=True)
class SettlementResult:
    total: int
    base_points: int
    captain_bonus: int
    bench_points: int
    transfer_penalty: int
    chip: str
    starters: Tuple[int, ...]
    bench: Tuple[int, ...]
    captain_id: Optional[int]
    vice_id: Optional[int]
    substitutions: List[Tuple[int, int]]
    athlete_points: Dict[int, int]


def aggregate_round_stats(rows: List[Dict]) -> Dict[int, StatLine]:
    """
    Fold stat rows into one StatLine per athlete.

    Args:
        rows: Dicts with 'athlete_id' plus the STAT_FIELDS columns

    Returns:
        athlete id -> StatLine with numeric fields summed and flags OR-ed
    """
    if not rows:
        return {}

    df = pd.DataFrame.from_records(rows, columns=['athlete_id'] + STAT_FIELDS)
    aggregations = {name: 'sum' for name in NUMERIC_STATS}
    aggregations.update({name: 'any' for name in BOOLEAN_STATS})
    totals = df.groupby('athlete_id').agg(aggregations)

    return {
        int(athlete_id): StatLine.from_mapping(row.to_dict())
        for athlete_id, row in totals.iterrows()
    }


def round_stats_for(round_obj: Round) -> RoundStats:
    rows = list(
        MatchStatLine.objects
        .filter(fixture__round=round_obj)
        .values('athlete_id', *STAT_FIELDS)
    )
    stat_lines = aggregate_round_stats(rows)
    return RoundStats(
        round_number=round_obj.number,
        minutes={athlete_id: line.minutes for athlete_id, line in stat_lines.items()},
        stat_lines=stat_lines,
    )


def build_snapshot(roster: Roster) -> RosterSnapshot:
    """
    Read a stored roster into a RosterSnapshot.

    A missing captain defaults to the first starter and a missing vice to
    the next starter.

    Raises:
        DataIntegrityError: Incomplete picks, unknown position or chip, or a
            stored lineup that breaks the formation or bench rules
    """
    picks = roster.ordered_picks()
    slots = sorted(pick.slot for pick in picks)
    if slots != list(range(1, 16)):
        raise DataIntegrityError(f"Roster {roster.id} has {len(picks)} picks in slots {slots}")

    positions = {pick.athlete_id: pick.athlete.position for pick in picks}
    unknown = [athlete_id for athlete_id, pos in positions.items() if pos not in POSITIONS]
    if unknown:
        raise DataIntegrityError(f"Roster {roster.id} has athletes with unknown positions: {unknown}")

    if roster.chip not in Chip.values:
        raise DataIntegrityError(f"Roster {roster.id} has unknown chip {roster.chip!r}")

    lineup = roster.lineup()
    starters, bench = tuple(lineup['starters']), tuple(lineup['bench'])
    if not is_valid_formation(starters, positions) or not is_valid_bench(bench, positions):
        raise DataIntegrityError(f"Roster {roster.id} has an invalid stored lineup")

    captain_id = lineup['captain_id'] if lineup['captain_id'] is not None else starters[0]
    vice_id = lineup['vice_id']
    if vice_id is None:
        vice_id = next((athlete_id for athlete_id in starters if athlete_id != captain_id), None)

    return RosterSnapshot(
        roster_id=roster.id,
        participant_id=roster.participant_id,
        round_id=roster.round_id,
        starters=starters,
        bench=bench,
        captain_id=captain_id,
        vice_id=vice_id,
        chip=roster.chip,
        transfers_made=roster.transfers_made,
        free_transfers_available=roster.free_transfers_available,
        positions=positions,
    )


def score_roster(snapshot: RosterSnapshot, round_stats: RoundStats) -> SettlementResult:
    """
    Compute a roster's round total. Pure; nothing is read or written.

    Raises:
        InvariantViolation: Auto-substitution returned a lineup that breaks
            the formation or bench rules, or changed the squad
    """
    minutes = round_stats.minutes
    positions = snapshot.positions

    if snapshot.chip == BENCH_BOOST:
        starters, bench = snapshot.starters, snapshot.bench
        captain_id, vice_id = snapshot.captain_id, snapshot.vice_id
        substitutions = []
    else:
        resolved = resolve_auto_subs(
            snapshot.starters,
            snapshot.bench,
            positions,
            minutes,
            snapshot.captain_id,
            snapshot.vice_id,
        )
        if not is_valid_formation(resolved.starters, positions) or not is_valid_bench(resolved.bench, positions):
            raise InvariantViolation(
                f"Auto-substitution broke the lineup of roster {snapshot.roster_id}: {resolved}"
            )
        if sorted(resolved.starters + resolved.bench) != sorted(snapshot.starters + snapshot.bench):
            raise InvariantViolation(f"Auto-substitution changed the squad of roster {snapshot.roster_id}")
        starters, bench = resolved.starters, resolved.bench
        captain_id, vice_id = resolved.captain_id, resolved.vice_id
        if snapshot.chip in (TRIPLE_CAPTAIN, TWO_CAPTAINS):
            # Chip armbands are never promoted; apply_chip owns their fallbacks
            captain_id, vice_id = snapshot.captain_id, snapshot.vice_id
        substitutions = resolved.substitutions

    athlete_points = {
        athlete_id: points_for(round_stats.stat_lines.get(athlete_id), positions[athlete_id])
        for athlete_id in starters + bench
    }
    chip_result = apply_chip(
        starter_points={athlete_id: athlete_points[athlete_id] for athlete_id in starters},
        bench_points={athlete_id: athlete_points[athlete_id] for athlete_id in bench},
        captain_id=captain_id,
        vice_id=vice_id,
        captain_played=played(captain_id, starters, minutes),
        vice_played=played(vice_id, starters, minutes),
        chip=snapshot.chip,
    )
    # Stored count from the squad save, not a fresh diff
    penalty = transfer_penalty(snapshot.transfers_made, snapshot.free_transfers_available, snapshot.chip)

    return SettlementResult(
        total=chip_result.total - penalty,
        base_points=chip_result.base_points,
        captain_bonus=chip_result.captain_bonus,
        bench_points=chip_result.bench_points,
        transfer_penalty=penalty,
        chip=snapshot.chip,
        starters=starters,
        bench=bench,
        captain_id=captain_id,
        vice_id=vice_id,
        substitutions=list(substitutions),
        athlete_points=athlete_points,
    )


def persist_settlement(snapshot: RosterSnapshot, result: SettlementResult) -> RoundPointTotal:
    """Write the repaired lineup, chip usage and round total in one transaction"""
    roster = Roster.objects.select_related('participant', 'round').get(id=snapshot.roster_id)
    slots = {athlete_id: slot for slot, athlete_id in enumerate(result.starters + result.bench, start=1)}

    with transaction.atomic():
        picks = list(RosterPick.objects.filter(roster=roster))
        for pick in picks:
            pick.auto_slot = slots[pick.athlete_id]
            pick.auto_captain = pick.athlete_id == result.captain_id
            pick.auto_vice = pick.athlete_id == result.vice_id
        RosterPick.objects.bulk_update(picks, ['auto_slot', 'auto_captain', 'auto_vice'])

        record_chip_usage(roster.participant, result.chip, roster.round)

        total, _ = RoundPointTotal.objects.update_or_create(
            participant=roster.participant,
            round=roster.round,
            defaults={
                'points': result.total,
                'base_points': result.base_points,
                'captain_bonus': result.captain_bonus,
                'bench_points': result.bench_points,
                'transfer_penalty': result.transfer_penalty,
                'chip': result.chip,
            },
        )
    return total


@task(name="Load Round Stats", cache_policy=NONE)
def load_round_stats(round_number: int) -> RoundStats:
    """
    Load and pre-aggregate every stat line in a round.

    Raises:
        Round.DoesNotExist: Unknown round number
    """
    logger = get_run_logger()

    round_obj = Round.objects.get(number=round_number)
    round_stats = round_stats_for(round_obj)

    played_count = sum(1 for value in round_stats.minutes.values() if value > 0)
    logger.info(
        f"Loaded stats for {round_obj}: {len(round_stats.stat_lines)} athletes, {played_count} with minutes"
    )
    return round_stats


@task(name="Load Participant Roster", cache_policy=NONE)
def load_participant_roster(roster_id: int) -> RosterSnapshot:
    """
    Load a roster for settlement.

    A chip already consumed in another round is ignored and the roster is
    scored with no chip.

    Raises:
        DataIntegrityError: Missing or malformed roster
    """
    logger = get_run_logger()

    try:
        roster = Roster.objects.select_related('participant', 'round').get(id=roster_id)
    except Roster.DoesNotExist as e:
        raise DataIntegrityError(f"Roster {roster_id} does not exist") from e

    snapshot = build_snapshot(roster)

    if snapshot.chip != NO_CHIP:
        usage = ChipUsageRecord.objects.filter(participant_id=snapshot.participant_id, chip=snapshot.chip).first()
        if usage is not None and usage.round_id != snapshot.round_id:
            logger.warning(
                f"{roster.participant} already used {snapshot.chip} in round id {usage.round_id}; "
                f"scoring {roster.round} without a chip"
            )
            snapshot = replace(snapshot, chip=NO_CHIP)

    return snapshot


@task(name="Settle Participant", cache_policy=NONE)
def settle_participant(roster_id: int, round_stats: RoundStats) -> Dict:
    """
    Settle one participant's roster for the round.

    Failures are reported in the result instead of raised so the round
    keeps going:
    - skipped: the roster is missing or malformed
    - invariant_violation: auto-substitution bug, prior total kept
    - error: anything else while loading, scoring or saving

    Args:
        roster_id: Roster to settle
        round_stats: Output of load_round_stats

    Returns:
        Dict with status, points and the substitutions made
    """
    logger = get_run_logger()

    result = {
        'roster_id': roster_id,
        'participant_id': None,
        'round': round_stats.round_number,
        'status': 'success',
    }

    try:
        snapshot = load_participant_roster.fn(roster_id)
    except DataIntegrityError as e:
        logger.warning(f"Skipping roster {roster_id} in round {round_stats.round_number}: {e}")
        result['status'] = 'skipped'
        result['error'] = str(e)
        return result
    except Exception as e:
        logger.error(f"Failed to load roster {roster_id} in round {round_stats.round_number}: {e}")
        result['status'] = 'error'
        result['error'] = str(e)
        return result

    result['participant_id'] = snapshot.participant_id

    try:
        outcome = score_roster(snapshot, round_stats)
    except InvariantViolation as e:
        logger.critical(
            f"Invariant violation for participant {snapshot.participant_id} "
            f"in round {round_stats.round_number}: {e}"
        )
        result['status'] = 'invariant_violation'
        result['error'] = str(e)
        return result
    except Exception as e:
        logger.error(
            f"Failed to score participant {snapshot.participant_id} "
            f"in round {round_stats.round_number}: {e}"
        )
        result['status'] = 'error'
        result['error'] = str(e)
        return result

    try:
        persist_settlement(snapshot, outcome)
    except Exception as e:
        logger.error(
            f"Failed to save settlement for participant {snapshot.participant_id} "
            f"in round {round_stats.round_number}: {e}"
        )
        result['status'] = 'error'
        result['error'] = str(e)
        return result

    result['points'] = outcome.total
    result['transfer_penalty'] = outcome.transfer_penalty
    result['chip'] = outcome.chip
    result['substitutions'] = outcome.substitutions

    if outcome.substitutions:
        logger.info(
            f"Participant {snapshot.participant_id}: {len(outcome.substitutions)} auto-subs, "
            f"{outcome.total} pts"
        )
    else:
        logger.debug(f"Participant {snapshot.participant_id}: {outcome.total} pts")
    return result


def preview_round(participant, round_obj) -> Dict:
    """
    Live view of a participant's round without saving anything.

    Runs the same composition as settlement on the stats entered so far.

    Raises:
        DataIntegrityError: No roster for the round, or a malformed one
    """
    roster = Roster.objects.filter(participant=participant, round=round_obj).first()
    if roster is None:
        raise DataIntegrityError(f"{participant} has no roster for {round_obj}")

    snapshot = build_snapshot(roster)
    round_stats = round_stats_for(round_obj)
    outcome = score_roster(snapshot, round_stats)

    names = {pick.athlete_id: pick.athlete.name for pick in roster.ordered_picks()}
    athletes = []
    for athlete_id in outcome.starters + outcome.bench:
        stat = round_stats.stat_lines.get(athlete_id)
        athletes.append({
            'athlete_id': athlete_id,
            'name': names[athlete_id],
            'position': snapshot.positions[athlete_id],
            'minutes': stat.minutes if stat else 0,
            'points': outcome.athlete_points[athlete_id],
            'starter': athlete_id in outcome.starters,
            'captain': athlete_id == outcome.captain_id,
            'vice': athlete_id == outcome.vice_id,
            'breakdown': points_breakdown(stat, snapshot.positions[athlete_id]),
        })

    return {
        'participant_id': participant.id,
        'round': round_obj.number,
        'chip': outcome.chip,
        'total': outcome.total,
        'base_points': outcome.base_points,
        'captain_bonus': outcome.captain_bonus,
        'bench_points': outcome.bench_points,
        'transfer_penalty': outcome.transfer_penalty,
        'substitutions': outcome.substitutions,
        'athletes': athletes,
    }
