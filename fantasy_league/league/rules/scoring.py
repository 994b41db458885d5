"""
Scoring table: translate one athlete's match statistics into fantasy points.

Points are additive over the rules in FANTASY_RULES['scoring'], so scoring
the sum of two stat lines equals the sum of their scores. Settlement relies
on that and always aggregates an athlete's stat lines for the round first,
then scores once.
"""

from dataclasses import dataclass, fields
from typing import Dict, Iterable, Optional

from config.rules import FANTASY_RULES

SCORING = FANTASY_RULES['scoring']


@dataclass(frozen=True)
class StatLine:
    """
    Statistical event counts for one athlete.

    Either a single fixture or a whole round (see aggregate_stat_lines).
    Every field defaults to zero/False so partial input is always scorable.
    """
    minutes: int = 0
    goals: int = 0
    assists: int = 0
    clean_sheet: bool = False
    goals_conceded: int = 0
    penalties_saved: int = 0
    penalties_missed: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    own_goals: int = 0
    man_of_the_match: bool = False

    @classmethod
    def from_mapping(cls, data: Dict) -> 'StatLine':
        """Build from a dict, ignoring unknown keys and treating None as zero"""
        values = {}
        for f in fields(cls):
            raw = data.get(f.name)
            if raw is None:
                continue
            values[f.name] = bool(raw) if f.type in (bool, 'bool') else int(raw)
        return cls(**values)

    def merge(self, other: 'StatLine') -> 'StatLine':
        """Sum numeric fields, OR boolean flags"""
        values = {}
        for f in fields(self):
            mine, theirs = getattr(self, f.name), getattr(other, f.name)
            if isinstance(mine, bool):
                values[f.name] = mine or theirs
            else:
                values[f.name] = mine + theirs
        return StatLine(**values)


def aggregate_stat_lines(lines: Iterable[StatLine]) -> StatLine:
    """Fold several fixtures' stat lines into one round line"""
    total = StatLine()
    for line in lines:
        total = total.merge(line)
    return total


def appearance_points(minutes: int) -> int:
    appearance = SCORING['appearance']
    if minutes >= appearance['full_minutes']:
        return appearance['60_plus']
    if minutes > 0:
        return appearance['under_60']
    return 0


def points_breakdown(stat: Optional[StatLine], position: str) -> Dict[str, int]:
    """
    Per-rule point contributions for a stat line.

    Args:
        stat: Stat line (None scores as an empty line)
        position: 'GK', 'DEF', 'MID' or 'FWD'

    Returns:
        Dict of rule name -> points, zero entries omitted
    """
    if stat is None:
        stat = StatLine()

    conceded = SCORING['goals_conceded']
    breakdown = {
        'appearance': appearance_points(stat.minutes),
        'goals': stat.goals * SCORING['goal'].get(position, 0),
        'assists': stat.assists * SCORING['assist'],
        'clean_sheet': SCORING['clean_sheet'].get(position, 0) if stat.clean_sheet else 0,
        'goals_conceded': 0,
        'penalties_saved': stat.penalties_saved * SCORING['penalty_saved'],
        'penalties_missed': stat.penalties_missed * SCORING['penalty_missed'],
        'yellow_cards': stat.yellow_cards * SCORING['yellow_card'],
        'red_cards': stat.red_cards * SCORING['red_card'],
        'own_goals': stat.own_goals * SCORING['own_goal'],
        'man_of_the_match': SCORING['man_of_the_match'] if stat.man_of_the_match else 0,
    }
    if position in conceded['positions']:
        breakdown['goals_conceded'] = (stat.goals_conceded // conceded['per_goals']) * conceded['points']

    return {rule: pts for rule, pts in breakdown.items() if pts}


def points_for(stat: Optional[StatLine], position: str) -> int:
    """Fantasy points for a stat line at the given position"""
    return sum(points_breakdown(stat, position).values())
