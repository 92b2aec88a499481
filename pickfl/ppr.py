"""PPR (points-per-reception) fantasy scoring.

Scoring:
    Passing:   1 point per 25 yards, 4 points per TD, -2 points per INT
    Rushing:   1 point per 10 yards, 6 points per TD
    Receiving: 1 point per reception, 1 point per 10 yards, 6 points per TD

Yardage points are fractional. Stats arrive as box-score strings keyed by the
provider's column labels (YDS, TD, INT, REC); anything missing or unparseable
counts as zero. Other stat categories (kicking, defensive, ...) score nothing.
"""

import math
import re
from typing import Dict, Optional, Tuple

from .models import BoxScore, PlayerPoints

_NUMBER_PREFIX = re.compile(r'\s*([-+]?(?:\d+\.?\d*|\.\d+))')


def parse_stat_value(value) -> Optional[float]:
    """
    Parse a box-score cell into a number.

    Leading numeric prefixes are accepted ("12/20" -> 12.0), matching how the
    provider formats compound columns.

    Returns:
        The number, or None if the cell holds nothing numeric
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value))
        if not match:
            return None
        number = float(match.group(1))
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _stat(stats: dict, label: str) -> float:
    return parse_stat_value(stats.get(label)) or 0.0


def score_passing(stats: dict) -> Tuple[float, Dict[str, float]]:
    """Score a passing line."""
    points = 0.0
    breakdown = {}

    yard_pts = _stat(stats, 'YDS') / 25
    if yard_pts:
        breakdown['passing_yards'] = yard_pts
    points += yard_pts

    td_pts = _stat(stats, 'TD') * 4
    if td_pts:
        breakdown['passing_tds'] = td_pts
    points += td_pts

    int_pts = _stat(stats, 'INT') * -2
    if int_pts:
        breakdown['interceptions'] = int_pts
    points += int_pts

    return points, breakdown


def score_rushing(stats: dict) -> Tuple[float, Dict[str, float]]:
    """Score a rushing line."""
    points = 0.0
    breakdown = {}

    yard_pts = _stat(stats, 'YDS') / 10
    if yard_pts:
        breakdown['rushing_yards'] = yard_pts
    points += yard_pts

    td_pts = _stat(stats, 'TD') * 6
    if td_pts:
        breakdown['rushing_tds'] = td_pts
    points += td_pts

    return points, breakdown


def score_receiving(stats: dict) -> Tuple[float, Dict[str, float]]:
    """Score a receiving line (one point per reception)."""
    points = 0.0
    breakdown = {}

    receptions = _stat(stats, 'REC')
    if receptions:
        breakdown['receptions'] = receptions
    points += receptions

    yard_pts = _stat(stats, 'YDS') / 10
    if yard_pts:
        breakdown['receiving_yards'] = yard_pts
    points += yard_pts

    td_pts = _stat(stats, 'TD') * 6
    if td_pts:
        breakdown['receiving_tds'] = td_pts
    points += td_pts

    return points, breakdown


CATEGORY_SCORERS = {
    'passing': score_passing,
    'rushing': score_rushing,
    'receiving': score_receiving,
}


def points_for(stats: dict, category: str) -> Tuple[float, Dict[str, float]]:
    """
    Score one player's stats in one box-score category.

    Args:
        stats: Column label -> value (e.g. {'YDS': '250', 'TD': '2', 'INT': '1'})
        category: Box-score category name ('passing', 'rushing', 'receiving')

    Returns:
        Tuple of (total points, breakdown by point source); unknown
        categories return (0.0, {})
    """
    scorer = CATEGORY_SCORERS.get(category)
    if scorer is None:
        return 0.0, {}
    return scorer(stats or {})


def score_box_score(box_score: BoxScore) -> Dict[str, PlayerPoints]:
    """
    Accumulate PPR points for every player in one game.

    A player appearing in several categories (a QB passing and rushing) gets
    the sum. Games that are not completed yield nothing, even if the payload
    carries partial stats.

    Returns:
        Dict mapping provider player id to PlayerPoints
    """
    if not box_score.completed:
        return {}

    players: Dict[str, PlayerPoints] = {}
    for entry in box_score.entries:
        total, breakdown = points_for(entry.stats, entry.category)

        player = players.get(entry.player_id)
        if player is None:
            player = PlayerPoints(player_id=entry.player_id, player_name=entry.player_name)
            players[entry.player_id] = player

        player.total_points += total
        for key, val in breakdown.items():
            player.breakdown[key] = player.breakdown.get(key, 0.0) + val

    return players
