"""Lineup eligibility rules: no duplicates in a lineup, no reuse across weeks."""

from typing import Iterable, Sequence

from .errors import DuplicateInLineupError, PlayerReusedError
from .schemas import Lineup


def find_duplicates(names: Sequence[str]) -> list[str]:
    """Names appearing more than once, in first-seen order."""
    seen = set()
    duplicates = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates


def used_player_names(prior_lineups: Iterable[Lineup], before_week: int) -> set[str]:
    """All names a user put in lineups for weeks strictly before before_week."""
    used = set()
    for lineup in prior_lineups:
        if lineup.week_number < before_week:
            used.update(lineup.slots.names())
    return used


def validate_new_lineup(candidate: Lineup, prior_lineups: Iterable[Lineup]) -> None:
    """
    Check a lineup before it is stored.

    Checks:
    - All nine slot values are pairwise distinct
    - No value was used in one of the user's lineups for an earlier week

    Lineups for later weeks are ignored, so a past lineup is never
    invalidated by a future one.

    Args:
        candidate: Lineup being submitted
        prior_lineups: The same user's stored lineups

    Raises:
        DuplicateInLineupError: If a name fills more than one slot
        PlayerReusedError: If names were used in earlier weeks
    """
    names = candidate.slots.names()

    if len(set(names)) != len(names):
        raise DuplicateInLineupError(find_duplicates(names))

    used = used_player_names(prior_lineups, candidate.week_number)
    reused = []
    for name in names:
        if name in used and name not in reused:
            reused.append(name)
    if reused:
        raise PlayerReusedError(reused)


def filter_available(players: Iterable[dict], used: set[str]) -> list[dict]:
    """Drop players whose name is in used."""
    return [p for p in players if p['name'] not in used]
