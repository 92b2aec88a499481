"""Player reference data lookups and position pools."""

import logging
from typing import Optional

import polars as pl

from .constants import DEFENSE_SUFFIX, FLEX_POSITIONS
from .models import TeamInfo
from .schemas import Player

logger = logging.getLogger('pickfl.players')

PLAYER_SCHEMA = {'espn_id': pl.Utf8, 'name': pl.Utf8, 'position': pl.Utf8}


class PlayerDirectory:
    """Read-only view over players.json backed by a polars DataFrame."""

    def __init__(self, players: pl.DataFrame):
        self.players = players

    @classmethod
    def from_records(cls, players: list[Player]) -> 'PlayerDirectory':
        frame = pl.DataFrame(
            [p.model_dump() for p in players],
            schema=PLAYER_SCHEMA,
        )
        return cls(frame)

    def __len__(self) -> int:
        return self.players.height

    def find_by_name(self, name: str) -> Optional[dict]:
        """
        Find a player by exact display name.

        Returns:
            Dict with espn_id, name, position, or None if not found
        """
        matches = self.players.filter(pl.col('name') == name.strip())
        if matches.height == 0:
            return None
        if matches.height > 1:
            logger.warning(f'{matches.height} players share the name {name!r}; using the first')
        return matches.row(0, named=True)

    def players_at(self, position: str) -> list[dict]:
        """
        Players eligible for a position pool.

        FLEX is the union of the RB, WR and TE pools.
        """
        if position == 'FLEX':
            pool = self.players.filter(pl.col('position').is_in(list(FLEX_POSITIONS)))
        else:
            pool = self.players.filter(pl.col('position') == position)
        return [
            {'id': row['espn_id'], 'name': row['name'], 'position': row['position']}
            for row in pool.iter_rows(named=True)
        ]

    def duplicate_names(self) -> list[str]:
        """Names shared by more than one player (these collide in lineups)."""
        counts = self.players.group_by('name').agg(pl.len().alias('count'))
        return sorted(counts.filter(pl.col('count') > 1)['name'].to_list())


def defense_name(team: TeamInfo) -> str:
    """Lineup display name for a team defense."""
    return f'{team.name}{DEFENSE_SUFFIX}'


def defense_pool(teams: list[TeamInfo]) -> list[dict]:
    """Team defenses in the same shape as players_at()."""
    return [{'id': t.id, 'name': defense_name(t), 'position': 'DEF', 'team': t.name} for t in teams]


def strip_defense_suffix(name: str) -> str:
    """'Kansas City Chiefs Defense' -> 'Kansas City Chiefs'."""
    name = name.strip()
    if name.endswith(DEFENSE_SUFFIX.strip()):
        name = name[: -len(DEFENSE_SUFFIX.strip())]
    return name.strip()


def find_team(teams: list[TeamInfo], defense: str) -> Optional[TeamInfo]:
    """Resolve a DEF slot value to a team by display name or nickname."""
    team_name = strip_defense_suffix(defense)
    for team in teams:
        if team.name == team_name or (team.nickname and team.nickname == team_name):
            return team
    return None
