"""Player reference data synchronization from nflverse.

players.json is the lookup table that maps lineup display names to ESPN
athlete ids. It is rebuilt from the nflverse fantasy player-id crosswalk
(nflreadpy.load_ff_playerids), which carries each player's ESPN id, display
name and position.
"""

import logging
from pathlib import Path

import polars as pl

try:
    import nflreadpy as nfl
except ImportError:
    raise ImportError("Please install nflreadpy: pip install nflreadpy")

from .constants import PLAYER_POSITIONS, POSITION_NORMALIZE
from .players import PlayerDirectory
from .schemas import Player, PlayersFile
from .utils import save_json

logger = logging.getLogger('pickfl.player_sync')


def normalize_player_ids(ids: pl.DataFrame) -> pl.DataFrame:
    """
    Reduce the nflverse id crosswalk to (espn_id, name, position).

    Keeps QB/RB/WR/TE/K (kickers renamed PK), drops rows without an ESPN id
    and de-duplicates on ESPN id.
    """
    frame = ids.select(
        pl.col('espn_id').cast(pl.Float64, strict=False).cast(pl.Int64, strict=False).cast(pl.Utf8).alias('espn_id'),
        pl.col('name').cast(pl.Utf8).str.strip_chars().alias('name'),
        pl.col('position').cast(pl.Utf8).replace(POSITION_NORMALIZE).alias('position'),
    )
    return (
        frame.filter(
            pl.col('espn_id').is_not_null()
            & pl.col('name').is_not_null()
            & (pl.col('name') != '')
            & pl.col('position').is_in(list(PLAYER_POSITIONS))
        )
        .unique(subset='espn_id', keep='first', maintain_order=True)
        .sort(['position', 'name'])
    )


def fetch_players() -> list[Player]:
    """Download the id crosswalk and convert it to Player records."""
    logger.info('Loading fantasy player ids from nflverse...')
    frame = normalize_player_ids(nfl.load_ff_playerids())
    return [Player(**row) for row in frame.iter_rows(named=True)]


def sync_players(players_path: str | Path) -> list[Player]:
    """
    Rebuild players.json from nflverse.

    Names shared by several players are logged: lineups identify players by
    name, so those players cannot be told apart.

    Args:
        players_path: Where to write players.json

    Returns:
        The players written
    """
    players = fetch_players()

    for name in PlayerDirectory.from_records(players).duplicate_names():
        logger.warning(f'Player name {name!r} is not unique in reference data')

    save_json(players_path, PlayersFile(players=players))
    logger.info(f'Wrote {len(players)} players to {players_path}')
    return players
