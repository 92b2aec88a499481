"""League configuration management."""

import logging
from functools import lru_cache
from pathlib import Path

from .schemas import LeagueConfig
from .utils import load_json

CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'league_config.json'


@lru_cache(maxsize=1)
def get_config() -> LeagueConfig:
    """
    Load league configuration from data/league_config.json.

    Configuration is cached after first load.

    Returns:
        LeagueConfig object with validated settings

    Raises:
        FileNotFoundError: If league_config.json doesn't exist
        PersistenceError: If config file has invalid structure

    Example:
        from pickfl.config import get_config
        config = get_config()
        print(f"Points per question: {config.points_per_question}")
    """
    return load_json(CONFIG_PATH, schema=LeagueConfig)


def get_points_per_question() -> int:
    """Get the points awarded for each correct pick."""
    return get_config().points_per_question


def get_season_override() -> tuple[int | None, int | None]:
    """Get explicit (season_year, season_type); None means derive from the date."""
    config = get_config()
    return config.season_year, config.season_type


def get_log_level() -> int:
    """Get the configured logging level as a logging module constant."""
    return logging.getLevelName(get_config().log_level)


def get_espn_api_base() -> str:
    """Get the ESPN site API base URL."""
    return get_config().espn_api_base


def get_request_timeout() -> float:
    """Get the HTTP timeout (seconds) for stats provider calls."""
    return get_config().request_timeout


def get_data_dir() -> Path:
    """Get the data directory, resolved against the repository root."""
    data_dir = Path(get_config().data_dir)
    if not data_dir.is_absolute():
        data_dir = CONFIG_PATH.parent.parent / data_dir
    return data_dir


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
