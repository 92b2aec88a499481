"""NFL season/week resolution from the calendar.

The stats provider lists games by (week, season year, season type). When the
league config does not pin the season, it is derived from today's date:

- September-December: current year, regular season
- January-February: previous year's season, postseason
- March-August (off-season): current year, regular season, week 1

Regular-season weeks are capped at 18 and postseason weeks at 4.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .config import get_season_override
from .constants import (
    MAX_POSTSEASON_WEEK,
    MAX_REGULAR_SEASON_WEEK,
    SEASON_TYPE_POSTSEASON,
    SEASON_TYPE_REGULAR,
)


@dataclass(frozen=True)
class SeasonInfo:
    year: int
    season_type: int
    week: int


def _week_for(month: int, day: int) -> int:
    if month == 9:
        # Week 1 opens on the first Thursday after Labor Day, around Sept 5
        if day >= 5:
            return (day - 5) // 7 + 1
        return 1
    if month == 10:
        return 4 + math.ceil(day / 7)
    if month == 11:
        return 8 + math.ceil(day / 7)
    if month == 12:
        return 12 + math.ceil(day / 7)
    if month == 1:
        return 17 + math.ceil(day / 7)
    if month == 2:
        return 4  # Super Bowl
    return 1


def current_season_info(today: Optional[date] = None) -> SeasonInfo:
    """
    Estimate the NFL season year, season type and week for a date.

    Args:
        today: Date to evaluate (default: today)

    Returns:
        SeasonInfo for that date
    """
    today = today or date.today()
    month = today.month

    if month <= 2:
        year = today.year - 1
        season_type = SEASON_TYPE_POSTSEASON
    else:
        year = today.year
        season_type = SEASON_TYPE_REGULAR

    week = _week_for(month, today.day)
    if season_type == SEASON_TYPE_REGULAR:
        week = min(week, MAX_REGULAR_SEASON_WEEK)
    else:
        week = min(week, MAX_POSTSEASON_WEEK)

    return SeasonInfo(year=year, season_type=season_type, week=week)


def resolve_season(
    season_year: Optional[int] = None,
    season_type: Optional[int] = None,
    today: Optional[date] = None,
) -> SeasonInfo:
    """Explicit year/type win; anything left unset comes from the calendar."""
    derived = current_season_info(today)
    return SeasonInfo(
        year=season_year or derived.year,
        season_type=season_type or derived.season_type,
        week=derived.week,
    )


def configured_season(today: Optional[date] = None) -> SeasonInfo:
    """The season pinned in league_config.json, with unset parts from the calendar."""
    season_year, season_type = get_season_override()
    return resolve_season(season_year, season_type, today)
