"""NFL game data from ESPN's public site API."""

import logging
from typing import Optional

import requests

from .config import get_espn_api_base, get_request_timeout
from .errors import ExternalServiceError
from .models import (
    BoxScore,
    BoxScoreEntry,
    GameResult,
    GameSummary,
    PlayerStatLookup,
    TeamInfo,
    TeamLine,
)
from .ppr import parse_stat_value
from .season import configured_season

logger = logging.getLogger('pickfl.stats_provider')


def _parse_score(value) -> int:
    number = parse_stat_value(value)
    return int(number) if number is not None else 0


def _team_line(competitor: dict) -> TeamLine:
    team = competitor.get('team', {})
    return TeamLine(
        id=str(competitor.get('id') or team.get('id', '')),
        name=team.get('displayName', ''),
        abbreviation=team.get('abbreviation', ''),
        score=_parse_score(competitor.get('score')),
        winner=bool(competitor.get('winner', False)),
    )


def _home_and_away(competition: dict) -> tuple[dict, dict]:
    competitors = competition['competitors']
    home = next(c for c in competitors if c.get('homeAway') == 'home')
    away = next(c for c in competitors if c.get('homeAway') == 'away')
    return home, away


class ESPNStatsProvider:
    """
    Thin client over ESPN's scoreboard, summary and teams endpoints.

    Every transport or payload problem surfaces as ExternalServiceError. A game
    that has not finished is a normal outcome (completed=False), never an error.
    Nothing is retried here; callers decide.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or get_espn_api_base()).rstrip('/')
        self.timeout = timeout if timeout is not None else get_request_timeout()
        self.session = session or requests.Session()

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        url = f'{self.base_url}/{path}'
        logger.debug(f'GET {url} {params or {}}')
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error(f'Request to {url} failed: {e}')
            raise ExternalServiceError(f'Request to {path} failed: {e}') from e
        except ValueError as e:
            logger.error(f'Invalid JSON from {url}: {e}')
            raise ExternalServiceError(f'Invalid JSON from {path}') from e

    def _summary(self, game_id: str) -> tuple[dict, dict]:
        data = self._get('summary', params={'event': game_id})
        try:
            competition = data['header']['competitions'][0]
        except (KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError(f'Malformed summary for game {game_id}') from e
        return data, competition

    def list_teams(self) -> list[TeamInfo]:
        """Fetch all NFL teams."""
        data = self._get('teams')
        try:
            teams = data['sports'][0]['leagues'][0]['teams']
            return [
                TeamInfo(
                    id=str(t['team']['id']),
                    name=t['team']['displayName'],
                    nickname=t['team'].get('name', ''),
                    abbreviation=t['team'].get('abbreviation', ''),
                    logo=(t['team'].get('logos') or [{}])[0].get('href'),
                )
                for t in teams
            ]
        except (KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError('Malformed teams payload') from e

    def list_games(
        self,
        week: int,
        season_year: Optional[int] = None,
        season_type: Optional[int] = None,
    ) -> list[GameSummary]:
        """
        Fetch the scoreboard for one week.

        Args:
            week: Week number (1-18 regular season, 1-5 postseason)
            season_year: Season year (default: league config pin, else today's date)
            season_type: 2=regular, 3=postseason (default: league config pin, else today's date)

        Returns:
            List of GameSummary objects
        """
        pinned = configured_season()
        data = self._get(
            'scoreboard',
            params={
                'seasontype': season_type or pinned.season_type,
                'week': week,
                'dates': season_year or pinned.year,
            },
        )
        try:
            games = []
            for event in data['events']:
                competition = event['competitions'][0]
                home, away = _home_and_away(competition)
                status = competition['status']['type']
                games.append(
                    GameSummary(
                        id=str(event['id']),
                        name=event.get('name', ''),
                        short_name=event.get('shortName', ''),
                        date=event.get('date', ''),
                        status=status.get('name', ''),
                        completed=bool(status.get('completed', False)),
                        home=_team_line(home),
                        away=_team_line(away),
                    )
                )
            return games
        except (KeyError, IndexError, TypeError, StopIteration) as e:
            raise ExternalServiceError(f'Malformed scoreboard for week {week}') from e

    def game_result(self, game_id: str) -> GameResult:
        """Get the final result (winner, tie, scores) of one game."""
        _data, competition = self._summary(game_id)
        try:
            status = competition['status']['type']
            if not status.get('completed'):
                return GameResult(completed=False, status=status.get('name', ''))

            home_raw, away_raw = _home_and_away(competition)
            home = _team_line(home_raw)
            away = _team_line(away_raw)
        except (KeyError, IndexError, TypeError, StopIteration) as e:
            raise ExternalServiceError(f'Malformed summary for game {game_id}') from e

        home.winner = home.score > away.score
        away.winner = away.score > home.score
        result = GameResult(completed=True, status=status.get('name', ''), home=home, away=away)

        if home.score == away.score:
            result.tie = True
            result.winner_name = 'Tie'
        elif home.winner:
            result.winner_id, result.winner_name = home.id, home.name
        else:
            result.winner_id, result.winner_name = away.id, away.name
        return result

    def game_box_score(self, game_id: str) -> BoxScore:
        """
        Get every player's stat lines for one game.

        Lines are parsed even for games in progress; the completed flag tells
        the caller whether they count.
        """
        data, competition = self._summary(game_id)
        try:
            status = competition['status']['type']
            box_score = BoxScore(
                game_id=str(game_id),
                completed=bool(status.get('completed', False)),
                status=status.get('name', ''),
            )

            for team_data in (data.get('boxscore') or {}).get('players') or []:
                team = team_data.get('team', {})
                for category in team_data.get('statistics', []):
                    labels = category.get('labels') or []
                    for athlete in category.get('athletes') or []:
                        person = athlete['athlete']
                        values = athlete.get('stats') or []
                        box_score.entries.append(
                            BoxScoreEntry(
                                player_id=str(person['id']),
                                player_name=person.get('displayName', ''),
                                team_id=str(team.get('id', '')),
                                team_name=team.get('displayName', ''),
                                position=(person.get('position') or {}).get('abbreviation', ''),
                                category=category.get('name', ''),
                                stats=dict(zip(labels, values)),
                            )
                        )
            return box_score
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ExternalServiceError(f'Malformed box score for game {game_id}') from e

    def player_stat(self, game_id: str, player_id: str, stat_name: str) -> PlayerStatLookup:
        """
        Look up one stat (e.g. 'TD', 'REC', 'YDS') for a player in a game.

        The first category with a numeric value for the label wins. A player
        without any line in a completed game is reported as found=False with
        a value of 0.
        """
        box_score = self.game_box_score(game_id)
        if not box_score.completed:
            return PlayerStatLookup(completed=False)

        entries = [e for e in box_score.entries if e.player_id == str(player_id)]
        if not entries:
            return PlayerStatLookup(completed=True, found=False, stat_value=0.0)

        wanted = stat_name.upper()
        for entry in entries:
            for label, value in entry.stats.items():
                if label.upper() != wanted:
                    continue
                number = parse_stat_value(value)
                if number is not None:
                    return PlayerStatLookup(
                        completed=True,
                        found=True,
                        stat_value=number,
                        player_name=entry.player_name,
                    )

        return PlayerStatLookup(
            completed=True, found=True, stat_value=0.0, player_name=entries[0].player_name
        )
