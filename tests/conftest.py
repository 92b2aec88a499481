"""Shared fixtures: an in-memory stats provider and sample league data."""

from collections import Counter

import pytest

from pickfl.errors import ExternalServiceError
from pickfl.models import (
    BoxScore,
    BoxScoreEntry,
    GameResult,
    GameSummary,
    PlayerStatLookup,
    TeamInfo,
    TeamLine,
)
from pickfl.players import PlayerDirectory
from pickfl.schemas import Lineup, LineupSlots, Player
from pickfl.season import SeasonInfo
from pickfl.store import JsonStore


CHIEFS = TeamInfo(id='12', name='Kansas City Chiefs', nickname='Chiefs', abbreviation='KC')
BILLS = TeamInfo(id='2', name='Buffalo Bills', nickname='Bills', abbreviation='BUF')

PLAYERS = [
    Player(espn_id='3139477', name='Patrick Mahomes', position='QB'),
    Player(espn_id='3918298', name='Josh Allen', position='QB'),
    Player(espn_id='3043078', name='Derrick Henry', position='RB'),
    Player(espn_id='3929630', name='Saquon Barkley', position='RB'),
    Player(espn_id='3117251', name='Christian McCaffrey', position='RB'),
    Player(espn_id='4262921', name='Justin Jefferson', position='WR'),
    Player(espn_id='3116406', name='Tyreek Hill', position='WR'),
    Player(espn_id='4241389', name='CeeDee Lamb', position='WR'),
    Player(espn_id='15847', name='Travis Kelce', position='TE'),
    Player(espn_id='3054850', name='Harrison Butker', position='PK'),
]

LINEUP_NAMES = {
    'QB': 'Patrick Mahomes',
    'RB1': 'Derrick Henry',
    'RB2': 'Saquon Barkley',
    'WR1': 'Justin Jefferson',
    'WR2': 'Tyreek Hill',
    'TE': 'Travis Kelce',
    'FLEX': 'CeeDee Lamb',
    'PK': 'Harrison Butker',
    'DEF': 'Kansas City Chiefs Defense',
}


def game(game_id, completed=True, home=CHIEFS, away=BILLS, home_score=0, away_score=0):
    return GameSummary(
        id=game_id,
        name=f'{away.name} at {home.name}',
        short_name=f'{away.abbreviation} @ {home.abbreviation}',
        date='2025-09-07T17:00Z',
        status='STATUS_FINAL' if completed else 'STATUS_IN_PROGRESS',
        completed=completed,
        home=TeamLine(id=home.id, name=home.name, abbreviation=home.abbreviation, score=home_score),
        away=TeamLine(id=away.id, name=away.name, abbreviation=away.abbreviation, score=away_score),
    )


def entry(player_id, name, category, stats, team=CHIEFS):
    return BoxScoreEntry(
        player_id=player_id,
        player_name=name,
        team_id=team.id,
        team_name=team.name,
        position='',
        category=category,
        stats=stats,
    )


class FakeProvider:
    """Stats provider serving canned teams, games, box scores and results."""

    def __init__(self, teams=None, games=None, box_scores=None, results=None, errors=None):
        self.teams = teams if teams is not None else [CHIEFS, BILLS]
        self.games = games or {}
        self.box_scores = box_scores or {}
        self.results = results or {}
        self.errors = errors or {}
        self.calls = Counter()

    def list_teams(self):
        self.calls['list_teams'] += 1
        return list(self.teams)

    def list_games(self, week, season_year=None, season_type=None):
        self.calls['list_games'] += 1
        return list(self.games.get(week, []))

    def game_box_score(self, game_id):
        self.calls[f'box:{game_id}'] += 1
        if game_id in self.errors:
            raise ExternalServiceError(self.errors[game_id])
        return self.box_scores[game_id]

    def game_result(self, game_id):
        self.calls[f'result:{game_id}'] += 1
        if game_id in self.errors:
            raise ExternalServiceError(self.errors[game_id])
        return self.results.get(game_id, GameResult(completed=False, status='STATUS_SCHEDULED'))

    def player_stat(self, game_id, player_id, stat_name):
        box_score = self.game_box_score(game_id)
        if not box_score.completed:
            return PlayerStatLookup(completed=False)
        for e in box_score.entries:
            if e.player_id == player_id and stat_name in e.stats:
                return PlayerStatLookup(completed=True, found=True, stat_value=float(e.stats[stat_name]))
        return PlayerStatLookup(completed=True)


def make_lineup(user_id, week_number, **overrides):
    names = dict(LINEUP_NAMES, **overrides)
    return Lineup(user_id=user_id, week_number=week_number, slots=LineupSlots(**names))


@pytest.fixture
def week_one_provider():
    """Two finished games and one still in progress in week 1."""
    box_scores = {
        'g1': BoxScore(
            game_id='g1',
            completed=True,
            status='STATUS_FINAL',
            entries=[
                entry('3139477', 'Patrick Mahomes', 'passing',
                      {'C/ATT': '25/35', 'YDS': '250', 'TD': '2', 'INT': '1'}),
                entry('3139477', 'Patrick Mahomes', 'rushing', {'CAR': '3', 'YDS': '20', 'TD': '0'}),
                entry('15847', 'Travis Kelce', 'receiving', {'REC': '6', 'YDS': '70', 'TD': '1'}),
                entry('3054850', 'Harrison Butker', 'kicking', {'FG': '2/2', 'XP': '3/3', 'PTS': '9'}),
            ],
        ),
        'g2': BoxScore(
            game_id='g2',
            completed=True,
            status='STATUS_FINAL',
            entries=[
                entry('3043078', 'Derrick Henry', 'rushing', {'CAR': '22', 'YDS': '100', 'TD': '1'}),
            ],
        ),
        'g3': BoxScore(
            game_id='g3',
            completed=False,
            status='STATUS_IN_PROGRESS',
            entries=[
                entry('4262921', 'Justin Jefferson', 'receiving', {'REC': '5', 'YDS': '50', 'TD': '0'}),
            ],
        ),
    }
    games = {1: [game('g1', home_score=31, away_score=24), game('g2'), game('g3', completed=False)]}
    return FakeProvider(games=games, box_scores=box_scores)


@pytest.fixture
def directory():
    return PlayerDirectory.from_records(PLAYERS)


@pytest.fixture
def store(tmp_path):
    return JsonStore(tmp_path / 'data')


@pytest.fixture
def season():
    return SeasonInfo(year=2025, season_type=2, week=1)
