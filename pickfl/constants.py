"""Constants and mappings for the PICKFL scoring engine."""

# Lineup slots in submission order
LINEUP_SLOTS = ['QB', 'RB1', 'RB2', 'WR1', 'WR2', 'TE', 'FLEX', 'PK', 'DEF']

# FLEX is the union of these pools
FLEX_POSITIONS = ('RB', 'WR', 'TE')

# Positions kept in players.json
PLAYER_POSITIONS = ('QB', 'RB', 'WR', 'TE', 'PK')

# Positions accepted by available_players()
POOL_POSITIONS = ('QB', 'RB', 'WR', 'TE', 'PK', 'DEF', 'FLEX', 'ALL')

# nflreadpy position -> players.json position
POSITION_NORMALIZE = {
    'K': 'PK',
}

# Team defenses are entered as "<team display name> Defense"
DEFENSE_SUFFIX = ' Defense'

QUESTION_TYPES = ('text', 'number', 'single-select', 'multi-select')

AUTO_SCORE_TYPES = (
    'game_winner',
    'team_wins',
    'score_over_under',
    'player_stat_over_under',
)

# ESPN season types
SEASON_TYPE_REGULAR = 2
SEASON_TYPE_POSTSEASON = 3

MAX_REGULAR_SEASON_WEEK = 18
MAX_POSTSEASON_WEEK = 4

ESPN_API_BASE = 'https://site.api.espn.com/apis/site/v2/sports/football/nfl'

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')

# Third-party loggers kept at WARNING unless running verbose
NOISY_LOGGERS = ('urllib3', 'requests')
