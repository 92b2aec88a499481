"""Derive correct answers for questions from live game results.

Supported AutoScoreConfig types:

    game_winner             {game_id}                         -> winning option / tie option
    team_wins               {game_id, team_id}                -> 'Yes' / 'No'
    score_over_under        {game_id, threshold}              -> 'Over' / 'Under'
    player_stat_over_under  {game_id, player_id, stat_name,   -> 'Over' / 'Under'
                             threshold}

Anything that cannot be decided yet (game not final, provider failure,
incomplete config, unknown type) is left unresolved as None.
"""

import logging
from typing import Any, Optional, Sequence

from .constants import AUTO_SCORE_TYPES
from .errors import ExternalServiceError
from .models import GameResult
from .schemas import AutoScoreConfig, Question

logger = logging.getLogger('pickfl.auto_score')


class _ResultCache:
    """Fetch each game's result once per auto-scoring pass."""

    def __init__(self, provider):
        self.provider = provider
        self._results: dict[str, GameResult] = {}

    def get(self, game_id: str) -> GameResult:
        if game_id not in self._results:
            self._results[game_id] = self.provider.game_result(game_id)
        return self._results[game_id]


def _over_under(value: float, threshold: float) -> str:
    return 'Over' if value > threshold else 'Under'


def _game_winner(question: Question, result: GameResult) -> Optional[str]:
    if result.tie:
        for option in question.options:
            lowered = option.lower()
            if 'tie' in lowered or 'draw' in lowered:
                return option
        return None
    for option in question.options:
        if option == result.winner_name or (result.winner_id and result.winner_id in option):
            return option
    return None


def resolve_auto_answer(question: Question, provider, cache: Optional[_ResultCache] = None) -> Any:
    """
    Work out one question's correct answer from game data.

    Raises:
        ExternalServiceError: If the provider call fails
    """
    config: Optional[AutoScoreConfig] = question.auto_score
    if config is None:
        return None
    cache = cache or _ResultCache(provider)

    if config.type not in AUTO_SCORE_TYPES:
        logger.warning(f'Unknown auto-score type: {config.type}')
        return None

    if not config.game_id:
        logger.warning(f'Auto-score config for {question.question!r} has no game_id')
        return None

    if config.type == 'game_winner':
        result = cache.get(config.game_id)
        if not result.completed:
            return None
        return _game_winner(question, result)

    if config.type == 'team_wins':
        if not config.team_id:
            logger.warning(f'team_wins config for {question.question!r} has no team_id')
            return None
        result = cache.get(config.game_id)
        if not result.completed:
            return None
        return 'Yes' if result.winner_id == str(config.team_id) else 'No'

    if config.type == 'score_over_under':
        if config.threshold is None:
            logger.warning(f'score_over_under config for {question.question!r} has no threshold')
            return None
        result = cache.get(config.game_id)
        if not result.completed:
            return None
        return _over_under(result.total_score, config.threshold)

    if config.type == 'player_stat_over_under':
        if config.threshold is None or not config.player_id or not config.stat_name:
            logger.warning(f'player_stat_over_under config for {question.question!r} is incomplete')
            return None
        lookup = provider.player_stat(config.game_id, config.player_id, config.stat_name)
        if not lookup.completed:
            return None
        # A player with no line in a finished game counts as zero
        value = lookup.stat_value if lookup.found else 0.0
        return _over_under(value, config.threshold)

    return None


def auto_score_questions(questions: Sequence[Question], provider) -> list[Any]:
    """
    Derive answers for every question that carries an auto-score config.

    Provider failures only affect the question being resolved.

    Returns:
        One answer per question; None where nothing could be determined
    """
    cache = _ResultCache(provider)
    answers = []
    for i, question in enumerate(questions):
        if question.auto_score is None:
            answers.append(None)
            continue
        try:
            answers.append(resolve_auto_answer(question, provider, cache))
        except ExternalServiceError as e:
            logger.error(f'Error auto-scoring question {i}: {e}')
            answers.append(None)
    return answers
