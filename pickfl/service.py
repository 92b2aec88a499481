"""League operations used by the HTTP layer and the admin CLI.

Caller identity (user id, admin rights) is established by the caller; nothing
here authenticates. User-facing writes (responses, lineups) are only accepted
for the active week.
"""

import logging
from typing import Any, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from .auto_score import auto_score_questions
from .config import get_points_per_question
from .constants import FLEX_POSITIONS, POOL_POSITIONS
from .edit_locks import EditLockRegistry, apply_response
from .eligibility import filter_available, used_player_names, validate_new_lineup
from .errors import NotFoundError, PersistenceError, ValidationError, EditsLockedError
from .lineup_scorer import LineupScorer
from .models import QuestionScoringReport, ScoreFailure, WeekLineupReport
from .pick_engine import merge_correct_answers, record_week_score, tally_scores
from .players import PlayerDirectory, defense_pool
from .schemas import ActiveWeekPointer, Lineup, Question, UserResponse, WeekInformation
from .season import SeasonInfo
from .store import JsonStore
from .utils import utc_timestamp
from .validators import validate_correct_answers, validate_lineup_slots, validate_response_shape

logger = logging.getLogger('pickfl.service')


class LeagueService:
    """Weekly pick'em and fantasy lineup operations over a JsonStore."""

    def __init__(
        self,
        store: JsonStore,
        provider,
        directory: Optional[PlayerDirectory] = None,
        points_per_question: Optional[int] = None,
        season: Optional[SeasonInfo] = None,
    ):
        self.store = store
        self.provider = provider
        self.directory = directory or PlayerDirectory.from_records(store.load_players())
        self.points_per_question = (
            points_per_question if points_per_question is not None else get_points_per_question()
        )
        self.scorer = LineupScorer(provider, store, self.directory, season)

    # Week lifecycle

    def active_week(self) -> ActiveWeekPointer:
        return self.store.load_active_week()

    def _require_active(self, week_number: int) -> None:
        try:
            active = self.store.load_active_week()
        except NotFoundError:
            raise ValidationError('No current week found') from None
        if active.week_number != week_number:
            raise ValidationError(
                f'Week {week_number} is not accepting submissions (current week is {active.week_number})'
            )

    def _load_week(self, week_number: int) -> WeekInformation:
        week = self.store.load_week(week_number)
        if week.align():
            logger.info(f'Re-aligned answers and locks of week {week_number}')
        return week

    def create_new_week(self, questions: Sequence[Question | dict]) -> ActiveWeekPointer:
        """
        Publish the next week and make it the active one.

        The current week is retired (is_current=False) and the new week gets
        the next number, all questions editable and lineup edits allowed.
        With no week published yet, week 1 is created.
        """
        try:
            parsed = [q if isinstance(q, Question) else Question.model_validate(q) for q in questions]
        except PydanticValidationError as e:
            raise ValidationError(f'Invalid question: {e}') from e
        if len({q.id for q in parsed}) != len(parsed):
            raise ValidationError('Question ids must be unique')

        try:
            previous = self.store.load_active_week()
        except NotFoundError:
            previous = None

        if previous is not None:
            old_week = self.store.load_week(previous.week_number)
            old_week.is_current = False
            self.store.save_week(old_week)
            week_number = previous.week_number + 1
        else:
            existing = self.store.week_numbers()
            week_number = existing[-1] + 1 if existing else 1

        new_week = WeekInformation(
            week_number=week_number,
            questions=parsed,
            correct_answers=[None] * len(parsed),
            question_edit_locks={q.id: True for q in parsed},
            lineup_edits_allowed=True,
            is_current=True,
        )
        self.store.save_week(new_week)

        pointer = ActiveWeekPointer(week_number=week_number)
        self.store.save_active_week(pointer)
        logger.info(f'Created week {week_number} with {len(parsed)} questions')
        return pointer

    def set_lineup_edits(self, week_number: int, allowed: bool) -> None:
        if not isinstance(allowed, bool):
            raise ValidationError(f'Edit permission must be a boolean, got {allowed!r}')
        week = self._load_week(week_number)
        week.lineup_edits_allowed = allowed
        self.store.save_week(week)

    def set_question_lock(self, week_number: int, index: int, allowed: bool) -> list[bool]:
        """
        Allow or forbid edits to one question of a week.

        Returns:
            The week's edit permissions in question order
        """
        week = self._load_week(week_number)
        registry = EditLockRegistry.for_week(week)
        registry.set_lock(index, allowed)
        week.question_edit_locks = registry.as_mapping()
        self.store.save_week(week)
        return registry.as_vector()

    def set_correct_answers(self, week_number: int, answers: Sequence[Any]) -> list[Any]:
        """Store admin-entered correct answers (lists allow several correct values)."""
        week = self._load_week(week_number)
        answers = validate_correct_answers(answers, week.questions)
        week.correct_answers = answers
        week.align()
        self.store.save_week(week)
        return week.correct_answers

    # Pick responses

    def find_or_create_response(self, week_number: int, user_id: str) -> list[Any]:
        """A user's answers for the week, creating an empty vector on first visit."""
        week = self._load_week(week_number)
        response = week.find_response(user_id)
        if response is not None:
            return list(response.answers)

        self._require_active(week_number)
        response = UserResponse(
            user_id=user_id,
            answers=[None] * len(week.questions),
            last_modified=utc_timestamp(),
        )
        week.responses.append(response)
        self.store.save_week(week)
        return list(response.answers)

    def apply_response_edit(self, week_number: int, user_id: str, incoming: Any) -> list[Any]:
        """
        Save a user's picks, honouring per-question edit locks.

        Locked questions keep their stored answer whatever the client sends.

        Returns:
            The stored answer vector after the edit

        Raises:
            ValidationError: On a malformed vector or a week that is not active
        """
        choices = validate_response_shape(incoming)
        self._require_active(week_number)

        week = self._load_week(week_number)
        locks = EditLockRegistry.for_week(week).as_vector()

        response = week.find_response(user_id)
        if response is None:
            response = UserResponse(user_id=user_id, answers=[None] * len(week.questions))
            week.responses.append(response)

        response.answers = apply_response(response.answers, choices, locks)
        response.last_modified = utc_timestamp()
        self.store.save_week(week)
        return list(response.answers)

    def merge_and_score_questions(self, week_number: int) -> QuestionScoringReport:
        """
        Auto-score what can be derived, merge with manual answers, tally picks.

        Each user's score goes into their cumulative scores at index
        week_number - 1. A user that cannot be updated is reported in
        failures and does not stop the others.
        """
        week = self._load_week(week_number)

        auto_answers = auto_score_questions(week.questions, self.provider)
        merged = merge_correct_answers(auto_answers, week.correct_answers, week.questions)
        week.correct_answers = merged
        self.store.save_week(week)

        report = QuestionScoringReport(
            week_number=week_number,
            correct_answers=merged,
            auto_resolved=sum(1 for a in auto_answers if a is not None),
        )

        scores = tally_scores(week.responses, merged, self.points_per_question)
        for user_id, score in scores.items():
            try:
                user = self.store.load_user(user_id)
                user.scores = record_week_score(user.scores, week_number, score)
                self.store.save_user(user)
                report.user_scores[user_id] = score
            except (NotFoundError, PersistenceError) as e:
                logger.error(f'Could not record week {week_number} score for {user_id}: {e}')
                report.failures.append(ScoreFailure(user_id, str(e)))

        logger.info(
            f'Week {week_number}: {report.auto_resolved} answers auto-resolved, '
            f'{len(report.user_scores)} users scored, {len(report.failures)} failed'
        )
        return report

    def responses_table(self, week_number: int) -> tuple[list[str], list[list[Any]]]:
        """
        Admin view of a week's picks.

        Returns:
            Tuple of (header, rows); header is Username followed by the
            question texts, each row a username followed by that user's answers
        """
        week = self._load_week(week_number)
        header = ['Username'] + [q.question for q in week.questions]
        rows = []
        for response in week.responses:
            try:
                username = self.store.load_user(response.user_id).username
            except NotFoundError:
                username = response.user_id
            rows.append([username] + list(response.answers))
        return header, rows

    # Fantasy lineups

    def submit_lineup(self, user_id: str, week_number: int, candidate: Any) -> tuple[Lineup, bool]:
        """
        Create or replace a user's lineup for the active week.

        Returns:
            Tuple of (stored lineup, created) where created is False on update

        Raises:
            ValidationError: Missing slots or week not active
            EditsLockedError: Lineup edits are disabled for the week
            DuplicateInLineupError: A name fills more than one slot
            PlayerReusedError: Names used in earlier weeks
        """
        slots = validate_lineup_slots(candidate)
        self._require_active(week_number)

        week = self.store.load_week(week_number)
        if not week.lineup_edits_allowed:
            raise EditsLockedError(week_number)

        existing = self.store.find_lineup(user_id, week_number)
        if existing is not None:
            lineup = existing
            lineup.slots = slots
        else:
            lineup = Lineup(user_id=user_id, week_number=week_number, slots=slots)
        lineup.submitted_at = utc_timestamp()

        validate_new_lineup(lineup, self.store.lineups_for_user(user_id))

        self.store.save_lineup(lineup)
        logger.info(f'{"Created" if existing is None else "Updated"} week {week_number} lineup for {user_id}')
        return lineup, existing is None

    def score_week_lineups(self, week_number: int) -> WeekLineupReport:
        """Score every lineup of a week (see LineupScorer.calculate_all_for_week)."""
        self.store.load_week(week_number)
        return self.scorer.calculate_all_for_week(week_number)

    def available_players(self, user_id: str, position: str, week_number: int) -> list[dict] | dict:
        """
        Players a user may still pick for a position in a week.

        Names used in the user's lineups for earlier weeks are excluded.
        position 'ALL' returns a dict of every pool, FLEX included.
        """
        if position not in POOL_POSITIONS:
            raise ValidationError(
                f'Invalid position. Must be one of: {", ".join(POOL_POSITIONS)}'
            )

        used = used_player_names(self.store.lineups_for_user(user_id), week_number)

        def pool(pos: str) -> list[dict]:
            if pos == 'DEF':
                return defense_pool(self.provider.list_teams())
            return self.directory.players_at(pos)

        if position != 'ALL':
            return filter_available(pool(position), used)

        pools = {pos: filter_available(pool(pos), used) for pos in ('QB', 'RB', 'WR', 'TE', 'PK', 'DEF')}
        pools['FLEX'] = [p for pos in FLEX_POSITIONS for p in pools[pos]]
        return pools

    def player_history(self, user_id: str) -> dict:
        """Every name a user has played, plus their lineups by week."""
        lineups = self.store.lineups_for_user(user_id)
        used: list[str] = []
        for lineup in lineups:
            for name in lineup.slots.names():
                if name not in used:
                    used.append(name)
        return {
            'user_id': user_id,
            'total_weeks': len(lineups),
            'used_players': used,
            'history_by_week': {l.week_number: dict(l.slots.items()) for l in lineups},
        }

    def leaderboard(self, week_number: int) -> list[dict]:
        """Lineups of a week ranked by total points."""
        lineups = sorted(
            self.store.lineups_for_week(week_number), key=lambda l: l.total_points, reverse=True
        )
        board = []
        for rank, lineup in enumerate(lineups, 1):
            try:
                username = self.store.load_user(lineup.user_id).username
            except NotFoundError:
                username = lineup.user_id
            board.append(
                {
                    'rank': rank,
                    'username': username,
                    'user_id': lineup.user_id,
                    'total_points': lineup.total_points,
                    **dict(lineup.slots.items()),
                }
            )
        return board
