"""Integration tests for league workflows through LeagueService."""

import pytest

from pickfl.errors import (
    DuplicateInLineupError,
    EditsLockedError,
    InvalidIndexError,
    PlayerReusedError,
    ValidationError,
)
from pickfl.models import GameResult, TeamLine
from pickfl.schemas import UserRecord
from pickfl.service import LeagueService

from conftest import LINEUP_NAMES, make_lineup

QUESTIONS = [
    {
        'id': 'winner',
        'question': 'Who wins BUF @ KC?',
        'options': ['Kansas City Chiefs', 'Buffalo Bills', 'Tie'],
        'auto_score': {'type': 'game_winner', 'game_id': 'g1'},
    },
    {'id': 'mvp', 'question': 'Who scores first?', 'options': ['X', 'Y', 'Z']},
    {'id': 'yards', 'question': 'Over/under 300 passing yards?', 'options': ['Over', 'Under']},
]

WEEK_TWO_NAMES = {
    'QB': 'Josh Allen',
    'RB1': 'Christian McCaffrey',
    'RB2': 'Breece Hall',
    'WR1': 'Puka Nacua',
    'WR2': 'Garrett Wilson',
    'TE': 'Trey McBride',
    'FLEX': 'Amon-Ra St. Brown',
    'PK': 'Justin Tucker',
    'DEF': 'Buffalo Bills Defense',
}


def _chiefs_win():
    home = TeamLine(id='12', name='Kansas City Chiefs', abbreviation='KC', score=31)
    away = TeamLine(id='2', name='Buffalo Bills', abbreviation='BUF', score=24)
    return GameResult(
        completed=True,
        status='STATUS_FINAL',
        home=home,
        away=away,
        winner_id='12',
        winner_name='Kansas City Chiefs',
    )


@pytest.fixture
def service(store, week_one_provider, directory, season):
    week_one_provider.results['g1'] = _chiefs_win()
    store.save_user(UserRecord(user_id='u1', username='alice'))
    store.save_user(UserRecord(user_id='u2', username='bob'))
    return LeagueService(store, week_one_provider, directory, points_per_question=30, season=season)


class TestWeekLifecycle:
    def test_first_week(self, service, store):
        pointer = service.create_new_week(QUESTIONS)
        assert pointer.week_number == 1
        week = store.load_week(1)
        assert week.is_current
        assert week.lineup_edits_allowed
        assert week.question_edit_locks == {'winner': True, 'mvp': True, 'yards': True}
        assert week.correct_answers == [None, None, None]

    def test_next_week_retires_current(self, service, store):
        service.create_new_week(QUESTIONS)
        pointer = service.create_new_week(QUESTIONS[:1])
        assert pointer.week_number == 2
        assert service.active_week().week_number == 2
        assert not store.load_week(1).is_current
        assert store.load_week(2).is_current

    def test_duplicate_question_ids(self, service):
        with pytest.raises(ValidationError):
            service.create_new_week([QUESTIONS[1], QUESTIONS[1]])

    def test_invalid_question(self, service):
        with pytest.raises(ValidationError, match='Invalid question'):
            service.create_new_week([{'question': 'Pick one', 'type': 'dropdown'}])

    def test_lineup_edits_toggle(self, service, store):
        service.create_new_week(QUESTIONS)
        service.set_lineup_edits(1, False)
        assert not store.load_week(1).lineup_edits_allowed
        with pytest.raises(ValidationError):
            service.set_lineup_edits(1, 'yes')


class TestResponses:
    def test_find_or_create(self, service, store):
        service.create_new_week(QUESTIONS)
        assert service.find_or_create_response(1, 'u1') == [None, None, None]
        assert store.load_week(1).find_response('u1') is not None
        assert service.find_or_create_response(1, 'u1') == [None, None, None]
        assert len(store.load_week(1).responses) == 1

    def test_submit_and_resubmit_with_lock(self, service):
        service.create_new_week(QUESTIONS)
        assert service.apply_response_edit(1, 'u1', ['Buffalo Bills', 'X', 'Over']) == [
            'Buffalo Bills', 'X', 'Over',
        ]

        assert service.set_question_lock(1, 0, False) == [False, True, True]
        stored = service.apply_response_edit(1, 'u1', ['Kansas City Chiefs', 'Y', 'Under'])
        assert stored == ['Buffalo Bills', 'Y', 'Under']

    def test_locked_question_on_first_submission(self, service):
        service.create_new_week(QUESTIONS)
        service.set_question_lock(1, 2, False)
        assert service.apply_response_edit(1, 'u2', ['Tie', 'Z', 'Over']) == ['Tie', 'Z', None]

    def test_multiple_answers_rejected(self, service):
        service.create_new_week(QUESTIONS)
        with pytest.raises(ValidationError):
            service.apply_response_edit(1, 'u1', [['Kansas City Chiefs', 'Tie'], 'X', 'Over'])

    def test_retired_week_rejected(self, service):
        service.create_new_week(QUESTIONS)
        service.create_new_week(QUESTIONS)
        with pytest.raises(ValidationError):
            service.apply_response_edit(1, 'u1', ['Tie', 'X', 'Over'])

    def test_lock_index_out_of_range(self, service):
        service.create_new_week(QUESTIONS)
        with pytest.raises(InvalidIndexError):
            service.set_question_lock(1, 3, False)

    def test_responses_table(self, service):
        service.create_new_week(QUESTIONS)
        service.apply_response_edit(1, 'u1', ['Tie', 'X', 'Over'])
        service.apply_response_edit(1, 'ghost', ['Tie'])
        header, rows = service.responses_table(1)
        assert header[0] == 'Username'
        assert header[1] == 'Who wins BUF @ KC?'
        assert rows == [['alice', 'Tie', 'X', 'Over'], ['ghost', 'Tie', None, None]]


class TestScorePicks:
    def test_auto_and_manual_answers_merged(self, service, store):
        service.create_new_week(QUESTIONS)
        service.set_correct_answers(1, [None, ['Y', 'Z']])
        service.apply_response_edit(1, 'u1', ['Kansas City Chiefs', 'Z', 'Over'])
        service.apply_response_edit(1, 'u2', ['Buffalo Bills', 'Y', None])

        report = service.merge_and_score_questions(1)

        assert report.auto_resolved == 1
        assert report.correct_answers == ['Kansas City Chiefs', ['Y', 'Z'], None]
        assert report.user_scores == {'u1': 60.0, 'u2': 30.0}
        assert store.load_week(1).correct_answers == ['Kansas City Chiefs', ['Y', 'Z'], None]
        assert store.load_user('u1').scores == [60.0]

    def test_scores_written_at_week_index(self, service, store):
        service.create_new_week(QUESTIONS)
        service.create_new_week(QUESTIONS)
        service.apply_response_edit(2, 'u1', ['Kansas City Chiefs', None, None])
        service.merge_and_score_questions(2)
        assert store.load_user('u1').scores == [0.0, 30.0]

    def test_rescoring_replaces_week_score(self, service, store):
        service.create_new_week(QUESTIONS)
        service.apply_response_edit(1, 'u1', ['Kansas City Chiefs', 'X', 'Over'])
        service.merge_and_score_questions(1)
        service.set_correct_answers(1, [None, 'X', 'Over'])
        service.merge_and_score_questions(1)
        assert store.load_user('u1').scores == [90.0]

    def test_unknown_user_reported(self, service, store):
        service.create_new_week(QUESTIONS)
        service.apply_response_edit(1, 'ghost', ['Kansas City Chiefs', None, None])
        service.apply_response_edit(1, 'u1', ['Kansas City Chiefs', None, None])

        report = service.merge_and_score_questions(1)

        assert [f.key for f in report.failures] == ['ghost']
        assert report.user_scores == {'u1': 30.0}
        assert store.load_user('u1').scores == [30.0]

    def test_too_many_correct_answers(self, service):
        service.create_new_week(QUESTIONS)
        with pytest.raises(ValidationError):
            service.set_correct_answers(1, ['A', 'B', 'C', 'D'])

    @pytest.mark.parametrize('answers', [[['X', ['Y']]], [{'X', 'Y'}]])
    def test_malformed_answers_leave_week_readable(self, service, store, answers):
        service.create_new_week(QUESTIONS)
        service.set_correct_answers(1, [None, 'X'])

        with pytest.raises(ValidationError):
            service.set_correct_answers(1, answers)

        week = store.load_week(1)
        assert week.correct_answers == [None, 'X', None]
        assert not list(store.data_dir.rglob('*.tmp'))


class TestLineups:
    def test_create_then_update(self, service, store):
        service.create_new_week(QUESTIONS)
        lineup, created = service.submit_lineup('u1', 1, dict(LINEUP_NAMES))
        assert created
        assert lineup.submitted_at is not None

        lineup, created = service.submit_lineup('u1', 1, dict(LINEUP_NAMES, QB='Josh Allen'))
        assert not created
        assert store.load_lineup('u1', 1).slots.QB == 'Josh Allen'
        assert len(store.lineups_for_week(1)) == 1

    def test_missing_slots(self, service):
        service.create_new_week(QUESTIONS)
        candidate = dict(LINEUP_NAMES)
        del candidate['PK']
        candidate['TE'] = '  '
        with pytest.raises(ValidationError, match='Missing required positions: TE, PK'):
            service.submit_lineup('u1', 1, candidate)

    def test_duplicate_player(self, service):
        service.create_new_week(QUESTIONS)
        with pytest.raises(DuplicateInLineupError):
            service.submit_lineup('u1', 1, dict(LINEUP_NAMES, FLEX='Derrick Henry'))

    def test_reuse_across_weeks(self, service, store):
        service.create_new_week(QUESTIONS)
        service.submit_lineup('u1', 1, dict(LINEUP_NAMES))
        service.create_new_week(QUESTIONS)

        with pytest.raises(PlayerReusedError) as exc:
            service.submit_lineup('u1', 2, dict(WEEK_TWO_NAMES, QB='Patrick Mahomes'))
        assert exc.value.players == ['Patrick Mahomes']
        assert store.find_lineup('u1', 2) is None

        _, created = service.submit_lineup('u1', 2, dict(WEEK_TWO_NAMES))
        assert created

    def test_other_users_unaffected(self, service):
        service.create_new_week(QUESTIONS)
        service.submit_lineup('u1', 1, dict(LINEUP_NAMES))
        service.create_new_week(QUESTIONS)
        service.submit_lineup('u2', 2, dict(LINEUP_NAMES))

    def test_edits_locked(self, service):
        service.create_new_week(QUESTIONS)
        service.set_lineup_edits(1, False)
        with pytest.raises(EditsLockedError):
            service.submit_lineup('u1', 1, dict(LINEUP_NAMES))

    def test_past_week_rejected(self, service):
        service.create_new_week(QUESTIONS)
        service.create_new_week(QUESTIONS)
        with pytest.raises(ValidationError):
            service.submit_lineup('u1', 1, dict(LINEUP_NAMES))

    def test_score_and_leaderboard(self, service):
        service.create_new_week(QUESTIONS)
        service.submit_lineup('u1', 1, dict(LINEUP_NAMES))
        service.submit_lineup('u2', 1, dict(LINEUP_NAMES, QB='Josh Allen'))

        report = service.score_week_lineups(1)
        assert len(report.succeeded) == 2

        board = service.leaderboard(1)
        assert [row['username'] for row in board] == ['alice', 'bob']
        assert board[0]['rank'] == 1
        assert board[0]['QB'] == 'Patrick Mahomes'
        assert board[0]['total_points'] > board[1]['total_points']


class TestPlayerPools:
    def test_used_players_excluded(self, service):
        service.create_new_week(QUESTIONS)
        service.submit_lineup('u1', 1, dict(LINEUP_NAMES))
        service.create_new_week(QUESTIONS)

        qbs = service.available_players('u1', 'QB', 2)
        assert [p['name'] for p in qbs] == ['Josh Allen']
        assert {p['name'] for p in service.available_players('u2', 'QB', 2)} == {
            'Patrick Mahomes', 'Josh Allen',
        }

    def test_current_week_lineup_does_not_exclude(self, service):
        service.create_new_week(QUESTIONS)
        service.submit_lineup('u1', 1, dict(LINEUP_NAMES))
        names = [p['name'] for p in service.available_players('u1', 'QB', 1)]
        assert 'Patrick Mahomes' in names

    def test_flex_and_defense(self, service):
        flex = {p['position'] for p in service.available_players('u1', 'FLEX', 1)}
        assert flex == {'RB', 'WR', 'TE'}
        defenses = service.available_players('u1', 'DEF', 1)
        assert defenses[0]['name'] == 'Kansas City Chiefs Defense'
        assert defenses[0]['id'] == '12'

    def test_all_pools(self, service):
        pools = service.available_players('u1', 'ALL', 1)
        assert set(pools) == {'QB', 'RB', 'WR', 'TE', 'PK', 'DEF', 'FLEX'}
        assert len(pools['FLEX']) == len(pools['RB']) + len(pools['WR']) + len(pools['TE'])

    def test_invalid_position(self, service):
        with pytest.raises(ValidationError, match='Invalid position'):
            service.available_players('u1', 'K', 1)

    def test_player_history(self, service, store):
        store.save_lineup(make_lineup('u1', 1))
        store.save_lineup(make_lineup('u1', 2, QB='Josh Allen'))
        history = service.player_history('u1')
        assert history['total_weeks'] == 2
        assert history['used_players'][0] == 'Patrick Mahomes'
        assert 'Josh Allen' in history['used_players']
        assert len(history['used_players']) == 10
        assert history['history_by_week'][2]['QB'] == 'Josh Allen'
