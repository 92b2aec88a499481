"""Unit tests for validation functions."""

import pytest

from pickfl.errors import ValidationError
from pickfl.models import LineupScore, SlotScore
from pickfl.schemas import Question
from pickfl.validators import (
    validate_correct_answers,
    validate_lineup_score,
    validate_lineup_slots,
    validate_response_shape,
    validate_week_lineup_scores,
)

from conftest import LINEUP_NAMES


class TestResponseShape:
    def test_valid(self):
        assert validate_response_shape(('A', None, 0)) == ['A', None, 0]

    def test_not_a_list(self):
        with pytest.raises(ValidationError, match='must be an array'):
            validate_response_shape('A')
        with pytest.raises(ValidationError):
            validate_response_shape({'0': 'A'})

    def test_nested_answers(self):
        with pytest.raises(ValidationError, match='Cannot submit multiple answers'):
            validate_response_shape(['A', ['B', 'C']])


class TestLineupSlots:
    def test_valid_and_stripped(self):
        slots = validate_lineup_slots(dict(LINEUP_NAMES, QB='  Patrick Mahomes  '))
        assert slots.QB == 'Patrick Mahomes'
        assert slots.names()[-1] == 'Kansas City Chiefs Defense'

    def test_missing_positions_listed(self):
        candidate = {'QB': 'Patrick Mahomes'}
        with pytest.raises(ValidationError) as exc:
            validate_lineup_slots(candidate)
        assert str(exc.value) == (
            'Missing required positions: RB1, RB2, WR1, WR2, TE, FLEX, PK, DEF'
        )

    def test_non_string_slot(self):
        with pytest.raises(ValidationError, match='QB'):
            validate_lineup_slots(dict(LINEUP_NAMES, QB=12))

    def test_unknown_slot(self):
        with pytest.raises(ValidationError, match='Unknown lineup positions: K'):
            validate_lineup_slots(dict(LINEUP_NAMES, K='Justin Tucker'))

    def test_not_a_mapping(self):
        with pytest.raises(ValidationError, match='lineup is required'):
            validate_lineup_slots(None)


class TestCorrectAnswers:
    def test_multi_correct_accepted(self):
        questions = [Question(question='a'), Question(question='b')]
        assert validate_correct_answers(['A', ['Y', 'Z']], questions) == ['A', ['Y', 'Z']]

    def test_too_many(self):
        with pytest.raises(ValidationError):
            validate_correct_answers(['A', 'B'], [Question(question='a')])

    def test_mapping_entry_rejected(self):
        with pytest.raises(ValidationError):
            validate_correct_answers([{'answer': 'A'}], [Question(question='a')])

    @pytest.mark.parametrize(
        'answer',
        [['X', ['Y']], {'A', 'B'}, True, ['A', False], [None]],
    )
    def test_malformed_entry_rejected(self, answer):
        with pytest.raises(ValidationError, match='question 0'):
            validate_correct_answers([answer], [Question(question='a')])

    def test_tuples_and_numbers_normalised(self):
        questions = [Question(question='a'), Question(question='b')]
        assert validate_correct_answers([3, ('Over', 2.5)], questions) == [3, ['Over', 2.5]]


def _score(**slots):
    score = LineupScore(user_id='u1', week_number=1)
    for slot, (player_id, points, breakdown) in slots.items():
        score.slots[slot] = SlotScore(
            slot=slot, name=f'{slot} player', player_id=player_id,
            total_points=points, breakdown=breakdown,
        )
    score.total_points = sum(s.total_points for s in score.slots.values())
    return score


class TestLineupScoreChecks:
    def test_clean_score(self):
        score = _score(QB=('1', 16.0, {'passing_yards': 10.0, 'passing_tds': 8.0, 'interceptions': -2.0}))
        assert validate_lineup_score(score) == []

    def test_unresolved_slot(self):
        warnings = validate_lineup_score(_score(QB=(None, 0.0, {})))
        assert any('could not be resolved' in w for w in warnings)

    def test_unusually_high(self):
        warnings = validate_lineup_score(_score(WR1=('4', 65.0, {'receptions': 65.0})))
        assert any('unusually high' in w for w in warnings)

    def test_breakdown_mismatch(self):
        warnings = validate_lineup_score(_score(RB1=('2', 20.0, {'rushing_yards': 10.0})))
        assert any('breakdown sum' in w for w in warnings)

    def test_total_mismatch(self):
        score = _score(TE=('6', 19.0, {'receptions': 6.0, 'receiving_yards': 7.0, 'receiving_tds': 6.0}))
        score.total_points = 25.0
        assert any('slot sum' in w for w in validate_lineup_score(score))

    def test_week_errors_and_warnings(self):
        failed = LineupScore(user_id='u2', week_number=1, error='Week 1 not found')
        errors, warnings = validate_week_lineup_scores([_score(QB=(None, 0.0, {})), failed])
        assert errors == ['u2: Week 1 not found']
        assert len(warnings) == 1
