"""Validation functions for submissions and scoring results."""

from typing import Any, Sequence

from .constants import LINEUP_SLOTS
from .errors import ValidationError
from .models import LineupScore
from .schemas import LineupSlots, Question


def validate_response_shape(choices: Any) -> list:
    """
    Check a submitted answer vector.

    Personal picks hold one answer per question: the vector must be a list
    and no element may itself be a list.

    Raises:
        ValidationError: If the shape is wrong

    Returns:
        The choices as a list
    """
    if not isinstance(choices, (list, tuple)):
        raise ValidationError('Invalid request: choices must be an array.')
    if any(isinstance(choice, (list, tuple, set, dict)) for choice in choices):
        raise ValidationError(
            'Cannot submit multiple answers for a single question. '
            'Please select only one answer per question for your personal picks.'
        )
    return list(choices)


def validate_lineup_slots(candidate: Any) -> LineupSlots:
    """
    Check that a lineup submission fills all nine slots.

    Raises:
        ValidationError: If the submission is not a mapping, a slot is
            missing/blank, or an unknown slot is present

    Returns:
        Validated LineupSlots (names stripped of surrounding whitespace)
    """
    if not isinstance(candidate, dict):
        raise ValidationError('lineup is required')

    missing = [
        slot
        for slot in LINEUP_SLOTS
        if not isinstance(candidate.get(slot), str) or not candidate.get(slot).strip()
    ]
    if missing:
        raise ValidationError(f'Missing required positions: {", ".join(missing)}')

    unknown = sorted(set(candidate) - set(LINEUP_SLOTS))
    if unknown:
        raise ValidationError(f'Unknown lineup positions: {", ".join(unknown)}')

    return LineupSlots(**{slot: candidate[slot].strip() for slot in LINEUP_SLOTS})


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def validate_correct_answers(answers: Any, questions: Sequence[Question]) -> list:
    """
    Check an admin-entered correct-answer vector.

    Entries may be a single value (string or number), a flat list of
    acceptable values, or None.

    Raises:
        ValidationError: If answers is not a list, has more entries than
            questions, or holds an entry of any other shape
    """
    if not isinstance(answers, (list, tuple)):
        raise ValidationError('correctAnswers must be an array')
    if len(answers) > len(questions):
        raise ValidationError(
            f'Got {len(answers)} correct answers for {len(questions)} questions'
        )
    checked = []
    for index, answer in enumerate(answers):
        if answer is None or _is_scalar(answer):
            checked.append(answer)
        elif isinstance(answer, (list, tuple)) and all(_is_scalar(v) for v in answer):
            checked.append(list(answer))
        else:
            raise ValidationError(f'Invalid correct answer for question {index}: {answer!r}')
    return checked


def validate_lineup_score(score: LineupScore) -> list[str]:
    """
    Check that a lineup score is reasonable and internally consistent.

    Sanity checks:
    - Slot breakdowns add up to slot totals (within rounding)
    - Slot totals add up to the lineup total
    - No single slot above 60 points or below -10
    - Unresolved slot names

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    for slot, slot_score in score.slots.items():
        if slot_score.player_id is None:
            warnings.append(f'{score.user_id} {slot} {slot_score.name!r} could not be resolved')

        if slot_score.total_points > 60:
            warnings.append(
                f'{slot_score.name} scored {slot_score.total_points:.1f} pts (unusually high - check for scoring bug)'
            )
        elif slot_score.total_points < -10:
            warnings.append(
                f'{slot_score.name} scored {slot_score.total_points:.1f} pts (unusually low - check for scoring bug)'
            )

        if slot_score.breakdown:
            breakdown_sum = sum(slot_score.breakdown.values())
            if abs(breakdown_sum - slot_score.total_points) > 0.01:
                warnings.append(
                    f'{slot_score.name} breakdown sum ({breakdown_sum:.2f}) != total ({slot_score.total_points:.2f})'
                )

    slot_sum = sum(s.total_points for s in score.slots.values())
    if abs(slot_sum - score.total_points) > 0.01:
        warnings.append(
            f'{score.user_id} slot sum ({slot_sum:.2f}) != lineup total ({score.total_points:.2f})'
        )

    return warnings


def validate_week_lineup_scores(scores: Sequence[LineupScore]) -> tuple[list[str], list[str]]:
    """
    Validate all lineup scores for a week.

    Returns:
        Tuple of (errors, warnings)
        - errors: lineups that failed to score
        - warnings: issues to review but not block scoring
    """
    errors: list[str] = []
    warnings: list[str] = []

    for score in scores:
        if score.error:
            errors.append(f'{score.user_id}: {score.error}')
            continue
        warnings.extend(validate_lineup_score(score))

    return errors, warnings
