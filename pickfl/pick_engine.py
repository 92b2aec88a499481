"""Correct-answer merging and pick'em score tallying."""

from typing import Any, Dict, Sequence

from .schemas import Question, UserResponse


def is_answer_set(value: Any) -> bool:
    """An answer is set unless it is None, an empty string or an empty list."""
    if value is None:
        return False
    if isinstance(value, str) and value == '':
        return False
    if isinstance(value, (list, tuple, set)) and len(value) == 0:
        return False
    return True


def merge_correct_answers(
    auto_answers: Sequence[Any],
    existing_answers: Sequence[Any] | None,
    questions: Sequence[Question],
) -> list[Any]:
    """
    Merge automatically derived answers with answers already on the week.

    Per question: a resolved auto answer wins; otherwise a previously set
    answer (typically entered by an admin) is kept; otherwise the answer
    stays unresolved (None).

    Args:
        auto_answers: Answer per question from auto-scoring (None = unresolved)
        existing_answers: Answers currently stored on the week
        questions: The week's questions (defines the length of the result)

    Returns:
        Merged answers, one per question
    """
    existing_answers = existing_answers or []
    merged = []
    for i in range(len(questions)):
        auto = auto_answers[i] if i < len(auto_answers) else None
        existing = existing_answers[i] if i < len(existing_answers) else None
        if auto is not None:
            merged.append(auto)
        elif is_answer_set(existing):
            merged.append(existing)
        else:
            merged.append(None)
    return merged


def is_correct(response: Any, correct: Any) -> bool:
    """
    Check one response against one correct-answer entry.

    A list entry holds every acceptable answer (membership); anything else is
    compared for equality. Unresolved entries and blank responses never match.
    """
    if not is_answer_set(correct) or response is None:
        return False
    if isinstance(correct, (list, tuple, set)):
        return response in correct
    return response == correct


def score_response(
    answers: Sequence[Any],
    correct_answers: Sequence[Any],
    points_per_question: float,
) -> float:
    """Points earned by one answer vector."""
    score = 0.0
    for i, answer in enumerate(answers):
        if i < len(correct_answers) and is_correct(answer, correct_answers[i]):
            score += points_per_question
    return score


def tally_scores(
    responses: Sequence[UserResponse],
    merged_answers: Sequence[Any],
    points_per_question: float,
) -> Dict[str, float]:
    """
    Score every user's responses for a week.

    Args:
        responses: The week's responses
        merged_answers: Correct answers (scalar, list of acceptable values, or None)
        points_per_question: Points for each correct pick

    Returns:
        Dict mapping user id to week score
    """
    return {
        response.user_id: score_response(response.answers, merged_answers, points_per_question)
        for response in responses
    }


def record_week_score(scores: list[float], week_number: int, score: float) -> list[float]:
    """Return a copy of a cumulative score list with the week's score set."""
    updated = list(scores)
    while len(updated) < week_number:
        updated.append(0.0)
    updated[week_number - 1] = score
    return updated
