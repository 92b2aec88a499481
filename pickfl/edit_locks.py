"""Per-question edit permissions for pick responses."""

from typing import Any, Optional, Sequence

from .errors import InvalidIndexError, ValidationError
from .schemas import WeekInformation


class EditLockRegistry:
    """
    Edit permission per question, keyed by stable question id.

    Callers address questions by position; the registry resolves positions to
    ids so reordering questions never moves a lock onto another question.
    Questions without an entry are editable.
    """

    def __init__(self, question_ids: Sequence[str], locks: Optional[dict[str, bool]] = None):
        self.question_ids = list(question_ids)
        locks = locks or {}
        self.locks = {qid: bool(locks.get(qid, True)) for qid in self.question_ids}

    @classmethod
    def for_week(cls, week: WeekInformation) -> 'EditLockRegistry':
        return cls(week.question_ids, week.question_edit_locks)

    def __len__(self) -> int:
        return len(self.question_ids)

    def _check_index(self, index) -> None:
        if not isinstance(index, int) or isinstance(index, bool):
            raise ValidationError(f'Question index must be an integer, got {index!r}')
        if index < 0 or index >= len(self.question_ids):
            raise InvalidIndexError(index, len(self.question_ids))

    def set_lock(self, index: int, allowed: bool) -> None:
        """
        Allow or forbid edits to one question.

        Raises:
            InvalidIndexError: If index is outside [0, number of questions)
            ValidationError: If index is not an int or allowed is not a bool
        """
        if not isinstance(allowed, bool):
            raise ValidationError(f'Edit permission must be a boolean, got {allowed!r}')
        self._check_index(index)
        self.locks[self.question_ids[index]] = allowed

    def is_editable(self, index: int) -> bool:
        self._check_index(index)
        return self.locks[self.question_ids[index]]

    def as_vector(self) -> list[bool]:
        """Edit permissions in question order."""
        return [self.locks[qid] for qid in self.question_ids]

    def as_mapping(self) -> dict[str, bool]:
        return dict(self.locks)


def apply_response(
    existing: Sequence[Any],
    incoming: Sequence[Any],
    lock_vector: Sequence[bool],
) -> list[Any]:
    """
    Merge a resubmitted answer vector into the stored one.

    An incoming answer replaces the stored answer only where the question is
    editable; locked positions keep the stored value. Incoming answers beyond
    the number of questions are ignored.

    Args:
        existing: Stored answers
        incoming: Submitted answers
        lock_vector: Edit permission per question (True = editable)

    Returns:
        The updated answer vector, sized to lock_vector
    """
    size = len(lock_vector)
    updated = (list(existing) + [None] * size)[:size]
    for i in range(min(len(incoming), size)):
        if lock_vector[i]:
            updated[i] = incoming[i]
    return updated
