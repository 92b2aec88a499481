"""Exception hierarchy for PICKFL operations."""


class PickflError(Exception):
    """Base class for every error raised by the scoring engine."""


class NotFoundError(PickflError):
    """A week, lineup or user record does not exist."""


class WeekNotFoundError(NotFoundError):
    def __init__(self, week_number: int):
        self.week_number = week_number
        super().__init__(f'Week {week_number} not found')


class LineupNotFoundError(NotFoundError):
    def __init__(self, user_id: str, week_number: int):
        self.user_id = user_id
        self.week_number = week_number
        super().__init__(f'No lineup found for user {user_id} in week {week_number}')


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f'User {user_id} not found')


class InvalidIndexError(PickflError):
    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f'Invalid question index {index} (week has {length} questions)')


class ValidationError(PickflError):
    """Malformed submission: missing slots, bad response shape, wrong week."""


class DuplicateInLineupError(ValidationError):
    def __init__(self, duplicates: list[str]):
        self.duplicates = duplicates
        super().__init__(
            'Duplicate players in lineup detected: '
            f'{", ".join(duplicates)}. Each player can only be selected once per week.'
        )


class PlayerReusedError(ValidationError):
    def __init__(self, players: list[str]):
        self.players = players
        super().__init__(
            'The following players have already been used in previous weeks: '
            f'{", ".join(players)}. Players cannot be reused across multiple weeks.'
        )


class EditsLockedError(ValidationError):
    def __init__(self, week_number: int):
        self.week_number = week_number
        super().__init__(f'Lineup submissions are not allowed for week {week_number}')


class ExternalServiceError(PickflError):
    """The stats provider failed to answer or returned an unreadable payload."""


class PersistenceError(PickflError):
    """A document could not be read or written."""


class ConcurrentModificationError(PersistenceError):
    def __init__(self, what: str, expected: int, found: int | None):
        self.expected = expected
        self.found = found
        super().__init__(
            f'{what} was modified concurrently (expected version {expected}, found {found})'
        )
