"""Pydantic schemas for persisted league documents."""

import uuid
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from .constants import ESPN_API_BASE, LINEUP_SLOTS, LOG_LEVELS, PLAYER_POSITIONS, QUESTION_TYPES

ScalarAnswer = Union[str, int, float]
CorrectAnswer = Union[ScalarAnswer, list[ScalarAnswer], None]
ResponseValue = Optional[ScalarAnswer]


def _new_question_id() -> str:
    return uuid.uuid4().hex[:12]


class AutoScoreConfig(BaseModel):
    """How a question's correct answer is derived from live game data."""

    type: str = Field(..., min_length=1)
    game_id: str | None = None
    team_id: str | None = None
    player_id: str | None = None
    stat_name: str | None = None
    threshold: float | None = None

    class Config:
        extra = 'forbid'


class Question(BaseModel):
    """A single pick'em question."""

    id: str = Field(default_factory=_new_question_id, min_length=1)
    question: str = Field(..., min_length=1)
    type: str = 'single-select'
    options: list[str] = Field(default_factory=list)
    auto_score: AutoScoreConfig | None = None

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Ensure question type is known."""
        if v not in QUESTION_TYPES:
            raise ValueError(f'Invalid question type: {v}')
        return v

    class Config:
        extra = 'forbid'


class UserResponse(BaseModel):
    """One user's answer vector for a week."""

    user_id: str = Field(..., min_length=1)
    answers: list[ResponseValue] = Field(default_factory=list)
    last_modified: str | None = None

    class Config:
        extra = 'forbid'


class WeekInformation(BaseModel):
    """Questions, answers, responses and edit state for one competition week."""

    week_number: int = Field(..., ge=1)
    questions: list[Question] = Field(default_factory=list)
    correct_answers: list[CorrectAnswer] = Field(default_factory=list)
    responses: list[UserResponse] = Field(default_factory=list)
    question_edit_locks: dict[str, bool] = Field(default_factory=dict)
    lineup_edits_allowed: bool = True
    is_current: bool = False
    version: int = Field(default=0, ge=0)

    class Config:
        extra = 'forbid'

    @property
    def question_ids(self) -> list[str]:
        return [q.id for q in self.questions]

    def align(self) -> bool:
        """
        Re-align answer vectors and edit locks to the question list in place.

        Correct answers and response vectors are padded with None or truncated,
        locks for unknown question ids are dropped and missing ones default to
        editable.

        Returns:
            True if anything had to be repaired
        """
        size = len(self.questions)
        repaired = False

        if len(self.correct_answers) != size:
            self.correct_answers = (self.correct_answers + [None] * size)[:size]
            repaired = True

        ids = self.question_ids
        if set(self.question_edit_locks) != set(ids):
            self.question_edit_locks = {
                qid: self.question_edit_locks.get(qid, True) for qid in ids
            }
            repaired = True

        for response in self.responses:
            if len(response.answers) != size:
                response.answers = (response.answers + [None] * size)[:size]
                repaired = True

        return repaired

    def find_response(self, user_id: str) -> UserResponse | None:
        for response in self.responses:
            if response.user_id == user_id:
                return response
        return None


class ActiveWeekPointer(BaseModel):
    """Which week is currently accepting responses and lineups."""

    week_number: int = Field(..., ge=1)

    class Config:
        extra = 'forbid'


class LineupSlots(BaseModel):
    """The nine required lineup slots, each holding a display name."""

    QB: str = Field(..., min_length=1)
    RB1: str = Field(..., min_length=1)
    RB2: str = Field(..., min_length=1)
    WR1: str = Field(..., min_length=1)
    WR2: str = Field(..., min_length=1)
    TE: str = Field(..., min_length=1)
    FLEX: str = Field(..., min_length=1)
    PK: str = Field(..., min_length=1)
    DEF: str = Field(..., min_length=1)

    class Config:
        extra = 'forbid'

    def names(self) -> list[str]:
        """Slot values in lineup order."""
        return [getattr(self, slot) for slot in LINEUP_SLOTS]

    def items(self) -> list[tuple[str, str]]:
        return [(slot, getattr(self, slot)) for slot in LINEUP_SLOTS]


class Lineup(BaseModel):
    """A user's fantasy lineup for one week."""

    user_id: str = Field(..., min_length=1)
    week_number: int = Field(..., ge=1)
    slots: LineupSlots
    total_points: float = 0.0
    score_notes: list[str] = Field(default_factory=list)
    submitted_at: str | None = None
    version: int = Field(default=0, ge=0)

    class Config:
        extra = 'forbid'


class LineupsFile(BaseModel):
    """Complete lineups/week_N.json file structure."""

    week: int = Field(..., ge=1)
    lineups: dict[str, Lineup] = Field(default_factory=dict)

    class Config:
        extra = 'forbid'


class Player(BaseModel):
    """Reference data for one NFL player."""

    espn_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    position: str

    @field_validator('position')
    @classmethod
    def validate_position(cls, v):
        """Ensure position is one we keep."""
        if v not in PLAYER_POSITIONS:
            raise ValueError(f'Invalid position: {v}')
        return v

    class Config:
        extra = 'forbid'


class PlayersFile(BaseModel):
    """Complete players.json file structure."""

    players: list[Player] = Field(default_factory=list)

    class Config:
        extra = 'forbid'


class UserRecord(BaseModel):
    """A competitor and their per-week pick scores."""

    user_id: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    scores: list[float] = Field(default_factory=list)

    class Config:
        extra = 'forbid'


class UsersFile(BaseModel):
    """Complete users.json file structure."""

    users: dict[str, UserRecord] = Field(default_factory=dict)

    class Config:
        extra = 'forbid'


class LeagueConfig(BaseModel):
    """League configuration settings."""

    points_per_question: int = Field(default=30, ge=1)
    season_year: int | None = Field(default=None, ge=2000, le=2100)
    season_type: int | None = Field(default=None, ge=1, le=3)
    espn_api_base: str = Field(default=ESPN_API_BASE, min_length=1)
    request_timeout: float = Field(default=10.0, gt=0)
    data_dir: str = 'data'
    log_level: str = 'INFO'

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f'log_level must be one of {LOG_LEVELS}')
        return level

    class Config:
        extra = 'forbid'
