from .errors import (
    PickflError,
    NotFoundError,
    WeekNotFoundError,
    LineupNotFoundError,
    UserNotFoundError,
    InvalidIndexError,
    ValidationError,
    DuplicateInLineupError,
    PlayerReusedError,
    EditsLockedError,
    ExternalServiceError,
    PersistenceError,
    ConcurrentModificationError,
)
from .schemas import (
    AutoScoreConfig,
    Question,
    UserResponse,
    WeekInformation,
    ActiveWeekPointer,
    LineupSlots,
    Lineup,
    Player,
    UserRecord,
    LeagueConfig,
)
from .models import (
    TeamInfo,
    GameSummary,
    GameResult,
    BoxScore,
    BoxScoreEntry,
    PlayerPoints,
    SlotScore,
    LineupScore,
    WeekLineupReport,
    QuestionScoringReport,
)
from .pick_engine import merge_correct_answers, is_correct, score_response, tally_scores
from .edit_locks import EditLockRegistry, apply_response
from .eligibility import validate_new_lineup, used_player_names
from .ppr import points_for, score_box_score
from .stats_provider import ESPNStatsProvider
from .lineup_scorer import LineupScorer
from .auto_score import auto_score_questions
from .players import PlayerDirectory
from .store import JsonStore
from .service import LeagueService
from .excel_export import export_week_workbook

__all__ = [
    # Errors
    'PickflError',
    'NotFoundError',
    'WeekNotFoundError',
    'LineupNotFoundError',
    'UserNotFoundError',
    'InvalidIndexError',
    'ValidationError',
    'DuplicateInLineupError',
    'PlayerReusedError',
    'EditsLockedError',
    'ExternalServiceError',
    'PersistenceError',
    'ConcurrentModificationError',
    # Stored documents
    'AutoScoreConfig',
    'Question',
    'UserResponse',
    'WeekInformation',
    'ActiveWeekPointer',
    'LineupSlots',
    'Lineup',
    'Player',
    'UserRecord',
    'LeagueConfig',
    # Provider and scoring results
    'TeamInfo',
    'GameSummary',
    'GameResult',
    'BoxScore',
    'BoxScoreEntry',
    'PlayerPoints',
    'SlotScore',
    'LineupScore',
    'WeekLineupReport',
    'QuestionScoringReport',
    # Pick'em
    'merge_correct_answers',
    'is_correct',
    'score_response',
    'tally_scores',
    'EditLockRegistry',
    'apply_response',
    'auto_score_questions',
    # Fantasy
    'validate_new_lineup',
    'used_player_names',
    'points_for',
    'score_box_score',
    'LineupScorer',
    'PlayerDirectory',
    # Data access
    'ESPNStatsProvider',
    'JsonStore',
    'LeagueService',
    'export_week_workbook',
]
