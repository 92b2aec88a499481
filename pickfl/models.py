"""Data models for PICKFL scoring results and provider payloads."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TeamInfo:
    """An NFL team as listed by the stats provider."""
    id: str
    name: str  # display name, e.g. "Kansas City Chiefs"
    nickname: str = ''  # e.g. "Chiefs"
    abbreviation: str = ''
    logo: Optional[str] = None


@dataclass
class TeamLine:
    """One side of a game."""
    id: str
    name: str
    abbreviation: str = ''
    score: int = 0
    winner: bool = False


@dataclass
class GameSummary:
    """A scheduled game from the weekly scoreboard."""
    id: str
    name: str
    short_name: str
    date: str
    status: str
    completed: bool
    home: TeamLine
    away: TeamLine


@dataclass
class GameResult:
    """Final result of a game, or completed=False if it is not over yet."""
    completed: bool
    status: str
    tie: bool = False
    home: Optional[TeamLine] = None
    away: Optional[TeamLine] = None
    winner_id: Optional[str] = None
    winner_name: Optional[str] = None

    @property
    def total_score(self) -> int:
        if not self.home or not self.away:
            return 0
        return self.home.score + self.away.score


@dataclass
class BoxScoreEntry:
    """One player's line in one stat category of a box score."""
    player_id: str
    player_name: str
    team_id: str
    team_name: str
    position: str
    category: str
    stats: Dict[str, str] = field(default_factory=dict)


@dataclass
class BoxScore:
    """All player lines of one game."""
    game_id: str
    completed: bool
    status: str
    entries: List[BoxScoreEntry] = field(default_factory=list)


@dataclass
class PlayerStatLookup:
    """Result of looking up a single stat for a player in a game."""
    completed: bool
    found: bool = False
    stat_value: float = 0.0
    player_name: Optional[str] = None


@dataclass
class PlayerPoints:
    """PPR points accumulated by one player across stat categories."""
    player_id: str
    player_name: str = ''
    total_points: float = 0.0
    breakdown: Dict[str, float] = field(default_factory=dict)


@dataclass
class SlotScore:
    """Container for a lineup slot's score breakdown."""
    slot: str
    name: str
    player_id: Optional[str] = None
    total_points: float = 0.0
    breakdown: Dict[str, float] = field(default_factory=dict)
    found_in_stats: bool = False
    data_notes: List[str] = field(default_factory=list)  # Flags for unresolved names etc.


@dataclass
class LineupScore:
    """Result of scoring one lineup."""
    user_id: str
    week_number: int
    total_points: float = 0.0
    slots: Dict[str, SlotScore] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def flagged_slots(self) -> List[str]:
        return [slot for slot, score in self.slots.items() if score.player_id is None]


@dataclass
class ScoreFailure:
    """A single entry that could not be scored in a batch run."""
    key: str  # user id
    message: str


@dataclass
class WeekLineupReport:
    """Result of scoring every lineup of a week."""
    week_number: int
    results: List[LineupScore] = field(default_factory=list)

    @property
    def failures(self) -> List[ScoreFailure]:
        return [ScoreFailure(r.user_id, r.error) for r in self.results if r.error]

    @property
    def succeeded(self) -> List[LineupScore]:
        return [r for r in self.results if not r.error]


@dataclass
class QuestionScoringReport:
    """Result of merging correct answers and tallying pick scores for a week."""
    week_number: int
    correct_answers: List[Any] = field(default_factory=list)
    auto_resolved: int = 0
    user_scores: Dict[str, float] = field(default_factory=dict)
    failures: List[ScoreFailure] = field(default_factory=list)
