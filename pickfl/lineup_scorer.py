"""PPR scoring of weekly fantasy lineups against live box scores."""

import logging
from typing import Dict, Optional

from .errors import PickflError
from .models import (
    GameSummary,
    LineupScore,
    PlayerPoints,
    SlotScore,
    TeamInfo,
    WeekLineupReport,
)
from .players import PlayerDirectory, find_team
from .ppr import score_box_score
from .schemas import Lineup
from .season import SeasonInfo, configured_season
from .validators import validate_lineup_score, validate_week_lineup_scores

logger = logging.getLogger('pickfl.lineup_scorer')


class ScoringRun:
    """
    Provider data shared by every lineup scored in one run.

    Team list, weekly game lists and per-game player points are fetched at
    most once. A failed box-score fetch is remembered and re-raised for every
    lineup that needs that game, so the game is not requested again.
    """

    def __init__(self, provider, season: SeasonInfo):
        self.provider = provider
        self.season = season
        self._teams: Optional[list[TeamInfo]] = None
        self._games: Dict[int, list[GameSummary]] = {}
        self._game_points: Dict[str, Dict[str, PlayerPoints]] = {}
        self._game_errors: Dict[str, PickflError] = {}

    def teams(self) -> list[TeamInfo]:
        if self._teams is None:
            self._teams = self.provider.list_teams()
        return self._teams

    def games(self, week_number: int) -> list[GameSummary]:
        if week_number not in self._games:
            self._games[week_number] = self.provider.list_games(
                week_number, self.season.year, self.season.season_type
            )
        return self._games[week_number]

    def game_points(self, game_id: str) -> Dict[str, PlayerPoints]:
        """Per-player PPR points of a game; empty unless the game is completed."""
        if game_id in self._game_errors:
            raise self._game_errors[game_id]
        if game_id not in self._game_points:
            try:
                box_score = self.provider.game_box_score(game_id)
            except PickflError as e:
                self._game_errors[game_id] = e
                raise
            self._game_points[game_id] = score_box_score(box_score)
        return self._game_points[game_id]

    @property
    def box_scores_fetched(self) -> int:
        return len(self._game_points) + len(self._game_errors)


class LineupScorer:
    """
    Scores lineups by correlating slot names with box-score player ids.

    Slot names resolve through the player directory (exact display name);
    the DEF slot resolves to a team by stripping the " Defense" suffix. Names
    that do not resolve score zero and are flagged on the slot.
    """

    def __init__(
        self,
        provider,
        store,
        directory: PlayerDirectory,
        season: Optional[SeasonInfo] = None,
    ):
        self.provider = provider
        self.store = store
        self.directory = directory
        self.season = season or configured_season()

    def new_run(self) -> ScoringRun:
        return ScoringRun(self.provider, self.season)

    def _resolve_slots(self, lineup: Lineup, run: ScoringRun) -> Dict[str, SlotScore]:
        slots: Dict[str, SlotScore] = {}
        for slot, name in lineup.slots.items():
            score = SlotScore(slot=slot, name=name)
            if slot == 'DEF':
                team = find_team(run.teams(), name)
                if team:
                    score.player_id = team.id
                else:
                    logger.warning(f'Team not found for defense: {name}')
                    score.data_notes.append('Team not found')
            else:
                player = self.directory.find_by_name(name)
                if player:
                    score.player_id = player['espn_id']
                else:
                    logger.warning(f'Player not found in reference data: {name}')
                    score.data_notes.append('Player not found in reference data')
            slots[slot] = score
        return slots

    def score_lineup(
        self,
        user_id: str,
        week_number: int,
        run: Optional[ScoringRun] = None,
    ) -> LineupScore:
        """
        Compute and store a lineup's PPR total for a week.

        Only completed games count. The stored total is replaced, not added
        to, so re-running with unchanged game data gives the same result.

        Args:
            user_id: Lineup owner
            week_number: Competition week (also the provider's week number)
            run: Shared provider cache (default: a fresh one)

        Returns:
            LineupScore with per-slot breakdown

        Raises:
            LineupNotFoundError: If the user has no lineup for the week
            ExternalServiceError: If the provider fails
            PersistenceError: If the updated lineup cannot be saved
        """
        run = run or self.new_run()
        lineup = self.store.load_lineup(user_id, week_number)
        slots = self._resolve_slots(lineup, run)

        for game in run.games(week_number):
            if not game.completed:
                continue
            players = run.game_points(game.id)
            for slot_score in slots.values():
                if slot_score.player_id is None:
                    continue
                points = players.get(slot_score.player_id)
                if points is None:
                    continue
                slot_score.found_in_stats = True
                slot_score.total_points += points.total_points
                for key, val in points.breakdown.items():
                    slot_score.breakdown[key] = slot_score.breakdown.get(key, 0.0) + val

        total = sum(s.total_points for s in slots.values())
        result = LineupScore(
            user_id=user_id, week_number=week_number, total_points=total, slots=slots
        )

        for warning in validate_lineup_score(result):
            logger.warning(warning)

        lineup.total_points = total
        lineup.score_notes = [
            f'{s.slot}: {note}' for s in slots.values() for note in s.data_notes
        ]
        self.store.save_lineup(lineup)

        logger.info(f'Week {week_number} lineup of {user_id}: {total:.2f} pts')
        return result

    def calculate_all_for_week(self, week_number: int) -> WeekLineupReport:
        """
        Score every lineup submitted for a week.

        One lineup failing is recorded with zero points and the error message;
        the rest are still scored.
        """
        run = self.new_run()
        report = WeekLineupReport(week_number=week_number)

        lineups = self.store.lineups_for_week(week_number)
        logger.info(f'Scoring {len(lineups)} lineups for week {week_number}')

        for lineup in lineups:
            try:
                result = self.score_lineup(lineup.user_id, week_number, run)
            except PickflError as e:
                logger.error(f'Error calculating points for user {lineup.user_id}: {e}')
                result = LineupScore(
                    user_id=lineup.user_id,
                    week_number=week_number,
                    total_points=0.0,
                    error=str(e),
                )
            report.results.append(result)

        errors, _warnings = validate_week_lineup_scores(report.results)
        if errors:
            logger.warning(f'{len(errors)} lineups failed to score in week {week_number}')
        logger.info(f'Fetched {run.box_scores_fetched} box scores for week {week_number}')
        return report
