"""JSON document store for weeks, lineups, users and player reference data.

Layout under the data directory:

    active_week.json          {"week_number": N}
    weeks/week_N.json         WeekInformation
    lineups/week_N.json       {"week": N, "lineups": {user_id: Lineup}}
    users.json                {"users": {user_id: UserRecord}}
    players.json              {"players": [Player, ...]}

Weeks and lineups are versioned: saving a document whose version no longer
matches the stored one raises ConcurrentModificationError, and a successful
save bumps the version. Keying lineups by user id inside the week file makes
(user_id, week_number) unique.
"""

import logging
import re
import threading
from pathlib import Path

from .errors import (
    ConcurrentModificationError,
    LineupNotFoundError,
    NotFoundError,
    UserNotFoundError,
    WeekNotFoundError,
)
from .schemas import (
    ActiveWeekPointer,
    Lineup,
    LineupsFile,
    Player,
    PlayersFile,
    UserRecord,
    UsersFile,
    WeekInformation,
)
from .utils import load_json, save_json

logger = logging.getLogger('pickfl.store')

_WEEK_FILE = re.compile(r'^week_(\d+)\.json$')


class JsonStore:
    """Whole-document persistence on the local filesystem."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self._lock = threading.RLock()

    # Paths

    @property
    def active_week_path(self) -> Path:
        return self.data_dir / 'active_week.json'

    @property
    def users_path(self) -> Path:
        return self.data_dir / 'users.json'

    @property
    def players_path(self) -> Path:
        return self.data_dir / 'players.json'

    def week_path(self, week_number: int) -> Path:
        return self.data_dir / 'weeks' / f'week_{week_number}.json'

    def lineups_path(self, week_number: int) -> Path:
        return self.data_dir / 'lineups' / f'week_{week_number}.json'

    # Active week

    def load_active_week(self) -> ActiveWeekPointer:
        """
        Raises:
            NotFoundError: If no week has been published yet
        """
        if not self.active_week_path.exists():
            raise NotFoundError('No current week found')
        return load_json(self.active_week_path, schema=ActiveWeekPointer)

    def save_active_week(self, pointer: ActiveWeekPointer) -> None:
        save_json(self.active_week_path, pointer)
        logger.info(f'Active week set to {pointer.week_number}')

    # Weeks

    def week_numbers(self) -> list[int]:
        weeks_dir = self.data_dir / 'weeks'
        if not weeks_dir.exists():
            return []
        numbers = []
        for path in weeks_dir.iterdir():
            match = _WEEK_FILE.match(path.name)
            if match:
                numbers.append(int(match.group(1)))
        return sorted(numbers)

    def load_week(self, week_number: int) -> WeekInformation:
        """
        Raises:
            WeekNotFoundError: If the week does not exist
        """
        path = self.week_path(week_number)
        if not path.exists():
            raise WeekNotFoundError(week_number)
        return load_json(path, schema=WeekInformation)

    def save_week(self, week: WeekInformation) -> None:
        """
        Write a week, checking and bumping its version.

        Raises:
            ConcurrentModificationError: If the stored version differs
        """
        with self._lock:
            path = self.week_path(week.week_number)
            stored = load_json(path, schema=WeekInformation).version if path.exists() else 0
            if stored != week.version:
                raise ConcurrentModificationError(f'Week {week.week_number}', week.version, stored)
            week.version += 1
            try:
                save_json(path, week)
            except Exception:
                week.version -= 1
                raise

    # Lineups

    def _load_lineups_file(self, week_number: int) -> LineupsFile:
        path = self.lineups_path(week_number)
        if not path.exists():
            return LineupsFile(week=week_number)
        return load_json(path, schema=LineupsFile)

    def find_lineup(self, user_id: str, week_number: int) -> Lineup | None:
        return self._load_lineups_file(week_number).lineups.get(user_id)

    def load_lineup(self, user_id: str, week_number: int) -> Lineup:
        """
        Raises:
            LineupNotFoundError: If the user has no lineup for the week
        """
        lineup = self.find_lineup(user_id, week_number)
        if lineup is None:
            raise LineupNotFoundError(user_id, week_number)
        return lineup

    def lineups_for_week(self, week_number: int) -> list[Lineup]:
        return list(self._load_lineups_file(week_number).lineups.values())

    def lineups_for_user(self, user_id: str) -> list[Lineup]:
        """All of a user's lineups, ordered by week."""
        lineups_dir = self.data_dir / 'lineups'
        if not lineups_dir.exists():
            return []
        found = []
        for path in lineups_dir.iterdir():
            match = _WEEK_FILE.match(path.name)
            if not match:
                continue
            lineup = self._load_lineups_file(int(match.group(1))).lineups.get(user_id)
            if lineup is not None:
                found.append(lineup)
        return sorted(found, key=lambda l: l.week_number)

    def save_lineup(self, lineup: Lineup) -> None:
        """
        Insert or update a lineup, checking and bumping its version.

        A lineup with version 0 is an insert and fails if one already exists
        for the same (user_id, week_number).

        Raises:
            ConcurrentModificationError: If the stored version differs
        """
        with self._lock:
            data = self._load_lineups_file(lineup.week_number)
            existing = data.lineups.get(lineup.user_id)
            stored = existing.version if existing is not None else 0
            if stored != lineup.version:
                raise ConcurrentModificationError(
                    f'Lineup of {lineup.user_id} for week {lineup.week_number}',
                    lineup.version,
                    stored,
                )
            lineup.version += 1
            data.lineups[lineup.user_id] = lineup
            try:
                save_json(self.lineups_path(lineup.week_number), data)
            except Exception:
                lineup.version -= 1
                raise

    # Users

    def _load_users_file(self) -> UsersFile:
        if not self.users_path.exists():
            return UsersFile()
        return load_json(self.users_path, schema=UsersFile)

    def load_user(self, user_id: str) -> UserRecord:
        """
        Raises:
            UserNotFoundError: If the user is unknown
        """
        user = self._load_users_file().users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def list_users(self) -> list[UserRecord]:
        return list(self._load_users_file().users.values())

    def save_user(self, user: UserRecord) -> None:
        with self._lock:
            data = self._load_users_file()
            data.users[user.user_id] = user
            save_json(self.users_path, data)

    # Players

    def load_players(self) -> list[Player]:
        if not self.players_path.exists():
            logger.warning(f'No player reference data at {self.players_path}')
            return []
        return load_json(self.players_path, schema=PlayersFile).players

    def save_players(self, players: list[Player]) -> None:
        save_json(self.players_path, PlayersFile(players=players))
