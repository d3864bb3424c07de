"""
Lifetime statistics: high score, games played, AI-assisted games and playtime.

The game engine only calls the three hooks (record_game_start, record_score,
record_game_end). StatsRecorder keeps the numbers in SQLite; the in-memory
variant serves headless runs and tests.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Callable, Generator, Optional

from database import get_connection, init_database

logger = logging.getLogger(__name__)


@dataclass
class GameStats:
    total_games_played: int = 0
    ai_games_played: int = 0
    total_playtime: float = 0.0
    current_score: int = 0
    high_score: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class InMemoryStatsRecorder:
    """Keeps stats on the instance only."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self.stats = GameStats()
        self._game_started_at: Optional[float] = None

    def record_game_start(self, is_ai_enabled: bool) -> None:
        self._game_started_at = self.clock()
        self.stats.total_games_played += 1
        if is_ai_enabled:
            self.stats.ai_games_played += 1
        self.stats.current_score = 0

    def record_score(self, new_score: int) -> None:
        self.stats.current_score = new_score
        if new_score > self.stats.high_score:
            self.stats.high_score = new_score

    def record_game_end(self) -> None:
        if self._game_started_at is None:
            return
        self.stats.total_playtime += self.clock() - self._game_started_at
        self._game_started_at = None

    def get_stats(self) -> GameStats:
        return GameStats(**asdict(self.stats))

    def delete_data(self, high_score_only: bool = False) -> None:
        if high_score_only:
            self.stats.high_score = 0
        else:
            self.stats = GameStats()


class StatsRecorder(InMemoryStatsRecorder):
    """
    SQLite-backed stats.

    Every hook writes through immediately, so a crash mid-game loses at most the
    running game's playtime.
    """

    def __init__(self, db_path: Optional[str] = None, clock: Callable[[], float] = time.monotonic):
        super().__init__(clock=clock)
        self.db_path = db_path
        init_database(db_path)
        self.stats = self._load()

    @contextmanager
    def connection(self) -> Generator:
        """Yield (conn, cursor); commit on success, roll back on failure, always close."""
        conn = get_connection(self.db_path)
        cursor = conn.cursor()
        try:
            yield conn, cursor
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _load(self) -> GameStats:
        with self.connection() as (_, cursor):
            cursor.execute(
                """
                SELECT total_games_played, ai_games_played, total_playtime,
                       current_score, high_score
                FROM game_stats WHERE id = 1
                """
            )
            row = cursor.fetchone()
        return GameStats(**dict(row)) if row else GameStats()

    def _save(self) -> None:
        with self.connection() as (_, cursor):
            cursor.execute(
                """
                UPDATE game_stats
                SET total_games_played = ?,
                    ai_games_played = ?,
                    total_playtime = ?,
                    current_score = ?,
                    high_score = ?,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = 1
                """,
                (
                    self.stats.total_games_played,
                    self.stats.ai_games_played,
                    self.stats.total_playtime,
                    self.stats.current_score,
                    self.stats.high_score,
                ),
            )

    def record_game_start(self, is_ai_enabled: bool) -> None:
        super().record_game_start(is_ai_enabled)
        self._save()

    def record_score(self, new_score: int) -> None:
        previous_high = self.stats.high_score
        super().record_score(new_score)
        if self.stats.high_score > previous_high:
            logger.info("New high score: %d", self.stats.high_score)
        self._save()

    def record_game_end(self) -> None:
        super().record_game_end()
        self._save()

    def delete_data(self, high_score_only: bool = False) -> None:
        super().delete_data(high_score_only)
        self._save()
        logger.info("Deleted %s", "high score" if high_score_only else "all stats")
