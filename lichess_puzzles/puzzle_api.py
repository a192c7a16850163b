"""
Lichess puzzle API client.

Each method issues exactly one request through the AuthClient and decodes the
answer. Nothing is cached and no state is kept between calls.
"""
import logging
from datetime import datetime, timedelta
from typing import Mapping, Optional, Sequence, Tuple

from .auth_client import AuthClient
from .config import DASHBOARD_DAYS
from .decoders import (
    EPOCH,
    decode_batch,
    decode_puzzle,
    decode_streak,
    decode_storm,
    decode_storm_new_high,
    decode_dashboard,
    decode_history_entry,
    decode_storm_dashboard,
    decode_themes,
    decode_openings,
)
from .ids import PuzzleId, UserId
from .json_reader import read_json_object, read_ndjson_list
from .puzzle import (
    Puzzle,
    PuzzleBatchResponse,
    PuzzleDashboard,
    PuzzleHistoryEntry,
    PuzzleSolution,
    PuzzleStreakResponse,
)
from .puzzle_angle import PuzzleAngle, PuzzleDifficulty, DEFAULT_ANGLE
from .puzzle_opening import PuzzleOpeningFamily
from .puzzle_theme import PuzzleThemeKey, PuzzleThemeData
from .result import Result
from .storm import PuzzleStormResponse, StormDashboard, StormNewHigh, StormRunStats

logger = logging.getLogger(__name__)

JSON_HEADERS = {'Accept': 'application/json'}


def _check_positive(name: str, value: int):
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


def _epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.astimezone()  # naive datetimes are local time
    return (moment - EPOCH) // timedelta(milliseconds=1)


class PuzzleApiClient:
    """Client for the Lichess puzzle, streak and storm endpoints."""

    def __init__(self, api_client: Optional[AuthClient] = None):
        self.api_client = api_client or AuthClient()

    # ============================================
    # Puzzle batches
    # ============================================

    def select_batch(
        self,
        count: int,
        angle: PuzzleAngle = DEFAULT_ANGLE,
        difficulty: PuzzleDifficulty = PuzzleDifficulty.NORMAL,
    ) -> Result[PuzzleBatchResponse]:
        """Fetch `count` puzzles for an angle. Never retried."""
        _check_positive("count", count)
        return self.api_client.get(
            f"/api/puzzle/batch/{angle.key}",
            params={'nb': count, 'difficulty': difficulty.value},
            retry_on_error=False,
        ).flat_map(self._decode_batch_response)

    def solve_batch(
        self,
        count: int,
        solved: Sequence[PuzzleSolution],
        angle: PuzzleAngle = DEFAULT_ANGLE,
        difficulty: PuzzleDifficulty = PuzzleDifficulty.NORMAL,
    ) -> Result[PuzzleBatchResponse]:
        """Submit solved puzzles and receive the next batch."""
        _check_positive("count", count)
        body = {
            'solutions': [
                {'id': solution.id.value, 'win': solution.win, 'rated': solution.rated}
                for solution in solved
            ],
        }
        return self.api_client.post(
            f"/api/puzzle/batch/{angle.key}",
            params={'nb': count, 'difficulty': difficulty.value},
            headers={'Content-type': 'application/json'},
            json=body,
            retry_on_error=False,
        ).flat_map(self._decode_batch_response)

    def _decode_batch_response(self, response) -> Result[PuzzleBatchResponse]:
        return read_json_object(response, decode_batch, logger=logger)

    # ============================================
    # Single puzzles
    # ============================================

    def fetch(self, puzzle_id: PuzzleId) -> Result[Puzzle]:
        return self.api_client.get(f"/api/puzzle/{puzzle_id}").flat_map(
            lambda response: read_json_object(response, decode_puzzle, logger=logger)
        )

    def fetch_daily(self) -> Result[Puzzle]:
        return self.api_client.get("/api/puzzle/daily").flat_map(
            lambda response: read_json_object(response, decode_puzzle, logger=logger)
        ).map(lambda puzzle: puzzle.as_daily())

    # ============================================
    # Streak
    # ============================================

    def streak(self) -> Result[PuzzleStreakResponse]:
        return self.api_client.get("/api/streak").flat_map(
            lambda response: read_json_object(response, decode_streak, logger=logger)
        )

    def post_streak_run(self, run: int) -> Result[None]:
        """Record the length of a finished streak."""
        return self.api_client.post(f"/api/streak/{run}").map(lambda response: None)

    # ============================================
    # Storm
    # ============================================

    def storm(self) -> Result[PuzzleStormResponse]:
        return self.api_client.get("/api/storm").flat_map(
            lambda response: read_json_object(response, decode_storm, logger=logger)
        )

    def post_storm_run(self, stats: StormRunStats) -> Result[Optional[StormNewHigh]]:
        """Submit a finished run. Succeeds with None unless the run set a new high score."""
        return self.api_client.post("/storm", data=stats.to_form()).flat_map(
            lambda response: read_json_object(response, decode_storm_new_high, logger=logger)
        )

    def storm_dashboard(self, user_id: UserId) -> Result[StormDashboard]:
        return self.api_client.get(f"/api/storm/dashboard/{user_id}").flat_map(
            lambda response: read_json_object(response, decode_storm_dashboard, logger=logger)
        )

    # ============================================
    # Dashboard and history
    # ============================================

    def puzzle_dashboard(self) -> Result[PuzzleDashboard]:
        return self.api_client.get(f"/api/puzzle/dashboard/{DASHBOARD_DAYS}").flat_map(
            lambda response: read_json_object(response, decode_dashboard, logger=logger)
        )

    def puzzle_activity(
        self,
        max_count: int,
        before: Optional[datetime] = None,
    ) -> Result[Tuple[PuzzleHistoryEntry, ...]]:
        """
        Fetch the most recent puzzle attempts, newest first.

        Args:
            max_count: Maximum number of entries to return
            before: Only return attempts made before this time (for paging)

        Returns:
            Result with a tuple of PuzzleHistoryEntry
        """
        _check_positive("max_count", max_count)
        params = {'max': max_count}
        if before is not None:
            params['before'] = _epoch_millis(before)

        return self.api_client.get("/api/puzzle/activity", params=params).flat_map(
            lambda response: read_ndjson_list(response, decode_history_entry, logger=logger)
        ).map(tuple)

    # ============================================
    # Themes and openings
    # ============================================

    def puzzle_themes(self) -> Result[Mapping[PuzzleThemeKey, PuzzleThemeData]]:
        return self.api_client.get("/training/themes", headers=JSON_HEADERS).flat_map(
            lambda response: read_json_object(response, decode_themes, logger=logger)
        )

    def puzzle_openings(self) -> Result[Tuple[PuzzleOpeningFamily, ...]]:
        return self.api_client.get("/training/openings", headers=JSON_HEADERS).flat_map(
            lambda response: read_json_object(response, decode_openings, logger=logger)
        )
