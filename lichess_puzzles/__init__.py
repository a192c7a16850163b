"""Client for the Lichess puzzle, streak and storm API."""

from .auth_client import AuthClient
from .errors import ApiError, TransportError, HttpStatusError, NotFoundError, DecodeError
from .ids import PuzzleId, GameId, UserId
from .puzzle import (
    Puzzle,
    PuzzleBatchResponse,
    PuzzleDashboard,
    PuzzleHistoryEntry,
    PuzzleSolution,
    PuzzleStreakResponse,
)
from .puzzle_angle import PuzzleTheme, PuzzleOpening, PuzzleDifficulty, angle_from_key
from .puzzle_api import PuzzleApiClient
from .puzzle_theme import PuzzleThemeKey, PuzzleThemeData
from .result import Result, Success, Failure
from .storm import PuzzleStormResponse, StormDashboard, StormNewHigh, StormRunStats

__all__ = [
    'AuthClient',
    'PuzzleApiClient',
    'ApiError',
    'TransportError',
    'HttpStatusError',
    'NotFoundError',
    'DecodeError',
    'PuzzleId',
    'GameId',
    'UserId',
    'Puzzle',
    'PuzzleBatchResponse',
    'PuzzleDashboard',
    'PuzzleHistoryEntry',
    'PuzzleSolution',
    'PuzzleStreakResponse',
    'PuzzleTheme',
    'PuzzleOpening',
    'PuzzleDifficulty',
    'angle_from_key',
    'PuzzleThemeKey',
    'PuzzleThemeData',
    'Result',
    'Success',
    'Failure',
    'PuzzleStormResponse',
    'StormDashboard',
    'StormNewHigh',
    'StormRunStats',
]
