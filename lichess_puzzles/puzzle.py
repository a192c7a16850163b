"""
Data models for puzzles, puzzle sessions and puzzle history.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import FrozenSet, Optional, Tuple

import chess

from .config import PROVISIONAL_DEVIATION
from .ids import PuzzleId, GameId
from .perf import Perf
from .puzzle_theme import PuzzleThemeKey


@dataclass(frozen=True)
class PuzzleGamePlayer:
    """A player of the game a puzzle was taken from."""
    name: str
    side: chess.Color
    title: Optional[str] = None  # GM, IM, BOT...


@dataclass(frozen=True)
class PuzzleGame:
    """The game a puzzle was taken from."""
    id: GameId
    perf: Perf
    rated: bool
    white: PuzzleGamePlayer
    black: PuzzleGamePlayer
    pgn: str  # Moves up to the puzzle position


@dataclass(frozen=True)
class PuzzleData:
    id: PuzzleId
    rating: int
    plays: int
    initial_ply: int
    solution: Tuple[str, ...]  # UCI moves
    themes: FrozenSet[str]

    def __post_init__(self):
        object.__setattr__(self, 'solution', tuple(self.solution))
        object.__setattr__(self, 'themes', frozenset(self.themes))


@dataclass(frozen=True)
class Puzzle:
    puzzle: PuzzleData
    game: PuzzleGame
    is_daily_puzzle: bool = False

    @property
    def id(self) -> PuzzleId:
        return self.puzzle.id

    def as_daily(self) -> "Puzzle":
        return replace(self, is_daily_puzzle=True)


@dataclass(frozen=True)
class PuzzleSolution:
    """The outcome of one solved puzzle, as sent back with a batch."""
    id: PuzzleId
    win: bool
    rated: bool


@dataclass(frozen=True)
class PuzzleGlicko:
    rating: float
    deviation: float
    provisional: Optional[bool] = None

    @property
    def is_provisional(self) -> bool:
        if self.provisional is not None:
            return self.provisional
        return self.deviation >= PROVISIONAL_DEVIATION


@dataclass(frozen=True)
class PuzzleRound:
    id: PuzzleId
    rating_diff: int
    win: bool


@dataclass(frozen=True)
class PuzzleBatchResponse:
    puzzles: Tuple[Puzzle, ...]
    glicko: Optional[PuzzleGlicko] = None
    rounds: Optional[Tuple[PuzzleRound, ...]] = None


@dataclass(frozen=True)
class PuzzleStreakResponse:
    puzzle: Puzzle
    streak: Tuple[PuzzleId, ...]  # Ids of every puzzle in the streak, in order


@dataclass(frozen=True)
class PuzzleHistoryEntry:
    """One past puzzle attempt from the activity feed."""
    win: bool
    date: datetime
    rating: int
    id: PuzzleId
    fen: str
    last_move: chess.Move


@dataclass(frozen=True)
class PuzzleDashboardData:
    nb: int
    first_wins: int
    replay_wins: int
    performance: int
    theme: PuzzleThemeKey


@dataclass(frozen=True)
class PuzzleDashboard:
    global_: PuzzleDashboardData
    themes: Tuple[PuzzleDashboardData, ...]

    @property
    def solved_percent(self) -> int:
        """Share of puzzles solved on the first try, as a whole percentage."""
        if self.global_.nb == 0:
            return 0
        return round(self.global_.first_wins / self.global_.nb * 100)

    def chart_themes(self, limit: int = 9) -> Tuple[PuzzleDashboardData, ...]:
        """The first `limit` themes, ordered by theme name."""
        return tuple(sorted(self.themes[:limit], key=lambda t: t.theme.value))
