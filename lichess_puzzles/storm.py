"""
Data models for Puzzle Storm, the timed puzzle mode.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from .ids import PuzzleId

# Fixed field of every storm run submission
NOT_AN_EXPLOIT = (
    "Yes, we know that you can send whatever score you like. "
    "That's why there's no leaderboards and no competition."
)


@dataclass(frozen=True)
class LitePuzzle:
    """A puzzle reduced to what Storm needs to play it."""
    id: PuzzleId
    fen: str
    solution: Tuple[str, ...]
    rating: int

    def __post_init__(self):
        object.__setattr__(self, 'solution', tuple(self.solution))


@dataclass(frozen=True)
class PuzzleStormHighScore:
    day: int
    week: int
    month: int
    all_time: int


@dataclass(frozen=True)
class PuzzleStormResponse:
    puzzles: Tuple[LitePuzzle, ...]
    key: Optional[str] = None
    highscore: Optional[PuzzleStormHighScore] = None


@dataclass(frozen=True)
class StormRunStats:
    """Statistics of one finished storm run."""
    history: Sequence  # one entry per puzzle played
    score: int
    moves: int
    errors: int
    combo_best: int
    time: timedelta
    highest: int

    def to_form(self) -> Dict[str, str]:
        """Form fields for submitting the run."""
        return {
            'puzzles': str(len(self.history)),
            'score': str(self.score),
            'moves': str(self.moves),
            'errors': str(self.errors),
            'combo': str(self.combo_best),
            'time': str(int(self.time.total_seconds())),
            'highest': str(self.highest),
            'notAnExploit': NOT_AN_EXPLOIT,
        }


class StormNewHighType(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    ALL_TIME = "allTime"


@dataclass(frozen=True)
class StormNewHigh:
    key: StormNewHighType
    prev: int


@dataclass(frozen=True)
class StormDayScore:
    day: date
    runs: int
    score: int
    time: int
    highest: int


@dataclass(frozen=True)
class StormDashboard:
    high_score: PuzzleStormHighScore
    day_highscores: Tuple[StormDayScore, ...]
