"""
Puzzle selection filters: the angle (theme or opening) and the difficulty.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .puzzle_theme import PuzzleThemeKey, PUZZLE_THEME_NAME_MAP


@dataclass(frozen=True)
class PuzzleTheme:
    theme: PuzzleThemeKey

    @property
    def key(self) -> str:
        return self.theme.value


@dataclass(frozen=True)
class PuzzleOpening:
    """An opening key such as "Sicilian_Defense_Najdorf_Variation"."""
    key: str

    def __post_init__(self):
        if not self.key:
            raise ValueError("Opening key must not be empty")


PuzzleAngle = Union[PuzzleTheme, PuzzleOpening]

DEFAULT_ANGLE = PuzzleTheme(PuzzleThemeKey.MIX)


def angle_from_key(key: str) -> PuzzleAngle:
    """Known theme names become a theme angle, anything else an opening."""
    theme = PUZZLE_THEME_NAME_MAP.get(key)
    if theme is not None:
        return PuzzleTheme(theme)
    return PuzzleOpening(key)


class PuzzleDifficulty(str, Enum):
    EASIEST = "easiest"
    EASIER = "easier"
    NORMAL = "normal"
    HARDER = "harder"
    HARDEST = "hardest"
