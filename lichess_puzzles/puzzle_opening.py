"""
Openings available as puzzle angles, grouped by family.
"""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class PuzzleOpeningData:
    key: str
    name: str
    count: int


@dataclass(frozen=True)
class PuzzleOpeningFamily:
    key: str
    name: str
    count: int
    openings: Tuple[PuzzleOpeningData, ...] = ()
