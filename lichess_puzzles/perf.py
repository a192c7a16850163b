"""
Rating categories ("perfs") reported by Lichess.
"""
from enum import Enum


class Perf(str, Enum):
    ULTRA_BULLET = "ultraBullet"
    BULLET = "bullet"
    BLITZ = "blitz"
    RAPID = "rapid"
    CLASSICAL = "classical"
    CORRESPONDENCE = "correspondence"
    FROM_POSITION = "fromPosition"
    CHESS960 = "chess960"
    ANTICHESS = "antichess"
    KING_OF_THE_HILL = "kingOfTheHill"
    THREE_CHECK = "threeCheck"
    ATOMIC = "atomic"
    HORDE = "horde"
    RACING_KINGS = "racingKings"
    CRAZYHOUSE = "crazyhouse"
    PUZZLE = "puzzle"
    STORM = "storm"
    STREAK = "streak"
