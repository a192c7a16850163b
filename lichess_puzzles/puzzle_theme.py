"""
Puzzle themes and the name -> key lookup table.
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class PuzzleThemeKey(str, Enum):
    """Theme identifiers as they appear on the wire. MIX is the "healthy mix" angle."""
    MIX = "mix"
    ADVANCED_PAWN = "advancedPawn"
    ADVANTAGE = "advantage"
    ANASTASIA_MATE = "anastasiaMate"
    ARABIAN_MATE = "arabianMate"
    ATTACKING_F2F7 = "attackingF2F7"
    ATTRACTION = "attraction"
    BACK_RANK_MATE = "backRankMate"
    BISHOP_ENDGAME = "bishopEndgame"
    BODEN_MATE = "bodenMate"
    CAPTURING_DEFENDER = "capturingDefender"
    CASTLING = "castling"
    CLEARANCE = "clearance"
    CRUSHING = "crushing"
    DEFENSIVE_MOVE = "defensiveMove"
    DEFLECTION = "deflection"
    DISCOVERED_ATTACK = "discoveredAttack"
    DOUBLE_BISHOP_MATE = "doubleBishopMate"
    DOUBLE_CHECK = "doubleCheck"
    DOVETAIL_MATE = "dovetailMate"
    EQUALITY = "equality"
    ENDGAME = "endgame"
    EN_PASSANT = "enPassant"
    EXPOSED_KING = "exposedKing"
    FORK = "fork"
    HANGING_PIECE = "hangingPiece"
    HOOK_MATE = "hookMate"
    INTERFERENCE = "interference"
    INTERMEZZO = "intermezzo"
    KINGSIDE_ATTACK = "kingsideAttack"
    KNIGHT_ENDGAME = "knightEndgame"
    LONG = "long"
    MASTER = "master"
    MASTER_VS_MASTER = "masterVsMaster"
    MATE = "mate"
    MATE_IN_1 = "mateIn1"
    MATE_IN_2 = "mateIn2"
    MATE_IN_3 = "mateIn3"
    MATE_IN_4 = "mateIn4"
    MATE_IN_5 = "mateIn5"
    MIDDLEGAME = "middlegame"
    ONE_MOVE = "oneMove"
    OPENING = "opening"
    PAWN_ENDGAME = "pawnEndgame"
    PIN = "pin"
    PROMOTION = "promotion"
    QUEEN_ENDGAME = "queenEndgame"
    QUEEN_ROOK_ENDGAME = "queenRookEndgame"
    QUEENSIDE_ATTACK = "queensideAttack"
    QUIET_MOVE = "quietMove"
    ROOK_ENDGAME = "rookEndgame"
    SACRIFICE = "sacrifice"
    SHORT = "short"
    SKEWER = "skewer"
    SMOTHERED_MATE = "smotheredMate"
    SUPER_GM = "superGM"
    TRAPPED_PIECE = "trappedPiece"
    UNDER_PROMOTION = "underPromotion"
    VERY_LONG = "veryLong"
    X_RAY_ATTACK = "xRayAttack"
    ZUGZWANG = "zugzwang"

    # Anything the server sends that this client does not know about
    UNSUPPORTED = "unsupported"


PUZZLE_THEME_NAME_MAP: Mapping[str, PuzzleThemeKey] = MappingProxyType({
    key.value: key for key in PuzzleThemeKey if key is not PuzzleThemeKey.UNSUPPORTED
})


def theme_key_from_name(name: str) -> PuzzleThemeKey:
    """Look up a theme by its wire name, falling back to UNSUPPORTED."""
    return PUZZLE_THEME_NAME_MAP.get(name, PuzzleThemeKey.UNSUPPORTED)


@dataclass(frozen=True)
class PuzzleThemeData:
    """One entry of the training themes listing."""
    key: PuzzleThemeKey
    name: str
    desc: str
    count: int
