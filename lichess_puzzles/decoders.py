"""
Decoders from Lichess JSON payloads to puzzle models.

Every function takes a JsonField positioned on the object to decode and raises
DecodeError if a required field is missing or has the wrong type.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

import chess

from .errors import DecodeError
from .ids import PuzzleId, GameId
from .json_reader import JsonField
from .perf import Perf
from .puzzle import (
    Puzzle,
    PuzzleData,
    PuzzleGame,
    PuzzleGamePlayer,
    PuzzleGlicko,
    PuzzleRound,
    PuzzleBatchResponse,
    PuzzleStreakResponse,
    PuzzleHistoryEntry,
    PuzzleDashboard,
    PuzzleDashboardData,
)
from .puzzle_opening import PuzzleOpeningData, PuzzleOpeningFamily
from .puzzle_theme import PuzzleThemeKey, PuzzleThemeData, theme_key_from_name
from .storm import (
    LitePuzzle,
    PuzzleStormHighScore,
    PuzzleStormResponse,
    StormNewHigh,
    StormNewHighType,
    StormDayScore,
    StormDashboard,
)

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

STORM_DAY_FORMAT = "%Y/%m/%d"  # "2023/1/5", month and day unpadded

SIDES = {
    'white': chess.WHITE,
    'black': chess.BLACK,
}


# ============================================
# Field converters
# ============================================

def _puzzle_id(field: JsonField) -> PuzzleId:
    return field.convert(PuzzleId, "non-empty puzzle id")


def _game_id(field: JsonField) -> GameId:
    return field.convert(GameId, "non-empty game id")


def _perf(field: JsonField) -> Perf:
    return field.convert(Perf, "a known perf key")


def _side(field: JsonField) -> chess.Color:
    color = field.as_str()
    if color not in SIDES:
        raise DecodeError(field.path, "'white' or 'black'", repr(color))
    return SIDES[color]


def _uci_move(field: JsonField) -> chess.Move:
    field.as_str()
    return field.convert(chess.Move.from_uci, "a UCI move")


def _millis_datetime(field: JsonField) -> datetime:
    millis = field.as_int()
    return EPOCH + timedelta(milliseconds=millis)


def _storm_day(field: JsonField) -> date:
    field.as_str()
    return field.convert(lambda value: datetime.strptime(value, STORM_DAY_FORMAT).date(), "a yyyy/M/d date")


def _split_words(field: JsonField) -> Tuple[str, ...]:
    return tuple(field.as_str().split(' '))


# ============================================
# Puzzles
# ============================================

def decode_puzzle(field: JsonField) -> Puzzle:
    """Decode `{puzzle: {...}, game: {...}}`."""
    return Puzzle(
        puzzle=field('puzzle').let(_decode_puzzle_data),
        game=field('game').let(_decode_puzzle_game),
    )


def _decode_puzzle_data(field: JsonField) -> PuzzleData:
    return PuzzleData(
        id=_puzzle_id(field('id')),
        rating=field('rating').as_int(),
        plays=field('plays').as_int(),
        initial_ply=field('initialPly').as_int(),
        solution=field('solution').as_list(lambda move: move.as_str()),
        themes=field('themes').as_list(lambda theme: theme.as_str()),
    )


def _decode_puzzle_game(field: JsonField) -> PuzzleGame:
    players = field('players').as_list(_decode_player)
    return PuzzleGame(
        id=_game_id(field('id')),
        perf=_perf(field('perf', 'key')),
        rated=field('rated').as_bool(),
        white=_player_with_side(field('players'), players, chess.WHITE),
        black=_player_with_side(field('players'), players, chess.BLACK),
        pgn=field('pgn').as_str(),
    )


def _player_with_side(field: JsonField, players, side: chess.Color) -> PuzzleGamePlayer:
    for player in players:
        if player.side == side:
            return player
    raise DecodeError(field.path, f"a player with color {chess.COLOR_NAMES[side]}")


def _decode_player(field: JsonField) -> PuzzleGamePlayer:
    return PuzzleGamePlayer(
        name=field('name').as_str(),
        side=_side(field('color')),
        title=field('title').as_str_or_none(),
    )


def _decode_glicko(field: JsonField) -> PuzzleGlicko:
    return PuzzleGlicko(
        rating=field('rating').as_float(),
        deviation=field('deviation').as_float(),
        provisional=field('provisional').as_bool_or_none(),
    )


def _decode_round(field: JsonField) -> PuzzleRound:
    return PuzzleRound(
        id=_puzzle_id(field('id')),
        rating_diff=field('ratingDiff').as_int(),
        win=field('win').as_bool(),
    )


def decode_batch(field: JsonField) -> PuzzleBatchResponse:
    """Decode `{puzzles: [...], glicko?: {...}, rounds?: [...]}`."""
    rounds = field('rounds').as_list_or_none(_decode_round)
    return PuzzleBatchResponse(
        puzzles=tuple(field('puzzles').as_list(lambda puzzle: puzzle.let(decode_puzzle))),
        glicko=field('glicko').let_or_none(_decode_glicko),
        rounds=tuple(rounds) if rounds is not None else None,
    )


def decode_streak(field: JsonField) -> PuzzleStreakResponse:
    return PuzzleStreakResponse(
        puzzle=decode_puzzle(field),
        streak=tuple(PuzzleId(puzzle_id) for puzzle_id in _split_ids(field('streak'))),
    )


def _split_ids(field: JsonField) -> Tuple[str, ...]:
    ids = _split_words(field)
    if not all(ids):
        raise DecodeError(field.path, "space separated puzzle ids", repr(field.value))
    return ids


# ============================================
# History and dashboard
# ============================================

def decode_history_entry(field: JsonField) -> PuzzleHistoryEntry:
    """Decode one line of the activity feed."""
    return PuzzleHistoryEntry(
        win=field('win').as_bool(),
        date=_millis_datetime(field('date')),
        rating=field('puzzle', 'rating').as_int(),
        id=_puzzle_id(field('puzzle', 'id')),
        fen=field('puzzle', 'fen').as_str(),
        last_move=_uci_move(field('puzzle', 'lastMove')),
    )


def _decode_dashboard_results(field: JsonField, theme: PuzzleThemeKey) -> PuzzleDashboardData:
    return PuzzleDashboardData(
        nb=field('nb').as_int(),
        first_wins=field('firstWins').as_int(),
        replay_wins=field('replayWins').as_int(),
        performance=field('performance').as_int(),
        theme=theme,
    )


def decode_dashboard(field: JsonField) -> PuzzleDashboard:
    """
    Decode `{global: {...}, themes: {<theme>: {results: {...}}}}`.

    Theme entries the client does not know are skipped.
    """
    themes = []
    for name in field('themes').as_map():
        theme = theme_key_from_name(name)
        if theme is PuzzleThemeKey.UNSUPPORTED:
            logger.debug(f"Skipping unknown dashboard theme {name!r}")
            continue
        themes.append(field('themes', name, 'results').let(
            lambda results: _decode_dashboard_results(results, theme)
        ))

    return PuzzleDashboard(
        global_=field('global').let(lambda g: _decode_dashboard_results(g, PuzzleThemeKey.MIX)),
        themes=tuple(themes),
    )


# ============================================
# Themes and openings
# ============================================

def _decode_theme(field: JsonField) -> PuzzleThemeData:
    return PuzzleThemeData(
        key=theme_key_from_name(field('key').as_str()),
        name=field('name').as_str(),
        desc=field('desc').as_str(),
        count=field('count').as_int(),
    )


def decode_themes(field: JsonField) -> Mapping[PuzzleThemeKey, PuzzleThemeData]:
    """
    Decode `{themes: {<category>: [{key, name, desc, count}, ...]}}`.

    Categories are flattened. Themes with an unknown key are dropped.
    """
    result: Dict[PuzzleThemeKey, PuzzleThemeData] = {}
    for category in field('themes').as_map():
        for theme in field('themes', category).as_list(_decode_theme):
            if theme.key is PuzzleThemeKey.UNSUPPORTED:
                continue
            result[theme.key] = theme
    return MappingProxyType(result)


def _decode_opening(field: JsonField) -> PuzzleOpeningData:
    return PuzzleOpeningData(
        key=field('key').as_str(),
        name=field('name').as_str(),
        count=field('count').as_int(),
    )


def _decode_opening_family(field: JsonField) -> PuzzleOpeningFamily:
    family = field('family')
    openings = field('openings').as_list_or_none(_decode_opening)
    return PuzzleOpeningFamily(
        key=family('key').as_str(),
        name=family('name').as_str(),
        count=family('count').as_int(),
        openings=tuple(openings or ()),
    )


def decode_openings(field: JsonField) -> Tuple[PuzzleOpeningFamily, ...]:
    """Decode `{openings: [{family: {...}, openings?: [...]}, ...]}`."""
    return tuple(field('openings').as_list(_decode_opening_family))


# ============================================
# Storm
# ============================================

def _decode_lite_puzzle(field: JsonField) -> LitePuzzle:
    return LitePuzzle(
        id=_puzzle_id(field('id')),
        fen=field('fen').as_str(),
        solution=_split_words(field('line')),
        rating=field('rating').as_int(),
    )


def _decode_high_score(field: JsonField) -> PuzzleStormHighScore:
    return PuzzleStormHighScore(
        day=field('day').as_int(),
        week=field('week').as_int(),
        month=field('month').as_int(),
        all_time=field('allTime').as_int(),
    )


def decode_storm(field: JsonField) -> PuzzleStormResponse:
    """Decode `{puzzles: [...], high?: {...}, key?: "..."}`."""
    return PuzzleStormResponse(
        puzzles=tuple(field('puzzles').as_list(_decode_lite_puzzle)),
        key=field('key').as_str_or_none(),
        highscore=field('high').let_or_none(_decode_high_score),
    )


def decode_storm_new_high(field: JsonField) -> Optional[StormNewHigh]:
    """Decode the answer to a submitted run. Only `newHigh` matters, and it is optional."""
    return field('newHigh').let_or_none(lambda high: StormNewHigh(
        key=high('key').convert(StormNewHighType, "a storm high score period"),
        prev=high('prev').as_int(),
    ))


def _decode_storm_day(field: JsonField) -> StormDayScore:
    return StormDayScore(
        day=_storm_day(field('_id')),
        runs=field('runs').as_int(),
        score=field('score').as_int(),
        time=field('time').as_int(),
        highest=field('highest').as_int(),
    )


def decode_storm_dashboard(field: JsonField) -> StormDashboard:
    return StormDashboard(
        high_score=field('high').let(_decode_high_score),
        day_highscores=tuple(field('days').as_list(_decode_storm_day)),
    )
