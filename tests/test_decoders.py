"""Tests for decoding Lichess payloads into puzzle models."""

from __future__ import annotations

from datetime import date, datetime, timezone

import chess
import pytest

from lichess_puzzles.decoders import (
    decode_batch,
    decode_dashboard,
    decode_history_entry,
    decode_openings,
    decode_puzzle,
    decode_storm,
    decode_storm_dashboard,
    decode_storm_new_high,
    decode_streak,
    decode_themes,
)
from lichess_puzzles.errors import DecodeError
from lichess_puzzles.ids import PuzzleId, GameId
from lichess_puzzles.json_reader import JsonField
from lichess_puzzles.perf import Perf
from lichess_puzzles.puzzle_theme import PuzzleThemeKey
from lichess_puzzles.storm import StormNewHighType

from conftest import dashboard_results, history_line, puzzle_json


def decode(decoder, payload):
    return decoder(JsonField(payload))


class TestPuzzle:
    def test_full_puzzle(self):
        puzzle = decode(decode_puzzle, puzzle_json())

        assert puzzle.id == PuzzleId("Ab3dE")
        assert puzzle.puzzle.rating == 1500
        assert puzzle.puzzle.plays == 4321
        assert puzzle.puzzle.initial_ply == 5
        assert puzzle.puzzle.solution == ("f3e5", "d4e2", "d1e2")
        assert puzzle.puzzle.themes == frozenset({"fork", "short"})
        assert puzzle.game.id == GameId("x7Yz9Qwe")
        assert puzzle.game.perf is Perf.BLITZ
        assert puzzle.game.rated is True
        assert puzzle.game.white.name == "alice"
        assert puzzle.game.white.side == chess.WHITE
        assert puzzle.game.white.title == "FM"
        assert puzzle.game.black.name == "bob"
        assert puzzle.game.black.title is None
        assert puzzle.is_daily_puzzle is False

    def test_duplicate_themes_are_collapsed(self):
        puzzle = decode(decode_puzzle, puzzle_json(themes=["x", "x", "y"]))
        assert len(puzzle.puzzle.themes) == 2

    def test_missing_rating_fails_with_path(self):
        payload = puzzle_json()
        del payload["puzzle"]["rating"]

        with pytest.raises(DecodeError) as excinfo:
            decode(decode_puzzle, payload)

        assert excinfo.value.path == "puzzle.rating"

    def test_empty_id_is_rejected(self):
        with pytest.raises(DecodeError) as excinfo:
            decode(decode_puzzle, puzzle_json(puzzle_id=""))
        assert excinfo.value.path == "puzzle.id"

    def test_unknown_perf_is_rejected(self):
        payload = puzzle_json()
        payload["game"]["perf"]["key"] = "bughouse"
        with pytest.raises(DecodeError) as excinfo:
            decode(decode_puzzle, payload)
        assert excinfo.value.path == "game.perf.key"

    def test_missing_black_player(self):
        payload = puzzle_json()
        payload["game"]["players"] = [{"name": "alice", "color": "white"}]
        with pytest.raises(DecodeError) as excinfo:
            decode(decode_puzzle, payload)
        assert excinfo.value.path == "game.players"

    def test_bad_color(self):
        payload = puzzle_json()
        payload["game"]["players"][1]["color"] = "green"
        with pytest.raises(DecodeError) as excinfo:
            decode(decode_puzzle, payload)
        assert excinfo.value.path == "game.players[1].color"


class TestBatch:
    def test_order_and_length_preserved(self):
        ids = ["aaaaa", "bbbbb", "ccccc", "ddddd"]
        batch = decode(decode_batch, {"puzzles": [puzzle_json(puzzle_id=i) for i in ids]})

        assert [str(p.id) for p in batch.puzzles] == ids
        assert batch.glicko is None
        assert batch.rounds is None

    def test_glicko_and_rounds(self):
        batch = decode(decode_batch, {
            "puzzles": [puzzle_json()],
            "glicko": {"rating": 1712.4, "deviation": 65.1},
            "rounds": [{"id": "zzzzz", "ratingDiff": -12, "win": False}],
        })

        assert batch.glicko.rating == pytest.approx(1712.4)
        assert batch.glicko.provisional is None
        assert batch.glicko.is_provisional is False
        assert batch.rounds[0].id == PuzzleId("zzzzz")
        assert batch.rounds[0].rating_diff == -12
        assert batch.rounds[0].win is False

    def test_provisional_flag(self):
        batch = decode(decode_batch, {
            "puzzles": [],
            "glicko": {"rating": 1500, "deviation": 500, "provisional": True},
        })
        assert batch.glicko.provisional is True
        assert batch.glicko.is_provisional is True

    def test_puzzles_must_be_a_list(self):
        with pytest.raises(DecodeError) as excinfo:
            decode(decode_batch, {"puzzles": {"id": "x"}})
        assert excinfo.value.path == "puzzles"
        assert excinfo.value.expected == "list"

    def test_puzzle_entries_must_be_objects(self):
        with pytest.raises(DecodeError) as excinfo:
            decode(decode_batch, {"puzzles": [puzzle_json(), "nope"]})
        assert excinfo.value.path == "puzzles[1]"

    def test_bad_puzzle_in_batch_fails_whole_batch(self):
        broken = puzzle_json(puzzle_id="bbbbb")
        del broken["puzzle"]["rating"]
        with pytest.raises(DecodeError) as excinfo:
            decode(decode_batch, {"puzzles": [puzzle_json(), broken]})
        assert excinfo.value.path == "puzzles[1].puzzle.rating"


class TestStreak:
    def test_streak_ids_split_on_spaces(self):
        payload = puzzle_json()
        payload["streak"] = "Ab3dE 00Xyz 1abcd"

        streak = decode(decode_streak, payload)

        assert streak.puzzle.id == PuzzleId("Ab3dE")
        assert streak.streak == (PuzzleId("Ab3dE"), PuzzleId("00Xyz"), PuzzleId("1abcd"))

    def test_streak_required(self):
        with pytest.raises(DecodeError) as excinfo:
            decode(decode_streak, puzzle_json())
        assert excinfo.value.path == "streak"


class TestHistory:
    def test_entry(self):
        entry = decode(decode_history_entry, history_line(date=1700000000123))

        assert entry.win is True
        assert entry.date == datetime(2023, 11, 14, 22, 13, 20, 123000, tzinfo=timezone.utc)
        assert entry.rating == 1620
        assert entry.id == PuzzleId("Ab3dE")
        assert entry.last_move == chess.Move.from_uci("f1c4")

    def test_invalid_uci(self):
        payload = history_line()
        payload["puzzle"]["lastMove"] = "castle"
        with pytest.raises(DecodeError) as excinfo:
            decode(decode_history_entry, payload)
        assert excinfo.value.path == "puzzle.lastMove"


class TestDashboard:
    def test_global_and_themes(self):
        dashboard = decode(decode_dashboard, {
            "days": 30,
            "global": dashboard_results(nb=120, first_wins=90),
            "themes": {
                "fork": {"theme": "Fork", "results": dashboard_results(nb=12)},
                "mateIn2": {"theme": "Mate in 2", "results": dashboard_results(nb=8)},
            },
        })

        assert dashboard.global_.nb == 120
        assert dashboard.global_.theme is PuzzleThemeKey.MIX
        assert [t.theme for t in dashboard.themes] == [PuzzleThemeKey.FORK, PuzzleThemeKey.MATE_IN_2]
        assert dashboard.themes[0].nb == 12
        assert dashboard.solved_percent == 75

    def test_unknown_theme_skipped(self):
        dashboard = decode(decode_dashboard, {
            "global": dashboard_results(),
            "themes": {
                "someNewTheme": {"results": {"garbage": True}},
                "pin": {"results": dashboard_results()},
            },
        })
        assert [t.theme for t in dashboard.themes] == [PuzzleThemeKey.PIN]

    def test_missing_results_field(self):
        with pytest.raises(DecodeError) as excinfo:
            decode(decode_dashboard, {
                "global": dashboard_results(),
                "themes": {"pin": {"results": {"nb": 1, "firstWins": 1, "replayWins": 0}}},
            })
        assert excinfo.value.path == "themes.pin.results.performance"


class TestThemes:
    def test_unknown_keys_dropped(self):
        themes = decode(decode_themes, {
            "themes": {
                "Motifs": [
                    {"key": "fork", "name": "Fork", "desc": "A move that attacks two pieces.", "count": 100},
                    {"key": "brandNewMotif", "name": "New", "desc": "?", "count": 3},
                ],
                "Goals": [
                    {"key": "mate", "name": "Checkmate", "desc": "Win the game with style.", "count": 50},
                ],
            },
        })

        assert set(themes) == {PuzzleThemeKey.FORK, PuzzleThemeKey.MATE}
        assert PuzzleThemeKey.UNSUPPORTED not in themes
        assert themes[PuzzleThemeKey.FORK].name == "Fork"
        assert themes[PuzzleThemeKey.MATE].count == 50

    def test_result_is_read_only(self):
        themes = decode(decode_themes, {"themes": {}})
        with pytest.raises(TypeError):
            themes[PuzzleThemeKey.FORK] = None


class TestOpenings:
    def test_family_without_openings(self):
        families = decode(decode_openings, {
            "openings": [
                {"family": {"key": "Kings_Pawn_Game", "name": "King's Pawn Game", "count": 40}},
                {
                    "family": {"key": "Sicilian_Defense", "name": "Sicilian Defense", "count": 900},
                    "openings": [
                        {"key": "Sicilian_Defense_Najdorf_Variation", "name": "Najdorf", "count": 120},
                    ],
                },
            ],
        })

        assert families[0].openings == ()
        assert families[1].name == "Sicilian Defense"
        assert families[1].openings[0].key == "Sicilian_Defense_Najdorf_Variation"
        assert families[1].openings[0].count == 120


class TestStorm:
    def test_storm_without_highscore(self):
        storm = decode(decode_storm, {
            "puzzles": [{"id": "q1w2e", "fen": "8/8/8/8/8/8/8/K6k w - - 0 1", "line": "a1a2 h1h2", "rating": 900}],
        })

        assert storm.key is None
        assert storm.highscore is None
        assert storm.puzzles[0].solution == ("a1a2", "h1h2")

    def test_storm_with_highscore(self):
        storm = decode(decode_storm, {
            "puzzles": [],
            "high": {"allTime": 40, "day": 12, "month": 30, "week": 20},
            "key": "run-key",
        })
        assert storm.key == "run-key"
        assert storm.highscore.all_time == 40
        assert storm.highscore.week == 20

    def test_new_high(self):
        new_high = decode(decode_storm_new_high, {"newHigh": {"key": "allTime", "prev": 33}})
        assert new_high.key is StormNewHighType.ALL_TIME
        assert new_high.prev == 33

    def test_no_new_high(self):
        assert decode(decode_storm_new_high, {}) is None

    def test_dashboard_dates(self):
        dashboard = decode(decode_storm_dashboard, {
            "high": {"allTime": 40, "day": 12, "month": 30, "week": 20},
            "days": [{"_id": "2023/1/5", "runs": 3, "score": 25, "time": 180, "highest": 1800}],
        })

        assert dashboard.high_score.day == 12
        assert dashboard.day_highscores[0].day == date(2023, 1, 5)
        assert dashboard.day_highscores[0].runs == 3

    def test_dashboard_bad_date(self):
        with pytest.raises(DecodeError) as excinfo:
            decode(decode_storm_dashboard, {
                "high": {"allTime": 1, "day": 1, "month": 1, "week": 1},
                "days": [{"_id": "05-01-2023", "runs": 1, "score": 1, "time": 1, "highest": 1}],
            })
        assert excinfo.value.path == "days[0]._id"
