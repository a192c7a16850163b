"""Shared fixtures: a mocked requests session and sample Lichess payloads."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
import requests

from lichess_puzzles.auth_client import AuthClient
from lichess_puzzles.puzzle_api import PuzzleApiClient

HOST = "https://lichess.test"


def make_response(status: int = 200, body=None, url: str = f"{HOST}/api") -> MagicMock:
    """A stand-in for requests.Response. Dict/list bodies are JSON encoded."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    if body is None:
        body = ""
    response.text = body if isinstance(body, str) else json.dumps(body)
    response.url = url
    return response


def puzzle_json(puzzle_id: str = "Ab3dE", rating: int = 1500, themes=None, solution=None) -> dict:
    return {
        "game": {
            "id": "x7Yz9Qwe",
            "perf": {"key": "blitz", "name": "Blitz"},
            "rated": True,
            "players": [
                {"name": "alice", "color": "white", "title": "FM"},
                {"name": "bob", "color": "black"},
            ],
            "pgn": "e4 e5 Nf3 Nc6 Bc4 Nd4",
            "clock": "3+0",
        },
        "puzzle": {
            "id": puzzle_id,
            "rating": rating,
            "plays": 4321,
            "initialPly": 5,
            "solution": solution if solution is not None else ["f3e5", "d4e2", "d1e2"],
            "themes": themes if themes is not None else ["fork", "short"],
        },
    }


def history_line(puzzle_id: str = "Ab3dE", win: bool = True, date: int = 1700000000123) -> dict:
    return {
        "win": win,
        "date": date,
        "puzzle": {
            "id": puzzle_id,
            "rating": 1620,
            "fen": "r1bqkbnr/pppp1ppp/2n5/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R b KQkq - 3 3",
            "lastMove": "f1c4",
            "plays": 99,
            "solution": ["d8f6"],
            "themes": ["opening"],
        },
    }


def dashboard_results(nb: int = 10, first_wins: int = 7, replay_wins: int = 1, performance: int = 1650) -> dict:
    return {"nb": nb, "firstWins": first_wins, "replayWins": replay_wins, "performance": performance}


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def auth_client(session) -> AuthClient:
    return AuthClient(token="lip_secret", host=HOST, session=session, max_retries=2, retry_backoff=0)


@pytest.fixture
def api(auth_client) -> PuzzleApiClient:
    return PuzzleApiClient(auth_client)
