"""
Lichess Puzzles proxy API
"""
from fastapi import FastAPI, Query, HTTPException, Header, Depends
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Iterator, Optional, List
from datetime import datetime, timedelta, timezone

from .auth_client import AuthClient
from .config import CORS_ORIGINS, DASHBOARD_DAYS
from .errors import ApiError, NotFoundError, HttpStatusError, DecodeError, TransportError
from .ids import PuzzleId, UserId
from .logging_config import configure_logging
from .puzzle import Puzzle, PuzzleBatchResponse, PuzzleDashboardData, PuzzleSolution
from .puzzle_angle import PuzzleAngle, PuzzleDifficulty, angle_from_key
from .puzzle_api import PuzzleApiClient
from .result import Result
from .storm import PuzzleStormHighScore, StormRunStats

configure_logging()

app = FastAPI(title="Lichess Puzzles API")

# Minimum number of themes for the dashboard chart to be worth drawing
MIN_CHART_THEMES = 3


# ============================================
# Pydantic models for request/response
# ============================================

class PlayerResponse(BaseModel):
    name: str
    color: str
    title: Optional[str] = None


class PuzzleResponse(BaseModel):
    id: str
    rating: int
    plays: int
    initialPly: int
    solution: List[str]
    themes: List[str]
    gameId: str
    perf: str
    rated: bool
    white: PlayerResponse
    black: PlayerResponse
    pgn: str
    isDailyPuzzle: bool = False


class GlickoResponse(BaseModel):
    rating: float
    deviation: float
    provisional: bool


class RoundResponse(BaseModel):
    id: str
    ratingDiff: int
    win: bool


class BatchResponse(BaseModel):
    puzzles: List[PuzzleResponse]
    glicko: Optional[GlickoResponse] = None
    rounds: Optional[List[RoundResponse]] = None


class SolutionRequest(BaseModel):
    id: str
    win: bool
    rated: bool = True


class SolveBatchRequest(BaseModel):
    solutions: List[SolutionRequest]


class DashboardStats(BaseModel):
    theme: str
    nb: int
    firstWins: int
    replayWins: int
    performance: int


class DashboardSummaryResponse(BaseModel):
    available: bool
    days: int = DASHBOARD_DAYS
    message: Optional[str] = None
    performance: Optional[int] = None
    played: Optional[int] = None
    solvedPercent: Optional[int] = None
    chart: List[DashboardStats] = []


class HistoryEntryResponse(BaseModel):
    id: str
    win: bool
    date: str
    rating: int
    fen: str
    lastMove: str


class ThemeResponse(BaseModel):
    key: str
    name: str
    desc: str
    count: int


class OpeningResponse(BaseModel):
    key: str
    name: str
    count: int


class OpeningFamilyResponse(BaseModel):
    key: str
    name: str
    count: int
    openings: List[OpeningResponse]


class StreakResponse(BaseModel):
    puzzle: PuzzleResponse
    streak: List[str]


class LitePuzzleResponse(BaseModel):
    id: str
    fen: str
    solution: List[str]
    rating: int


class HighScoreResponse(BaseModel):
    day: int
    week: int
    month: int
    allTime: int


class StormResponse(BaseModel):
    puzzles: List[LitePuzzleResponse]
    key: Optional[str] = None
    high: Optional[HighScoreResponse] = None


class StormRunRequest(BaseModel):
    puzzles: List[str]  # ids of the puzzles played, in order
    score: int
    moves: int
    errors: int
    combo: int
    time: int  # seconds
    highest: int


class NewHighResponse(BaseModel):
    key: str
    prev: int


class StormRunResponse(BaseModel):
    newHigh: Optional[NewHighResponse] = None


class StormDayResponse(BaseModel):
    day: str
    runs: int
    score: int
    time: int
    highest: int


class StormDashboardResponse(BaseModel):
    high: HighScoreResponse
    days: List[StormDayResponse]


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================
# Dependencies and helpers
# ============================================

def get_puzzle_client(authorization: Optional[str] = Header(None)) -> Iterator[PuzzleApiClient]:
    """Build a client that forwards the caller's Lichess token, if any, and close its session afterwards."""
    token = None
    if authorization:
        # Expect "Bearer <token>"
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise HTTPException(status_code=401, detail="Malformed Authorization header")
        token = parts[1]

    client = PuzzleApiClient(AuthClient(token=token))
    try:
        yield client
    finally:
        client.api_client.session.close()


def error_to_http(error: ApiError) -> HTTPException:
    """Map a client failure to the status returned to our own callers."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail="Not found on Lichess")
    if isinstance(error, HttpStatusError):
        return HTTPException(status_code=502, detail=f"Lichess answered HTTP {error.status_code}")
    if isinstance(error, DecodeError):
        return HTTPException(status_code=502, detail=f"Unexpected Lichess response: {error}")
    if isinstance(error, TransportError):
        return HTTPException(status_code=503, detail="Lichess is unreachable")
    return HTTPException(status_code=500, detail=str(error))


def unwrap(result: Result):
    if not result.is_success:
        raise error_to_http(result.error)
    return result.value


def puzzle_to_response(puzzle: Puzzle) -> PuzzleResponse:
    data, game = puzzle.puzzle, puzzle.game
    return PuzzleResponse(
        id=str(data.id),
        rating=data.rating,
        plays=data.plays,
        initialPly=data.initial_ply,
        solution=list(data.solution),
        themes=sorted(data.themes),
        gameId=str(game.id),
        perf=game.perf.value,
        rated=game.rated,
        white=PlayerResponse(name=game.white.name, color="white", title=game.white.title),
        black=PlayerResponse(name=game.black.name, color="black", title=game.black.title),
        pgn=game.pgn,
        isDailyPuzzle=puzzle.is_daily_puzzle,
    )


def batch_to_response(batch: PuzzleBatchResponse) -> BatchResponse:
    glicko = None
    if batch.glicko:
        glicko = GlickoResponse(
            rating=batch.glicko.rating,
            deviation=batch.glicko.deviation,
            provisional=batch.glicko.is_provisional,
        )
    rounds = None
    if batch.rounds is not None:
        rounds = [RoundResponse(id=str(r.id), ratingDiff=r.rating_diff, win=r.win) for r in batch.rounds]
    return BatchResponse(
        puzzles=[puzzle_to_response(p) for p in batch.puzzles],
        glicko=glicko,
        rounds=rounds,
    )


def dashboard_stats(data: PuzzleDashboardData) -> DashboardStats:
    return DashboardStats(
        theme=data.theme.value,
        nb=data.nb,
        firstWins=data.first_wins,
        replayWins=data.replay_wins,
        performance=data.performance,
    )


def high_score_to_response(high: PuzzleStormHighScore) -> HighScoreResponse:
    return HighScoreResponse(day=high.day, week=high.week, month=high.month, allTime=high.all_time)


def parse_difficulty(difficulty: str) -> PuzzleDifficulty:
    try:
        return PuzzleDifficulty(difficulty)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown difficulty: {difficulty}")


def parse_angle(angle: str) -> PuzzleAngle:
    try:
        return angle_from_key(angle)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid angle: {e}")


def parse_before(before: int) -> datetime:
    """Unix milliseconds to an aware UTC datetime."""
    try:
        return datetime.fromtimestamp(0, tz=timezone.utc) + timedelta(milliseconds=before)
    except OverflowError:
        raise HTTPException(status_code=400, detail=f"Timestamp out of range: {before}")


# ============================================
# Puzzle endpoints
# ============================================

@app.get("/api/puzzles/batch", response_model=BatchResponse)
def get_batch(
    nb: int = Query(15, ge=1, le=50, description="Number of puzzles"),
    angle: str = Query("mix", description="Theme name or opening key"),
    difficulty: str = Query("normal", description="easiest, easier, normal, harder or hardest"),
    client: PuzzleApiClient = Depends(get_puzzle_client),
):
    """Fetch a batch of puzzles to solve."""
    batch = unwrap(client.select_batch(nb, angle=parse_angle(angle), difficulty=parse_difficulty(difficulty)))
    return batch_to_response(batch)


@app.post("/api/puzzles/batch", response_model=BatchResponse)
def solve_batch(
    request: SolveBatchRequest,
    nb: int = Query(15, ge=1, le=50, description="Number of new puzzles"),
    angle: str = Query("mix", description="Theme name or opening key"),
    difficulty: str = Query("normal"),
    client: PuzzleApiClient = Depends(get_puzzle_client),
):
    """Submit solved puzzles and get the next batch."""
    try:
        solved = [PuzzleSolution(id=PuzzleId(s.id), win=s.win, rated=s.rated) for s in request.solutions]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    batch = unwrap(client.solve_batch(
        nb, solved, angle=parse_angle(angle), difficulty=parse_difficulty(difficulty),
    ))
    return batch_to_response(batch)


@app.get("/api/puzzles/daily", response_model=PuzzleResponse)
def get_daily_puzzle(client: PuzzleApiClient = Depends(get_puzzle_client)):
    """Get today's puzzle."""
    return puzzle_to_response(unwrap(client.fetch_daily()))


@app.get("/api/puzzles/dashboard", response_model=DashboardSummaryResponse)
def get_dashboard(client: PuzzleApiClient = Depends(get_puzzle_client)):
    """
    Summary of the user's puzzle results over the last 30 days.

    Users without any puzzle activity get `available: false` instead of an error.
    """
    result = client.puzzle_dashboard()
    if not result.is_success and isinstance(result.error, NotFoundError):
        return DashboardSummaryResponse(available=False, message="No puzzles to show")

    dashboard = unwrap(result)
    chart = dashboard.chart_themes()
    return DashboardSummaryResponse(
        available=True,
        performance=dashboard.global_.performance,
        played=dashboard.global_.nb,
        solvedPercent=dashboard.solved_percent,
        chart=[dashboard_stats(t) for t in chart] if len(chart) >= MIN_CHART_THEMES else [],
    )


@app.get("/api/puzzles/activity", response_model=List[HistoryEntryResponse])
def get_activity(
    max: int = Query(50, ge=1, le=200, description="Maximum number of entries"),
    before: Optional[int] = Query(None, description="Only entries before this time (Unix ms)"),
    client: PuzzleApiClient = Depends(get_puzzle_client),
):
    """Recent puzzle attempts, newest first."""
    before_dt = parse_before(before) if before is not None else None
    entries = unwrap(client.puzzle_activity(max, before=before_dt))
    return [
        HistoryEntryResponse(
            id=str(entry.id),
            win=entry.win,
            date=entry.date.isoformat(),
            rating=entry.rating,
            fen=entry.fen,
            lastMove=entry.last_move.uci(),
        )
        for entry in entries
    ]


@app.get("/api/puzzles/themes", response_model=List[ThemeResponse])
def get_themes(client: PuzzleApiClient = Depends(get_puzzle_client)):
    """Puzzle themes known to this client, with their puzzle counts."""
    themes = unwrap(client.puzzle_themes())
    return [
        ThemeResponse(key=key.value, name=theme.name, desc=theme.desc, count=theme.count)
        for key, theme in themes.items()
    ]


@app.get("/api/puzzles/openings", response_model=List[OpeningFamilyResponse])
def get_openings(client: PuzzleApiClient = Depends(get_puzzle_client)):
    """Openings available as puzzle angles, by family."""
    families = unwrap(client.puzzle_openings())
    return [
        OpeningFamilyResponse(
            key=family.key,
            name=family.name,
            count=family.count,
            openings=[OpeningResponse(key=o.key, name=o.name, count=o.count) for o in family.openings],
        )
        for family in families
    ]


@app.get("/api/puzzles/{puzzle_id}", response_model=PuzzleResponse)
def get_puzzle(puzzle_id: str, client: PuzzleApiClient = Depends(get_puzzle_client)):
    """Get a single puzzle by id."""
    return puzzle_to_response(unwrap(client.fetch(PuzzleId(puzzle_id))))


# ============================================
# Streak endpoints
# ============================================

@app.get("/api/streak", response_model=StreakResponse)
def get_streak(client: PuzzleApiClient = Depends(get_puzzle_client)):
    """Start a new puzzle streak."""
    streak = unwrap(client.streak())
    return StreakResponse(
        puzzle=puzzle_to_response(streak.puzzle),
        streak=[str(puzzle_id) for puzzle_id in streak.streak],
    )


@app.post("/api/streak/{run}")
def post_streak(run: int, client: PuzzleApiClient = Depends(get_puzzle_client)):
    """Record a finished streak."""
    if run < 1:
        raise HTTPException(status_code=400, detail="Streak run must be at least 1")
    unwrap(client.post_streak_run(run))
    return {"status": "ok"}


# ============================================
# Storm endpoints
# ============================================

@app.get("/api/storm", response_model=StormResponse)
def get_storm(client: PuzzleApiClient = Depends(get_puzzle_client)):
    """Get the puzzles for a new storm run."""
    storm = unwrap(client.storm())
    return StormResponse(
        puzzles=[
            LitePuzzleResponse(id=str(p.id), fen=p.fen, solution=list(p.solution), rating=p.rating)
            for p in storm.puzzles
        ],
        key=storm.key,
        high=high_score_to_response(storm.highscore) if storm.highscore else None,
    )


@app.post("/api/storm", response_model=StormRunResponse)
def post_storm(request: StormRunRequest, client: PuzzleApiClient = Depends(get_puzzle_client)):
    """Submit a finished storm run."""
    try:
        history = tuple(PuzzleId(puzzle_id) for puzzle_id in request.puzzles)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    stats = StormRunStats(
        history=history,
        score=request.score,
        moves=request.moves,
        errors=request.errors,
        combo_best=request.combo,
        time=timedelta(seconds=request.time),
        highest=request.highest,
    )
    new_high = unwrap(client.post_storm_run(stats))
    if new_high is None:
        return StormRunResponse()
    return StormRunResponse(newHigh=NewHighResponse(key=new_high.key.value, prev=new_high.prev))


@app.get("/api/storm/dashboard/{user_id}", response_model=StormDashboardResponse)
def get_storm_dashboard(user_id: str, client: PuzzleApiClient = Depends(get_puzzle_client)):
    """A user's storm high scores and best daily runs."""
    dashboard = unwrap(client.storm_dashboard(UserId(user_id.lower())))
    return StormDashboardResponse(
        high=high_score_to_response(dashboard.high_score),
        days=[
            StormDayResponse(
                day=day.day.isoformat(),
                runs=day.runs,
                score=day.score,
                time=day.time,
                highest=day.highest,
            )
            for day in dashboard.day_highscores
        ],
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
