"""
Runtime configuration read from the environment.
"""
import os

LICHESS_HOST = os.getenv("LICHESS_HOST", "https://lichess.dev").rstrip("/")
LICHESS_TOKEN = os.getenv("LICHESS_TOKEN") or None

USER_AGENT = "LichessPuzzles/1.0"
REQUEST_TIMEOUT = float(os.getenv("LICHESS_PUZZLES_TIMEOUT", "10"))
MAX_RETRIES = int(os.getenv("LICHESS_PUZZLES_MAX_RETRIES", "2"))
RETRY_BACKOFF = float(os.getenv("LICHESS_PUZZLES_RETRY_BACKOFF", "0.5"))  # seconds, doubled per attempt

LOG_LEVEL = os.getenv("LICHESS_PUZZLES_LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "LICHESS_PUZZLES_CORS_ORIGINS",
        "http://localhost:5173,http://localhost:5174,http://localhost:3000",
    ).split(",")
    if origin.strip()
]

# https://github.com/lichess-org/lila/blob/master/modules/rating/src/main/Glicko.scala
PROVISIONAL_DEVIATION = 110

# Puzzle dashboard window, in days
DASHBOARD_DAYS = 30
