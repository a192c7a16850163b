"""
Identifier types. Each wraps a non-empty string.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class _StringId:
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value:
            raise ValueError(f"{type(self).__name__} must be a non-empty string, got {self.value!r}")

    def __str__(self) -> str:
        return self.value


class PuzzleId(_StringId):
    pass


class GameId(_StringId):
    pass


class UserId(_StringId):
    """Lichess user ids are lowercase usernames."""
