"""
Tagged success/failure values returned by every client operation.
"""
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

from .errors import ApiError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.value))

    def flat_map(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        return fn(self.value)

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default):
        return self.value


@dataclass(frozen=True)
class Failure:
    error: ApiError

    @property
    def is_success(self) -> bool:
        return False

    def map(self, fn) -> "Failure":
        return self

    def flat_map(self, fn) -> "Failure":
        return self

    def unwrap(self):
        """Raise the carried error."""
        raise self.error

    def unwrap_or(self, default):
        return default


Result = Union[Success[T], Failure]
