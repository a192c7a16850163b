"""
Typed extraction of fields from decoded JSON, with the field path kept for errors.
"""
import json
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from .errors import DecodeError
from .result import Result, Success, Failure

T = TypeVar("T")

_MISSING = object()


def _describe(value: Any) -> str:
    """Short JSON type name of a value, for error messages."""
    if value is _MISSING:
        return "nothing"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "list"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class JsonField:
    """
    A value inside a JSON document together with the path that led to it.

    Calling a field with keys walks into nested objects; missing keys give a
    field whose value is absent rather than raising, so optional fields can be
    read with the `*_or_none` accessors.

        root = JsonField(payload)
        rating = root('puzzle', 'rating').as_int()
    """

    def __init__(self, value: Any, path: str = ""):
        self.value = value
        self.path = path

    def __call__(self, *keys: str) -> "JsonField":
        field = self
        for key in keys:
            field = field._child(key)
        return field

    def _child(self, key: str) -> "JsonField":
        path = f"{self.path}.{key}" if self.path else key
        if isinstance(self.value, dict):
            return JsonField(self.value.get(key, _MISSING), path)
        return JsonField(_MISSING, path)

    @property
    def is_absent(self) -> bool:
        return self.value is _MISSING or self.value is None

    def _fail(self, expected: str) -> DecodeError:
        return DecodeError(self.path, expected, _describe(self.value))

    # -- primitives --

    def as_int(self) -> int:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise self._fail("int")
        return self.value

    def as_int_or_none(self) -> Optional[int]:
        return None if self.is_absent else self.as_int()

    def as_float(self) -> float:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise self._fail("number")
        return float(self.value)

    def as_bool(self) -> bool:
        if not isinstance(self.value, bool):
            raise self._fail("bool")
        return self.value

    def as_bool_or_none(self) -> Optional[bool]:
        return None if self.is_absent else self.as_bool()

    def as_str(self) -> str:
        if not isinstance(self.value, str):
            raise self._fail("string")
        return self.value

    def as_str_or_none(self) -> Optional[str]:
        return None if self.is_absent else self.as_str()

    # -- structures --

    def as_map(self) -> Dict[str, Any]:
        if not isinstance(self.value, dict):
            raise self._fail("object")
        return self.value

    def as_list(self, mapper: Callable[["JsonField"], T]) -> List[T]:
        if not isinstance(self.value, list):
            raise self._fail("list")
        return [mapper(JsonField(item, f"{self.path}[{i}]")) for i, item in enumerate(self.value)]

    def as_list_or_none(self, mapper: Callable[["JsonField"], T]) -> Optional[List[T]]:
        return None if self.is_absent else self.as_list(mapper)

    def let(self, mapper: Callable[["JsonField"], T]) -> T:
        """Apply `mapper` to a required nested object."""
        self.as_map()
        return mapper(self)

    def let_or_none(self, mapper: Callable[["JsonField"], T]) -> Optional[T]:
        return None if self.is_absent else self.let(mapper)

    def convert(self, parse: Callable[[Any], T], expected: str) -> T:
        """Run `parse` on the raw value, turning ValueError into a decode failure."""
        if self.is_absent:
            raise self._fail(expected)
        try:
            return parse(self.value)
        except (ValueError, TypeError) as e:
            raise DecodeError(self.path, expected, repr(self.value)) from e


def _log_decode_failure(logger: Optional[logging.Logger], response: requests.Response, error: DecodeError):
    if logger:
        logger.warning(f"Could not read JSON from {response.url}: {error}")


def _parse(text: str, path: str) -> JsonField:
    try:
        return JsonField(json.loads(text), path)
    except ValueError as e:
        raise DecodeError(path, "a JSON document", f"unparseable text ({e})") from e
    except RecursionError as e:
        raise DecodeError(path, "a JSON document", "text nested too deeply") from e


def read_json_object(
    response: requests.Response,
    mapper: Callable[[JsonField], T],
    logger: Optional[logging.Logger] = None,
) -> Result[T]:
    """Decode a response whose body is a single JSON object."""
    try:
        return Success(_parse(response.text, "").let(mapper))
    except DecodeError as error:
        _log_decode_failure(logger, response, error)
        return Failure(error)


def read_ndjson_list(
    response: requests.Response,
    mapper: Callable[[JsonField], T],
    logger: Optional[logging.Logger] = None,
) -> Result[List[T]]:
    """
    Decode a newline-delimited JSON body, one object per line.

    Blank lines are skipped. A single bad line fails the whole body.
    """
    items = []
    for line_no, line in enumerate(response.text.strip().split('\n')):
        if not line.strip():
            continue
        try:
            items.append(_parse(line, f"[line {line_no + 1}]").let(mapper))
        except DecodeError as error:
            _log_decode_failure(logger, response, error)
            return Failure(error)
    return Success(items)
