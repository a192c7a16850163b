"""
Failures reported by the puzzle API client.
"""
from typing import Optional


class ApiError(Exception):
    """Base class for every failure the client reports."""


class TransportError(ApiError):
    """The request never produced an HTTP response (DNS, TLS, connection, timeout)."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"Request to {url} failed: {cause}")
        self.url = url
        self.cause = cause


class HttpStatusError(ApiError):
    """The service answered with a status outside the 2xx range."""

    def __init__(self, status_code: int, body: str, url: str):
        super().__init__(f"HTTP {status_code} from {url}")
        self.status_code = status_code
        self.body = body
        self.url = url


class NotFoundError(HttpStatusError):
    """HTTP 404."""


class DecodeError(ApiError):
    """A response body did not have the expected shape."""

    def __init__(self, path: str, expected: str, actual: Optional[str] = None):
        where = path or "<root>"
        message = f"{where}: expected {expected}"
        if actual is not None:
            message += f", got {actual}"
        super().__init__(message)
        self.path = path
        self.expected = expected
        self.actual = actual
