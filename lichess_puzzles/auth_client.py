"""
Authenticated HTTP transport for the Lichess API.
"""
import requests
import time
import logging
from typing import Optional

from .config import LICHESS_HOST, LICHESS_TOKEN, USER_AGENT, REQUEST_TIMEOUT, MAX_RETRIES, RETRY_BACKOFF
from .errors import TransportError, HttpStatusError, NotFoundError
from .result import Result, Success, Failure

logger = logging.getLogger(__name__)


class AuthClient:
    """Sends requests to Lichess with the user's OAuth token attached."""

    RETRY_STATUSES = {429, 500, 502, 503, 504}

    def __init__(
        self,
        token: Optional[str] = LICHESS_TOKEN,
        host: str = LICHESS_HOST,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_backoff: float = RETRY_BACKOFF,
    ):
        self.host = host.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': USER_AGENT,
        })
        if token:
            self.session.headers['Authorization'] = f"Bearer {token}"

    def get(
        self,
        path: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
        retry_on_error: bool = True,
    ) -> Result[requests.Response]:
        return self._send('GET', path, params=params, headers=headers, retry_on_error=retry_on_error)

    def post(
        self,
        path: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
        data: Optional[dict] = None,
        json: Optional[dict] = None,
        retry_on_error: bool = True,
    ) -> Result[requests.Response]:
        return self._send(
            'POST', path, params=params, headers=headers, data=data, json=json,
            retry_on_error=retry_on_error,
        )

    def _send(self, method: str, path: str, retry_on_error: bool, **kwargs) -> Result[requests.Response]:
        """Issue one request, retrying transient failures when allowed."""
        url = f"{self.host}{path}"
        attempts = self.max_retries + 1 if retry_on_error else 1

        for attempt in range(attempts):
            is_last = attempt == attempts - 1
            try:
                response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                if not is_last:
                    self._wait_before_retry(attempt, url, str(e))
                    continue
                logger.error(f"Request error fetching {url}: {str(e)}")
                return Failure(TransportError(url, e))
            except requests.exceptions.RequestException as e:
                logger.error(f"Request error fetching {url}: {str(e)}")
                return Failure(TransportError(url, e))

            if response.status_code in self.RETRY_STATUSES and not is_last:
                self._wait_before_retry(attempt, url, f"HTTP {response.status_code}")
                continue

            return self._check_status(response, url)

    def _wait_before_retry(self, attempt: int, url: str, reason: str):
        delay = self.retry_backoff * (2 ** attempt)
        logger.info(f"Retrying {url} in {delay:.1f}s after {reason}")
        time.sleep(delay)

    def _check_status(self, response: requests.Response, url: str) -> Result[requests.Response]:
        status = response.status_code
        if 200 <= status < 300:
            return Success(response)
        if status == 404:
            logger.warning(f"Not found: {url}")
            return Failure(NotFoundError(status, response.text, url))
        logger.warning(f"HTTP error fetching {url}: {status}")
        return Failure(HttpStatusError(status, response.text, url))
