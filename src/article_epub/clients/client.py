"""Base HTTP client with retries for fetching pages."""

import logging
from abc import ABC, abstractmethod
from time import sleep
from typing import Any

import httpx

from .exceptions import (
    APIError,
    ConnectionError,
    NotFoundError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "article-epub/1.0 (+https://pypi.org/project/article-epub/)"
DEFAULT_ACCEPT = "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8"

# Server-side statuses worth another attempt
RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})
MAX_RETRY_AFTER = 60.0


def parse_retry_after(value: str | None) -> float | None:
    """Read a Retry-After header given in seconds.

    HTTP-date values are ignored and give None.

    Examples:
        >>> parse_retry_after("5")
        5.0
        >>> parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") is None
        True
    """
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return max(0.0, seconds)


class Client(ABC):
    """Base class for clients that fetch pages over HTTP.

    The underlying httpx.Client is created on first use and closed by
    close() or on leaving a with-block. Connection failures, timeouts and
    retryable statuses (429, 502, 503, 504) are retried with exponential
    backoff; every other non-2xx status raises immediately.

    Config keys:
        base_url (required): Base URL for relative requests
        timeout: Request timeout in seconds (default: 30)
        retry_attempts: Total attempts per request, at least 1 (default: 3)
        retry_delay: Initial backoff in seconds, doubled per attempt (default: 1)
        follow_redirects: Follow HTTP redirects (default: True)
        headers: Headers merged over the defaults (User-Agent, Accept)
    """

    def __init__(self, config: dict):
        if "base_url" not in config:
            raise ValueError("config must include 'base_url'")

        self._config = config
        self._client: httpx.Client | None = None

    @property
    def base_url(self) -> str:
        return str(self._config["base_url"])

    @property
    def timeout(self) -> float:
        return float(self._config.get("timeout", 30))

    @property
    def retry_attempts(self) -> int:
        return max(1, int(self._config.get("retry_attempts", 3)))

    @property
    def retry_delay(self) -> float:
        return float(self._config.get("retry_delay", 1))

    @property
    def follow_redirects(self) -> bool:
        return bool(self._config.get("follow_redirects", True))

    @property
    def headers(self) -> dict[str, str]:
        headers = {"User-Agent": DEFAULT_USER_AGENT, "Accept": DEFAULT_ACCEPT}
        headers.update(self._config.get("headers", {}))
        return headers

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=self.follow_redirects,
            )
        return self._client

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def backoff(self, attempt: int) -> float:
        """Seconds to wait after the given zero-based attempt."""
        return self.retry_delay * (2 ** attempt)

    def _raise_for_status(self, response: httpx.Response) -> httpx.Response:
        """Return a successful response, raise the matching error otherwise."""
        if response.is_success:
            return response

        url = str(response.url)
        status_code = response.status_code

        if status_code == 404:
            raise NotFoundError(f"Page not found: {url}", url=url)
        if status_code == 429:
            raise RateLimitError(
                f"Rate limit exceeded: {url}",
                url=url,
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )
        raise APIError(f"HTTP error {status_code}: {url}", status_code=status_code, url=url)

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request, retrying transient failures.

        Raises:
            ConnectionError: If every attempt failed at the network level
            APIError: If the server answered with an error status
        """
        attempt = 0
        while True:
            last_attempt = attempt + 1 >= self.retry_attempts
            try:
                response = self.client.request(method, url, **kwargs)
                return self._raise_for_status(response)
            except (httpx.ConnectError, httpx.TimeoutException) as e:
                logger.warning(
                    f"Request to {url} failed (attempt {attempt + 1}/{self.retry_attempts}): {e}"
                )
                if last_attempt:
                    raise ConnectionError(
                        f"Connection failed after {self.retry_attempts} attempts: {url}",
                        url=url,
                    ) from e
                delay = self.backoff(attempt)
            except APIError as e:
                if last_attempt or e.status_code not in RETRYABLE_STATUS_CODES:
                    raise
                logger.warning(
                    f"{e.message} (attempt {attempt + 1}/{self.retry_attempts})"
                )
                delay = self.backoff(attempt)
                if isinstance(e, RateLimitError) and e.retry_after is not None:
                    delay = min(e.retry_after, MAX_RETRY_AFTER)

            sleep(delay)
            attempt += 1

    def get(self, url: str, **kwargs) -> httpx.Response:
        return self._request("GET", url, **kwargs)

    @abstractmethod
    def fetch(self, *args, **kwargs) -> Any:
        """Fetch a resource from the remote site."""
