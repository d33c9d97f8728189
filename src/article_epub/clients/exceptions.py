"""Exceptions raised while fetching article pages."""

from article_epub.exceptions import ArticleEpubError


class ClientError(ArticleEpubError):
    """Base exception for page fetching failures.

    Attributes:
        url: The URL being fetched, when known
    """

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message)


class ConnectionError(ClientError):
    """Raised when a page cannot be reached after all retries."""


class APIError(ClientError):
    """Raised when a server answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, url: str | None = None):
        self.status_code = status_code
        super().__init__(message, url=url)


class RateLimitError(APIError):
    """Raised on 429 Too Many Requests.

    Attributes:
        retry_after: Seconds the server asked us to wait, if it said
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        url: str | None = None,
        retry_after: float | None = None,
    ):
        self.retry_after = retry_after
        super().__init__(message, status_code=429, url=url)


class NotFoundError(APIError):
    """Raised on 404 Not Found."""

    def __init__(self, message: str = "Page not found", url: str | None = None):
        super().__init__(message, status_code=404, url=url)


class InvalidURLError(ClientError):
    """Raised when a page URL is not an absolute http(s) URL."""

    def __init__(self, url: str):
        super().__init__(f"Invalid URL format: {url}", url=url)
