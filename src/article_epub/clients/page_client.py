"""Page client for downloading article web pages."""

import logging
from urllib.parse import urlparse

from .client import Client
from .exceptions import InvalidURLError

logger = logging.getLogger(__name__)


def validate_url(url: str) -> str:
    """Check that url is an absolute http(s) URL and return it.

    Raises:
        InvalidURLError: If the URL has no http(s) scheme or no host
    """
    parsed = urlparse(url or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidURLError(url)
    return url


def origin(url: str) -> str:
    """Return the scheme://host part of a URL.

    Examples:
        >>> origin("https://example.com/news/story?id=1")
        'https://example.com'
    """
    parsed = urlparse(validate_url(url))
    return f"{parsed.scheme}://{parsed.netloc}"


class PageClient(Client):
    """Client for fetching the HTML of article pages.

    Example:
        url = "https://example.com/news/story"
        with PageClient.for_url(url) as client:
            html = client.fetch(url)
    """

    @classmethod
    def for_url(cls, url: str, config: dict | None = None) -> "PageClient":
        """Create a client whose base_url is the origin of url.

        Args:
            url: Article URL
            config: Additional client config (timeout, retries, headers)
        """
        merged = dict(config or {})
        merged["base_url"] = origin(url)
        return cls(merged)

    def fetch(self, url: str) -> str:
        """Fetch a page and return its decoded HTML.

        Args:
            url: Absolute article URL (or path relative to base_url)

        Returns:
            The page HTML as text

        Raises:
            InvalidURLError: If an absolute URL is malformed
            APIError: If the server returns a non-2xx response
            ConnectionError: If the network connection fails
        """
        if "://" in url:
            validate_url(url)
        logger.info(f"Fetching {url}")
        response = self.get(url)
        logger.debug(f"Fetched {len(response.content)} bytes from {response.url}")
        return response.text
