"""Network clients for fetching article pages."""

from .client import Client
from .exceptions import (
    APIError,
    ClientError,
    ConnectionError,
    InvalidURLError,
    NotFoundError,
    RateLimitError,
)
from .page_client import PageClient, origin, validate_url

__all__ = [
    "Client",
    "PageClient",
    "ClientError",
    "ConnectionError",
    "APIError",
    "RateLimitError",
    "NotFoundError",
    "InvalidURLError",
    "origin",
    "validate_url",
]
