"""Custom exceptions for article conversion."""


class ArticleEpubError(Exception):
    """Base exception for conversion errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class ExtractionError(ArticleEpubError):
    """Raised when no readable article content can be extracted."""

    def __init__(self, message: str = "Could not extract article content", url: str | None = None):
        self.url = url
        super().__init__(message)


class PackagingError(ArticleEpubError):
    """Raised when an EPUB archive cannot be written to its destination."""

    def __init__(self, message: str, destination: str | None = None):
        self.destination = destination
        super().__init__(message)
