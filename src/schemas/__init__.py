"""Schema definitions for article-epub."""

from .article import UNKNOWN_BYLINE, Article
from .epub import ArchiveEntry

__all__ = [
    "Article",
    "ArchiveEntry",
    "UNKNOWN_BYLINE",
]
