"""Extractors for pulling readable articles out of web pages."""

from .article_extractor import ArticleExtractor, extract_article

__all__ = [
    "ArticleExtractor",
    "extract_article",
]
