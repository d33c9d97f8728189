"""Article schema.

An Article is the value handed from the extraction step to the EPUB
packager. It is built once, carried through the pipeline, and never
mutated by the packager.
"""

import math

from pydantic import BaseModel, Field, field_validator

UNKNOWN_BYLINE = "Unknown"
WORDS_PER_MINUTE = 200


class Article(BaseModel):
    """An extracted web article.

    Attributes:
        title: Article headline (non-empty)
        byline: Author attribution, "Unknown" when the source has none
        content: HTML body fragment
        text_content: Visible text of the body
        word_count: Number of whitespace-delimited words in text_content
        reading_time: Estimated reading time in minutes
    """

    title: str = Field(min_length=1)
    byline: str = UNKNOWN_BYLINE
    content: str = ""
    text_content: str = ""
    word_count: int = 0
    reading_time: int = 0

    @field_validator("byline", mode="before")
    @classmethod
    def _default_byline(cls, value: str | None) -> str:
        if value is None or not str(value).strip():
            return UNKNOWN_BYLINE
        return str(value).strip()

    @classmethod
    def from_content(
        cls,
        title: str,
        content: str,
        byline: str | None = None,
        text_content: str = "",
    ) -> "Article":
        """Build an Article and derive its reading statistics.

        Args:
            title: Article headline
            content: HTML body fragment
            byline: Author attribution (placeholder used when missing)
            text_content: Visible text of the body

        Returns:
            Article with word_count and reading_time filled in

        Examples:
            >>> Article.from_content("T", "<p>a b c</p>", text_content="a b c").word_count
            3
        """
        word_count = count_words(text_content)
        return cls(
            title=title,
            byline=byline,
            content=content,
            text_content=text_content,
            word_count=word_count,
            reading_time=reading_time(word_count),
        )


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens in text."""
    if not text:
        return 0
    return len(text.split())


def reading_time(word_count: int) -> int:
    """Minutes needed to read word_count words at WORDS_PER_MINUTE."""
    return math.ceil(word_count / WORDS_PER_MINUTE)
