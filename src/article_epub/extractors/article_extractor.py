"""Article extractor for turning raw web pages into Articles.

Uses readability-lxml to find the readable body of a page, then removes
images, figures and captions, sanitizes the remaining markup and derives
reading statistics.
"""

import html
import logging
import re

from lxml import etree
from lxml import html as lxml_html
from readability import Document
from readability.readability import Unparseable

from schemas.article import UNKNOWN_BYLINE, Article

from article_epub.exceptions import ExtractionError
from article_epub.sanitizers import sanitize

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"
MAX_BYLINE_LENGTH = 100

IMAGE_XPATH = "//img | //figure | //figcaption | //picture | //svg"
IMAGE_CLASS_HINTS = ("image", "photo", "caption")

BYLINE_XPATHS = (
    "//meta[@name='author']/@content",
    "//meta[@property='author']/@content",
    "//meta[@name='byl']/@content",
    "//*[@rel='author']",
    "//*[@itemprop='author']",
    "//*[contains(concat(' ', normalize-space(@class), ' '), ' byline ')]",
    "//*[contains(concat(' ', normalize-space(@class), ' '), ' author ')]",
)

_BY_PREFIX_RE = re.compile(r"^\s*by\s+", re.IGNORECASE)


class ArticleExtractor:
    """Extract an Article from the HTML of a web page.

    The ArticleExtractor:
    1. Runs readability over the page to find the title and main content
    2. Finds a byline in page metadata or byline markup
    3. Removes images, figures, captions and image-classed elements
    4. Sanitizes the body for XHTML
    5. Computes word count and reading time from the visible text
    """

    def extract(self, page_html: str, url: str | None = None) -> Article:
        """Extract an Article from page HTML.

        Args:
            page_html: Full HTML of the page
            url: Page URL, used to resolve relative links

        Returns:
            Article with sanitized content and reading statistics

        Raises:
            ExtractionError: If no readable content is found
        """
        if not page_html or not page_html.strip():
            raise ExtractionError(url=url)

        try:
            document = Document(page_html, url=url)
            summary = document.summary(html_partial=True)
            title = document.short_title() or document.title()
            page = lxml_html.document_fromstring(page_html)
        except (Unparseable, etree.ParserError) as e:
            raise ExtractionError(f"Could not parse page: {e}", url=url) from e

        body = self._strip_images(summary)
        text_content = body.text_content()
        if not text_content.strip():
            raise ExtractionError(url=url)

        article = Article.from_content(
            title=self._clean_title(title) or self._first_heading(page) or UNTITLED,
            byline=self.find_byline(page),
            content=sanitize(self._inner_html(body)),
            text_content=text_content,
        )
        logger.info(
            f"Extracted '{article.title}' by {article.byline}: "
            f"{article.word_count} words, {article.reading_time} min"
        )
        return article

    def find_byline(self, page: etree._Element) -> str:
        """Find the author attribution of a page.

        Args:
            page: Parsed page document

        Returns:
            The byline without a leading "By", or "Unknown"
        """
        for xpath in BYLINE_XPATHS:
            for match in page.xpath(xpath):
                if isinstance(match, str):
                    text = match
                else:
                    text = match.text_content()
                byline = _BY_PREFIX_RE.sub("", " ".join(text.split()))
                if byline and len(byline) <= MAX_BYLINE_LENGTH:
                    return byline
        return UNKNOWN_BYLINE

    def _strip_images(self, summary: str) -> lxml_html.HtmlElement:
        """Parse the readable summary and drop image-bearing elements."""
        root = lxml_html.fragment_fromstring(summary, create_parent="div")

        # readability wraps its output in a single page div
        if len(root) == 1 and (root[0].get("id") or "").startswith("readability-page"):
            root = root[0]

        for element in root.xpath(IMAGE_XPATH):
            if element.getparent() is not None:
                element.drop_tree()

        for element in root.xpath("//*[@class]"):
            classes = element.get("class", "").lower()
            if element.getparent() is not None and any(
                hint in classes for hint in IMAGE_CLASS_HINTS
            ):
                element.drop_tree()

        return root

    def _inner_html(self, element: lxml_html.HtmlElement) -> str:
        """Serialize the children of an element."""
        parts = [html.escape(element.text or "", quote=False)]
        for child in element:
            parts.append(lxml_html.tostring(child, encoding="unicode"))
        return "".join(parts)

    def _clean_title(self, title: str | None) -> str:
        if not title:
            return ""
        return " ".join(title.split())

    def _first_heading(self, page: etree._Element) -> str:
        for heading in page.xpath("//h1"):
            text = " ".join(heading.text_content().split())
            if text:
                return text
        return ""


def extract_article(page_html: str, url: str | None = None) -> Article:
    """Extract an Article from page HTML with the default extractor."""
    return ArticleExtractor().extract(page_html, url)
