"""EPUB Packager for converting articles into EPUB 2 books.

Renders the container, package document, navigation map and XHTML document
through Jinja2 templates and assembles them, with a static stylesheet, into
a single-document EPUB archive.
"""

import logging
import re
import time
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from schemas.article import Article
from schemas.epub import ArchiveEntry

from article_epub.sanitizers import sanitize

from .filters import FILTERS
from .packager import Packager

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).parent.parent
TEMPLATES_DIR = PACKAGE_DIR / "resources" / "templates"
STYLESHEETS_DIR = PACKAGE_DIR / "resources" / "stylesheets"

EPUB_MEDIA_TYPE = "application/epub+zip"
DEFAULT_LANGUAGE = "en"

MIMETYPE_PATH = "mimetype"
CONTAINER_PATH = "META-INF/container.xml"
CONTENT_DIR = "OEBPS"
PACKAGE_DOCUMENT_NAME = "content.opf"
NCX_NAME = "toc.ncx"
DOCUMENT_NAME = "content.xhtml"


def generate_identifier() -> str:
    """Generate a package identifier from the current time in milliseconds."""
    return str(time.time_ns() // 1_000_000)


def epub_filename(title: str) -> str:
    """Derive a download filename from an article title.

    Examples:
        >>> epub_filename("A & B: Test")
        'A___B__Test.epub'
    """
    return f"{re.sub(r'[^a-zA-Z0-9]', '_', title)}.epub"


def content_disposition(title: str) -> str:
    """Content-Disposition header value for downloading an article's EPUB."""
    return f'attachment; filename="{epub_filename(title)}"'


class EPUBPackager(Packager):
    """Package an Article as a single-document EPUB 2 book.

    The EPUBPackager writes, in order:
    1. mimetype (stored, uncompressed)
    2. META-INF/container.xml pointing at the package document
    3. OEBPS/content.opf with metadata, manifest and spine
    4. OEBPS/toc.ncx with one navigation point
    5. OEBPS/styles.css
    6. OEBPS/content.xhtml with the sanitized article body

    Attributes:
        language: Language code declared in the package metadata
        stylesheet_name: Name of the CSS stylesheet file
    """

    first_entry_name = MIMETYPE_PATH

    def __init__(
        self,
        language: str = DEFAULT_LANGUAGE,
        stylesheet_name: str = "styles.css",
        templates_dir: Path | None = None,
        stylesheets_dir: Path | None = None,
    ):
        """Initialize the EPUB packager.

        Args:
            language: Language code for dc:language (default: en)
            stylesheet_name: Name of the CSS stylesheet file
            templates_dir: Directory containing templates (default: resources/templates)
            stylesheets_dir: Directory containing stylesheets (default: resources/stylesheets)
        """
        self.language = language
        self.stylesheet_name = stylesheet_name
        self.templates_dir = templates_dir or TEMPLATES_DIR
        self.stylesheets_dir = stylesheets_dir or STYLESHEETS_DIR

        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
        )
        for name, func in FILTERS.items():
            self._env.filters[name] = func

    def build_entries(self, article: Article, identifier: str | None = None) -> list[ArchiveEntry]:
        """Build the six EPUB entries for an article.

        Args:
            article: Article to package
            identifier: Value for dc:identifier and dtb:uid (generated if None)

        Returns:
            Entries in archive order, mimetype first
        """
        identifier = identifier or generate_identifier()
        logger.info(f"Building EPUB for '{article.title}' (id {identifier})")

        context = {
            "article": article,
            "content": sanitize(article.content),
            "identifier": identifier,
            "language": self.language,
            "package_path": f"{CONTENT_DIR}/{PACKAGE_DOCUMENT_NAME}",
            "ncx_name": NCX_NAME,
            "document_name": DOCUMENT_NAME,
            "stylesheet_name": self.stylesheet_name,
        }

        return [
            ArchiveEntry(
                name=MIMETYPE_PATH,
                data=EPUB_MEDIA_TYPE.encode("ascii"),
                compressed=False,
            ),
            self._render_entry(CONTAINER_PATH, "container.xml.j2", context),
            self._render_entry(
                f"{CONTENT_DIR}/{PACKAGE_DOCUMENT_NAME}", "content.opf.j2", context
            ),
            self._render_entry(f"{CONTENT_DIR}/{NCX_NAME}", "toc.ncx.j2", context),
            ArchiveEntry(
                name=f"{CONTENT_DIR}/{self.stylesheet_name}",
                data=self._read_stylesheet(),
            ),
            self._render_entry(
                f"{CONTENT_DIR}/{DOCUMENT_NAME}", "content.xhtml.j2", context
            ),
        ]

    def _render_entry(self, name: str, template_name: str, context: dict) -> ArchiveEntry:
        """Render a template into a deflated UTF-8 entry."""
        template = self._env.get_template(template_name)
        return ArchiveEntry(name=name, data=template.render(**context).encode("utf-8"))

    def _read_stylesheet(self) -> bytes:
        """Read the stylesheet bundled into every book."""
        return (self.stylesheets_dir / self.stylesheet_name).read_bytes()


def package(article: Article, identifier: str | None = None) -> bytes:
    """Package an article as EPUB bytes with the default packager.

    Args:
        article: Article to package
        identifier: Value for dc:identifier and dtb:uid (generated if None)

    Returns:
        Complete EPUB archive bytes
    """
    return EPUBPackager().package(article, identifier)
