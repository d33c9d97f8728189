"""Convert web articles into EPUB e-books."""

from .packagers import EPUB_MEDIA_TYPE, EPUBPackager, epub_filename, package
from .sanitizers import sanitize

__all__ = [
    "EPUB_MEDIA_TYPE",
    "EPUBPackager",
    "epub_filename",
    "package",
    "sanitize",
]
