"""Packagers for assembling articles into e-book archives."""

from .epub_packager import (
    EPUB_MEDIA_TYPE,
    EPUBPackager,
    content_disposition,
    epub_filename,
    generate_identifier,
    package,
)
from .packager import Packager

__all__ = [
    "Packager",
    "EPUBPackager",
    "EPUB_MEDIA_TYPE",
    "package",
    "generate_identifier",
    "epub_filename",
    "content_disposition",
]
