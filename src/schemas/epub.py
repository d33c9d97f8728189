"""EPUB container schemas.

An EPUB is a zip archive whose entries must be written in a fixed order:

    mimetype                  # stored, never compressed, always first
    META-INF/container.xml
    OEBPS/content.opf
    OEBPS/toc.ncx
    OEBPS/styles.css
    OEBPS/content.xhtml
"""

from pydantic import BaseModel, ConfigDict


class ArchiveEntry(BaseModel):
    """A single file inside the EPUB archive.

    Attributes:
        name: Path of the entry within the archive
        data: Raw bytes of the entry
        compressed: Whether the entry is deflated (False means stored)
    """

    model_config = ConfigDict(frozen=True)

    name: str
    data: bytes
    compressed: bool = True
