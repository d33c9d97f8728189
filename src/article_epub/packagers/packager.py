"""Base class for archive packagers.

Packagers turn an Article into an ordered list of ArchiveEntry objects and
write them to a zip container. Subclasses decide what the entries are; the
base class owns the archive semantics:

- The first entry is written stored (uncompressed) and must be the format
  marker entry named by ``first_entry_name``.
- Every entry carries the same fixed timestamp so output depends only on
  the entries themselves.
- Bytes are returned only after the archive is closed, i.e. after the
  central directory has been written.
"""

import io
import logging
import os
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from schemas.article import Article
from schemas.epub import ArchiveEntry

from article_epub.exceptions import PackagingError

logger = logging.getLogger(__name__)

# Earliest timestamp the zip format can represent
FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)


class Packager(ABC):
    """Abstract base class for article packagers.

    Attributes:
        first_entry_name: Name the first, stored entry must have
    """

    first_entry_name: str = ""

    @abstractmethod
    def build_entries(self, article: Article, identifier: str | None = None) -> list[ArchiveEntry]:
        """Build the archive entries for an article, in write order.

        Args:
            article: Article to package
            identifier: Unique identifier for the package (generated if None)

        Returns:
            Ordered list of ArchiveEntry objects
        """
        pass

    def package(self, article: Article, identifier: str | None = None) -> bytes:
        """Package an article into archive bytes.

        Args:
            article: Article to package
            identifier: Unique identifier for the package (generated if None)

        Returns:
            Complete archive bytes

        Raises:
            PackagingError: If the archive cannot be assembled
        """
        entries = self.build_entries(article, identifier)
        buffer = io.BytesIO()
        self._write_archive(buffer, entries)
        data = buffer.getvalue()
        logger.info(f"Packaged '{article.title}' ({len(entries)} entries, {len(data)} bytes)")
        return data

    def write(
        self,
        article: Article,
        sink: str | Path | BinaryIO,
        identifier: str | None = None,
    ) -> int:
        """Package an article and write it to a file path or binary stream.

        Paths are written through a temporary sibling file which replaces
        the target only once the archive is complete.

        Args:
            article: Article to package
            sink: Destination path or writable binary stream
            identifier: Unique identifier for the package (generated if None)

        Returns:
            Number of bytes written

        Raises:
            PackagingError: If the destination cannot accept the archive
        """
        data = self.package(article, identifier)

        if isinstance(sink, (str, Path)):
            self._write_path(Path(sink), data)
        else:
            self._write_stream(sink, data)
        return len(data)

    def _write_archive(self, fileobj: BinaryIO, entries: list[ArchiveEntry]) -> None:
        """Write entries to a zip archive, first entry stored.

        Args:
            fileobj: Writable binary file object
            entries: Ordered entries, the first being the format marker

        Raises:
            PackagingError: If the entry order is invalid or writing fails
        """
        if not entries:
            raise PackagingError("No entries to package")

        first, *rest = entries
        if first.name != self.first_entry_name or first.compressed:
            raise PackagingError(
                f"First entry must be an uncompressed '{self.first_entry_name}', "
                f"got '{first.name}'"
            )

        try:
            with zipfile.ZipFile(fileobj, "w") as archive:
                self._write_entry(archive, first)
                for entry in rest:
                    self._write_entry(archive, entry)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise PackagingError(f"Failed to write archive: {e}") from e

    def _write_entry(self, archive: zipfile.ZipFile, entry: ArchiveEntry) -> None:
        """Write a single entry with a fixed timestamp."""
        info = zipfile.ZipInfo(entry.name, date_time=FIXED_DATE_TIME)
        info.compress_type = zipfile.ZIP_DEFLATED if entry.compressed else zipfile.ZIP_STORED
        info.external_attr = 0o644 << 16
        archive.writestr(info, entry.data)
        logger.debug(
            f"Wrote {entry.name} ({len(entry.data)} bytes, "
            f"{'deflated' if entry.compressed else 'stored'})"
        )

    def _write_path(self, path: Path, data: bytes) -> None:
        """Write archive bytes to a path, replacing it only on success."""
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise PackagingError(f"Failed to write {path}: {e}", destination=str(path)) from e
        logger.debug(f"Wrote archive to {path}")

    def _write_stream(self, stream: BinaryIO, data: bytes) -> None:
        """Write archive bytes to a binary stream and flush it."""
        destination = getattr(stream, "name", None)
        try:
            stream.write(data)
            stream.flush()
        except (OSError, ValueError) as e:
            raise PackagingError(
                f"Failed to write archive to stream: {e}",
                destination=str(destination) if destination else None,
            ) from e
