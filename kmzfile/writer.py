from __future__ import annotations

import logging
from typing import BinaryIO, List, Optional, Union

from .codec import ArchiveCodec, ZipCodec
from .constants import EMPTY_ARCHIVE
from .entries import Entry, EntryTable
from .errors import InvalidOperationError, InvalidPathError
from .pathutil import norm_path


logger = logging.getLogger(__name__)

Content = Union[bytes, bytearray, memoryview, str]


class ArchiveWriter:
    """Append-only archive builder.

    The destination is opened on construction. Entries are buffered in order
    and handed to the codec on :meth:`finalize`, which also runs when the
    writer leaves a ``with`` block or is garbage collected, so the destination
    always ends up holding a complete (possibly empty) archive.
    """

    def __init__(self, out_path: str, codec: Optional[ArchiveCodec] = None):
        self.out_path = out_path
        self.codec = codec or ZipCodec()
        self.f: Optional[BinaryIO] = None
        self.finalized = False
        self._table = EntryTable()
        self.f = open(out_path, "wb")

    @classmethod
    def create(cls, out_path: str, codec: Optional[ArchiveCodec] = None) -> "ArchiveWriter":
        return cls(out_path, codec=codec)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.finalize()

    def __del__(self):
        try:
            self.finalize()
        except Exception as exc:
            logger.warning("Finalize on collection failed for %s: %s", self.out_path, exc)

    def __len__(self) -> int:
        return len(self._table)

    def list(self) -> List[str]:
        return self._table.paths()

    def contains(self, path: str) -> bool:
        return self._table.contains(path)

    def add_entry_strict(self, content: Content, path: str) -> Entry:
        """Append ``content`` under ``path``, raising on any rejection."""
        if self.finalized or self.f is None:
            raise InvalidOperationError("Writer is already finalized")
        arc_path = norm_path(path)
        if isinstance(content, str):
            content = content.encode("utf-8")
        elif not isinstance(content, (bytes, bytearray, memoryview)):
            raise TypeError(f"Entry content must be bytes or str, not {type(content).__name__}")
        return self._table.append(arc_path, content)

    def add_entry(self, content: Content, path: str) -> bool:
        """Append an entry; returns False (with no effect) for a rejected path."""
        try:
            self.add_entry_strict(content, path)
        except (InvalidPathError, InvalidOperationError) as exc:
            logger.debug("Rejected entry %r: %s", path, exc)
            return False
        return True

    def finalize(self):
        if self.finalized or self.f is None:
            return
        self.finalized = True
        f, self.f = self.f, None
        try:
            try:
                payload = self.codec.encode(self._table.items())
            except Exception:
                # Leave a valid, empty archive behind rather than nothing, whatever the codec raised
                f.write(EMPTY_ARCHIVE)
                raise
            f.write(payload)
        finally:
            f.close()

    def close(self):
        self.finalize()


def create(out_path: str, codec: Optional[ArchiveCodec] = None) -> Optional[ArchiveWriter]:
    """Create a writer for ``out_path``, returning None if it cannot be opened."""
    try:
        return ArchiveWriter.create(out_path, codec=codec)
    except OSError as exc:
        logger.warning("Cannot open %s for writing: %s", out_path, exc)
        return None
