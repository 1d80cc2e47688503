from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from .codec import ArchiveCodec, ZipCodec, is_archive_data
from .entries import EntryTable
from .errors import (
    EntryDecodeError,
    InvalidContainerError,
    KmzError,
    UnsupportedEncodingError,
)


logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


class ArchiveReader:
    """Read-only view over a decoded archive.

    The whole table is decoded when the reader is built, so a reader that
    exists never fails on a later lookup. Use :meth:`from_bytes` or
    :meth:`from_file`; both raise instead of returning a partial reader.
    """

    def __init__(self, data: bytes, table: EntryTable):
        # Internal; the classmethods are the only supported way to build a reader.
        self._data = data
        self._table = table

    @classmethod
    def from_bytes(cls, data: BytesLike, codec: Optional[ArchiveCodec] = None) -> "ArchiveReader":
        data = bytes(data)
        if not is_archive_data(data):
            raise InvalidContainerError("Data is not a ZIP archive")
        codec = codec or ZipCodec()
        try:
            table = EntryTable(codec.decode(data))
        except KmzError:
            raise
        except (ValueError, RuntimeError, OSError, EOFError, TypeError) as e:
            raise InvalidContainerError(f"Codec failed to decode archive: {e}") from e
        return cls(data, table)

    @classmethod
    def from_file(cls, path: str, codec: Optional[ArchiveCodec] = None) -> "ArchiveReader":
        with open(path, "rb") as f:
            data = f.read()
        return cls.from_bytes(data, codec=codec)

    @property
    def data(self) -> bytes:
        """The exact bytes this reader was opened from."""
        return self._data

    def __len__(self) -> int:
        return len(self._table)

    def list(self) -> List[str]:
        return self._table.paths()

    def contains(self, path: str) -> bool:
        return self._table.contains(path)

    def get_entry(self, path: str) -> Optional[bytes]:
        e = self._table.get(path)
        return None if e is None else e.content

    def get_entry_into(self, path: str, out: Optional[bytearray]) -> bool:
        """Copy the content of ``path`` into ``out``.

        ``out`` is only modified on success; a missing path, a ``None``
        buffer or anything other than a ``bytearray`` returns False and
        leaves the caller's data alone.
        """
        if not isinstance(out, bytearray):
            return False
        e = self._table.get(path)
        if e is None:
            return False
        out[:] = e.content
        return True

    def find_first_of(self, suffix: str) -> Optional[Tuple[str, bytes]]:
        e = self._table.find_first_suffix(suffix)
        return None if e is None else (e.path, e.content)

    def add_entry(self, content: Union[bytes, str], path: str) -> bool:
        # Readers are never mutable.
        return False


def _log_open_failure(source: str, exc: Exception) -> None:
    if isinstance(exc, UnsupportedEncodingError):
        logger.warning("Unsupported entry encoding in %s: %s", source, exc)
    elif isinstance(exc, EntryDecodeError):
        logger.warning("Entry decode failed in %s: %s", source, exc)
    elif isinstance(exc, InvalidContainerError):
        logger.warning("Invalid container %s: %s", source, exc)
    else:
        logger.warning("Cannot read %s: %s", source, exc)


def open_from_bytes(data: BytesLike, codec: Optional[ArchiveCodec] = None) -> Optional[ArchiveReader]:
    """Open an in-memory archive, returning None if it cannot be decoded."""
    try:
        return ArchiveReader.from_bytes(data, codec=codec)
    except KmzError as exc:
        _log_open_failure("<bytes>", exc)
        return None


def open_from_file(path: str, codec: Optional[ArchiveCodec] = None) -> Optional[ArchiveReader]:
    """Open an archive on disk, returning None if it cannot be read or decoded."""
    try:
        return ArchiveReader.from_file(path, codec=codec)
    except (KmzError, OSError) as exc:
        _log_open_failure(path, exc)
        return None
