"""
kmzfile: read/write access to KMZ and other ZIP entry containers.

- ArchiveReader decodes the whole table of contents up front, keeps insertion
  order, and serves exact-path and first-suffix-match lookups.
- ArchiveWriter appends entries under strict path rules (no absolute paths, no
  climbing above the archive root) and always leaves a complete archive
  behind, whether finalized explicitly, by a ``with`` block, or on collection.
- The byte-level transform is an injected codec; ZipCodec is the default and
  also reads Zstandard (method 93) members via the zstandard package.

Duplicate paths are kept in the archive but lookups resolve to the first one
written.
"""

from .codec import ArchiveCodec, ZipCodec, is_archive_data
from .entries import Entry, EntryTable
from .errors import (
    KmzError,
    InvalidContainerError,
    EncodeError,
    EntryDecodeError,
    UnsupportedEncodingError,
    InvalidPathError,
    InvalidOperationError,
)
from .reader import ArchiveReader, open_from_bytes, open_from_file
from .writer import ArchiveWriter, create

__version__ = "0.1"

__all__ = [
    "ArchiveCodec",
    "ZipCodec",
    "is_archive_data",
    "Entry",
    "EntryTable",
    "ArchiveReader",
    "ArchiveWriter",
    "open_from_bytes",
    "open_from_file",
    "create",
    "KmzError",
    "InvalidContainerError",
    "EncodeError",
    "EntryDecodeError",
    "UnsupportedEncodingError",
    "InvalidPathError",
    "InvalidOperationError",
]
