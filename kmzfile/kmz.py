"""KMZ helpers layered over the generic archive reader/writer.

A KMZ is a ZIP archive whose primary document is a KML file, conventionally
``doc.kml`` at the archive root, with images and other resources alongside.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple, Union

from .codec import ArchiveCodec, is_archive_data
from .constants import DEFAULT_KML_NAME, KML_SUFFIX
from .reader import ArchiveReader
from .writer import ArchiveWriter


def is_kmz_data(data: bytes) -> bool:
    return is_archive_data(data)


def read_kml(reader: ArchiveReader) -> Optional[bytes]:
    """Return the primary KML document: doc.kml if present, else the first .kml entry."""
    content = reader.get_entry(DEFAULT_KML_NAME)
    if content is not None:
        return content
    found = reader.find_first_of(KML_SUFFIX)
    return None if found is None else found[1]


def write_kmz(
    out_path: str,
    kml: Union[bytes, str],
    resources: Optional[Iterable[Tuple[str, Union[bytes, str]]]] = None,
    codec: Optional[ArchiveCodec] = None,
) -> None:
    """Write ``kml`` as doc.kml followed by ``resources`` in the order given.

    Raises InvalidPathError on an unsafe resource path; the destination still
    holds a valid archive with the entries added before the failure.
    """
    with ArchiveWriter(out_path, codec=codec) as w:
        w.add_entry_strict(kml, DEFAULT_KML_NAME)
        for path, content in resources or ():
            w.add_entry_strict(content, path)
