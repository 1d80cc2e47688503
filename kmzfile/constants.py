import zipfile


# Container signatures (first four bytes of a ZIP stream)
SIG_LOCAL_HEADER = b"PK\x03\x04"
SIG_EMPTY_ARCHIVE = b"PK\x05\x06"  # end-of-central-directory only
SIG_SPANNED = b"PK\x07\x08"

ARCHIVE_SIGNATURES = (SIG_LOCAL_HEADER, SIG_EMPTY_ARCHIVE, SIG_SPANNED)


# Compression method IDs (APPNOTE 4.4.5)
METHOD_STORED = zipfile.ZIP_STORED
METHOD_DEFLATED = zipfile.ZIP_DEFLATED
METHOD_BZIP2 = zipfile.ZIP_BZIP2
METHOD_LZMA = zipfile.ZIP_LZMA
METHOD_ZSTD = 93

WRITE_METHODS = (METHOD_STORED, METHOD_DEFLATED)

DEFAULT_METHOD = METHOD_DEFLATED
DEFAULT_MAX_ENTRY_SIZE = 256 * 1024 * 1024  # 256 MiB


# KMZ conventions
KML_SUFFIX = ".kml"
DEFAULT_KML_NAME = "doc.kml"

# A bare end-of-central-directory record: the smallest valid archive
EMPTY_ARCHIVE = SIG_EMPTY_ARCHIVE + b"\x00" * 18
