from __future__ import annotations

import io
import logging
import lzma
import struct
import time
import warnings
import zipfile
import zlib
from typing import Iterable, List, Optional, Protocol, Tuple

import zstandard

from .constants import (
    ARCHIVE_SIGNATURES,
    DEFAULT_MAX_ENTRY_SIZE,
    DEFAULT_METHOD,
    METHOD_ZSTD,
    SIG_LOCAL_HEADER,
    WRITE_METHODS,
)
from .errors import EncodeError, EntryDecodeError, InvalidContainerError, UnsupportedEncodingError


logger = logging.getLogger(__name__)

# Local file header: sig[4], extract_version u8, extract_system u8, flags u16,
# method u16, mtime u16, mdate u16, crc32 u32, compressed u32, uncompressed u32,
# name_len u16, extra_len u16
_LOCAL_HDR_STRUCT = struct.Struct("<4s2B4HL2L2H")

_FLAG_ENCRYPTED = 0x1


def is_archive_data(data: bytes) -> bool:
    """Cheap signature check; does not walk the central directory."""
    return bytes(data[:4]) in ARCHIVE_SIGNATURES


class ArchiveCodec(Protocol):
    """decode() reports failures as KmzError subclasses; readers treat anything
    else it raises as an invalid container."""

    def decode(self, data: bytes) -> List[Tuple[str, bytes]]: ...
    def encode(self, entries: Iterable[Tuple[str, bytes]]) -> bytes: ...


class ZipCodec:
    """ZIP codec over the stdlib ``zipfile`` module.

    Entries come back in central-directory order, which is the order they were
    written in. Duplicate names are kept as separate directory records and
    directory records (names ending in '/') are skipped on decode.
    Zstandard members (method 93) are decoded through the ``zstandard``
    package regardless of what the running ``zipfile`` supports.
    """

    def __init__(self, method: int = DEFAULT_METHOD, max_entry_size: Optional[int] = DEFAULT_MAX_ENTRY_SIZE):
        if method not in WRITE_METHODS:
            raise ValueError(f"unsupported write method: {method}")
        self.method = method
        self.max_entry_size = max_entry_size

    def decode(self, data: bytes) -> List[Tuple[str, bytes]]:
        if not is_archive_data(data):
            raise InvalidContainerError("Missing ZIP signature")
        try:
            zf = zipfile.ZipFile(io.BytesIO(data))
        except NotImplementedError as e:
            raise InvalidContainerError(f"Unsupported ZIP directory: {e}") from e
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError, EOFError) as e:
            raise InvalidContainerError(f"Unreadable central directory: {e}") from e
        with zf:
            out: List[Tuple[str, bytes]] = []
            for info in zf.infolist():
                if info.is_dir():
                    continue
                out.append((info.filename, self._read_entry(zf, info, data)))
        return out

    def encode(self, entries: Iterable[Tuple[str, bytes]]) -> bytes:
        buf = io.BytesIO()
        try:
            with warnings.catch_warnings():
                # zipfile warns on duplicate names; duplicates are written on purpose
                warnings.simplefilter("ignore", UserWarning)
                with zipfile.ZipFile(buf, "w", compression=self.method) as zf:
                    for path, content in entries:
                        zi = zipfile.ZipInfo(path, date_time=time.localtime(time.time())[:6])
                        zi.compress_type = self.method
                        zi.external_attr = 0o644 << 16
                        zf.writestr(zi, content)
        except (zipfile.LargeZipFile, OSError, ValueError) as e:
            raise EncodeError(f"ZIP encode failed: {e}") from e
        return buf.getvalue()

    # internals
    def _check_size(self, path: str, size: int) -> None:
        if self.max_entry_size is not None and size > self.max_entry_size:
            raise InvalidContainerError(f"{path}: entry exceeds {self.max_entry_size} bytes")

    def _read_entry(self, zf: zipfile.ZipFile, info: zipfile.ZipInfo, data: bytes) -> bytes:
        self._check_size(info.filename, info.file_size)
        if info.compress_type == METHOD_ZSTD:
            return self._read_zstd_entry(info, data)
        limit = -1 if self.max_entry_size is None else self.max_entry_size + 1
        try:
            with zf.open(info) as fh:
                raw = fh.read(limit)
        except NotImplementedError as e:
            raise UnsupportedEncodingError(info.filename, str(e)) from e
        except RuntimeError as e:
            # zipfile raises RuntimeError for encrypted members
            raise UnsupportedEncodingError(info.filename, str(e)) from e
        except (zipfile.BadZipFile, zlib.error, lzma.LZMAError, OSError, EOFError, ValueError) as e:
            raise EntryDecodeError(info.filename, str(e)) from e
        self._check_size(info.filename, len(raw))
        return raw

    def _read_zstd_entry(self, info: zipfile.ZipInfo, data: bytes) -> bytes:
        logger.debug("decoding zstd member %s via zstandard", info.filename)
        if info.flag_bits & _FLAG_ENCRYPTED:
            raise UnsupportedEncodingError(info.filename, "encrypted member")
        start = info.header_offset
        hdr = data[start:start + _LOCAL_HDR_STRUCT.size]
        if len(hdr) != _LOCAL_HDR_STRUCT.size:
            raise EntryDecodeError(info.filename, "truncated local header")
        fields = _LOCAL_HDR_STRUCT.unpack(hdr)
        if fields[0] != SIG_LOCAL_HEADER:
            raise EntryDecodeError(info.filename, "bad local header signature")
        name_len, extra_len = fields[10], fields[11]
        off = start + _LOCAL_HDR_STRUCT.size + name_len + extra_len
        payload = data[off:off + info.compress_size]
        if len(payload) != info.compress_size:
            raise EntryDecodeError(info.filename, "truncated entry data")
        try:
            raw = zstandard.ZstdDecompressor().decompress(payload, max_output_size=info.file_size)
        except zstandard.ZstdError as e:
            raise EntryDecodeError(info.filename, f"zstd decompression failed: {e}") from e
        if len(raw) != info.file_size:
            raise EntryDecodeError(info.filename, "length mismatch after decompress")
        if zlib.crc32(raw) & 0xFFFFFFFF != info.CRC:
            raise EntryDecodeError(info.filename, "bad CRC-32")
        return raw
