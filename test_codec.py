from __future__ import annotations

import io
import struct
import unittest
import zipfile
import zlib

import zstandard

from kmzfile.codec import ZipCodec
from kmzfile.constants import METHOD_STORED, METHOD_ZSTD
from kmzfile.errors import EntryDecodeError, InvalidContainerError
from kmzfile.reader import ArchiveReader


def _zstd_zip(name: str, content: bytes, *, crc: int = None) -> bytes:
    """Hand-assemble a single-member archive whose member uses method 93."""
    payload = zstandard.ZstdCompressor().compress(content)
    if crc is None:
        crc = zlib.crc32(content) & 0xFFFFFFFF
    fname = name.encode("ascii")
    local = struct.pack(
        "<4s2B4HL2L2H",
        b"PK\x03\x04", 63, 0, 0, METHOD_ZSTD, 0, 0x21, crc, len(payload), len(content), len(fname), 0,
    ) + fname + payload
    central = struct.pack(
        "<4s4B4HL2L5H2L",
        b"PK\x01\x02", 63, 0, 63, 0, 0, METHOD_ZSTD, 0, 0x21, crc, len(payload), len(content),
        len(fname), 0, 0, 0, 0, 0, 0,
    ) + fname
    eocd = struct.pack("<4s4H2LH", b"PK\x05\x06", 0, 0, 1, 1, len(central), len(local), 0)
    return local + central + eocd


class ZipCodecTests(unittest.TestCase):
    def test_encode_preserves_order_and_duplicates(self):
        codec = ZipCodec()
        entries = [("z/c.kml", b"one"), ("b.kml", b"two"), ("z/c.kml", b"three")]
        raw = codec.encode(entries)
        with zipfile.ZipFile(io.BytesIO(raw)) as zf:
            self.assertEqual(["z/c.kml", "b.kml", "z/c.kml"], [i.filename for i in zf.infolist()])
            self.assertTrue(all(i.compress_type == zipfile.ZIP_DEFLATED for i in zf.infolist()))
        self.assertEqual(entries, codec.decode(raw))

    def test_stored_method(self):
        codec = ZipCodec(method=METHOD_STORED)
        raw = codec.encode([("doc.kml", b"<kml/>")])
        with zipfile.ZipFile(io.BytesIO(raw)) as zf:
            self.assertEqual(zipfile.ZIP_STORED, zf.infolist()[0].compress_type)
        self.assertEqual([("doc.kml", b"<kml/>")], codec.decode(raw))

    def test_rejects_unknown_write_method(self):
        with self.assertRaises(ValueError):
            ZipCodec(method=METHOD_ZSTD)

    def test_empty_archive(self):
        codec = ZipCodec()
        raw = codec.encode([])
        self.assertTrue(raw.startswith(b"PK\x05\x06"))
        self.assertEqual([], codec.decode(raw))

    def test_decode_invalid(self):
        codec = ZipCodec()
        with self.assertRaises(InvalidContainerError):
            codec.decode(b"plain text")
        with self.assertRaises(InvalidContainerError):
            codec.decode(b"PK\x03\x04" + b"\x00" * 40)

    def test_decode_bad_crc(self):
        raw = bytearray(ZipCodec(method=METHOD_STORED).encode([("doc.kml", b"<kml>payload</kml>")]))
        pos = raw.find(b"payload")
        raw[pos] ^= 0xFF
        with self.assertRaises(EntryDecodeError) as ctx:
            ZipCodec().decode(bytes(raw))
        self.assertEqual("doc.kml", ctx.exception.path)

    def test_max_entry_size(self):
        raw = ZipCodec().encode([("big.bin", b"\x00" * 4096)])
        with self.assertRaises(InvalidContainerError):
            ZipCodec(max_entry_size=1024).decode(raw)
        self.assertEqual(4096, len(ZipCodec(max_entry_size=4096).decode(raw)[0][1]))
        self.assertEqual(4096, len(ZipCodec(max_entry_size=None).decode(raw)[0][1]))

    def test_zstd_member(self):
        content = b"<kml><Document><name>zstd</name></Document></kml>\n" * 20
        raw = _zstd_zip("doc.kml", content)
        self.assertEqual([("doc.kml", content)], ZipCodec().decode(raw))
        reader = ArchiveReader.from_bytes(raw)
        self.assertEqual(content, reader.get_entry("doc.kml"))

    def test_zstd_member_bad_crc(self):
        content = b"<kml/>" * 10
        raw = _zstd_zip("doc.kml", content, crc=(zlib.crc32(content) ^ 1) & 0xFFFFFFFF)
        with self.assertRaises(EntryDecodeError):
            ZipCodec().decode(raw)


if __name__ == "__main__":
    unittest.main()
