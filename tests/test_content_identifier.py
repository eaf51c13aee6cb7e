"""Tests for content identifier decoding and rendering."""

import base64
import hashlib

from tile_documents.infrastructure.car.cid import (
    base58btc_encode,
    read_content_identifier,
)


class TestBase58:
    def test_known_vector(self):
        assert base58btc_encode(b"Hello World!") == "2NEpo7TZRRrLZSi2U"

    def test_leading_zero_bytes(self):
        assert base58btc_encode(b"\x00\x00") == "11"

    def test_empty(self):
        assert base58btc_encode(b"") == ""


class TestCidV1:
    def test_decodes_fields(self, tile_builder):
        raw = tile_builder.cid(b"hello")
        cid, consumed = read_content_identifier(raw)
        assert consumed == len(raw)
        assert cid.version == 1
        assert cid.codec == 0x55
        assert cid.hash_code == 0x12
        assert cid.digest == hashlib.sha256(b"hello").digest()
        assert cid.raw == raw

    def test_canonical_text_is_base32(self, tile_builder):
        raw = tile_builder.cid(b"hello")
        cid, _ = read_content_identifier(raw)
        expected = "b" + base64.b32encode(raw).decode("ascii").lower().rstrip("=")
        assert str(cid) == expected
        assert str(cid).startswith("bafkrei")

    def test_dag_cbor_codec_prefix(self, tile_builder):
        cid, _ = read_content_identifier(tile_builder.cid(b"x", codec=0x71))
        assert str(cid).startswith("bafyrei")

    def test_reports_length_before_payload(self, tile_builder):
        raw = tile_builder.cid(b"body")
        cid, consumed = read_content_identifier(raw + b"body")
        assert consumed == len(raw)
        assert str(cid) == tile_builder.text(raw)

    def test_reads_from_offset(self, tile_builder):
        raw = tile_builder.cid(b"body")
        _, consumed = read_content_identifier(b"\x00\x00" + raw, 2)
        assert consumed == len(raw)

    def test_unknown_codec_is_structurally_valid(self):
        raw = b"\x01\xf0\x01\x99\x01\x03abc"
        cid, consumed = read_content_identifier(raw)
        assert consumed == len(raw)
        assert cid.codec == 0xF0
        assert cid.hash_code == 0x99
        assert cid.digest == b"abc"

    def test_truncated_digest(self, tile_builder):
        raw = tile_builder.cid(b"hello")
        assert read_content_identifier(raw[:-1]) is None

    def test_digest_must_fit_bound(self, tile_builder):
        raw = tile_builder.cid(b"hello")
        assert read_content_identifier(raw + b"more", 0, len(raw) - 4) is None

    def test_bad_version(self):
        assert read_content_identifier(b"\x02\x55\x12\x01a") is None

    def test_truncated_varint(self):
        assert read_content_identifier(b"\x01\x80") is None

    def test_empty(self):
        assert read_content_identifier(b"") is None


class TestCidV0:
    def test_sha256_multihash(self):
        raw = b"\x12\x20" + hashlib.sha256(b"hello").digest()
        cid, consumed = read_content_identifier(raw + b"payload")
        assert consumed == 34
        assert cid.version == 0
        assert cid.codec == 0x70
        text = str(cid)
        assert text.startswith("Qm")
        assert len(text) == 46

    def test_truncated(self):
        raw = b"\x12\x20" + b"\x01" * 10
        assert read_content_identifier(raw) is None


class TestRoundTrip:
    def test_round_trip_text(self, tile_builder):
        raw = tile_builder.cid(b"round trip")
        cid, _ = read_content_identifier(raw)
        assert str(cid) == tile_builder.text(raw)

    def test_rejects_garbage(self):
        assert read_content_identifier(b"\xff\xff") is None

    def test_value_equality(self, tile_builder):
        raw = tile_builder.cid(b"same")
        assert read_content_identifier(raw)[0] == read_content_identifier(bytes(raw) + b"tail")[0]
