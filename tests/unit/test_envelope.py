"""Tests for KeyValue decoding, magic detection and envelope unwrapping."""

from __future__ import annotations

import pytest

from k8sexport.core.envelope import (
    RESOURCE_MAGIC,
    decode_store_entry,
    has_resource_magic,
    unwrap_envelope,
    unwrap_resource,
)
from k8sexport.core.errors import EnvelopeDecodeError


class TestDecodeStoreEntry:
    def test_all_fields(self, make_key_value):
        entry = decode_store_entry(
            make_key_value(
                "/registry/pods/default/p",
                b"payload",
                create_revision=4,
                mod_revision=9,
                version=3,
                lease=77,
            )
        )
        assert entry.key == b"/registry/pods/default/p"
        assert entry.logical_key == "/registry/pods/default/p"
        assert entry.create_revision == 4
        assert entry.mod_revision == 9
        assert entry.version == 3
        assert entry.value == b"payload"
        assert entry.lease == 77

    def test_empty_value_is_default_entry(self):
        entry = decode_store_entry(b"")
        assert entry.key == b""
        assert entry.value == b""

    def test_unknown_fields_skipped(self, pb, make_key_value):
        data = make_key_value("/registry/a", b"x") + pb.string(15, "future")
        assert decode_store_entry(data).value == b"x"

    def test_undecodable_key_escaped(self, make_key_value):
        entry = decode_store_entry(make_key_value(b"/registry/\xff", b""))
        assert entry.logical_key == "/registry/\\xff"

    def test_truncated(self, make_key_value):
        data = make_key_value("/registry/a", b"value")
        with pytest.raises(EnvelopeDecodeError, match="malformed store entry"):
            decode_store_entry(data[:-2])

    def test_wrong_wire_type(self, pb):
        with pytest.raises(EnvelopeDecodeError):
            decode_store_entry(pb.uint(1, 5))


class TestMagic:
    def test_magic_value(self):
        assert RESOURCE_MAGIC == bytes([0x6B, 0x38, 0x73, 0x00])

    @pytest.mark.parametrize("data", [b"", b"k", b"k8s", b"k8s!", b"{\"kind\":1}"])
    def test_not_a_resource(self, data):
        assert has_resource_magic(data) is False

    def test_resource(self):
        assert has_resource_magic(b"k8s\x00") is True
        assert has_resource_magic(b"k8s\x00\x0a\x00") is True


class TestUnwrap:
    def test_unwrap_envelope(self, pb):
        payload = (
            pb.message(1, pb.string(1, "apps/v1"), pb.string(2, "Deployment"))
            + pb.raw(2, b"\x0a\x00")
            + pb.string(3, "")
            + pb.string(4, "application/vnd.kubernetes.protobuf")
        )
        env = unwrap_envelope(payload)
        assert env.type_key == ("apps/v1", "Deployment")
        assert env.raw == b"\x0a\x00"
        assert env.content_type == "application/vnd.kubernetes.protobuf"

    def test_missing_type_meta(self, pb):
        env = unwrap_envelope(pb.raw(2, b"abc"))
        assert env.type_key == ("", "")
        assert env.raw == b"abc"

    def test_invalid_utf8_kind(self, pb):
        payload = pb.message(1, pb.raw(2, b"\xff\xfe"))
        with pytest.raises(EnvelopeDecodeError, match="invalid UTF-8"):
            unwrap_envelope(payload)

    def test_malformed_type_meta(self, pb):
        payload = pb.raw(1, b"\x0a\x05ab")
        with pytest.raises(EnvelopeDecodeError, match="malformed resource envelope"):
            unwrap_envelope(payload)

    def test_unwrap_resource_without_magic(self, make_key_value):
        entry = decode_store_entry(make_key_value("/registry/a", b"{}"))
        assert unwrap_resource(entry) is None

    def test_unwrap_resource_short_value(self, make_key_value):
        entry = decode_store_entry(make_key_value("/registry/a", b"k8"))
        assert unwrap_resource(entry) is None

    def test_unwrap_resource(self, make_store_value):
        entry = decode_store_entry(
            make_store_value("/registry/x", "custom/v9", "Widget", b"\x01\x02")
        )
        env = unwrap_resource(entry)
        assert env is not None
        assert env.type_key == ("custom/v9", "Widget")
        assert env.raw == b"\x01\x02"
