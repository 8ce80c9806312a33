"""Shared test fixtures for k8sexport.

Provides a tiny protobuf encoder and a bbolt file builder so tests can
fabricate etcd snapshots byte by byte without etcd itself.
"""

from __future__ import annotations

import struct
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from k8sexport.catalog import ResourceRegistry, default_registry
from k8sexport.models.config import ExportConfig

# ---------------------------------------------------------------------------
# Protobuf encoding
# ---------------------------------------------------------------------------


class Proto:
    """Encodes protobuf fields the way Go's generated marshallers do."""

    @staticmethod
    def varint(value: int) -> bytes:
        value &= (1 << 64) - 1
        out = bytearray()
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                out.append(byte | 0x80)
            else:
                out.append(byte)
                return bytes(out)

    @classmethod
    def tag(cls, number: int, wire_type: int) -> bytes:
        return cls.varint(number << 3 | wire_type)

    @classmethod
    def uint(cls, number: int, value: int) -> bytes:
        return cls.tag(number, 0) + cls.varint(value)

    @classmethod
    def raw(cls, number: int, data: bytes) -> bytes:
        return cls.tag(number, 2) + cls.varint(len(data)) + data

    @classmethod
    def string(cls, number: int, text: str) -> bytes:
        return cls.raw(number, text.encode("utf-8"))

    @classmethod
    def message(cls, number: int, *parts: bytes) -> bytes:
        return cls.raw(number, b"".join(parts))

    @classmethod
    def fixed32(cls, number: int, value: int) -> bytes:
        return cls.tag(number, 5) + struct.pack("<I", value)

    @classmethod
    def fixed64(cls, number: int, value: int) -> bytes:
        return cls.tag(number, 1) + struct.pack("<Q", value)

    @classmethod
    def map_entry(cls, number: int, key: str, value: str | bytes) -> bytes:
        if isinstance(value, str):
            value = value.encode("utf-8")
        return cls.message(number, cls.string(1, key), cls.raw(2, value))

    @classmethod
    def object_meta(cls, name: str, namespace: str = "", **extra: bytes) -> bytes:
        parts = [cls.string(1, name)]
        if namespace:
            parts.append(cls.string(3, namespace))
        parts.extend(extra.values())
        return cls.message(1, *parts)


RESOURCE_MAGIC = b"k8s\x00"


def encode_unknown(api_version: str, kind: str, raw: bytes) -> bytes:
    type_meta = Proto.message(1, Proto.string(1, api_version), Proto.string(2, kind))
    return RESOURCE_MAGIC + type_meta + Proto.raw(2, raw)


def encode_key_value(
    key: str | bytes,
    value: bytes,
    *,
    create_revision: int = 1,
    mod_revision: int = 1,
    version: int = 1,
    lease: int = 0,
) -> bytes:
    if isinstance(key, str):
        key = key.encode("utf-8")
    parts = [
        Proto.raw(1, key),
        Proto.uint(2, create_revision),
        Proto.uint(3, mod_revision),
        Proto.uint(4, version),
        Proto.raw(5, value),
    ]
    if lease:
        parts.append(Proto.uint(6, lease))
    return b"".join(parts)


def revision_key(main: int, sub: int = 0, *, tombstone: bool = False) -> bytes:
    key = struct.pack(">q", main) + b"_" + struct.pack(">q", sub)
    return key + b"t" if tombstone else key


# ---------------------------------------------------------------------------
# bbolt file building
# ---------------------------------------------------------------------------

BOLT_MAGIC = 0xED0CDAED
_PAGE_HEADER = struct.Struct("<QHHI")
_LEAF_ELEMENT = struct.Struct("<IIII")
_BRANCH_ELEMENT = struct.Struct("<IIQ")
_BRANCH, _LEAF, _META, _FREELIST = 0x01, 0x02, 0x04, 0x10
BUCKET_FLAG = 0x01


def fnv1a_64(data: bytes) -> int:
    h = 0xCBF29CE484222325
    for byte in data:
        h = ((h ^ byte) * 0x100000001B3) & 0xFFFFFFFFFFFFFFFF
    return h


def leaf_page(pgid: int, elements: Sequence[tuple[int, bytes, bytes]], overflow: int = 0) -> bytes:
    """Encode a leaf page body: header, element table, then key/value data."""
    table = bytearray()
    data = bytearray()
    data_start = _PAGE_HEADER.size + len(elements) * _LEAF_ELEMENT.size
    for i, (flags, key, value) in enumerate(elements):
        elem_addr = _PAGE_HEADER.size + i * _LEAF_ELEMENT.size
        pos = data_start + len(data) - elem_addr
        table += _LEAF_ELEMENT.pack(flags, pos, len(key), len(value))
        data += key + value
    header = _PAGE_HEADER.pack(pgid, _LEAF, len(elements), overflow)
    return header + bytes(table) + bytes(data)


def branch_page(pgid: int, children: Sequence[tuple[bytes, int]]) -> bytes:
    table = bytearray()
    data = bytearray()
    data_start = _PAGE_HEADER.size + len(children) * _BRANCH_ELEMENT.size
    for i, (key, child) in enumerate(children):
        elem_addr = _PAGE_HEADER.size + i * _BRANCH_ELEMENT.size
        pos = data_start + len(data) - elem_addr
        table += _BRANCH_ELEMENT.pack(pos, len(key), child)
        data += key
    header = _PAGE_HEADER.pack(pgid, _BRANCH, len(children), 0)
    return header + bytes(table) + bytes(data)


def meta_page(pgid: int, page_size: int, root: int, high_water: int, txid: int) -> bytes:
    body = struct.pack(
        "<IIIIQQQQQ", BOLT_MAGIC, 2, page_size, 0, root, 0, 2, high_water, txid
    )
    body += struct.pack("<Q", fnv1a_64(body))
    return _PAGE_HEADER.pack(pgid, _META, 0, 0) + body


class BoltBuilder:
    """Lays out a minimal bbolt file.

    Page 0 and 1 are metas, page 2 an empty freelist, page 3 the root
    bucket leaf; bucket data pages follow.
    """

    def __init__(self, page_size: int = 4096) -> None:
        self.page_size = page_size
        self._pages: dict[int, bytes] = {}
        self._next = 4

    def _place(self, encode: Callable[[int, int], bytes]) -> int:
        pgid = self._next
        size = len(encode(pgid, 0))
        overflow = max(0, -(-size // self.page_size) - 1)
        self._pages[pgid] = encode(pgid, overflow)
        self._next = pgid + 1 + overflow
        return pgid

    def add_tree(
        self, elements: Sequence[tuple[int, bytes, bytes]], leaf_size: int | None = None
    ) -> int:
        """Store *elements* as one leaf, or as leaves under a branch page."""
        if leaf_size is None or len(elements) <= leaf_size:
            return self._place(lambda pgid, ov: leaf_page(pgid, elements, ov))
        chunks = [elements[i:i + leaf_size] for i in range(0, len(elements), leaf_size)]
        children = []
        for chunk in chunks:
            child = self._place(lambda pgid, ov, c=chunk: leaf_page(pgid, c, ov))
            children.append((chunk[0][1], child))
        return self._place(lambda pgid, ov: branch_page(pgid, children))

    def build(
        self,
        buckets: Sequence[tuple[bytes, bytes]],
        txids: tuple[int, int] = (1, 2),
    ) -> bytes:
        """Return the file bytes; *buckets* are ``(name, bucket value)`` pairs."""
        root_elements = [(BUCKET_FLAG, name, value) for name, value in sorted(buckets)]
        self._pages[3] = leaf_page(3, root_elements)
        high_water = self._next
        self._pages[0] = meta_page(0, self.page_size, 3, high_water, txids[0])
        self._pages[1] = meta_page(1, self.page_size, 3, high_water, txids[1])
        self._pages[2] = _PAGE_HEADER.pack(2, _FREELIST, 0, 0)

        out = bytearray(high_water * self.page_size)
        for pgid, page in self._pages.items():
            offset = pgid * self.page_size
            out[offset:offset + len(page)] = page
        return bytes(out)


def bucket_value(root: int) -> bytes:
    return struct.pack("<QQ", root, 0)


def inline_bucket_value(elements: Sequence[tuple[int, bytes, bytes]]) -> bytes:
    return struct.pack("<QQ", 0, 0) + leaf_page(0, elements)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def pb() -> type[Proto]:
    """The protobuf field encoder."""
    return Proto


@pytest.fixture
def make_store_value() -> Callable[..., bytes]:
    """Factory fixture: etcd KeyValue bytes holding a protobuf resource."""

    def _factory(
        key: str,
        api_version: str = "v1",
        kind: str = "ConfigMap",
        raw: bytes = b"",
        *,
        magic: bool = True,
        **kv: Any,
    ) -> bytes:
        value = encode_unknown(api_version, kind, raw)
        if not magic:
            value = value[len(RESOURCE_MAGIC):]
        return encode_key_value(key, value, **kv)

    return _factory


@pytest.fixture
def make_config_map() -> Callable[..., bytes]:
    """Factory fixture: raw ConfigMap payload bytes."""

    def _factory(
        name: str = "foo",
        namespace: str = "default",
        data: dict[str, str] | None = None,
    ) -> bytes:
        parts = [Proto.object_meta(name, namespace)]
        for k, v in (data or {}).items():
            parts.append(Proto.map_entry(2, k, v))
        return b"".join(parts)

    return _factory


@pytest.fixture
def make_snapshot(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write a bbolt file holding *records* in bucket ``key``.

    Records are sorted by key as bbolt would store them.
    """

    def _factory(
        records: Sequence[tuple[bytes, bytes]],
        *,
        name: str = "db",
        bucket: bytes = b"key",
        page_size: int = 4096,
        leaf_size: int | None = None,
        inline: bool = False,
        nested: Sequence[bytes] = (),
        extra_buckets: Sequence[bytes] = (b"meta",),
        txids: tuple[int, int] = (1, 2),
    ) -> Path:
        builder = BoltBuilder(page_size)
        elements = [(0, k, v) for k, v in records]
        elements += [(BUCKET_FLAG, n, inline_bucket_value([])) for n in nested]
        elements.sort(key=lambda e: e[1])

        if inline:
            value = inline_bucket_value(elements)
        else:
            value = bucket_value(builder.add_tree(elements, leaf_size))
        buckets = [(bucket, value)]
        buckets += [(n, inline_bucket_value([])) for n in extra_buckets]

        path = tmp_path / name
        path.write_bytes(builder.build(buckets, txids=txids))
        return path

    return _factory


@pytest.fixture
def export_config(tmp_path: Path) -> ExportConfig:
    """Provide an ExportConfig rooted in a temp directory."""
    return ExportConfig(db_path=tmp_path / "db", output_path=tmp_path / "out")


@pytest.fixture
def registry() -> ResourceRegistry:
    """Provide the built-in resource registry."""
    return default_registry()


@pytest.fixture
def revkey() -> Callable[..., bytes]:
    """Build a bolt revision key: ``revkey(main, sub=0, tombstone=False)``."""
    return revision_key


@pytest.fixture
def make_key_value() -> Callable[..., bytes]:
    """Factory fixture: bare etcd KeyValue bytes around an arbitrary value."""
    return encode_key_value
