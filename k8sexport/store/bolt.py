"""Read-only bbolt snapshot reader.

etcd keeps its MVCC data in a bbolt file: a copy-on-write B+tree of fixed
size pages.  This reader only needs enough of the format to walk one
top-level bucket in key order:

Page header (16 bytes, little-endian)::

    id        uint64
    flags     uint16   branch 0x01, leaf 0x02, meta 0x04, freelist 0x10
    count     uint16   number of elements
    overflow  uint32   extra contiguous pages

Meta (pages 0 and 1, after the page header)::

    magic 0xED0CDAED, version 2, pageSize, flags,
    root bucket {root pgid, sequence}, freelist pgid, high-water pgid,
    txid, checksum (FNV-1a 64 over the preceding 56 bytes)

The valid meta page with the highest txid describes the current tree.
Leaf elements are ``(flags, pos, ksize, vsize)``, branch elements
``(pos, ksize, pgid)``; ``pos`` is relative to the element itself.  A
bucket value starts with a ``(root pgid, sequence)`` header; ``root == 0``
means the bucket's page is stored inline right after the header.

The file is memory-mapped read-only for the lifetime of the snapshot.
"""

from __future__ import annotations

import logging
import mmap
import struct
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from k8sexport.core.errors import StoreIterationError, StoreOpenError
from k8sexport.models.records import RawRecord

logger = logging.getLogger(__name__)

MAGIC = 0xED0CDAED
VERSION = 2

BRANCH_PAGE = 0x01
LEAF_PAGE = 0x02
META_PAGE = 0x04
FREELIST_PAGE = 0x10

BUCKET_LEAF_FLAG = 0x01

PAGE_HEADER = struct.Struct("<QHHI")
META = struct.Struct("<IIIIQQQQQQ")
LEAF_ELEMENT = struct.Struct("<IIII")
BRANCH_ELEMENT = struct.Struct("<IIQ")
BUCKET_HEADER = struct.Struct("<QQ")

_META_CHECKSUM_SPAN = 56
_FALLBACK_PAGE_SIZES = (4096, 8192, 16384, 32768, 65536)

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_U64_MASK = (1 << 64) - 1


def fnv1a_64(data: bytes) -> int:
    """FNV-1a 64-bit hash, as bbolt uses for meta checksums."""
    h = _FNV_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV_PRIME) & _U64_MASK
    return h


class _Meta:
    __slots__ = ("page_size", "root", "txid", "pgid")

    def __init__(self, page_size: int, root: int, txid: int, pgid: int) -> None:
        self.page_size = page_size
        self.root = root
        self.txid = txid
        self.pgid = pgid


def _read_meta(buf: bytes | mmap.mmap, offset: int) -> _Meta | None:
    """Parse and validate the meta page at *offset*; ``None`` if invalid."""
    start = offset + PAGE_HEADER.size
    if start + META.size > len(buf):
        return None
    _, flags, _, _ = PAGE_HEADER.unpack_from(buf, offset)
    if not flags & META_PAGE:
        return None
    (magic, version, page_size, _flags, root, _seq,
     _freelist, pgid, txid, checksum) = META.unpack_from(buf, start)
    if magic != MAGIC or version != VERSION:
        return None
    if fnv1a_64(bytes(buf[start:start + _META_CHECKSUM_SPAN])) != checksum:
        return None
    return _Meta(page_size, root, txid, pgid)


class _Page:
    """A view of one (possibly inline) page."""

    __slots__ = ("buf", "base", "flags", "count")

    def __init__(self, buf: bytes | mmap.mmap, base: int) -> None:
        if base + PAGE_HEADER.size > len(buf):
            raise StoreIterationError(f"page header at offset {base} past end of data")
        _, flags, count, _ = PAGE_HEADER.unpack_from(buf, base)
        self.buf = buf
        self.base = base
        self.flags = flags
        self.count = count

    def _element(self, layout: struct.Struct, index: int) -> tuple[int, tuple[int, ...]]:
        addr = self.base + PAGE_HEADER.size + index * layout.size
        if addr + layout.size > len(self.buf):
            raise StoreIterationError(f"element {index} at offset {addr} past end of data")
        return addr, layout.unpack_from(self.buf, addr)

    def _slice(self, start: int, length: int) -> bytes:
        if start + length > len(self.buf):
            raise StoreIterationError(f"{length} bytes at offset {start} past end of data")
        return bytes(self.buf[start:start + length])

    def leaf_elements(self) -> Iterator[tuple[int, bytes, bytes]]:
        for i in range(self.count):
            addr, (flags, pos, ksize, vsize) = self._element(LEAF_ELEMENT, i)
            key = self._slice(addr + pos, ksize)
            value = self._slice(addr + pos + ksize, vsize)
            yield flags, key, value

    def branch_children(self) -> Iterator[int]:
        for i in range(self.count):
            _, (_pos, _ksize, pgid) = self._element(BRANCH_ELEMENT, i)
            yield pgid


class BoltSnapshot:
    """A read-only view over a bbolt database file.

    Use :meth:`open` as a context manager; the mapping is released on exit.

    Examples
    --------
    >>> with BoltSnapshot.open(Path("member/snap/db")) as snap:  # doctest: +SKIP
    ...     for record in snap.iter_bucket("key"):
    ...         print(record.key)
    """

    def __init__(self, fh: BinaryIO, data: mmap.mmap, meta: _Meta, path: Path) -> None:
        self._fh = fh
        self._data = data
        self._meta = meta
        self.path = path

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def open(cls, path: Path | str) -> BoltSnapshot:
        """Open *path* read-only and select the current meta page.

        Raises
        ------
        StoreOpenError
            If the file cannot be opened or mapped, or neither meta page
            is valid.
        """
        path = Path(path)
        try:
            fh = path.open("rb")
        except OSError as exc:
            raise StoreOpenError(f"cannot open {path}: {exc}") from exc
        try:
            data = mmap.mmap(fh.fileno(), 0, access=mmap.ACCESS_READ)
        except (OSError, ValueError) as exc:
            fh.close()
            raise StoreOpenError(f"cannot map {path}: {exc}") from exc

        meta = cls._select_meta(data)
        if meta is None:
            data.close()
            fh.close()
            raise StoreOpenError(f"{path}: no valid bbolt meta page")
        logger.info(
            "Opened %s (page size %d, txid %d).", path, meta.page_size, meta.txid
        )
        return cls(fh, data, meta, path)

    @staticmethod
    def _select_meta(data: mmap.mmap) -> _Meta | None:
        meta0 = _read_meta(data, 0)
        candidates = [meta0] if meta0 else []
        sizes = (meta0.page_size,) if meta0 else _FALLBACK_PAGE_SIZES
        for size in sizes:
            meta1 = _read_meta(data, size)
            if meta1 is not None:
                candidates.append(meta1)
                break
        if not candidates:
            return None
        return max(candidates, key=lambda m: m.txid)

    def close(self) -> None:
        self._data.close()
        self._fh.close()

    def __enter__(self) -> BoltSnapshot:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def page_size(self) -> int:
        return self._meta.page_size

    @property
    def txid(self) -> int:
        return self._meta.txid

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _page(self, pgid: int) -> _Page:
        if pgid < 2 or pgid >= self._meta.pgid:
            raise StoreIterationError(
                f"page id {pgid} outside data pages 2..{self._meta.pgid - 1}"
            )
        return _Page(self._data, pgid * self._meta.page_size)

    def _walk(self, page: _Page, depth: int = 0) -> Iterator[tuple[int, bytes, bytes]]:
        """Yield ``(flags, key, value)`` for every leaf element under *page*."""
        if depth > 64:
            raise StoreIterationError("B+tree deeper than 64 levels; page cycle?")
        if page.flags & LEAF_PAGE:
            yield from page.leaf_elements()
        elif page.flags & BRANCH_PAGE:
            for child in page.branch_children():
                yield from self._walk(self._page(child), depth + 1)
        else:
            raise StoreIterationError(
                f"unexpected page flags 0x{page.flags:02x} at offset {page.base}"
            )

    def _bucket_root(self, header_value: bytes) -> _Page:
        if len(header_value) < BUCKET_HEADER.size:
            raise StoreIterationError("bucket value shorter than its header")
        root, _ = BUCKET_HEADER.unpack_from(header_value, 0)
        if root == 0:
            return _Page(header_value, BUCKET_HEADER.size)
        return self._page(root)

    def bucket_names(self) -> list[bytes]:
        """Names of the top-level buckets, in key order."""
        return [
            key
            for flags, key, _ in self._walk(self._page(self._meta.root))
            if flags & BUCKET_LEAF_FLAG
        ]

    def iter_bucket(self, name: str | bytes) -> Iterator[RawRecord]:
        """Yield every key/value pair of a top-level bucket in key order.

        Nested buckets are skipped.

        Raises
        ------
        StoreIterationError
            If the bucket does not exist or a page is corrupt.
        """
        wanted = name.encode("utf-8") if isinstance(name, str) else name
        for flags, key, value in self._walk(self._page(self._meta.root)):
            if key == wanted and flags & BUCKET_LEAF_FLAG:
                bucket = self._bucket_root(value)
                break
        else:
            raise StoreIterationError(
                f"bucket {wanted.decode('utf-8', errors='replace')!r} not found"
            )

        for flags, key, value in self._walk(bucket):
            if flags & BUCKET_LEAF_FLAG:
                continue
            yield RawRecord(key=key, value=value)
