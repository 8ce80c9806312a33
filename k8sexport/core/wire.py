"""Minimal protobuf wire-format reader.

etcd's ``mvccpb.KeyValue``, Kubernetes' ``runtime.Unknown`` and every typed
resource are plain protobuf messages.  This module only splits a buffer into
``(field_number, wire_type, value)`` triples; the callers decide what each
field means.

Wire types handled: 0 (varint), 1 (64-bit), 2 (length-delimited) and
5 (32-bit).  Groups (3/4) are rejected, as they are never produced by the
generators etcd and Kubernetes use.
"""

from __future__ import annotations

import struct
from collections.abc import Iterator
from typing import Union

from k8sexport.core.errors import DecodeError

VARINT = 0
FIXED64 = 1
LENGTH_DELIMITED = 2
FIXED32 = 5

_WIRE_NAMES = {
    VARINT: "varint",
    FIXED64: "fixed64",
    LENGTH_DELIMITED: "bytes",
    FIXED32: "fixed32",
}

_MAX_VARINT_BYTES = 10
_U64 = 1 << 64
_U32 = 1 << 32

WireValue = Union[int, bytes]


def wire_name(wire_type: int) -> str:
    return _WIRE_NAMES.get(wire_type, f"wiretype {wire_type}")


def read_varint(buf: bytes, pos: int) -> tuple[int, int]:
    """Read an unsigned varint at *pos*; return ``(value, new_pos)``."""
    result = 0
    shift = 0
    for _ in range(_MAX_VARINT_BYTES):
        if pos >= len(buf):
            raise DecodeError("unexpected end of buffer inside varint")
        byte = buf[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result & (_U64 - 1), pos
        shift += 7
    raise DecodeError(f"varint longer than {_MAX_VARINT_BYTES} bytes")


def iter_fields(buf: bytes) -> Iterator[tuple[int, int, WireValue]]:
    """Yield ``(field_number, wire_type, value)`` for each field in *buf*.

    Varint and fixed values are returned as unsigned ints; length-delimited
    values as ``bytes``.

    Raises
    ------
    DecodeError
        On truncation, a zero field number, or an unsupported wire type.
    """
    pos = 0
    end = len(buf)
    while pos < end:
        tag, pos = read_varint(buf, pos)
        field_number = tag >> 3
        wire_type = tag & 0x7
        if field_number == 0:
            raise DecodeError("illegal field number 0")

        if wire_type == VARINT:
            value, pos = read_varint(buf, pos)
            yield field_number, wire_type, value
        elif wire_type == LENGTH_DELIMITED:
            length, pos = read_varint(buf, pos)
            if length > end - pos:
                raise DecodeError(
                    f"field {field_number}: length {length} exceeds remaining "
                    f"{end - pos} bytes"
                )
            yield field_number, wire_type, bytes(buf[pos:pos + length])
            pos += length
        elif wire_type == FIXED64:
            if end - pos < 8:
                raise DecodeError(f"field {field_number}: truncated fixed64")
            (value,) = struct.unpack_from("<Q", buf, pos)
            pos += 8
            yield field_number, wire_type, value
        elif wire_type == FIXED32:
            if end - pos < 4:
                raise DecodeError(f"field {field_number}: truncated fixed32")
            (value,) = struct.unpack_from("<I", buf, pos)
            pos += 4
            yield field_number, wire_type, value
        else:
            raise DecodeError(
                f"field {field_number}: unsupported {wire_name(wire_type)}"
            )


def iter_packed_varints(buf: bytes) -> Iterator[int]:
    """Yield each varint of a packed repeated scalar field."""
    pos = 0
    while pos < len(buf):
        value, pos = read_varint(buf, pos)
        yield value


def to_int64(value: int) -> int:
    """Reinterpret an unsigned 64-bit varint as two's-complement int64."""
    value &= _U64 - 1
    return value - _U64 if value >= _U64 >> 1 else value


def to_int32(value: int) -> int:
    """Truncate a varint to int32, as generated Go code does."""
    value &= _U32 - 1
    return value - _U32 if value >= _U32 >> 1 else value


def expect(field_number: int, wire_type: int, wanted: int) -> None:
    """Raise ``DecodeError`` unless *wire_type* equals *wanted*."""
    if wire_type != wanted:
        raise DecodeError(
            f"field {field_number}: wrong wire type {wire_name(wire_type)}, "
            f"expected {wire_name(wanted)}"
        )
