"""Declarative message schemas and the generic decoder that walks them.

Each Kubernetes type is described once as a ``MessageSpec``: a table of
``FieldSpec`` entries mapping protobuf field numbers to JSON field names and
wire kinds.  ``decode_message`` turns protobuf bytes into the JSON-shaped
tree the API server would serve for the same object:

* zero scalars and empty lists/maps are omitted, unless the field keeps
  zeros (pointer fields upstream, e.g. ``replicas``);
* nested messages present on the wire are kept, even when empty;
* ``bytes`` become base64 strings;
* ``inline`` fields are flattened into their parent;
* a spec's ``render`` hook replaces the decoded dict with a scalar
  (``Time``, ``Quantity``, ``IntOrString`` and friends).

Field numbers a ``MessageSpec`` does not list are skipped.  A known field arriving
with the wrong wire type is a ``PayloadDecodeError``.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, cast

from k8sexport.core import wire
from k8sexport.core.errors import DecodeError, PayloadDecodeError


class Kind(str, Enum):
    """Wire kinds a field can carry."""

    STRING = "string"
    BYTES = "bytes"
    INT32 = "int32"
    INT64 = "int64"
    BOOL = "bool"
    JSON = "json"  # bytes holding an embedded JSON document
    MESSAGE = "message"


_VARINT_KINDS = frozenset({Kind.INT32, Kind.INT64, Kind.BOOL})


@dataclass(frozen=True)
class FieldSpec:
    """One field of a message.

    A field is either a singular value, a repeated value (``repeated``), or
    a ``map<string, kind>`` (``map_value`` set).  ``message`` names the
    nested spec for ``Kind.MESSAGE`` fields and message-valued maps.
    """

    number: int
    name: str
    kind: Kind
    message: MessageSpec | None = None
    repeated: bool = False
    map_value: Kind | None = None
    inline: bool = False
    keep_zero: bool = False

    def __post_init__(self) -> None:
        needs_message = self.kind is Kind.MESSAGE or self.map_value is Kind.MESSAGE
        if needs_message and self.message is None:
            raise ValueError(f"field {self.name!r} needs a message spec")
        if self.inline and self.kind is not Kind.MESSAGE:
            raise ValueError(f"inline field {self.name!r} must be a message")


@dataclass(frozen=True)
class MessageSpec:
    """A message shape: its fields and an optional render hook."""

    name: str
    fields: tuple[FieldSpec, ...]
    render: Callable[[dict[str, Any]], Any] | None = None
    by_number: dict[int, FieldSpec] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        table: dict[int, FieldSpec] = {}
        for f in self.fields:
            if f.number in table:
                raise ValueError(
                    f"{self.name}: field number {f.number} used by both "
                    f"{table[f.number].name!r} and {f.name!r}"
                )
            table[f.number] = f
        object.__setattr__(self, "by_number", table)

    @classmethod
    def of(
        cls,
        name: str,
        *fields: FieldSpec,
        render: Callable[[dict[str, Any]], Any] | None = None,
    ) -> MessageSpec:
        return cls(name=name, fields=tuple(fields), render=render)


# ---------------------------------------------------------------------------
# Table helpers — keep the catalog modules terse
# ---------------------------------------------------------------------------


def string(number: int, name: str, **kw: Any) -> FieldSpec:
    return FieldSpec(number, name, Kind.STRING, **kw)


def strings(number: int, name: str) -> FieldSpec:
    return FieldSpec(number, name, Kind.STRING, repeated=True)


def raw_bytes(number: int, name: str, **kw: Any) -> FieldSpec:
    return FieldSpec(number, name, Kind.BYTES, **kw)


def int32(number: int, name: str, **kw: Any) -> FieldSpec:
    return FieldSpec(number, name, Kind.INT32, **kw)


def int64(number: int, name: str, **kw: Any) -> FieldSpec:
    return FieldSpec(number, name, Kind.INT64, **kw)


def int64s(number: int, name: str) -> FieldSpec:
    return FieldSpec(number, name, Kind.INT64, repeated=True)


def boolean(number: int, name: str, **kw: Any) -> FieldSpec:
    return FieldSpec(number, name, Kind.BOOL, **kw)


def json_bytes(number: int, name: str) -> FieldSpec:
    return FieldSpec(number, name, Kind.JSON, keep_zero=True)


def message(number: int, name: str, spec: MessageSpec) -> FieldSpec:
    return FieldSpec(number, name, Kind.MESSAGE, message=spec)


def messages(number: int, name: str, spec: MessageSpec) -> FieldSpec:
    return FieldSpec(number, name, Kind.MESSAGE, message=spec, repeated=True)


def inline(number: int, spec: MessageSpec) -> FieldSpec:
    return FieldSpec(number, spec.name, Kind.MESSAGE, message=spec, inline=True)


def string_map(number: int, name: str) -> FieldSpec:
    return FieldSpec(number, name, Kind.STRING, map_value=Kind.STRING)


def bytes_map(number: int, name: str) -> FieldSpec:
    return FieldSpec(number, name, Kind.STRING, map_value=Kind.BYTES)


def message_map(number: int, name: str, spec: MessageSpec) -> FieldSpec:
    return FieldSpec(number, name, Kind.STRING, message=spec, map_value=Kind.MESSAGE)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _scalar(kind: Kind, spec: MessageSpec | None, number: int, wire_type: int, value: Any) -> Any:
    if kind in _VARINT_KINDS:
        wire.expect(number, wire_type, wire.VARINT)
        if kind is Kind.INT32:
            return wire.to_int32(value)
        if kind is Kind.INT64:
            return wire.to_int64(value)
        return value != 0

    wire.expect(number, wire_type, wire.LENGTH_DELIMITED)
    if kind is Kind.STRING:
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PayloadDecodeError(f"field {number}: invalid UTF-8") from exc
    if kind is Kind.BYTES:
        return base64.b64encode(value).decode("ascii")
    if kind is Kind.JSON:
        if not value:
            return None
        try:
            return json.loads(value)
        except ValueError as exc:
            raise PayloadDecodeError(f"field {number}: invalid embedded JSON") from exc
        except RecursionError as exc:
            raise PayloadDecodeError(f"field {number}: embedded JSON nests too deeply") from exc
    # FieldSpec guarantees a spec for message-valued fields.
    return decode_message(cast(MessageSpec, spec), value)


def _zero(kind: Kind, spec: MessageSpec | None) -> Any:
    if kind is Kind.MESSAGE:
        return decode_message(cast(MessageSpec, spec), b"")
    return {
        Kind.STRING: "",
        Kind.BYTES: "",
        Kind.INT32: 0,
        Kind.INT64: 0,
        Kind.BOOL: False,
        Kind.JSON: None,
    }[kind]


def _map_entry(f: FieldSpec, wire_type: int, value: Any) -> tuple[str, Any]:
    wire.expect(f.number, wire_type, wire.LENGTH_DELIMITED)
    value_kind = cast(Kind, f.map_value)
    key = ""
    item = None
    have_item = False
    for number, entry_wire, entry_value in wire.iter_fields(value):
        if number == 1:
            key = _scalar(Kind.STRING, None, number, entry_wire, entry_value)
        elif number == 2:
            item = _scalar(value_kind, f.message, number, entry_wire, entry_value)
            have_item = True
    if not have_item:
        item = _zero(value_kind, f.message)
    return key, item


def _merge(old: Any, new: Any) -> Any:
    if isinstance(old, dict) and isinstance(new, dict):
        merged = dict(old)
        for k, v in new.items():
            merged[k] = _merge(merged[k], v) if k in merged else v
        return merged
    return new


def _is_empty(f: FieldSpec, value: Any) -> bool:
    if value is None:
        return True
    if f.repeated or f.map_value is not None:
        return not value
    if f.kind is Kind.MESSAGE or f.keep_zero:
        return False
    return value == "" or value is False or value == 0


def _decode_fields(spec: MessageSpec, buf: bytes) -> dict[str, Any]:
    values: dict[str, Any] = {}
    inlined: dict[str, Any] = {}

    for number, wire_type, value in wire.iter_fields(buf):
        f = spec.by_number.get(number)
        if f is None:
            continue

        if f.map_value is not None:
            key, item = _map_entry(f, wire_type, value)
            values.setdefault(f.name, {})[key] = item
        elif f.repeated:
            if wire_type == wire.LENGTH_DELIMITED and f.kind in _VARINT_KINDS:
                items = [
                    _scalar(f.kind, None, number, wire.VARINT, v)
                    for v in wire.iter_packed_varints(value)
                ]
                values.setdefault(f.name, []).extend(items)
            else:
                item = _scalar(f.kind, f.message, number, wire_type, value)
                values.setdefault(f.name, []).append(item)
        elif f.inline:
            inlined = _merge(inlined, _scalar(f.kind, f.message, number, wire_type, value))
        else:
            item = _scalar(f.kind, f.message, number, wire_type, value)
            values[f.name] = _merge(values[f.name], item) if f.name in values else item

    out: dict[str, Any] = {}
    for f in spec.fields:
        if f.inline or f.name not in values:
            continue
        if _is_empty(f, values[f.name]):
            continue
        out[f.name] = values[f.name]
    out.update(inlined)
    return out


def decode_message(spec: MessageSpec, buf: bytes) -> Any:
    """Decode *buf* against *spec* into a JSON-shaped value.

    Raises
    ------
    PayloadDecodeError
        If *buf* is not valid protobuf, or a known field has the wrong wire
        type, or a render hook rejects the decoded fields.
    """
    try:
        decoded = _decode_fields(spec, buf)
    except PayloadDecodeError:
        raise
    except DecodeError as exc:
        raise PayloadDecodeError(f"{spec.name}: {exc}") from exc

    if spec.render is None:
        return decoded
    try:
        return spec.render(decoded)
    except (ValueError, OverflowError) as exc:
        raise PayloadDecodeError(f"{spec.name}: {exc}") from exc
