"""Envelope unwrapping and resource magic detection.

A bolt value holds an etcd ``mvccpb.KeyValue``::

    1 key              bytes
    2 create_revision  int64
    3 mod_revision     int64
    4 version          int64
    5 value            bytes
    6 lease            int64

When the API server wrote ``value`` in protobuf, it starts with the
``k8s\\x00`` magic followed by a ``runtime.Unknown``::

    1 typeMeta         TypeMeta { 1 apiVersion, 2 kind }
    2 raw              bytes
    3 contentEncoding  string
    4 contentType      string

Values without the magic (JSON-encoded objects, leases, events written by
other clients) are not resources and are skipped without complaint.
"""

from __future__ import annotations

from k8sexport.core import wire
from k8sexport.core.errors import DecodeError, EnvelopeDecodeError
from k8sexport.models.records import Envelope, StoreEntry

RESOURCE_MAGIC = b"k8s\x00"

_ENTRY_INT_FIELDS = {
    2: "create_revision",
    3: "mod_revision",
    4: "version",
    6: "lease",
}


def _text(field_number: int, data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EnvelopeDecodeError(
            f"field {field_number}: invalid UTF-8 in string"
        ) from exc


def decode_store_entry(value: bytes) -> StoreEntry:
    """Parse a bolt value into a ``StoreEntry``.

    Raises
    ------
    EnvelopeDecodeError
        If *value* is not a well-formed KeyValue message.
    """
    fields: dict[str, object] = {}
    try:
        for number, wire_type, data in wire.iter_fields(value):
            if number in (1, 5):
                wire.expect(number, wire_type, wire.LENGTH_DELIMITED)
                fields["key" if number == 1 else "value"] = data
            elif number in _ENTRY_INT_FIELDS:
                wire.expect(number, wire_type, wire.VARINT)
                fields[_ENTRY_INT_FIELDS[number]] = wire.to_int64(data)
    except DecodeError as exc:
        raise EnvelopeDecodeError(f"malformed store entry: {exc}") from exc
    return StoreEntry(**fields)


def has_resource_magic(data: bytes) -> bool:
    """Return ``True`` iff *data* starts with the ``k8s\\x00`` signature.

    Inputs shorter than the signature are simply not resources.
    """
    return len(data) >= len(RESOURCE_MAGIC) and data[:4] == RESOURCE_MAGIC


def _decode_type_meta(data: bytes) -> dict[str, str]:
    meta: dict[str, str] = {}
    for number, wire_type, value in wire.iter_fields(data):
        if number in (1, 2):
            wire.expect(number, wire_type, wire.LENGTH_DELIMITED)
            meta["api_version" if number == 1 else "kind"] = _text(number, value)
    return meta


def unwrap_envelope(payload: bytes) -> Envelope:
    """Parse the ``runtime.Unknown`` that follows the resource magic.

    *payload* must already have the 4-byte magic stripped.

    Raises
    ------
    EnvelopeDecodeError
        If *payload* is not a well-formed Unknown message.
    """
    fields: dict[str, object] = {}
    try:
        for number, wire_type, value in wire.iter_fields(payload):
            if number == 1:
                wire.expect(number, wire_type, wire.LENGTH_DELIMITED)
                fields.update(_decode_type_meta(value))
            elif number == 2:
                wire.expect(number, wire_type, wire.LENGTH_DELIMITED)
                fields["raw"] = value
            elif number in (3, 4):
                wire.expect(number, wire_type, wire.LENGTH_DELIMITED)
                name = "content_encoding" if number == 3 else "content_type"
                fields[name] = _text(number, value)
    except EnvelopeDecodeError:
        raise
    except DecodeError as exc:
        raise EnvelopeDecodeError(f"malformed resource envelope: {exc}") from exc
    return Envelope(**fields)


def unwrap_resource(entry: StoreEntry) -> Envelope | None:
    """Return the entry's envelope, or ``None`` if it carries no resource."""
    if not has_resource_magic(entry.value):
        return None
    return unwrap_envelope(entry.value[len(RESOURCE_MAGIC):])
