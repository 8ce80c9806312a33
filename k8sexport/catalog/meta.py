"""Shared apimachinery shapes: ObjectMeta, Time, Quantity, IntOrString, ...

These are referenced by nearly every resource schema.  The special types
carry render hooks so they come out the way the Kubernetes JSON encoding
prints them rather than as nested objects.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from k8sexport.catalog.schema import (
    MessageSpec,
    boolean,
    int32,
    int64,
    json_bytes,
    message,
    messages,
    string,
    string_map,
    strings,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _timestamp(fields: dict[str, Any], *, micros: bool) -> datetime:
    offset = timedelta(seconds=fields.get("seconds", 0))
    if micros:
        offset += timedelta(microseconds=fields.get("nanos", 0) // 1000)
    return _EPOCH + offset


def render_time(fields: dict[str, Any]) -> str | None:
    """RFC 3339 with second precision; an empty message is the zero time."""
    if not fields:
        return None
    moment = _timestamp(fields, micros=False)
    return moment.replace(tzinfo=None).isoformat(timespec="seconds") + "Z"


def render_micro_time(fields: dict[str, Any]) -> str | None:
    """RFC 3339 with microsecond precision."""
    if not fields:
        return None
    moment = _timestamp(fields, micros=True)
    return moment.replace(tzinfo=None).isoformat(timespec="microseconds") + "Z"


def render_quantity(fields: dict[str, Any]) -> str:
    return fields.get("string") or "0"


def render_int_or_string(fields: dict[str, Any]) -> int | str:
    if fields.get("type", 0) == 1:
        return fields.get("strVal", "")
    return fields.get("intVal", 0)


def render_fields_v1(fields: dict[str, Any]) -> Any:
    return fields.get("Raw")


TIME = MessageSpec.of(
    "Time",
    int64(1, "seconds", keep_zero=True),
    int32(2, "nanos", keep_zero=True),
    render=render_time,
)

MICRO_TIME = MessageSpec.of(
    "MicroTime",
    int64(1, "seconds", keep_zero=True),
    int32(2, "nanos", keep_zero=True),
    render=render_micro_time,
)

QUANTITY = MessageSpec.of(
    "Quantity",
    string(1, "string"),
    render=render_quantity,
)

INT_OR_STRING = MessageSpec.of(
    "IntOrString",
    int64(1, "type", keep_zero=True),
    int32(2, "intVal", keep_zero=True),
    string(3, "strVal", keep_zero=True),
    render=render_int_or_string,
)

FIELDS_V1 = MessageSpec.of(
    "FieldsV1",
    json_bytes(1, "Raw"),
    render=render_fields_v1,
)

OWNER_REFERENCE = MessageSpec.of(
    "OwnerReference",
    string(1, "kind"),
    string(3, "name"),
    string(4, "uid"),
    string(5, "apiVersion"),
    boolean(6, "controller", keep_zero=True),
    boolean(7, "blockOwnerDeletion", keep_zero=True),
)

MANAGED_FIELDS_ENTRY = MessageSpec.of(
    "ManagedFieldsEntry",
    string(1, "manager"),
    string(2, "operation"),
    string(3, "apiVersion"),
    message(4, "time", TIME),
    string(6, "fieldsType"),
    message(7, "fieldsV1", FIELDS_V1),
    string(8, "subresource"),
)

OBJECT_META = MessageSpec.of(
    "ObjectMeta",
    string(1, "name"),
    string(2, "generateName"),
    string(3, "namespace"),
    string(4, "selfLink"),
    string(5, "uid"),
    string(6, "resourceVersion"),
    int64(7, "generation"),
    message(8, "creationTimestamp", TIME),
    message(9, "deletionTimestamp", TIME),
    int64(10, "deletionGracePeriodSeconds", keep_zero=True),
    string_map(11, "labels"),
    string_map(12, "annotations"),
    messages(13, "ownerReferences", OWNER_REFERENCE),
    strings(14, "finalizers"),
    messages(17, "managedFields", MANAGED_FIELDS_ENTRY),
)

LABEL_SELECTOR_REQUIREMENT = MessageSpec.of(
    "LabelSelectorRequirement",
    string(1, "key"),
    string(2, "operator"),
    strings(3, "values"),
)

LABEL_SELECTOR = MessageSpec.of(
    "LabelSelector",
    string_map(1, "matchLabels"),
    messages(2, "matchExpressions", LABEL_SELECTOR_REQUIREMENT),
)
