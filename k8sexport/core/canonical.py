"""Canonical text rendering for decoded resources.

A decoded resource is first normalized through canonical JSON (sorted keys,
compact separators) into a plain tree, then dumped as block-style YAML with
sorted keys.  Both steps are pure, so re-exporting an unchanged store
reproduces byte-identical files.
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from k8sexport.core.errors import RenderError

DOCUMENT_SEPARATOR = "---\n"


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact.

    - sorted keys
    - no whitespace separators (",", ":")
    - ensure_ascii=True
    - NaN and infinities rejected
    - UTF-8 encoding
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True, allow_nan=False
    ).encode("utf-8")


def to_tree(value: Any) -> Any:
    """Round-trip *value* through canonical JSON into a plain tree.

    Raises
    ------
    RenderError
        If *value* holds anything JSON cannot represent, or nests too deeply.
    """
    try:
        return json.loads(canonical_json_bytes(value))
    except (TypeError, ValueError) as exc:
        raise RenderError(f"value is not JSON-representable: {exc}") from exc
    except RecursionError as exc:
        raise RenderError("value nests too deeply to render") from exc


def render_yaml(tree: Any) -> str:
    """Dump a plain tree as canonical YAML text.

    Raises
    ------
    RenderError
        If the emitter fails or the tree nests past the interpreter's
        recursion limit.
    """
    try:
        return yaml.safe_dump(
            tree,
            default_flow_style=False,
            sort_keys=True,
            allow_unicode=True,
        )
    except yaml.YAMLError as exc:
        raise RenderError(f"YAML emitter failed: {exc}") from exc
    except RecursionError as exc:
        raise RenderError("tree nests too deeply for the YAML emitter") from exc


def render_type_meta(api_version: str, kind: str) -> str:
    """Render the ``apiVersion``/``kind`` header block.

    Empty fields are left out, mirroring how the body drops empty values.

    Examples
    --------
    >>> print(render_type_meta("v1", "ConfigMap"), end="")
    apiVersion: v1
    kind: ConfigMap
    """
    header = {k: v for k, v in (("apiVersion", api_version), ("kind", kind)) if v}
    return render_yaml(to_tree(header))


def render_body(value: Any) -> str:
    """Render a decoded resource body."""
    return render_yaml(to_tree(value))


def render_document(
    api_version: str,
    kind: str,
    value: Any,
    *,
    separator: bool = False,
) -> str:
    """Render the full output document: optional ``---``, header, body."""
    parts = [
        DOCUMENT_SEPARATOR if separator else "",
        render_type_meta(api_version, kind),
        render_body(value),
    ]
    return "".join(parts)
