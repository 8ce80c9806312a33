"""Resource registry — dispatches ``(apiVersion, kind)`` to a typed decoder.

The registry is a static table keyed by the exact ``(apiVersion, kind)``
pair.  Matching is case-sensitive with no normalization and no version
ranges: ``apps/v1`` and ``extensions/v1beta1`` are unrelated entries even
when they describe the same kind.

A lookup miss is not an error — snapshots routinely hold types newer or
older than any catalog — so ``decode`` returns ``None`` and leaves the
diagnostic to the caller.  A payload that fails to parse against a
matched schema raises ``PayloadDecodeError``.

Adding a type is a pure table addition: construct a ``ResourceType`` and
include it in the entries passed to ``ResourceRegistry``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from k8sexport.catalog.schema import MessageSpec, decode_message

logger = logging.getLogger(__name__)

TypeKey = tuple[str, str]


# ---------------------------------------------------------------------------
# Table entry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResourceType:
    """One registered ``(apiVersion, kind)`` and the schema that decodes it.

    Examples
    --------
    >>> from k8sexport.catalog.core_v1 import CONFIG_MAP
    >>> ResourceType("v1", "ConfigMap", CONFIG_MAP).decode(b"")
    {}
    """

    api_version: str
    kind: str
    schema: MessageSpec

    @property
    def key(self) -> TypeKey:
        return (self.api_version, self.kind)

    def decode(self, raw: bytes) -> dict[str, Any]:
        """Decode a ``runtime.Unknown`` raw payload into a JSON-shaped tree."""
        return decode_message(self.schema, raw)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ResourceRegistry:
    """Immutable ``(apiVersion, kind) -> ResourceType`` table.

    Parameters
    ----------
    entries:
        The resource types to register.  Built once; there is no method
        that mutates a registry after construction.

    Raises
    ------
    ValueError
        If two entries share the same ``(apiVersion, kind)``.

    Examples
    --------
    >>> from k8sexport.catalog.core_v1 import CONFIG_MAP
    >>> registry = ResourceRegistry([ResourceType("v1", "ConfigMap", CONFIG_MAP)])
    >>> ("v1", "ConfigMap") in registry
    True
    >>> registry.decode("custom/v9", "Widget", b"") is None
    True
    """

    def __init__(self, entries: Iterable[ResourceType] = ()) -> None:
        table: dict[TypeKey, ResourceType] = {}
        for entry in entries:
            if entry.key in table:
                raise ValueError(
                    f"Resource type {entry.api_version}/{entry.kind} is "
                    "registered twice."
                )
            table[entry.key] = entry
        self._table = MappingProxyType(table)
        logger.debug("Built resource registry with %d type(s).", len(table))

    # -- Lookup -------------------------------------------------------------

    def lookup(self, api_version: str, kind: str) -> ResourceType | None:
        """Return the entry for the exact pair, or ``None``."""
        return self._table.get((api_version, kind))

    def decode(self, api_version: str, kind: str, raw: bytes) -> dict[str, Any] | None:
        """Decode *raw* with the matching entry.

        Returns
        -------
        dict | None
            The decoded resource, or ``None`` when no entry matches.

        Raises
        ------
        PayloadDecodeError
            If an entry matches but *raw* does not parse against it.
        """
        entry = self.lookup(api_version, kind)
        if entry is None:
            return None
        return entry.decode(raw)

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[ResourceType]:
        """Iterate entries sorted by ``(apiVersion, kind)``."""
        return iter([self._table[k] for k in sorted(self._table)])

    def keys(self) -> list[TypeKey]:
        return sorted(self._table)

    # -- Derivation ---------------------------------------------------------

    def extend(self, entries: Iterable[ResourceType]) -> ResourceRegistry:
        """Return a new registry holding this one's entries plus *entries*."""
        return ResourceRegistry([*self._table.values(), *entries])

    # -- Stats --------------------------------------------------------------

    def get_stats(self) -> dict[str, Any]:
        """Return summary counts: ``total`` and ``by_api_version``."""
        by_version: dict[str, int] = {}
        for api_version, _ in self._table:
            by_version[api_version] = by_version.get(api_version, 0) + 1
        return {"total": len(self._table), "by_api_version": dict(sorted(by_version.items()))}
