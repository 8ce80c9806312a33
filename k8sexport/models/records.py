"""Record-level models: raw bolt pairs, etcd entries and resource envelopes.

Every model here is scoped to the processing of a single record and is
discarded once that record has been written or skipped.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RawRecord(BaseModel):
    """One key/value pair as stored in the bolt ``key`` bucket."""

    model_config = ConfigDict(frozen=True)

    key: bytes
    value: bytes


class StoreEntry(BaseModel):
    """The etcd ``mvccpb.KeyValue`` carried in every bolt value.

    ``key`` is the logical key (``/registry/<resource>/<namespace>/<name>``);
    ``value`` is whatever the API server stored under it.
    """

    model_config = ConfigDict(frozen=True)

    key: bytes = b""
    create_revision: int = 0
    mod_revision: int = 0
    version: int = 0
    value: bytes = b""
    lease: int = 0

    @property
    def logical_key(self) -> str:
        """The key decoded as UTF-8, with undecodable bytes escaped."""
        return self.key.decode("utf-8", errors="backslashreplace")


class Envelope(BaseModel):
    """The Kubernetes ``runtime.Unknown`` wrapper around a typed payload.

    ``(api_version, kind)`` selects at most one decoder from the registry.
    When nothing matches, ``raw`` is never interpreted.
    """

    model_config = ConfigDict(frozen=True)

    api_version: str = ""
    kind: str = ""
    raw: bytes = b""
    content_encoding: str = ""
    content_type: str = ""

    @property
    def type_key(self) -> tuple[str, str]:
        return (self.api_version, self.kind)
