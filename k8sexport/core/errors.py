"""Error taxonomy for the export pipeline.

Two scopes matter to the driver:

* **Run-fatal** — ``ConfigError``, ``StoreError`` subclasses and
  ``OutputWriteError``.  The run stops and the CLI exits non-zero.
* **Record-fatal** — ``DecodeError`` subclasses, ``RenderError`` and
  ``UnsafeKeyError``.  The record is reported and skipped; the walk goes on.

An unregistered ``(apiVersion, kind)`` pair is not an error at all: the
registry returns ``None`` and the driver prints a diagnostic.
"""

from __future__ import annotations


class ExportError(RuntimeError):
    """Base class for every error raised by k8sexport."""


class ConfigError(ExportError):
    """Raised when a required parameter is missing or invalid."""


# ---------------------------------------------------------------------------
# Store (run-fatal)
# ---------------------------------------------------------------------------


class StoreError(ExportError):
    """Base class for failures reading the bbolt snapshot."""


class StoreOpenError(StoreError):
    """Raised when the snapshot file cannot be opened or has no valid meta page."""


class StoreIterationError(StoreError):
    """Raised when a page is corrupt or the requested bucket does not exist."""


# ---------------------------------------------------------------------------
# Record decoding (record-fatal)
# ---------------------------------------------------------------------------


class DecodeError(ExportError):
    """Raised when record bytes do not conform to their wire schema."""


class RevisionKeyError(DecodeError):
    """Raised when a bolt key is too short to hold a revision."""


class EnvelopeDecodeError(DecodeError):
    """Raised when the etcd KeyValue or runtime.Unknown frame is malformed."""


class PayloadDecodeError(DecodeError):
    """Raised when a typed payload does not parse against its matched schema."""


class RenderError(ExportError):
    """Raised when a decoded value cannot be rendered to canonical text."""


class UnsafeKeyError(ExportError):
    """Raised when a logical key cannot be mapped to a path under the output root."""


# ---------------------------------------------------------------------------
# Output (run-fatal)
# ---------------------------------------------------------------------------


class OutputWriteError(ExportError):
    """Raised when an output directory or file cannot be created or written."""
