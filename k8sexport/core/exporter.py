"""Export driver — walks the store and writes one YAML file per resource.

Per record the driver runs a fixed sequence::

    decode entry -> prefix filter -> revision -> unwrap envelope
        -> registry dispatch -> render -> output path -> atomic write

Records are processed strictly one at a time in bolt key order.  A
record-fatal error (bad envelope, bad payload, unrenderable value, unsafe
key) is logged and counted; the walk continues with the next record.  A
run-fatal error (store iteration, output write) propagates to the caller.

Output layout: ``{output}/{logical key segments}-{main}-{sub}.yaml``.
Every revision of every key gets its own file, so the mapping from
``(key, revision)`` to path is injective and files are never overwritten
by a different record.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path

from k8sexport.catalog import ResourceRegistry, default_registry
from k8sexport.core.canonical import render_document
from k8sexport.core.envelope import decode_store_entry, unwrap_resource
from k8sexport.core.errors import (
    DecodeError,
    OutputWriteError,
    RenderError,
    UnsafeKeyError,
)
from k8sexport.core.revision import parse_revision
from k8sexport.models.config import ExportConfig
from k8sexport.models.records import RawRecord, StoreEntry
from k8sexport.models.report import ExportReport, RecordOutcome
from k8sexport.models.revision import Revision
from k8sexport.store.bolt import BoltSnapshot

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".yaml"

_UNSAFE_SEGMENTS = frozenset({"", ".", ".."})
_DEFAULT_FILE_MODE = 0o666


class ExportState(str, Enum):
    """Lifecycle of one ``ResourceExporter`` run."""

    IDLE = "idle"
    SCANNING = "scanning"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Output paths
# ---------------------------------------------------------------------------


def derive_output_path(output_root: Path, logical_key: str, revision: Revision) -> Path:
    """Map a logical key and revision to a file under *output_root*.

    The key's ``/``-separated segments become nested directories; the last
    segment gets the revision suffix and ``.yaml``.

    Raises
    ------
    UnsafeKeyError
        If the key is not absolute, contains a NUL byte, or has an empty,
        ``.`` or ``..`` segment.  Such keys could escape *output_root* or
        share a path with another key.

    Examples
    --------
    >>> from k8sexport.models.revision import Revision
    >>> derive_output_path(Path("out"), "/registry/configmaps/default/cm1",
    ...                    Revision(main=5, sub=0)).as_posix()
    'out/registry/configmaps/default/cm1-5-0.yaml'
    """
    segments = logical_key[1:].split("/")
    if (
        not logical_key.startswith("/")
        or "\x00" in logical_key
        or any(s in _UNSAFE_SEGMENTS for s in segments)
    ):
        raise UnsafeKeyError(f"key {logical_key!r} does not map to a safe path")
    *parents, leaf = segments
    return output_root.joinpath(*parents, f"{leaf}{revision.suffix}{OUTPUT_SUFFIX}")


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_atomic(path: Path, text: str) -> None:
    """Write *text* to *path* via a temp file in the same directory.

    The destination either keeps its previous content or holds the
    complete new document; a partial file is never visible.  The file
    gets the usual ``0o666`` minus the process umask, not the owner-only
    mode of the temp file.

    Raises
    ------
    OutputWriteError
        If the directory or file cannot be created or written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(text)
            os.chmod(tmp_name, _DEFAULT_FILE_MODE & ~_current_umask())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise OutputWriteError(f"cannot write {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


class ResourceExporter:
    """Turns a stream of raw bolt records into YAML files.

    Parameters
    ----------
    config:
        The run configuration.
    registry:
        Type table used for dispatch.  Defaults to the built-in catalog.
    notify:
        Called with the ``Unknown <apiVersion>/<kind>`` line for every
        record whose type is not registered.  The CLI passes
        ``typer.echo`` so the line lands on stdout.
    """

    def __init__(
        self,
        config: ExportConfig,
        registry: ResourceRegistry | None = None,
        notify: Callable[[str], None] = print,
    ) -> None:
        self._config = config
        self._registry = default_registry() if registry is None else registry
        self._notify = notify
        self.state = ExportState.IDLE

    @property
    def config(self) -> ExportConfig:
        return self._config

    def run(self, records: Iterable[RawRecord]) -> ExportReport:
        """Process *records* in order and return the run report.

        Raises
        ------
        StoreIterationError
            Propagated from *records* if the store walk fails.
        OutputWriteError
            If a decoded resource cannot be written.
        """
        report = ExportReport()
        self.state = ExportState.SCANNING
        try:
            for record in records:
                self.state = ExportState.PROCESSING
                report.record(self._process(record, report))
                self.state = ExportState.SCANNING
        except Exception:
            self.state = ExportState.FAILED
            raise
        self.state = ExportState.DONE
        logger.info("Export finished: %s", report.summary())
        return report

    def _process(self, record: RawRecord, report: ExportReport) -> RecordOutcome:
        label = f"rev-key {record.key.hex()}"
        try:
            entry = decode_store_entry(record.value)
            label = entry.logical_key
            return self._export_entry(record, entry, report)
        except (DecodeError, RenderError, UnsafeKeyError) as exc:
            logger.warning(
                "Skipping %s: %s: %s",
                label,
                type(exc).__name__,
                exc,
            )
            return RecordOutcome.FAILED

    def _export_entry(
        self, record: RawRecord, entry: StoreEntry, report: ExportReport
    ) -> RecordOutcome:
        logical_key = entry.logical_key
        if not logical_key.startswith(self._config.prefix):
            logger.debug("Key %s is outside %s.", logical_key, self._config.prefix)
            return RecordOutcome.OUTSIDE_PREFIX

        revision = parse_revision(record.key)
        envelope = unwrap_resource(entry)
        if envelope is None:
            logger.debug("Key %s does not hold a protobuf resource.", logical_key)
            return RecordOutcome.NOT_A_RESOURCE

        body = self._registry.decode(envelope.api_version, envelope.kind, envelope.raw)
        if body is None:
            type_name = f"{envelope.api_version}/{envelope.kind}"
            self._notify(f"Unknown {type_name}")
            report.unknown_types[type_name] = report.unknown_types.get(type_name, 0) + 1
            return RecordOutcome.UNKNOWN_TYPE

        text = render_document(
            envelope.api_version,
            envelope.kind,
            body,
            separator=self._config.document_separator,
        )
        path = derive_output_path(self._config.output_path, logical_key, revision)
        write_atomic(path, text)
        report.written_paths.append(path)
        logger.debug("Wrote %s%s to %s.", logical_key, revision.suffix, path)
        return RecordOutcome.WRITTEN


def export_snapshot(
    config: ExportConfig,
    registry: ResourceRegistry | None = None,
    notify: Callable[[str], None] = print,
) -> ExportReport:
    """Open ``config.db_path`` and export every resource in its bucket.

    Raises
    ------
    StoreOpenError, StoreIterationError, OutputWriteError
        Run-fatal failures; see ``k8sexport.core.errors``.
    """
    exporter = ResourceExporter(config, registry=registry, notify=notify)
    with BoltSnapshot.open(config.db_path) as snapshot:
        return exporter.run(snapshot.iter_bucket(config.bucket))
