"""k8sexport: export an etcd snapshot's Kubernetes resources as YAML files.

Reads a bbolt snapshot of an etcd data directory offline, decodes every
protobuf-encoded resource under ``/registry/`` and writes one canonical
YAML document per key revision:

  - read-only bbolt page walker (no etcd or bbolt runtime needed)
  - etcd ``KeyValue`` and Kubernetes ``runtime.Unknown`` envelope decoding
  - table-driven ``(apiVersion, kind)`` registry over declarative schemas
  - deterministic YAML output (sorted keys, stable across re-runs)
"""

__version__ = "0.1.0"
__description__ = "Export Kubernetes resources from an etcd bbolt snapshot as YAML"

from k8sexport.catalog import ResourceRegistry, ResourceType, default_registry
from k8sexport.core.exporter import ResourceExporter, export_snapshot
from k8sexport.models import ExportConfig, ExportReport

__all__ = [
    "ExportConfig",
    "ExportReport",
    "ResourceExporter",
    "ResourceRegistry",
    "ResourceType",
    "default_registry",
    "export_snapshot",
    "__version__",
]
