"""k8sexport data models — all Pydantic v2; record models are frozen."""

from k8sexport.models.config import ExportConfig
from k8sexport.models.records import Envelope, RawRecord, StoreEntry
from k8sexport.models.report import ExportReport, RecordOutcome
from k8sexport.models.revision import Revision

__all__ = [
    # records
    "RawRecord",
    "StoreEntry",
    "Envelope",
    "Revision",
    # run
    "ExportConfig",
    "ExportReport",
    "RecordOutcome",
]
