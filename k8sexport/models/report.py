"""Per-run export report."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class RecordOutcome(str, Enum):
    """What happened to a single record."""

    WRITTEN = "written"
    OUTSIDE_PREFIX = "outside_prefix"
    NOT_A_RESOURCE = "not_a_resource"
    UNKNOWN_TYPE = "unknown_type"
    FAILED = "failed"


class ExportReport(BaseModel):
    """Counters accumulated while walking the store.

    Mutable on purpose: the driver owns one instance per run and bumps it
    as records are processed.
    """

    records_seen: int = 0
    outcomes: dict[RecordOutcome, int] = Field(
        default_factory=lambda: {o: 0 for o in RecordOutcome}
    )
    unknown_types: dict[str, int] = Field(default_factory=dict)
    written_paths: list[Path] = Field(default_factory=list)

    def record(self, outcome: RecordOutcome) -> None:
        self.records_seen += 1
        self.outcomes[outcome] += 1

    def count(self, outcome: RecordOutcome) -> int:
        return self.outcomes.get(outcome, 0)

    @property
    def written(self) -> int:
        return self.count(RecordOutcome.WRITTEN)

    @property
    def failed(self) -> int:
        return self.count(RecordOutcome.FAILED)

    def summary(self) -> str:
        """One-line human summary, e.g. for the CLI footer."""
        return (
            f"{self.records_seen} records: {self.written} written, "
            f"{self.count(RecordOutcome.UNKNOWN_TYPE)} unknown, "
            f"{self.failed} failed, "
            f"{self.count(RecordOutcome.OUTSIDE_PREFIX) + self.count(RecordOutcome.NOT_A_RESOURCE)} skipped"
        )
