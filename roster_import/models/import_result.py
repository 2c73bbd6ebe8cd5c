from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .field_key import FieldKey
from .records import PersonRecord

"""Run-level result models.

ImportStage mirrors the state machine of one run:
FETCHING -> HEADER_RESOLVING -> MAPPING -> ROW_SCANNING -> DONE | FAILED.
"""

__all__ = [
    "ImportStage",
    "SkippedRow",
    "ExtractionResult",
    "ImportResult",
]


class ImportStage(Enum):
    FETCHING = "fetching"
    HEADER_RESOLVING = "header_resolving"
    MAPPING = "mapping"
    ROW_SCANNING = "row_scanning"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class SkippedRow:
    row_number: int  # 1-based grid row, as shown by the spreadsheet
    reason: str  # UPPER_SNAKE


@dataclass(frozen=True)
class ExtractionResult:
    """Output of the record extractor for one grid."""
    records: tuple[PersonRecord, ...]
    rows_scanned: int
    empty_rows: int
    skipped: tuple[SkippedRow, ...] = ()

    @property
    def skipped_rows(self) -> int:
        return len(self.skipped)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import run (successful or not)."""
    stage: ImportStage
    source_label: str
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    records: tuple[PersonRecord, ...] = ()
    header_row_index: int | None = None
    header_labels: tuple[str, ...] = ()
    columns: dict[FieldKey, int] = field(default_factory=dict)
    rows_scanned: int = 0
    empty_rows: int = 0
    skipped_rows: int = 0
    error_kind: str | None = None  # RosterImportError.kind
    error: str | None = None
    failed_stage: ImportStage | None = None  # stage that raised, when FAILED

    @property
    def ok(self) -> bool:
        return self.stage is ImportStage.DONE

    @property
    def vehicle_count(self) -> int:
        return sum(len(r.vehicles) for r in self.records)
