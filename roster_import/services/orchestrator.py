from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

import httpx

from ..errors import RosterImportError
from ..excel.header import HeaderLocation, discover_header, locate_fixed
from ..excel.reader import RawGrid
from ..excel.source import Source, resolve_source
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import ImportConfig
from ..models.field_key import FieldKey
from ..models.import_result import ImportResult, ImportStage
from ..store.records import RecordStore, format_last_sync
from .column_mapper import ColumnMapper
from .extractor import extract_records
from .progress import StageIndicator

"""Import orchestration.

One run walks the stages
    FETCHING -> HEADER_RESOLVING -> MAPPING -> ROW_SCANNING -> DONE
and ends in FAILED as soon as a stage raises a classified error. Only the
network fetch suspends; everything after the bytes arrive is synchronous.

The record store is written once, at DONE. Failed runs never touch it.
"""

__all__ = [
    "locate_header",
    "run_import",
]

logger = logging.getLogger(__name__)


def locate_header(
    grid: RawGrid,
    config: ImportConfig,
    *,
    discover: bool = False,
) -> tuple[HeaderLocation, bool]:
    """Pick the header row; returns (location, discovered).

    Discovery only runs when asked for and no labels were cached by an
    earlier discovery; otherwise the configured row number is used.
    """
    if discover and not config.cached_header_labels:
        return discover_header(grid, config), True
    return locate_fixed(grid, config.header_row_number), False


class _Run:
    """Mutable bookkeeping for one run (stage + timings)."""

    def __init__(self, source_label: str) -> None:
        self.source_label = source_label
        self.stage = ImportStage.FETCHING
        self.start_time = datetime.now(UTC)
        self.indicator = StageIndicator(source_label)

    def enter(self, stage: ImportStage) -> None:
        self.stage = stage
        logger.debug("stage=%s source=%s", stage.value, self.source_label)
        self.indicator.start_stage(stage.value)

    def result(self, stage: ImportStage, **kwargs) -> ImportResult:
        end_time = datetime.now(UTC)
        return ImportResult(
            stage=stage,
            source_label=self.source_label,
            start_time=self.start_time,
            end_time=end_time,
            elapsed_seconds=(end_time - self.start_time).total_seconds(),
            **kwargs,
        )


async def run_import(
    config: ImportConfig,
    source: Source,
    *,
    client: httpx.AsyncClient | None = None,
    store: RecordStore | None = None,
    save_config: Callable[[ImportConfig], None] | None = None,
    discover: bool = False,
    id_factory: Callable[[], str] | None = None,
    error_log: ErrorLogBuffer | None = None,
    timeout: float = 30.0,
) -> ImportResult:
    """Run one import of ``source`` with ``config``.

    Args:
        config: current import configuration (not modified)
        source: UrlSource or FileSource
        client: HTTP client for URL sources (one is created when omitted)
        store: record store replaced on success (None = dry run)
        save_config: called with the updated config after a header discovery
        discover: allow heuristic header discovery when no labels are cached
        id_factory: generator for missing record ids
        error_log: buffer receiving skipped rows / run failures (flushed here)
        timeout: HTTP timeout in seconds when ``client`` is omitted

    Returns:
        ImportResult with stage DONE, or FAILED with error_kind/error set
    """
    run = _Run(source.label)
    log = error_log if error_log is not None else ErrorLogBuffer()
    header: HeaderLocation | None = None
    columns: dict[FieldKey, int] = {}

    try:
        run.enter(ImportStage.FETCHING)
        grid = await resolve_source(source, client, timeout=timeout)
        run.indicator.finish_stage(True, f"{len(grid)} rows")

        run.enter(ImportStage.HEADER_RESOLVING)
        header, discovered = locate_header(grid, config, discover=discover)
        run.indicator.finish_stage(True, f"row {header.row_number}")
        if discovered:
            logger.info("header discovered at row %d: %s", header.row_number, header.labels)
            config = config.with_discovered_header(header.row_index, header.labels)
            if save_config is not None:
                save_config(config)

        run.enter(ImportStage.MAPPING)
        columns = ColumnMapper(config, header.labels).resolve_all()
        run.indicator.finish_stage(True, f"{len(columns)} columns")

        run.enter(ImportStage.ROW_SCANNING)
        extraction = extract_records(grid, header.row_index, columns, id_factory=id_factory)
        run.indicator.finish_stage(True, f"{len(extraction.records)} records")
    except RosterImportError as e:
        run.indicator.finish_stage(False)
        logger.error("import failed stage=%s kind=%s: %s", run.stage.value, e.kind, e)
        log.append(ErrorRecord.create(run.source_label, -1, e.kind, str(e)))
        _flush(log)
        return run.result(
            ImportStage.FAILED,
            header_row_index=header.row_index if header else None,
            header_labels=tuple(header.labels) if header else (),
            columns=columns,
            error_kind=e.kind,
            error=str(e),
            failed_stage=run.stage,
        )

    if extraction.skipped:
        logger.warning("%d rows skipped (no name)", extraction.skipped_rows)
        log.add_skipped_rows(run.source_label, extraction.skipped)

    if store is not None:
        store.replace(extraction.records, format_last_sync())
    _flush(log)

    return run.result(
        ImportStage.DONE,
        records=extraction.records,
        header_row_index=header.row_index,
        header_labels=tuple(header.labels),
        columns=columns,
        rows_scanned=extraction.rows_scanned,
        empty_rows=extraction.empty_rows,
        skipped_rows=extraction.skipped_rows,
    )


def _flush(log: ErrorLogBuffer) -> None:
    try:
        path = log.flush()
    except OSError as e:
        # error log failures do not fail the run
        logger.warning("error log could not be written: %s", e)
        return
    if path is not None:
        logger.info("error log: %s", path)
