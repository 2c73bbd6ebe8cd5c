from __future__ import annotations

from ..models.import_result import ImportResult

"""SUMMARY line rendering.

Format:
SUMMARY source={label} status={done|failed} header_row={n|-} rows={scanned}
records={n} skipped={n} empty={n} vehicles={n} elapsed_sec={s}
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation for very small values
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line of one import run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> from roster_import.models.import_result import ImportStage
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> r = ImportResult(stage=ImportStage.DONE, source_label="roster.csv",
        ...                  start_time=t, end_time=t, elapsed_seconds=2.0,
        ...                  header_row_index=0, rows_scanned=10, skipped_rows=1)
        >>> render_summary_line(r)
        'SUMMARY source=roster.csv status=done header_row=1 rows=10 records=0 skipped=1 empty=0 vehicles=0 elapsed_sec=2'
    """
    header_row = "-" if result.header_row_index is None else str(result.header_row_index + 1)
    return (
        f"SUMMARY source={result.source_label} "
        f"status={result.stage.value} "
        f"header_row={header_row} "
        f"rows={result.rows_scanned} "
        f"records={len(result.records)} "
        f"skipped={result.skipped_rows} "
        f"empty={result.empty_rows} "
        f"vehicles={result.vehicle_count} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
