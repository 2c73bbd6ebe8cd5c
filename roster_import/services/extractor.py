from __future__ import annotations

import logging
import secrets
import string
from collections.abc import Callable, Sequence

from ..errors import EmptyResultSet
from ..models.field_key import VEHICLE_SLOT_COUNT, FieldKey, vehicle_slot_keys
from ..models.import_result import ExtractionResult, SkippedRow
from ..models.records import (
    DEFAULT_GENDER,
    DEFAULT_GROUP,
    NO_RUT,
    UNKNOWN_BRAND,
    PersonRecord,
    Vehicle,
)
from .progress import ProgressTracker

"""Record extraction: data rows -> PersonRecord collection.

Rows strictly below the header are read through the resolved column table.
Blank rows are ignored, rows without a name are skipped and counted, every
other value is trimmed and defaulted. Nothing here raises for a single bad
row; only an empty result aborts the run.
"""

__all__ = [
    "BLANK_NAME",
    "MIN_PLATE_LENGTH",
    "random_id",
    "clean_plate",
    "RowReader",
    "extract_records",
]

logger = logging.getLogger(__name__)

BLANK_NAME = "BLANK_NAME"
MIN_PLATE_LENGTH = 2

_ID_ALPHABET = string.ascii_lowercase + string.digits


def random_id(length: int = 9) -> str:
    """Random lowercase alphanumeric token; stable within a session only."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def clean_plate(raw: str) -> str:
    return raw.strip().upper()


class RowReader:
    """Cell access for one data row through the resolved column table."""

    def __init__(self, row: Sequence[str], columns: dict[FieldKey, int]) -> None:
        self._row = row
        self._columns = columns

    def get(self, key: FieldKey) -> str:
        index = self._columns.get(key)
        if index is None or index >= len(self._row):
            return ""
        value = self._row[index]
        return "" if value is None else str(value).strip()


def _is_empty(row: Sequence[str] | None) -> bool:
    return not row or all(not str(c).strip() for c in row)


def _vehicles(reader: RowReader, slot_count: int) -> tuple[Vehicle, ...]:
    vehicles: list[Vehicle] = []
    for slot in range(1, slot_count + 1):
        plate_key, brand_key, color_key = vehicle_slot_keys(slot)
        plate = clean_plate(reader.get(plate_key))
        if len(plate) < MIN_PLATE_LENGTH:
            continue
        vehicles.append(
            Vehicle(
                plate=plate,
                brand=reader.get(brand_key) or UNKNOWN_BRAND,
                color=reader.get(color_key),
            )
        )
    return tuple(vehicles)


def _person(reader: RowReader, name: str, id_factory: Callable[[], str], slot_count: int) -> PersonRecord:
    raw_id = reader.get(FieldKey.ID)
    # RUT first, internal id second, sentinel last
    rut = reader.get(FieldKey.RUT) or raw_id or NO_RUT
    return PersonRecord(
        id=raw_id or id_factory(),
        name=name,
        rut=rut,
        email=reader.get(FieldKey.EMAIL),
        department=reader.get(FieldKey.DEPARTMENT),
        role=reader.get(FieldKey.ROLE),
        group=reader.get(FieldKey.GROUP) or DEFAULT_GROUP,
        gender=reader.get(FieldKey.GENDER) or DEFAULT_GENDER,
        vehicles=_vehicles(reader, slot_count),
    )


def extract_records(
    grid: Sequence[Sequence[str]],
    header_row_index: int,
    columns: dict[FieldKey, int],
    *,
    id_factory: Callable[[], str] | None = None,
    slot_count: int = VEHICLE_SLOT_COUNT,
    show_progress: bool = True,
) -> ExtractionResult:
    """Extract PersonRecords from the rows below ``header_row_index``.

    Args:
        grid: decoded sheet
        header_row_index: 0-based header row; extraction starts right after it
        columns: FieldKey -> column index (from ColumnMapper.resolve_all)
        id_factory: generator for missing ids (defaults to :func:`random_id`)
        slot_count: number of vehicle slots to read
        show_progress: allow a tqdm bar on TTYs

    Raises:
        EmptyResultSet: no row produced a record
    """
    make_id = id_factory or random_id
    records: list[PersonRecord] = []
    skipped: list[SkippedRow] = []
    empty_rows = 0
    data_rows = grid[header_row_index + 1:]

    tracker = ProgressTracker(len(data_rows), description="Scanning rows", unit="row", enabled=show_progress)
    with tracker:
        for offset, row in enumerate(data_rows):
            tracker.advance()
            row_number = header_row_index + offset + 2  # 1-based sheet row
            if _is_empty(row):
                empty_rows += 1
                continue
            reader = RowReader(row, columns)
            name = reader.get(FieldKey.NAME)
            if not name:
                skipped.append(SkippedRow(row_number=row_number, reason=BLANK_NAME))
                continue
            records.append(_person(reader, name, make_id, slot_count))
        tracker.set_postfix(records=len(records), skipped=len(skipped))

    logger.debug(
        "extracted records=%d rows=%d empty=%d skipped=%d",
        len(records),
        len(data_rows),
        empty_rows,
        len(skipped),
    )
    if not records:
        raise EmptyResultSet(
            f"no records could be extracted below header row {header_row_index + 1} "
            f"({len(data_rows)} rows scanned, {len(skipped)} without name)"
        )
    return ExtractionResult(
        records=tuple(records),
        rows_scanned=len(data_rows),
        empty_rows=empty_rows,
        skipped=tuple(skipped),
    )
