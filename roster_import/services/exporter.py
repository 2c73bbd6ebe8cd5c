from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from pathlib import Path

import pandas as pd

from ..models.field_key import VEHICLE_SLOT_COUNT, FieldKey
from ..models.records import PersonRecord

"""Roster export: records -> grid -> .xlsx / .csv.

The header labels are the first keyword of each default keyword group, so an
exported file re-imports with header row 1 and no manual mapping. The .csv
form is unquoted ';' text, the dialect the upload parser reads back.
"""

__all__ = [
    "CSV_FORBIDDEN",
    "EXPORT_COLUMNS",
    "records_to_grid",
    "write_export",
]

# characters an unquoted ';' field cannot carry
CSV_FORBIDDEN = (";", '"', "\n", "\r")

# (field, header label) in export order
EXPORT_COLUMNS: tuple[tuple[FieldKey, str], ...] = (
    (FieldKey.ID, "ID"),
    (FieldKey.NAME, "NOMBRE"),
    (FieldKey.RUT, "RUT"),
    (FieldKey.EMAIL, "CORREO"),
    (FieldKey.DEPARTMENT, "DEPARTAMENTO"),
    (FieldKey.ROLE, "CARGO"),
    (FieldKey.GROUP, "GRUPO"),
    (FieldKey.GENDER, "GENERO"),
    (FieldKey.PLATE1, "PATENTE 1"),
    (FieldKey.BRAND1, "MARCA 1"),
    (FieldKey.COLOR1, "COLOR VEHICULO"),
    (FieldKey.PLATE2, "PATENTE 2"),
    (FieldKey.BRAND2, "MARCA 2"),
    (FieldKey.COLOR2, "COLOR 2"),
    (FieldKey.PLATE3, "PATENTE 3"),
    (FieldKey.BRAND3, "MARCA 3"),
    (FieldKey.COLOR3, "COLOR 3"),
)


def _row(record: PersonRecord) -> list[str]:
    values = {
        FieldKey.ID: record.id,
        FieldKey.NAME: record.name,
        FieldKey.RUT: record.rut,
        FieldKey.EMAIL: record.email,
        FieldKey.DEPARTMENT: record.department,
        FieldKey.ROLE: record.role,
        FieldKey.GROUP: record.group,
        FieldKey.GENDER: record.gender,
    }
    for slot, vehicle in enumerate(record.vehicles[:VEHICLE_SLOT_COUNT], start=1):
        values[FieldKey(f"plate{slot}")] = vehicle.plate
        values[FieldKey(f"brand{slot}")] = vehicle.brand
        values[FieldKey(f"color{slot}")] = vehicle.color
    return [values.get(key, "") for key, _ in EXPORT_COLUMNS]


def records_to_grid(records: Iterable[PersonRecord]) -> list[list[str]]:
    """Header row followed by one row per record."""
    grid = [[label for _, label in EXPORT_COLUMNS]]
    grid.extend(_row(r) for r in records)
    return grid


def _check_csv_safe(records: Sequence[PersonRecord], grid: Sequence[Sequence[str]]) -> None:
    for record, row in zip(records, grid[1:]):
        for (key, _), value in zip(EXPORT_COLUMNS, row):
            bad = [c for c in CSV_FORBIDDEN if c in value]
            if bad:
                raise ValueError(
                    f"record {record.id} ({record.name!r}): {key.value} contains {bad[0]!r}, "
                    "which .csv export cannot represent (use .xlsx)"
                )


def _frame(grid: Sequence[Sequence[str]]) -> pd.DataFrame:
    return pd.DataFrame(grid[1:], columns=list(grid[0]), dtype=str)


def write_export(records: Iterable[PersonRecord], path: Path) -> Path:
    """Write the roster to ``path`` (.xlsx via openpyxl, .csv with ';' separator)."""
    records = list(records)
    grid = records_to_grid(records)
    suffix = path.suffix.lower()
    if suffix in (".csv", ".txt"):
        _check_csv_safe(records, grid)
    df = _frame(grid)
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".xlsx":
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Roster", index=False)
    elif suffix in (".csv", ".txt"):
        df.to_csv(path, sep=";", index=False, encoding="utf-8", quoting=csv.QUOTE_NONE)
    else:
        raise ValueError(f"unsupported export format '{suffix}' (use .xlsx or .csv)")
    return path
