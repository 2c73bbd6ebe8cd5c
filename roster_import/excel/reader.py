from __future__ import annotations

import math
from datetime import date, datetime
from io import BytesIO
from typing import Any

import pandas as pd

from ..errors import SourceUnreachable, UnsupportedFileType

"""Tabular decoding: workbook / delimited bytes -> RawGrid.

A RawGrid is a plain ``list[list[str]]``: no header applied, no NaN, blank
cells as "". Row 0 / column 0 of the grid is always A1 of the sheet, whatever
range metadata the file carries, so indices line up with what the user sees.

pandas does the workbook work (openpyxl for .xlsx, xlrd for .xls). Values are
read with ``keep_default_na=False`` so strings such as "NA" or "NULL" that may
be legitimate plates or names are not turned into NaN.
"""

__all__ = [
    "RawGrid",
    "WORKBOOK_EXTENSIONS",
    "TEXT_EXTENSIONS",
    "cell_to_str",
    "dataframe_to_grid",
    "read_workbook_bytes",
    "read_csv_bytes",
    "decode_text",
    "parse_delimited_text",
    "read_file_source",
]

RawGrid = list[list[str]]

WORKBOOK_EXTENSIONS = frozenset({"xlsx", "xls"})
TEXT_EXTENSIONS = frozenset({"csv", "txt"})


def cell_to_str(value: Any) -> str:
    """Render one cell as text ("" for blanks, ``1234`` for ``1234.0``)."""
    if value is None or value is pd.NaT:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def dataframe_to_grid(df: pd.DataFrame) -> RawGrid:
    """Convert a header-less DataFrame to a RawGrid anchored at (0, 0)."""
    # Index/columns may carry upstream offsets (e.g. a used range starting at
    # B3); relabel so positions and labels agree.
    df = df.reset_index(drop=True)
    df.columns = range(df.shape[1])
    return [[cell_to_str(v) for v in row] for row in df.itertuples(index=False, name=None)]


def read_workbook_bytes(data: bytes, sheet: int | str = 0) -> RawGrid:
    """Decode .xlsx/.xls bytes, returning the grid of one worksheet (first by default).

    Raises:
        SourceUnreachable: bytes are not a readable workbook
    """
    try:
        df = pd.read_excel(
            BytesIO(data),
            sheet_name=sheet,
            header=None,
            dtype=object,
            keep_default_na=False,
        )
    except Exception as e:
        raise SourceUnreachable(f"workbook could not be decoded: {e}") from e
    return dataframe_to_grid(df)


def read_csv_bytes(data: bytes) -> RawGrid:
    """Decode a well-formed (RFC 4180) CSV export, as produced by hosted sheets."""
    head = data.lstrip()[:64].lower()
    if head.startswith(b"<!doctype html") or head.startswith(b"<html"):
        # Private sheets answer 200 with a sign-in page
        raise SourceUnreachable("received an HTML page instead of CSV (is the sheet shared?)")
    try:
        df = pd.read_csv(
            BytesIO(data),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError:
        return []
    except Exception as e:
        raise SourceUnreachable(f"CSV could not be decoded: {e}") from e
    return dataframe_to_grid(df)


def decode_text(data: bytes) -> str:
    """Decode uploaded text as UTF-8 (BOM tolerated), falling back to Latin-1."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _strip_quotes(cell: str) -> str:
    cell = cell.strip()
    if cell.startswith('"'):
        cell = cell[1:]
    if cell.endswith('"'):
        cell = cell[:-1]
    return cell


def parse_delimited_text(text: str) -> RawGrid:
    """Parse uploaded delimited text.

    The separator is ';' when the text contains one anywhere, ',' otherwise
    (spreadsheet apps in Spanish locales export CSV with ';'). Each field is
    trimmed and loses one surrounding pair of double quotes. A trailing empty
    line (final newline) is dropped; inner blank lines are kept as empty rows
    so row numbers keep matching the file.
    """
    separator = ";" if ";" in text else ","
    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    grid: RawGrid = []
    for line in lines:
        stripped = line.strip()
        if not stripped:
            grid.append([])
            continue
        grid.append([_strip_quotes(c) for c in stripped.split(separator)])
    return grid


def _normalize_extension(extension: str) -> str:
    return extension.strip().lower().lstrip(".")


def read_file_source(data: bytes, extension: str) -> RawGrid:
    """Decode uploaded file bytes by extension (xlsx, xls, csv, txt).

    Raises:
        UnsupportedFileType: extension is none of the above
        SourceUnreachable: workbook bytes cannot be decoded
    """
    ext = _normalize_extension(extension)
    if ext in WORKBOOK_EXTENSIONS:
        return read_workbook_bytes(data)
    if ext in TEXT_EXTENSIONS:
        return parse_delimited_text(decode_text(data))
    raise UnsupportedFileType(
        f"unsupported file type '.{ext}' (expected one of: xlsx, xls, csv, txt)"
    )
