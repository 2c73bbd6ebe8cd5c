# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from roster_import.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        for var in ("ROSTER_CONFIG", "ROSTER_DATA", "ROSTER_HTTP_TIMEOUT"):
            monkeypatch.delenv(var, raising=False)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_url: https://docs.google.com/spreadsheets/d/abc123/edit#gid=42
header_row_number: 1
column_mapping: {}
cached_header_labels: []
keyword_groups:
  name: [NOMBRE, NAME]
  plate1: "PATENTE, PLATE"
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def roster_rows() -> list[list[str]]:
    """Title row, header at row 2, three people (one without a name)."""
    return [
        ["Listado de personal", "", "", "", ""],
        ["NOMBRE", "RUT", "CORREO", "PATENTE", "MARCA"],
        ["Ana Ruiz", "1-9", "ana@example.com", "ab1234", "Kia"],
        ["", "2-3", "", "XY9999", ""],
        ["Luis Soto", "", "luis@example.com", "", ""],
    ]


@pytest.fixture()
def make_xlsx(tmp_path: Path):
    """Factory: rows -> .xlsx bytes (written with openpyxl, no header/index)."""
    def _make(rows: list[list[object]], name: str = "roster.xlsx") -> bytes:
        p = tmp_path / name
        with pd.ExcelWriter(p, engine="openpyxl") as writer:
            pd.DataFrame(rows).to_excel(writer, sheet_name="Sheet1", header=False, index=False)
        return p.read_bytes()
    return _make


@pytest.fixture()
def make_csv():
    """Factory: rows -> delimited text bytes (UTF-8, trailing newline)."""
    def _make(rows: list[list[str]], sep: str = ";") -> bytes:
        return ("\n".join(sep.join(r) for r in rows) + "\n").encode("utf-8")
    return _make