from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path

from roster_import.excel.source import FileSource
from roster_import.logging.error_log import ErrorLogBuffer
from roster_import.models.config_models import ImportConfig
from roster_import.services.orchestrator import run_import

"""Error log lines: one JSON object per line with a fixed key set."""

KEYS = {"timestamp", "source", "row", "error_type", "message"}
TS = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


def _lines(logs: Path) -> list[dict]:
    files = list(logs.glob("errors-*.log"))
    assert len(files) == 1
    return [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]


def test_blank_name_rows_schema(tmp_path: Path, make_csv):
    rows = [["NOMBRE", "RUT"], ["Ana", "1"], ["", "2"], ["Luis", "3"], ["", "4"]]
    source = FileSource(data=make_csv(rows), extension="csv", name="nomina.csv")
    asyncio.run(run_import(ImportConfig(), source, error_log=ErrorLogBuffer(tmp_path)))
    entries = _lines(tmp_path)
    assert [e["row"] for e in entries] == [3, 5]
    for e in entries:
        assert set(e) == KEYS
        assert e["source"] == "nomina.csv"
        assert e["error_type"] == "BLANK_NAME"
        assert TS.match(e["timestamp"])


def test_run_failure_schema(tmp_path: Path, make_csv):
    source = FileSource(data=make_csv([["RUT"], ["1"]]), extension="csv", name="nomina.csv")
    asyncio.run(run_import(ImportConfig(), source, error_log=ErrorLogBuffer(tmp_path)))
    (entry,) = _lines(tmp_path)
    assert entry["row"] == -1
    assert entry["error_type"] == "MISSING_REQUIRED_COLUMN"
    assert entry["message"]
