from __future__ import annotations
import json
from pathlib import Path

from roster_import.logging.error_log import ErrorLogBuffer, ErrorRecord
from roster_import.models.import_result import SkippedRow

KEYS = {"timestamp", "source", "row", "error_type", "message"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create(
        source="roster.xlsx",
        row=10,
        error_type="BLANK_NAME",
        message="row skipped",
    )
    data = json.loads(rec.to_json_line())
    assert data["source"] == "roster.xlsx"
    assert data["row"] == 10
    assert data["error_type"] == "BLANK_NAME"
    assert "timestamp" in data and data["timestamp"].endswith("Z")
    assert set(data.keys()) == KEYS


def test_error_record_keeps_non_ascii():
    rec = ErrorRecord.create("nómina.csv", -1, "HEADER_NOT_FOUND", "sin encabezado")
    assert "nómina.csv" in rec.to_json_line()


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("roster.csv", -1, "SOURCE_UNREACHABLE", "offline"))
    buf.add_skipped_rows("roster.csv", (SkippedRow(4, "BLANK_NAME"), SkippedRow(9, "BLANK_NAME")))
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent == Path("logs")
    assert path.name.startswith("errors-") and path.suffix == ".log"
    # ファイル内容検証
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 3
    objs = [json.loads(raw) for raw in lines]
    assert all(set(o.keys()) == KEYS for o in objs)
    assert [o["row"] for o in objs] == [-1, 4, 9]
    # flush 後バッファクリア
    assert len(buf) == 0


def test_error_log_buffer_empty_flush_creates_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_error_log_buffer_appends_on_second_flush(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.append(ErrorRecord.create("a", 1, "BLANK_NAME", "row skipped"))
    first = buf.flush()
    buf.append(ErrorRecord.create("a", 2, "BLANK_NAME", "row skipped"))
    second = buf.flush()
    assert first == second
    assert len(first.read_text(encoding="utf-8").splitlines()) == 2
