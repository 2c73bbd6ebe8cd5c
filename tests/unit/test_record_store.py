from __future__ import annotations
import json
from datetime import datetime
from pathlib import Path

import pytest

from roster_import.models.records import PersonRecord, Vehicle
from roster_import.store import SAMPLE_RECORDS, RecordStore, RecordStoreError
from roster_import.store.records import format_last_sync

RECORDS = (
    PersonRecord(id="a1", name="Ana Ruiz", rut="1-9", email="ana@x.cl", vehicles=(Vehicle("AB1234", "Kia", "Rojo"),)),
    PersonRecord(id="b2", name="Luis Soto"),
)


def test_missing_store_serves_sample_data(tmp_path: Path):
    stored = RecordStore(tmp_path / "records.json").load()
    assert stored.records == SAMPLE_RECORDS
    assert stored.last_sync is None


def test_sample_data_respects_record_invariants():
    assert len(SAMPLE_RECORDS) == 6
    for r in SAMPLE_RECORDS:
        assert r.name
        assert all(len(v.plate) >= 2 and v.plate == v.plate.upper() for v in r.vehicles)


def test_replace_then_load(tmp_path: Path):
    store = RecordStore(tmp_path / "data" / "records.json")
    store.replace(RECORDS, "01/02/2024 09:30")
    stored = store.load()
    assert stored.records == RECORDS
    assert stored.last_sync == "01/02/2024 09:30"
    assert not (tmp_path / "data" / "records.json.tmp").exists()


def test_replace_is_wholesale(tmp_path: Path):
    store = RecordStore(tmp_path / "records.json")
    store.replace(RECORDS)
    store.replace(RECORDS[1:])
    assert store.load().records == RECORDS[1:]


def test_replace_default_last_sync(tmp_path: Path):
    store = RecordStore(tmp_path / "records.json")
    store.replace(RECORDS)
    last_sync = store.load().last_sync
    datetime.strptime(last_sync, "%d/%m/%Y %H:%M")


def test_reset_restores_sample(tmp_path: Path):
    store = RecordStore(tmp_path / "records.json")
    store.replace(RECORDS)
    store.reset()
    assert store.load().records == SAMPLE_RECORDS
    store.reset()  # no file: still fine


def test_corrupt_store_raises(tmp_path: Path):
    p = tmp_path / "records.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(RecordStoreError):
        RecordStore(p).load()
    p.write_text(json.dumps({"last_sync": None}), encoding="utf-8")
    with pytest.raises(RecordStoreError):
        RecordStore(p).load()


def test_format_last_sync():
    assert format_last_sync(datetime(2024, 3, 5, 7, 4)) == "05/03/2024 07:04"
