from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..models.records import PersonRecord
from .sample_data import SAMPLE_RECORDS

"""Persistent record store (JSON document).

Holds the last successfully imported roster plus a human readable last-sync
string. The only write operation is a wholesale replace; there is no merge.
"""

__all__ = [
    "DEFAULT_STORE_PATH",
    "LAST_SYNC_FMT",
    "RecordStoreError",
    "StoredRecords",
    "RecordStore",
    "format_last_sync",
]

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path("data/records.json")
LAST_SYNC_FMT = "%d/%m/%Y %H:%M"


class RecordStoreError(Exception):
    pass


@dataclass(frozen=True)
class StoredRecords:
    records: tuple[PersonRecord, ...]
    last_sync: str | None  # None while the sample data is in use


def format_last_sync(moment: datetime | None = None) -> str:
    return (moment or datetime.now()).strftime(LAST_SYNC_FMT)


class RecordStore:
    def __init__(self, path: Path = DEFAULT_STORE_PATH) -> None:
        self.path = path

    def load(self) -> StoredRecords:
        """Load the stored roster; the sample roster when nothing was imported yet.

        Raises:
            RecordStoreError: the file exists but is not a valid store document
        """
        if not self.path.exists():
            return StoredRecords(records=SAMPLE_RECORDS, last_sync=None)
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            records = tuple(PersonRecord.from_dict(r) for r in data["records"])
        except (OSError, json.JSONDecodeError, KeyError, TypeError) as e:
            raise RecordStoreError(f"record store unreadable: {self.path}: {e}") from e
        return StoredRecords(records=records, last_sync=data.get("last_sync"))

    def replace(self, records: tuple[PersonRecord, ...] | list[PersonRecord], last_sync: str | None = None) -> None:
        """Replace the whole roster atomically (temp file + rename)."""
        payload = {
            "last_sync": last_sync if last_sync is not None else format_last_sync(),
            "records": [r.to_dict() for r in records],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise RecordStoreError(f"could not write record store {self.path}: {e}") from e
        logger.debug("record store replaced path=%s records=%d", self.path, len(payload["records"]))

    def reset(self) -> None:
        """Drop imported data; the sample roster is served again."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise RecordStoreError(f"could not remove record store {self.path}: {e}") from e
