"""Persistence of the imported roster."""

from .records import RecordStore, RecordStoreError, StoredRecords
from .sample_data import SAMPLE_RECORDS

__all__ = [
    "RecordStore",
    "RecordStoreError",
    "StoredRecords",
    "SAMPLE_RECORDS",
]
