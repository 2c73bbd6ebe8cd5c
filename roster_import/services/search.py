from __future__ import annotations

from collections.abc import Iterable

from ..models.records import PersonRecord

"""Substring search over the stored roster (name, RUT, email, plates)."""

__all__ = [
    "search_records",
]


def _matches(record: PersonRecord, q: str) -> bool:
    if q in record.name.lower():
        return True
    # RUTs are typed with or without thousands dots
    if q.replace(".", "") in record.rut.lower().replace(".", ""):
        return True
    if q in record.email.lower():
        return True
    return any(q in v.plate.lower() for v in record.vehicles)


def search_records(records: Iterable[PersonRecord], query: str) -> list[PersonRecord]:
    q = query.strip().lower()
    if not q:
        return list(records)
    return [r for r in records if _matches(r, q)]
