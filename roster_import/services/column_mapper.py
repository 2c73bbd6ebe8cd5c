from __future__ import annotations

import logging
from collections.abc import Sequence

from ..errors import MissingRequiredColumn
from ..models.config_models import ImportConfig, parse_column_index
from ..models.field_key import FieldKey

"""Column mapping: FieldKey -> column index.

Resolution order for each key:
  1. manual assignment from ImportConfig.column_mapping (always wins)
  2. keyword search over the header labels, only while no manual mapping has
     been saved (heuristic mode): exact label match first, then substring.
"""

__all__ = [
    "find_column",
    "ColumnMapper",
]

logger = logging.getLogger(__name__)


def find_column(headers: Sequence[str], keywords: Sequence[str]) -> int | None:
    """Index of the first header equal to a keyword, else the first containing one."""
    normalized = [str(h).strip().upper() for h in headers]
    wanted = [k.strip().upper() for k in keywords if k.strip()]
    if not wanted:
        return None
    for index, header in enumerate(normalized):
        if header and header in wanted:
            return index
    for index, header in enumerate(normalized):
        if header and any(k in header for k in wanted):
            return index
    return None


class ColumnMapper:
    """Resolves field keys against one header row."""

    def __init__(self, config: ImportConfig, headers: Sequence[str]) -> None:
        self._config = config
        self._headers = list(headers)
        self.heuristic = not config.has_manual_mapping

    def resolve(self, key: FieldKey) -> int | None:
        manual = parse_column_index(self._config.column_mapping.get(key))
        if manual is not None:
            return manual
        if not self.heuristic:
            return None
        return find_column(self._headers, self._config.keywords(key))

    def resolve_all(self) -> dict[FieldKey, int]:
        """Resolve every key; unmapped keys are left out.

        Raises:
            MissingRequiredColumn: ``name`` could not be resolved
        """
        columns: dict[FieldKey, int] = {}
        for key in FieldKey:
            index = self.resolve(key)
            if index is not None:
                columns[key] = index
        if FieldKey.NAME not in columns:
            how = "manual mapping" if not self.heuristic else "keywords " + ", ".join(
                self._config.keywords(FieldKey.NAME)
            )
            raise MissingRequiredColumn(f"no column found for 'name' (using {how})")
        logger.debug(
            "column mapping mode=%s columns=%s",
            "heuristic" if self.heuristic else "manual",
            {k.value: v for k, v in columns.items()},
        )
        return columns
