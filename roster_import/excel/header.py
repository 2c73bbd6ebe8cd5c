from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..errors import HeaderNotFound, HeaderRowOutOfRange
from ..models.config_models import ImportConfig
from ..models.field_key import FieldKey
from .reader import RawGrid

"""Header row location.

Fixed-row mode trusts the configured 1-based row number. Discovery mode scans
the top of the grid for a row that looks like roster column titles: it must
carry a name keyword plus an id/rut keyword or a plate keyword.
"""

__all__ = [
    "HEADER_SCAN_LIMIT",
    "HeaderLocation",
    "row_tokens",
    "keyword_groups_match",
    "locate_fixed",
    "discover_header",
]

HEADER_SCAN_LIMIT = 15


@dataclass(frozen=True)
class HeaderLocation:
    row_index: int  # 0-based
    labels: list[str]

    @property
    def row_number(self) -> int:
        return self.row_index + 1


def row_tokens(row: Sequence[str]) -> set[str]:
    """Upper-cased, trimmed, non-blank cell values of a row."""
    return {str(c).strip().upper() for c in row if str(c).strip()}


def keyword_groups_match(row: Sequence[str], groups: Iterable[Iterable[str]]) -> bool:
    """True when every group has at least one keyword equal to a cell of ``row``.

    Each group is an OR of keywords; the groups are AND-ed.
    """
    tokens = row_tokens(row)
    return all(any(k in tokens for k in group) for group in groups)


def _labels(row: Sequence[str]) -> list[str]:
    return [str(c).strip() for c in row]


def locate_fixed(grid: RawGrid, header_row_number: int) -> HeaderLocation:
    """Use the configured (1-based) header row.

    Raises:
        HeaderRowOutOfRange: the grid has no such row
    """
    index = header_row_number - 1
    if index < 0 or index >= len(grid):
        raise HeaderRowOutOfRange(
            f"header row {header_row_number} is out of range (sheet has {len(grid)} rows)"
        )
    return HeaderLocation(row_index=index, labels=_labels(grid[index]))


def discover_header(
    grid: RawGrid,
    config: ImportConfig,
    *,
    limit: int = HEADER_SCAN_LIMIT,
) -> HeaderLocation:
    """Find the first row within ``limit`` rows that looks like the header.

    Raises:
        HeaderNotFound: no row in the window satisfies the keyword rule
    """
    name_group = config.keywords(FieldKey.NAME)
    identity_group = config.keywords(FieldKey.ID) + config.keywords(FieldKey.RUT)
    plate_group = config.keywords(FieldKey.PLATE1)
    for index, row in enumerate(grid[:limit]):
        if not row:
            continue
        if keyword_groups_match(row, [name_group]) and (
            keyword_groups_match(row, [identity_group])
            or keyword_groups_match(row, [plate_group])
        ):
            return HeaderLocation(row_index=index, labels=_labels(row))
    raise HeaderNotFound(
        f"no header row found in the first {min(limit, len(grid))} rows; "
        "check the keyword configuration or set the header row number"
    )
