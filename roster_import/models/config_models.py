from __future__ import annotations

from dataclasses import dataclass, field, replace

from .field_key import DEFAULT_KEYWORDS, FieldKey, parse_keywords

"""Import configuration model.

ImportConfig is the user-editable state that survives between sessions: which
spreadsheet to read, where its header row is, manual column assignments and the
keyword groups used to guess columns. It is a frozen value; every edit returns
a new instance which the caller persists (see config.loader.save_config).
"""

__all__ = [
    "ImportConfig",
    "parse_column_index",
]


def parse_column_index(raw: str | int | None) -> int | None:
    """Parse a manual column assignment.

    Returns the index when ``raw`` is a non-negative integer (or its text),
    ``None`` for blank or unparsable values.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw >= 0 else None
    text = str(raw).strip()
    if not text.isdigit():
        return None
    return int(text)


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object of the import pipeline."""
    source_url: str = ""
    header_row_number: int = 1  # 1-based, as the user sees it in the sheet
    # FieldKey -> column index as typed by the user ("" / missing = unmapped)
    column_mapping: dict[FieldKey, str] = field(default_factory=dict)
    cached_header_labels: tuple[str, ...] = ()
    keyword_groups: dict[FieldKey, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_KEYWORDS)
    )

    @property
    def has_manual_mapping(self) -> bool:
        """True once the user saved at least one non-blank column assignment."""
        return any(str(v).strip() for v in self.column_mapping.values())

    def keywords(self, key: FieldKey) -> tuple[str, ...]:
        return self.keyword_groups.get(key, DEFAULT_KEYWORDS.get(key, ()))

    # Edits: URL and header row changes invalidate the cached labels because
    # they no longer describe the same row.

    def with_source_url(self, url: str) -> ImportConfig:
        url = url.strip()
        if url == self.source_url:
            return self
        return replace(self, source_url=url, cached_header_labels=())

    def with_header_row(self, number: int) -> ImportConfig:
        if number < 1:
            raise ValueError(f"header row number must be >= 1 (got {number})")
        if number == self.header_row_number:
            return self
        return replace(self, header_row_number=number, cached_header_labels=())

    def with_column(self, key: FieldKey, raw: str | int | None) -> ImportConfig:
        mapping = dict(self.column_mapping)
        text = "" if raw is None else str(raw).strip()
        if text and parse_column_index(text) is None:
            raise ValueError(f"column index must be a non-negative integer (got '{raw}')")
        if text:
            mapping[key] = text
        else:
            mapping.pop(key, None)
        return replace(self, column_mapping=mapping)

    def with_keywords(self, key: FieldKey, text: str) -> ImportConfig:
        groups = dict(self.keyword_groups)
        groups[key] = parse_keywords(text)
        return replace(self, keyword_groups=groups)

    def with_discovered_header(self, row_index: int, labels: list[str]) -> ImportConfig:
        return replace(
            self,
            header_row_number=row_index + 1,
            cached_header_labels=tuple(labels),
        )
