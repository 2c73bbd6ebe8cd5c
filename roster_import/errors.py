from __future__ import annotations

"""Classified import errors.

Every failure of an import run is raised as one of these kinds. The ``kind``
attribute (UPPER_SNAKE) is what ends up in the error log and in the run
result, so callers can branch on it without importing each class.
"""

__all__ = [
    "RosterImportError",
    "InvalidSourceUrl",
    "SourceUnreachable",
    "UnsupportedFileType",
    "HeaderRowOutOfRange",
    "HeaderNotFound",
    "MissingRequiredColumn",
    "EmptyResultSet",
]


class RosterImportError(Exception):
    """Base class for import failures that are reported to the user."""

    kind = "IMPORT_ERROR"


class InvalidSourceUrl(RosterImportError):
    """URL does not contain a recognizable spreadsheet identifier."""

    kind = "INVALID_SOURCE_URL"


class SourceUnreachable(RosterImportError):
    """Every fetch/decode attempt for a source failed."""

    kind = "SOURCE_UNREACHABLE"

    def __init__(self, message: str, attempts: list[str] | None = None) -> None:
        super().__init__(message)
        self.attempts = attempts or []


class UnsupportedFileType(RosterImportError):
    kind = "UNSUPPORTED_FILE_TYPE"


class HeaderRowOutOfRange(RosterImportError):
    """Configured header row number points past the end of the grid."""

    kind = "HEADER_ROW_OUT_OF_RANGE"


class HeaderNotFound(RosterImportError):
    """Heuristic scan found no header row in the scanned window."""

    kind = "HEADER_NOT_FOUND"


class MissingRequiredColumn(RosterImportError):
    kind = "MISSING_REQUIRED_COLUMN"


class EmptyResultSet(RosterImportError):
    """No data row survived extraction."""

    kind = "EMPTY_RESULT_SET"
