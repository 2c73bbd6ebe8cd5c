"""Domain models for the roster import tool.

This package contains the value types shared by the import pipeline: field
keys, import configuration, person/vehicle records and run results.
"""

from .config_models import ImportConfig, parse_column_index
from .error_record import ErrorRecord
from .field_key import DEFAULT_KEYWORDS, VEHICLE_SLOT_COUNT, FieldKey, parse_keywords
from .import_result import ExtractionResult, ImportResult, ImportStage, SkippedRow
from .records import PersonRecord, Vehicle

__all__ = [
    # Configuration models
    "ImportConfig",
    "FieldKey",
    "DEFAULT_KEYWORDS",
    "VEHICLE_SLOT_COUNT",
    "parse_keywords",
    "parse_column_index",
    # Domain records
    "PersonRecord",
    "Vehicle",
    # Processing models
    "ExtractionResult",
    "ImportResult",
    "ImportStage",
    "SkippedRow",
    "ErrorRecord",
]
