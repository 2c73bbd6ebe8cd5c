from __future__ import annotations

from enum import Enum

"""FieldKey enum and default keyword groups.

FieldKey is the closed set of semantic attributes a roster column can carry.
Vehicle slot keys exist for slots 1..3; VEHICLE_SLOT_COUNT decides how many of
them the extractor actually reads.
"""

__all__ = [
    "FieldKey",
    "VEHICLE_SLOT_COUNT",
    "MAX_VEHICLE_SLOTS",
    "DEFAULT_KEYWORDS",
    "vehicle_slot_keys",
    "parse_keywords",
]

VEHICLE_SLOT_COUNT = 3


class FieldKey(str, Enum):
    NAME = "name"
    ID = "id"
    GROUP = "group"
    GENDER = "gender"
    EMAIL = "email"
    RUT = "rut"
    DEPARTMENT = "department"
    ROLE = "role"
    PLATE1 = "plate1"
    BRAND1 = "brand1"
    COLOR1 = "color1"
    PLATE2 = "plate2"
    BRAND2 = "brand2"
    COLOR2 = "color2"
    PLATE3 = "plate3"
    BRAND3 = "brand3"
    COLOR3 = "color3"

    @classmethod
    def parse(cls, value: str) -> FieldKey:
        """Look up a key by its value, case-insensitively (``"Plate2"`` -> PLATE2)."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(f"unknown field '{value}' (expected one of: {valid})") from None


# slots the enum defines keys for
MAX_VEHICLE_SLOTS = sum(1 for k in FieldKey if k.value.startswith("plate"))


def vehicle_slot_keys(slot: int) -> tuple[FieldKey, FieldKey, FieldKey]:
    """Return the (plate, brand, color) keys of a 1-based vehicle slot."""
    if not 1 <= slot <= MAX_VEHICLE_SLOTS:
        raise ValueError(f"vehicle slot out of range: {slot}")
    return (
        FieldKey(f"plate{slot}"),
        FieldKey(f"brand{slot}"),
        FieldKey(f"color{slot}"),
    )


# Spanish labels first (the rosters this was built for), English alternatives after.
DEFAULT_KEYWORDS: dict[FieldKey, tuple[str, ...]] = {
    FieldKey.NAME: ("NOMBRE", "NAME", "FULL NAME"),
    FieldKey.ID: ("ID", "INTERNAL ID"),
    FieldKey.GROUP: ("GRUPO", "GROUP"),
    FieldKey.GENDER: ("GENERO", "GÉNERO", "GENDER"),
    FieldKey.EMAIL: ("EMAIL", "CORREO", "MAIL", "E-MAIL"),
    FieldKey.RUT: ("RUT", "NATIONAL ID", "DNI"),
    FieldKey.DEPARTMENT: ("DEPARTAMENTO", "DEPARTMENT", "AREA"),
    FieldKey.ROLE: ("CARGO", "ROLE", "JOB TITLE", "POSITION"),
    FieldKey.PLATE1: ("PATENTE 1", "PATENTE", "LICENSE PLATE 1", "PLATE 1", "PLATE"),
    FieldKey.BRAND1: ("MARCA 1", "MARCA", "BRAND 1", "MAKE 1", "BRAND"),
    FieldKey.COLOR1: ("COLOR VEHICULO", "COLOR", "COLOR 1"),
    FieldKey.PLATE2: ("PATENTE 2", "LICENSE PLATE 2", "PLATE 2"),
    FieldKey.BRAND2: ("MARCA 2", "BRAND 2", "MAKE 2"),
    FieldKey.COLOR2: ("COLOR 2", "COLOR VEHICULO 2", "SECOND COLOR"),
    FieldKey.PLATE3: ("PATENTE 3", "LICENSE PLATE 3", "PLATE 3"),
    FieldKey.BRAND3: ("MARCA 3", "BRAND 3", "MAKE 3"),
    FieldKey.COLOR3: ("COLOR 3", "COLOR VEHICULO 3", "THIRD COLOR"),
}


def parse_keywords(text: str) -> tuple[str, ...]:
    """Split a comma separated keyword list into normalized keywords.

    Keywords are trimmed and upper-cased; accents are kept as typed.
    """
    return tuple(k.strip().upper() for k in text.split(",") if k.strip())
