from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""PersonRecord / Vehicle domain models.

Records are produced by the extractor and are immutable afterwards; the whole
collection is swapped on every successful import.
"""

__all__ = [
    "Vehicle",
    "PersonRecord",
    "UNKNOWN_BRAND",
    "NO_RUT",
    "DEFAULT_GROUP",
    "DEFAULT_GENDER",
]

UNKNOWN_BRAND = "Unknown"
NO_RUT = "S/R"  # sin RUT
DEFAULT_GROUP = "General"
DEFAULT_GENDER = "Unspecified"


@dataclass(frozen=True)
class Vehicle:
    plate: str  # upper-case, at least 2 chars
    brand: str = UNKNOWN_BRAND
    color: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"plate": self.plate, "brand": self.brand, "color": self.color}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Vehicle:
        return Vehicle(
            plate=str(data["plate"]),
            brand=str(data.get("brand") or UNKNOWN_BRAND),
            color=str(data.get("color") or ""),
        )


@dataclass(frozen=True)
class PersonRecord:
    """One person of the roster with the vehicles registered to them."""
    id: str
    name: str
    rut: str = NO_RUT
    email: str = ""
    department: str = ""
    role: str = ""
    group: str = DEFAULT_GROUP
    gender: str = DEFAULT_GENDER
    vehicles: tuple[Vehicle, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "rut": self.rut,
            "email": self.email,
            "department": self.department,
            "role": self.role,
            "group": self.group,
            "gender": self.gender,
            "vehicles": [v.to_dict() for v in self.vehicles],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> PersonRecord:
        return PersonRecord(
            id=str(data["id"]),
            name=str(data["name"]),
            rut=str(data.get("rut") or NO_RUT),
            email=str(data.get("email") or ""),
            department=str(data.get("department") or ""),
            role=str(data.get("role") or ""),
            group=str(data.get("group") or DEFAULT_GROUP),
            gender=str(data.get("gender") or DEFAULT_GENDER),
            vehicles=tuple(Vehicle.from_dict(v) for v in data.get("vehicles") or []),
        )
