"""
Catalog data models.

These models are the reference records the cost engine reads rates from:
filaments (cost per gram), printers (energy draw) and work packages (labor
rules). A CatalogSnapshot bundles one consistent set of them.

Thread Safety:
    - All models are frozen dataclasses (immutable)
    - Safe to read from any thread without locks
    - New snapshots replace old ones atomically
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional, Tuple

from modules.numeric import safe_number


NO_WORK_PACKAGE = "none"


class CalculationType(Enum):
    """
    How a work package turns into a labor cost.

    FIXED contributes its value once per job; MULTIPLY contributes its value
    for every work-package hour.
    """

    FIXED = "Fixed"
    MULTIPLY = "Multiply"

    @classmethod
    def parse(cls, value: Any) -> Optional["CalculationType"]:
        """Parse "Fixed"/"Multiply" case-insensitively; unknown gives None."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text or member.name.lower() == text:
                return member
        return None


@dataclass(frozen=True)
class FilamentRate:
    """Cost per gram of one filament spool type."""

    filament_id: str
    """Catalog identifier referenced by consumption rows."""

    cost_per_gram: float
    """Price of one gram of this filament."""

    name: str = ""
    """Display name (e.g., 'PLA Black 1kg')."""

    material: str = ""
    """Filament material (PLA, PETG, ABS, ...)."""

    color: str = ""
    """Hex or named color."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.filament_id,
            "costPerGram": self.cost_per_gram,
            "name": self.name,
            "material": self.material,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilamentRate":
        return cls(
            filament_id=str(data.get("id", data.get("filament_id", ""))),
            cost_per_gram=safe_number(data.get("costPerGram", data.get("cost_per_gram"))),
            name=str(data.get("name", "")),
            material=str(data.get("material", data.get("type", ""))),
            color=str(data.get("color", "")),
        )


@dataclass(frozen=True)
class PrinterRate:
    """Energy draw of one printer."""

    printer_id: str
    """Catalog identifier."""

    kwh_per_hour: float
    """Average energy consumed per printing hour (kWh)."""

    name: str = ""
    """Display name."""

    model: str = ""
    """Printer model."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.printer_id,
            "kwhPerHour": self.kwh_per_hour,
            "name": self.name,
            "model": self.model,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrinterRate":
        return cls(
            printer_id=str(data.get("id", data.get("printer_id", ""))),
            kwh_per_hour=safe_number(data.get("kwhPerHour", data.get("kwh_per_hour"))),
            name=str(data.get("name", "")),
            model=str(data.get("model", "")),
        )


@dataclass(frozen=True)
class WorkPackageRule:
    """A priced labor rule: flat fee or hourly rate."""

    id: str
    calculation_type: Optional[CalculationType]
    """None when the stored type is unknown; such a rule prices at zero."""

    value: float
    name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "calculationType": self.calculation_type.value if self.calculation_type else None,
            "value": self.value,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkPackageRule":
        calculation_type = CalculationType.parse(
            data.get("calculationType", data.get("calculation_type"))
        )
        return cls(
            id=str(data.get("id", "")),
            calculation_type=calculation_type,
            value=safe_number(data.get("value")),
            name=str(data.get("name", "")),
        )


@dataclass(frozen=True)
class CatalogSnapshot:
    """
    Point-in-time view of every rate the engine may need.

    Lookups are by id; an unknown id returns None and callers treat that as
    a missing rate.
    """

    filaments: Tuple[FilamentRate, ...] = ()
    printers: Tuple[PrinterRate, ...] = ()
    work_packages: Tuple[WorkPackageRule, ...] = ()
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.filaments or self.printers or self.work_packages)

    @property
    def age_seconds(self) -> float:
        return (datetime.now(timezone.utc) - self.loaded_at).total_seconds()

    def get_printer(self, printer_id: Optional[str]) -> Optional[PrinterRate]:
        if not printer_id:
            return None
        return next((p for p in self.printers if p.printer_id == printer_id), None)

    def get_work_package(self, work_package_id: Optional[str]) -> Optional[WorkPackageRule]:
        if not work_package_id or work_package_id == NO_WORK_PACKAGE:
            return None
        return next((w for w in self.work_packages if w.id == work_package_id), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filaments": [f.to_dict() for f in self.filaments],
            "printers": [p.to_dict() for p in self.printers],
            "workPackages": [w.to_dict() for w in self.work_packages],
            "loadedAt": self.loaded_at.isoformat(),
            "source": self.source,
        }

    @classmethod
    def create_empty(cls) -> "CatalogSnapshot":
        """Placeholder used before the first load so readers never see None."""
        return cls(loaded_at=datetime.fromtimestamp(0, tz=timezone.utc))

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = "") -> "CatalogSnapshot":
        """
        Build a snapshot from a parsed catalog document.

        Expected shape::

            {
                "filaments": [{"id": "pla-black", "costPerGram": 0.05}],
                "printers": [{"id": "mk4", "kwhPerHour": 0.2}],
                "workPackages": [{"id": "paint", "calculationType": "Multiply", "value": 8}]
            }

        Raises:
            KeyError: if a record has no id
        """
        def _require_id(record: Dict[str, Any], kind: str) -> Dict[str, Any]:
            if not record.get("id"):
                raise KeyError(f"{kind} record without id: {record}")
            return record

        return cls(
            filaments=tuple(
                FilamentRate.from_dict(_require_id(r, "filament"))
                for r in data.get("filaments", [])
            ),
            printers=tuple(
                PrinterRate.from_dict(_require_id(r, "printer"))
                for r in data.get("printers", [])
            ),
            work_packages=tuple(
                WorkPackageRule.from_dict(_require_id(r, "work package"))
                for r in data.get("workPackages", data.get("work_packages", []))
            ),
            source=source,
        )
