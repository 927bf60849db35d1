"""
Job draft models.

A JobDraft describes one print job as the user is filling it in: which
filaments, how many grams, how long the print runs, labor, packaging, tax
and quantity. Drafts are transient; the engine turns them into a
CostBreakdown on every change.

Parsing from request payloads is lenient on numbers (blank or invalid
becomes zero) so a half-filled form still yields a partial estimate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional, Tuple

from core.exceptions import InvalidMarginError, InvalidRequestError
from modules.numeric import optional_number, safe_int, safe_number


# Standard margin tiers shown next to every calculation, in display order
MARGIN_TIERS: Tuple[Tuple[str, float], ...] = (
    ("competitive", 25.0),
    ("standard", 40.0),
    ("premium", 60.0),
    ("luxury", 80.0),
)

TIER_PERCENTS = tuple(percent for _, percent in MARGIN_TIERS)

MAX_QUANTITY = 10000


def parse_quantity(value: Any) -> int:
    """
    Units requested; blank or invalid gives 0.

    Raises:
        InvalidRequestError: more than MAX_QUANTITY units
    """
    quantity = safe_int(value)
    if quantity > MAX_QUANTITY:
        raise InvalidRequestError(
            f"Quantity too large. Maximum is {MAX_QUANTITY} units.",
            field="quantity",
            details={"max_quantity": MAX_QUANTITY},
        )
    return quantity


@dataclass(frozen=True)
class FilamentConsumption:
    """One (filament, grams used) row of a job."""

    filament_id: str = ""
    grams_used: Optional[float] = None
    """None while the user has not typed a value yet."""

    @property
    def is_complete(self) -> bool:
        """Both a filament and a grams value have been entered."""
        return bool(self.filament_id) and self.grams_used is not None

    def to_dict(self) -> Dict[str, Any]:
        return {"filamentId": self.filament_id, "gramsUsed": self.grams_used}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilamentConsumption":
        return cls(
            filament_id=str(data.get("filamentId", data.get("filament_id")) or ""),
            grams_used=optional_number(data.get("gramsUsed", data.get("grams_used"))),
        )


def parse_consumptions(rows: Any) -> Tuple[FilamentConsumption, ...]:
    """Parse a list of consumption dicts, skipping anything that is not a dict."""
    if not isinstance(rows, list):
        return ()
    return tuple(FilamentConsumption.from_dict(r) for r in rows if isinstance(r, dict))


@dataclass(frozen=True)
class JobDraft:
    """
    Everything the engine needs about one job apart from catalog rates.

    Lifecycle:
        Built from the calculator form on every change, priced, then either
        discarded or stored as part of a Quotation snapshot.
    """

    filament_consumptions: Tuple[FilamentConsumption, ...] = ()
    print_time_hours: float = 0.0
    work_package_hours: float = 0.0
    quantity: int = 1
    tax_rate_percent: float = 0.0
    packaging_cost: float = 0.0
    additional_costs: float = 0.0
    electricity_cost_per_kwh: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filamentConsumptions": [c.to_dict() for c in self.filament_consumptions],
            "printTimeHours": self.print_time_hours,
            "workPackageHours": self.work_package_hours,
            "quantity": self.quantity,
            "taxRate": self.tax_rate_percent,
            "packagingCost": self.packaging_cost,
            "additionalCosts": self.additional_costs,
            "electricityCostPerKwh": self.electricity_cost_per_kwh,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any],
                  default_electricity_cost: float = 0.0) -> "JobDraft":
        """
        Build a draft from a request payload.

        ``printTimeMinutes`` is folded into the hours. A missing quantity
        means one unit; a blank one means zero (the user is still typing).

        Raises:
            InvalidRequestError: quantity above MAX_QUANTITY
        """
        hours = safe_number(data.get("printTimeHours"))
        hours += safe_number(data.get("printTimeMinutes")) / 60.0

        electricity = data.get("electricityCostPerKwh")
        if electricity is None:
            electricity = default_electricity_cost

        return cls(
            filament_consumptions=parse_consumptions(data.get("filamentConsumptions")),
            print_time_hours=hours,
            work_package_hours=safe_number(data.get("workPackageHours")),
            quantity=parse_quantity(data.get("quantity", 1)),
            tax_rate_percent=safe_number(data.get("taxRate")),
            packaging_cost=safe_number(data.get("packagingCost")),
            additional_costs=safe_number(data.get("additionalCosts")),
            electricity_cost_per_kwh=safe_number(electricity),
        )


class MarginKind(Enum):
    """Which source a margin percent comes from."""

    TIER = "tier"
    """One of the standard tiers (25/40/60/80)."""

    CUSTOM = "custom"
    """Any percent the user typed."""

    DEFAULT = "default"
    """Configured default profit margin (sale details, unspecified margin)."""


@dataclass(frozen=True)
class MarginSelection:
    """Tagged margin choice. All kinds price through the same formula."""

    kind: MarginKind
    percent: float

    @classmethod
    def tier(cls, percent: float) -> "MarginSelection":
        return cls(MarginKind.TIER, float(percent))

    @classmethod
    def custom(cls, percent: float) -> "MarginSelection":
        return cls(MarginKind.CUSTOM, safe_number(percent))

    @classmethod
    def default(cls, percent: float) -> "MarginSelection":
        return cls(MarginKind.DEFAULT, safe_number(percent))

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "percent": self.percent}

    @classmethod
    def from_dict(cls, data: Any, default_percent: float) -> "MarginSelection":
        """
        Parse ``{"kind": "tier" | "custom", "percent": n}``.

        Missing data, or ``{"kind": "default"}``, resolves to the configured
        default margin.

        Raises:
            InvalidMarginError: unknown kind, or a tier outside MARGIN_TIERS
            InvalidRequestError: margin is present but not an object
        """
        if data is None:
            return cls.default(default_percent)
        if not isinstance(data, dict):
            raise InvalidRequestError("margin must be an object", field="margin")

        kind_text = str(data.get("kind", "")).strip().lower()
        try:
            kind = MarginKind(kind_text)
        except ValueError:
            raise InvalidMarginError(kind_text)

        if kind is MarginKind.DEFAULT:
            return cls.default(default_percent)
        if kind is MarginKind.CUSTOM:
            return cls.custom(data.get("percent"))

        percent = safe_number(data.get("percent"), default=-1.0)
        if percent not in TIER_PERCENTS:
            raise InvalidMarginError(kind_text, data.get("percent"), list(TIER_PERCENTS))
        return cls.tier(percent)


@dataclass
class CalculationRequest:
    """
    A draft plus the catalog ids and margin it should be priced with.

    This is what the calculator and quotation endpoints receive.
    """

    draft: JobDraft
    printer_id: str = ""
    work_package_id: str = ""
    margin: Optional[MarginSelection] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_electricity_cost: float,
                  default_margin_percent: float) -> "CalculationRequest":
        return cls(
            draft=JobDraft.from_dict(data, default_electricity_cost),
            printer_id=str(data.get("printerId") or ""),
            work_package_id=str(data.get("workPackageId") or ""),
            margin=MarginSelection.from_dict(data.get("margin"), default_margin_percent),
        )
