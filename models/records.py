"""
Persisted snapshot models.

A Quotation freezes a full CostBreakdown together with the job inputs that
produced it, as shown to a customer. A PrintingHistory record stores the
actual material and energy cost of a completed print. Neither is ever
recalculated after it is stored.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, List, Optional

from models.breakdown import CostBreakdown, HistoricalCost
from models.job import FilamentConsumption, JobDraft, MarginSelection


class PrintingType(Enum):
    """Why a print was made."""

    PROTOTYPE = "prototype"
    FINAL = "final"
    CALIBRATION = "calibration"
    TEST = "test"
    REWORK = "rework"
    SAMPLE = "sample"
    PRODUCTION = "production"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "PrintingType":
        """Unknown or missing types are recorded as PROTOTYPE."""
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.PROTOTYPE


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class PrintingHistory:
    """
    Production-cost record of one completed print.

    Lifecycle:
        Created from a print's consumptions, printer and duration (directly,
        or alongside a quotation), then used to price sale details.
    """

    cost: HistoricalCost
    """Material and energy cost at recording time."""

    printer_id: str = ""
    print_time_hours: float = 0.0
    electricity_cost_per_kwh: float = 0.0

    filament_consumptions: List[FilamentConsumption] = field(default_factory=list)

    type: PrintingType = PrintingType.PROTOTYPE
    """Why the print was made."""

    product_id: Optional[str] = None
    sale_detail_id: Optional[str] = None
    quotation_id: Optional[str] = None
    """Set when the record was created together with a quotation."""

    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": self.created_at.isoformat(),
            "type": self.type.value,
            "printerId": self.printer_id,
            "printTimeHours": self.print_time_hours,
            "electricityCostPerKwh": self.electricity_cost_per_kwh,
            "filamentConsumptions": [c.to_dict() for c in self.filament_consumptions],
            "productId": self.product_id,
            "saleDetailId": self.sale_detail_id,
            "quotationId": self.quotation_id,
            **self.cost.to_dict(),
        }


@dataclass
class Quotation:
    """
    Customer-facing pricing snapshot.

    ``breakdown`` is computed server-side at save time; the stored values
    are what the customer was quoted even if catalog rates change later.
    """

    title: str
    draft: JobDraft
    breakdown: CostBreakdown
    margin: MarginSelection

    printer_id: str = ""
    work_package_id: str = ""
    client_id: Optional[str] = None
    product_id: Optional[str] = None
    notes: str = ""

    printing_history_id: Optional[str] = None
    """Id of the PrintingHistory recorded with this quotation, if any."""

    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": self.created_at.isoformat(),
            "title": self.title,
            "notes": self.notes,
            "clientId": self.client_id,
            "productId": self.product_id,
            "printerId": self.printer_id,
            "workPackageId": self.work_package_id or None,
            "margin": self.margin.to_dict(),
            "job": self.draft.to_dict(),
            "breakdown": self.breakdown.to_dict(),
            "printingHistoryId": self.printing_history_id,
        }
