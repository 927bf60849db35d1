"""
Data models for PrintCostWeb.

This module contains dataclasses for:
- Catalog: filament, printer and work package rates (frozen snapshot)
- Job: the draft being priced and the margin selection
- Breakdown: engine outputs (aggregate, pricing, full breakdown, historical cost)
- Records: stored Quotation and PrintingHistory snapshots

Engine inputs and outputs are frozen so they can be shared between request
threads without copying.
"""

from .catalog import (
    CalculationType,
    CatalogSnapshot,
    FilamentRate,
    PrinterRate,
    WorkPackageRule,
)
from .job import (
    MARGIN_TIERS,
    CalculationRequest,
    FilamentConsumption,
    JobDraft,
    MarginKind,
    MarginSelection,
)
from .breakdown import CostAggregate, CostBreakdown, HistoricalCost, PricingResult, TierPrice
from .records import PrintingHistory, PrintingType, Quotation

__all__ = [
    # Catalog models
    "CalculationType",
    "CatalogSnapshot",
    "FilamentRate",
    "PrinterRate",
    "WorkPackageRule",
    # Job models
    "MARGIN_TIERS",
    "CalculationRequest",
    "FilamentConsumption",
    "JobDraft",
    "MarginKind",
    "MarginSelection",
    # Engine outputs
    "CostAggregate",
    "CostBreakdown",
    "HistoricalCost",
    "PricingResult",
    "TierPrice",
    # Stored records
    "PrintingHistory",
    "PrintingType",
    "Quotation",
]
