"""Cost calculator facade used by every pricing call site."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from models.breakdown import CostAggregate, CostBreakdown, HistoricalCost
from models.catalog import CatalogSnapshot
from models.job import CalculationRequest, FilamentConsumption, JobDraft, MarginSelection
from modules.cost_aggregator import aggregate, calculate_historical, work_package_cost
from modules.numeric import safe_number
from modules.pricing import apply_tax_and_margin, per_unit, tier_prices
from modules.rate_resolver import resolve_rates
from logging_config import get_logger


class CostCalculator:
    """
    Prices print jobs against a catalog snapshot.

    Holds only configuration (the default margin); every call recomputes
    from its arguments, so one instance can serve concurrent requests.

    Call sites:
        - calculate():          live calculator and quotation snapshots
        - historical():         printing-history production cost
        - price_sale_detail():  sale lines priced from recorded history
    """

    def __init__(self, default_margin_percent: float = 20.0) -> None:
        self.default_margin_percent = safe_number(default_margin_percent)
        self.logger = get_logger(__name__)

    def default_margin(self) -> MarginSelection:
        return MarginSelection.default(self.default_margin_percent)

    def calculate(
        self,
        draft: JobDraft,
        catalog: CatalogSnapshot,
        printer_id: Optional[str] = None,
        work_package_id: Optional[str] = None,
        margin: Optional[MarginSelection] = None,
    ) -> CostBreakdown:
        """Full breakdown: material, energy, labor, tax and margin."""
        margin = margin or self.default_margin()
        rates = resolve_rates(
            draft.filament_consumptions,
            catalog.filaments,
            printer_id,
            catalog.printers,
            work_package_id,
            catalog.work_packages,
        )
        totals = aggregate(draft, rates)
        pricing = apply_tax_and_margin(totals, draft.quantity, draft.tax_rate_percent, margin)
        breakdown = CostBreakdown.combine(totals, pricing, draft.quantity)

        self.logger.debug(
            f"Breakdown: qty={draft.quantity}, subtotal={breakdown.subtotal_cost}, "
            f"total={breakdown.total_cost}, margin={margin.kind.value}:{margin.percent}, "
            f"final={breakdown.final_value}"
        )
        return breakdown

    def calculate_request(self, request: CalculationRequest,
                          catalog: CatalogSnapshot) -> CostBreakdown:
        return self.calculate(
            request.draft,
            catalog,
            printer_id=request.printer_id,
            work_package_id=request.work_package_id,
            margin=request.margin,
        )

    def historical(
        self,
        consumptions: Iterable[FilamentConsumption],
        catalog: CatalogSnapshot,
        printer_id: Optional[str],
        print_time_hours: float,
        electricity_cost_per_kwh: float,
    ) -> HistoricalCost:
        """Material and energy cost of a completed print."""
        cost = calculate_historical(
            consumptions,
            catalog.filaments,
            catalog.get_printer(printer_id),
            print_time_hours,
            electricity_cost_per_kwh,
        )
        self.logger.debug(
            f"Historical cost: grams={cost.total_grams_used}, total={cost.total_cost}"
        )
        return cost

    def price_sale_detail(
        self,
        unit_cost: HistoricalCost,
        quantity: int,
        catalog: CatalogSnapshot,
        work_package_id: Optional[str] = None,
        work_package_hours: float = 0.0,
        margin: Optional[MarginSelection] = None,
    ) -> CostBreakdown:
        """
        Price a sale line from a product's recorded production cost.

        The recorded material and energy cost is scaled by quantity; the work
        package is added once per line. No tax is applied here.
        """
        package_cost = work_package_cost(
            catalog.get_work_package(work_package_id), work_package_hours
        )
        totals = CostAggregate(
            total_filament_cost=safe_number(unit_cost.total_filament_cost),
            total_grams_used=safe_number(unit_cost.total_grams_used),
            total_energy_cost=safe_number(unit_cost.total_energy_cost),
            work_package_cost=package_cost,
            total_labor_cost=package_cost,
        )
        margin = margin or self.default_margin()
        pricing = apply_tax_and_margin(totals, quantity, 0.0, margin)
        return CostBreakdown.combine(totals, pricing, quantity)

    @staticmethod
    def describe(breakdown: CostBreakdown) -> Dict[str, Any]:
        """Breakdown plus per-unit price and the standard tier projections."""
        return {
            "breakdown": breakdown.to_dict(),
            "pricePerUnit": per_unit(breakdown.final_value, breakdown.quantity),
            "totalCostPerUnit": per_unit(breakdown.total_cost, breakdown.quantity),
            "tiers": [t.to_dict() for t in tier_prices(breakdown.total_cost, breakdown.quantity)],
        }
