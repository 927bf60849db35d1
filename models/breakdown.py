"""
Cost engine output models.

All values are raw floats. Rounding and currency formatting happen only
where values are shown to a person, never in between calculation steps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any


@dataclass(frozen=True)
class CostAggregate:
    """Material, energy and labor totals for one job (before tax and margin)."""

    total_filament_cost: float = 0.0
    total_grams_used: float = 0.0
    total_energy_cost: float = 0.0
    work_package_cost: float = 0.0
    packaging_cost: float = 0.0
    additional_costs: float = 0.0
    total_labor_cost: float = 0.0

    @property
    def cost_per_unit(self) -> float:
        """Material plus energy: the only components scaled by quantity."""
        return self.total_filament_cost + self.total_energy_cost


@dataclass(frozen=True)
class PricingResult:
    """Tax and margin applied on top of a CostAggregate."""

    cost_per_unit: float
    subtotal_cost: float
    tax_rate: float
    tax_amount: float
    total_cost: float
    margin_percent: float
    margin_amount: float
    final_value: float


@dataclass(frozen=True)
class TierPrice:
    """Final value of a job under one standard margin tier."""

    label: str
    percent: float
    final_value: float
    price_per_unit: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "percent": self.percent,
            "finalValue": self.final_value,
            "pricePerUnit": self.price_per_unit,
        }


@dataclass(frozen=True)
class CostBreakdown:
    """
    Complete cost picture of one job.

    Recomputed from scratch on every input change; never mutated.

    Invariants (exact, no rounding):
        total_cost == subtotal_cost + tax_amount
        subtotal_cost == cost_per_unit * quantity + total_labor_cost
        final_value == total_cost * (1 + margin_percent / 100)
    """

    total_filament_cost: float
    total_energy_cost: float
    total_grams_used: float
    work_package_cost: float
    packaging_cost: float
    additional_costs: float
    total_labor_cost: float
    cost_per_unit: float
    subtotal_cost: float
    tax_rate: float
    tax_amount: float
    total_cost: float
    margin_percent: float
    margin_amount: float
    final_value: float
    quantity: int

    @classmethod
    def combine(cls, aggregate: CostAggregate, pricing: PricingResult,
                quantity: int) -> "CostBreakdown":
        return cls(
            total_filament_cost=aggregate.total_filament_cost,
            total_energy_cost=aggregate.total_energy_cost,
            total_grams_used=aggregate.total_grams_used,
            work_package_cost=aggregate.work_package_cost,
            packaging_cost=aggregate.packaging_cost,
            additional_costs=aggregate.additional_costs,
            total_labor_cost=aggregate.total_labor_cost,
            cost_per_unit=pricing.cost_per_unit,
            subtotal_cost=pricing.subtotal_cost,
            tax_rate=pricing.tax_rate,
            tax_amount=pricing.tax_amount,
            total_cost=pricing.total_cost,
            margin_percent=pricing.margin_percent,
            margin_amount=pricing.margin_amount,
            final_value=pricing.final_value,
            quantity=quantity,
        )

    def to_dict(self) -> Dict[str, Any]:
        """camelCase keys, matching the dashboard's JSON contract."""
        return {
            "totalFilamentCost": self.total_filament_cost,
            "totalEnergyCost": self.total_energy_cost,
            "totalGramsUsed": self.total_grams_used,
            "workPackageCost": self.work_package_cost,
            "packagingCost": self.packaging_cost,
            "additionalCosts": self.additional_costs,
            "totalLaborCost": self.total_labor_cost,
            "costPerUnit": self.cost_per_unit,
            "subtotalCost": self.subtotal_cost,
            "taxRate": self.tax_rate,
            "taxAmount": self.tax_amount,
            "totalCost": self.total_cost,
            "marginPercent": self.margin_percent,
            "marginAmount": self.margin_amount,
            "finalValue": self.final_value,
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class HistoricalCost:
    """
    Actual production cost of a completed print: material and energy only.

    No labor, tax or margin; those belong to quotations.
    """

    total_grams_used: float
    total_filament_cost: float
    total_energy_cost: float
    total_cost: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalGramsUsed": self.total_grams_used,
            "totalFilamentCost": self.total_filament_cost,
            "totalEnergyCost": self.total_energy_cost,
            "totalCost": self.total_cost,
        }
