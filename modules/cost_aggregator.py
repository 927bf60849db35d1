"""
Material, energy and labor aggregation.

The material and energy formulas live here once and are shared by the live
calculator (:func:`aggregate`) and by printing-history records
(:func:`calculate_historical`). A product's recorded production cost and its
quoted cost therefore can never drift apart.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Tuple

from models.breakdown import CostAggregate, HistoricalCost
from models.catalog import CalculationType, FilamentRate, PrinterRate, WorkPackageRule
from models.job import FilamentConsumption, JobDraft
from modules.numeric import safe_number
from modules.rate_resolver import Catalog, ResolvedRates, resolve_filament_rates


def filament_cost(
    consumptions: Iterable[FilamentConsumption],
    cost_per_gram: Mapping[str, float],
) -> Tuple[float, float]:
    """
    Return ``(total_grams_used, total_filament_cost)``.

    Rows without a filament id, without grams, or whose filament is not in
    ``cost_per_gram`` count toward neither total. A sum that overflows the
    float range is reported as 0.
    """
    total_grams = 0.0
    total_cost = 0.0
    for consumption in consumptions:
        if not consumption.is_complete or consumption.filament_id not in cost_per_gram:
            continue
        grams = safe_number(consumption.grams_used)
        total_grams += grams
        total_cost += grams * safe_number(cost_per_gram[consumption.filament_id])
    return safe_number(total_grams), safe_number(total_cost)


def energy_cost(printer_kwh: float, electricity_cost_per_kwh: float,
                print_time_hours: float) -> float:
    """kWh per hour x price per kWh x hours."""
    return safe_number(
        safe_number(printer_kwh)
        * safe_number(electricity_cost_per_kwh)
        * safe_number(print_time_hours)
    )


def work_package_cost(rule: Optional[WorkPackageRule], work_package_hours: float) -> float:
    if rule is None:
        return 0.0
    if rule.calculation_type is CalculationType.FIXED:
        return safe_number(rule.value)
    if rule.calculation_type is CalculationType.MULTIPLY:
        return safe_number(safe_number(rule.value) * safe_number(work_package_hours))
    return 0.0


def aggregate(draft: JobDraft, rates: ResolvedRates) -> CostAggregate:
    """Combine material, energy and labor costs of a draft."""
    total_grams, total_filament = filament_cost(
        draft.filament_consumptions, rates.filament_cost_per_gram
    )
    total_energy = energy_cost(
        rates.printer_kwh, draft.electricity_cost_per_kwh, draft.print_time_hours
    )

    package_cost = work_package_cost(rates.work_package_rule, draft.work_package_hours)
    packaging = safe_number(draft.packaging_cost)
    additional = safe_number(draft.additional_costs)

    return CostAggregate(
        total_filament_cost=total_filament,
        total_grams_used=total_grams,
        total_energy_cost=total_energy,
        work_package_cost=package_cost,
        packaging_cost=packaging,
        additional_costs=additional,
        total_labor_cost=safe_number(package_cost + packaging + additional),
    )


def calculate_historical(
    consumptions: Iterable[FilamentConsumption],
    filament_catalog: Optional[Catalog[FilamentRate]],
    printer_rate: Optional[PrinterRate],
    print_time_hours: float,
    electricity_cost_per_kwh: float,
) -> HistoricalCost:
    """
    Production cost of an already completed print.

    Material plus energy only. Uses the same helpers as :func:`aggregate`.
    """
    consumptions = tuple(consumptions)
    total_grams, total_filament = filament_cost(
        consumptions, resolve_filament_rates(consumptions, filament_catalog)
    )
    printer_kwh = printer_rate.kwh_per_hour if printer_rate is not None else 0.0
    total_energy = energy_cost(printer_kwh, electricity_cost_per_kwh, print_time_hours)

    return HistoricalCost(
        total_grams_used=total_grams,
        total_filament_cost=total_filament,
        total_energy_cost=total_energy,
        total_cost=safe_number(total_filament + total_energy),
    )
