"""Resolve per-unit rates for a job from caller-supplied catalogs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, TypeVar, Union

from models.catalog import (
    NO_WORK_PACKAGE,
    FilamentRate,
    PrinterRate,
    WorkPackageRule,
)
from models.job import FilamentConsumption
from modules.numeric import safe_number


T = TypeVar("T")

# A catalog is either a mapping keyed by id or any iterable of records
Catalog = Union[Mapping[str, T], Iterable[T]]


@dataclass(frozen=True)
class ResolvedRates:
    """
    Numeric rates for one job.

    A filament id that could not be resolved is simply absent from
    ``filament_cost_per_gram``; the aggregator skips such rows.
    """

    filament_cost_per_gram: Dict[str, float] = field(default_factory=dict)
    printer_kwh: float = 0.0
    work_package_rule: Optional[WorkPackageRule] = None


def _index(catalog: Optional[Catalog], key: str) -> Dict[str, object]:
    if catalog is None:
        return {}
    if isinstance(catalog, Mapping):
        return dict(catalog)
    return {getattr(record, key): record for record in catalog}


def resolve_filament_rates(
    consumptions: Iterable[FilamentConsumption],
    filament_catalog: Optional[Catalog[FilamentRate]],
) -> Dict[str, float]:
    """Cost per gram for every filament id referenced by ``consumptions``."""
    by_id = _index(filament_catalog, "filament_id")
    rates: Dict[str, float] = {}
    for consumption in consumptions:
        filament = by_id.get(consumption.filament_id) if consumption.filament_id else None
        if filament is not None:
            rates[consumption.filament_id] = safe_number(filament.cost_per_gram)
    return rates


def resolve_printer_kwh(printer_id: Optional[str],
                        printer_catalog: Optional[Catalog[PrinterRate]]) -> float:
    """Energy draw of the selected printer; 0 when none is selected or known."""
    if not printer_id:
        return 0.0
    printer = _index(printer_catalog, "printer_id").get(printer_id)
    return safe_number(printer.kwh_per_hour) if printer is not None else 0.0


def resolve_work_package(
    work_package_id: Optional[str],
    work_package_catalog: Optional[Catalog[WorkPackageRule]],
) -> Optional[WorkPackageRule]:
    if not work_package_id or work_package_id == NO_WORK_PACKAGE:
        return None
    return _index(work_package_catalog, "id").get(work_package_id)


def resolve_rates(
    filament_consumptions: Iterable[FilamentConsumption],
    filament_catalog: Optional[Catalog[FilamentRate]],
    printer_id: Optional[str],
    printer_catalog: Optional[Catalog[PrinterRate]],
    work_package_id: Optional[str],
    work_package_catalog: Optional[Catalog[WorkPackageRule]],
) -> ResolvedRates:
    """
    Look up every rate a job needs.

    Unknown ids are not errors: the UI shows partial estimates while a form
    is still being filled, so a missing filament, printer or work package
    just contributes nothing.
    """
    return ResolvedRates(
        filament_cost_per_gram=resolve_filament_rates(filament_consumptions, filament_catalog),
        printer_kwh=resolve_printer_kwh(printer_id, printer_catalog),
        work_package_rule=resolve_work_package(work_package_id, work_package_catalog),
    )
