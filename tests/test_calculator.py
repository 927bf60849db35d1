"""
Tests for the CostCalculator.

Covers the worked pricing scenarios, the exact arithmetic identities of a
breakdown (checked over seeded random inputs), and the shared formula
between live quotes and printing-history records.
"""

import math
import random

import pytest

from models.breakdown import HistoricalCost
from models.catalog import CatalogSnapshot
from models.job import FilamentConsumption, JobDraft, MarginKind, MarginSelection


class TestScenarios:
    """Worked examples with hand-checked numbers."""

    def test_single_filament_no_labor(self, calculator, catalog, basic_draft):
        breakdown = calculator.calculate(
            basic_draft, catalog, printer_id="mk4", margin=MarginSelection.tier(40)
        )

        assert breakdown.total_filament_cost == pytest.approx(5.00)
        assert breakdown.total_energy_cost == pytest.approx(0.15)
        assert breakdown.cost_per_unit == pytest.approx(5.15)
        assert breakdown.subtotal_cost == pytest.approx(5.15)
        assert breakdown.total_cost == pytest.approx(5.15)
        assert breakdown.final_value == pytest.approx(7.21)

    def test_quantity_labor_and_tax(self, calculator, catalog):
        draft = JobDraft(
            filament_consumptions=(FilamentConsumption("pla-black", 100.0),),
            print_time_hours=5.0,
            quantity=3,
            packaging_cost=2.0,
            additional_costs=1.0,
            tax_rate_percent=19.0,
            electricity_cost_per_kwh=0.15,
        )

        breakdown = calculator.calculate(
            draft, catalog, printer_id="mk4", work_package_id="setup",
            margin=MarginSelection.tier(40),
        )

        assert breakdown.work_package_cost == 10.0
        assert breakdown.total_labor_cost == 13.0
        assert breakdown.subtotal_cost == pytest.approx(28.45)
        assert breakdown.tax_amount == pytest.approx(5.4055)
        assert breakdown.total_cost == pytest.approx(33.8555)

    def test_multiply_work_package(self, calculator, catalog):
        draft = JobDraft(work_package_hours=2.0)
        breakdown = calculator.calculate(draft, catalog, work_package_id="painting")
        assert breakdown.work_package_cost == 16.0

    def test_empty_job_is_all_zero(self, calculator, catalog):
        breakdown = calculator.calculate(JobDraft(), catalog)

        for key, value in breakdown.to_dict().items():
            if key in ("marginPercent", "quantity"):
                continue
            assert value == 0.0, key

    @pytest.mark.parametrize("quantity", [0, ""])
    def test_transient_quantity_gives_zero_per_unit(self, calculator, catalog, quantity):
        draft = JobDraft.from_dict({
            "filamentConsumptions": [{"filamentId": "pla-black", "gramsUsed": 100}],
            "printTimeHours": 5,
            "quantity": quantity,
            "electricityCostPerKwh": 0.15,
        })

        result = calculator.describe(calculator.calculate(draft, catalog, printer_id="mk4"))

        assert result["pricePerUnit"] == 0.0
        assert result["totalCostPerUnit"] == 0.0
        assert all(t["pricePerUnit"] == 0.0 for t in result["tiers"])

    def test_unknown_filament_contributes_nothing(self, calculator, catalog):
        draft = JobDraft(filament_consumptions=(FilamentConsumption("ghost", 500.0),))
        breakdown = calculator.calculate(draft, catalog)
        assert breakdown.total_filament_cost == 0.0
        assert breakdown.total_grams_used == 0.0

    def test_default_margin_when_unspecified(self, calculator, catalog, basic_draft):
        breakdown = calculator.calculate(basic_draft, catalog, printer_id="mk4")
        assert breakdown.margin_percent == 30.0
        assert breakdown.final_value == pytest.approx(5.15 * 1.3)


def _random_case(rng):
    """Random non-negative catalog and draft."""
    filaments = [
        {"id": f"f{i}", "costPerGram": rng.uniform(0, 0.5)} for i in range(3)
    ]
    catalog = CatalogSnapshot.from_dict({
        "filaments": filaments,
        "printers": [{"id": "p", "kwhPerHour": rng.uniform(0, 1.5)}],
        "workPackages": [
            {"id": "fixed", "calculationType": "Fixed", "value": rng.uniform(0, 50)},
            {"id": "hourly", "calculationType": "Multiply", "value": rng.uniform(0, 30)},
        ],
    })
    draft = JobDraft(
        filament_consumptions=tuple(
            FilamentConsumption(f"f{rng.randrange(4)}", rng.uniform(0, 1000))
            for _ in range(rng.randrange(4))
        ),
        print_time_hours=rng.uniform(0, 48),
        work_package_hours=rng.uniform(0, 10),
        quantity=rng.randrange(0, 50),
        tax_rate_percent=rng.uniform(0, 30),
        packaging_cost=rng.uniform(0, 20),
        additional_costs=rng.uniform(0, 20),
        electricity_cost_per_kwh=rng.uniform(0, 1000),
    )
    work_package_id = rng.choice(["fixed", "hourly", "none", ""])
    margin = rng.choice([
        MarginSelection.tier(rng.choice([25, 40, 60, 80])),
        MarginSelection.custom(rng.uniform(0, 100)),
    ])
    return catalog, draft, work_package_id, margin


class TestBreakdownProperties:
    """Identities that must hold exactly for any non-negative input."""

    CASES = 300

    @pytest.fixture
    def cases(self):
        rng = random.Random(20240607)
        return [_random_case(rng) for _ in range(self.CASES)]

    def test_arithmetic_identities_are_exact(self, calculator, cases):
        for catalog, draft, work_package_id, margin in cases:
            b = calculator.calculate(draft, catalog, "p", work_package_id, margin)

            assert b.total_cost == b.subtotal_cost + b.tax_amount
            assert b.subtotal_cost == b.cost_per_unit * b.quantity + b.total_labor_cost
            assert b.final_value == b.total_cost * (1 + b.margin_percent / 100)

    def test_non_negative_inputs_give_non_negative_fields(self, calculator, cases):
        for catalog, draft, work_package_id, margin in cases:
            b = calculator.calculate(draft, catalog, "p", work_package_id, margin)

            for key, value in b.to_dict().items():
                assert value >= 0, key
                assert math.isfinite(value), key

    def test_calculation_is_idempotent(self, calculator, cases):
        for catalog, draft, work_package_id, margin in cases:
            first = calculator.calculate(draft, catalog, "p", work_package_id, margin)
            second = calculator.calculate(draft, catalog, "p", work_package_id, margin)
            assert first == second

    def test_historical_matches_live_material_and_energy(self, calculator, cases):
        for catalog, draft, work_package_id, margin in cases:
            live = calculator.calculate(draft, catalog, "p", work_package_id, margin)
            recorded = calculator.historical(
                draft.filament_consumptions,
                catalog,
                "p",
                draft.print_time_hours,
                draft.electricity_cost_per_kwh,
            )

            assert recorded.total_filament_cost == live.total_filament_cost
            assert recorded.total_energy_cost == live.total_energy_cost
            assert recorded.total_grams_used == live.total_grams_used
            assert recorded.total_cost == live.cost_per_unit


class TestMarginSelection:

    @pytest.mark.parametrize("percent", [25, 40, 60, 80])
    def test_tier_and_custom_converge(self, calculator, catalog, basic_draft, percent):
        tier = calculator.calculate(basic_draft, catalog, "mk4", margin=MarginSelection.tier(percent))
        custom = calculator.calculate(basic_draft, catalog, "mk4", margin=MarginSelection.custom(percent))

        assert tier.final_value == custom.final_value
        assert tier.margin_amount == custom.margin_amount

    def test_describe_tiers_match_tier_selection(self, calculator, catalog, basic_draft):
        described = calculator.describe(calculator.calculate(basic_draft, catalog, "mk4"))

        for tier in described["tiers"]:
            chosen = calculator.calculate(
                basic_draft, catalog, "mk4", margin=MarginSelection.tier(tier["percent"])
            )
            assert tier["finalValue"] == chosen.final_value

    def test_default_margin_kind(self, calculator):
        margin = calculator.default_margin()
        assert margin.kind is MarginKind.DEFAULT
        assert margin.percent == 30.0


class TestSaleDetailPricing:

    @pytest.fixture
    def unit_cost(self):
        return HistoricalCost(
            total_grams_used=100.0,
            total_filament_cost=5.0,
            total_energy_cost=0.15,
            total_cost=5.15,
        )

    def test_scales_recorded_cost_and_adds_labor_once(self, calculator, catalog, unit_cost):
        breakdown = calculator.price_sale_detail(
            unit_cost, 4, catalog, work_package_id="painting", work_package_hours=1.5
        )

        assert breakdown.work_package_cost == 12.0
        assert breakdown.subtotal_cost == pytest.approx(5.15 * 4 + 12.0)
        assert breakdown.tax_amount == 0.0
        assert breakdown.margin_percent == 30.0
        assert breakdown.final_value == pytest.approx(breakdown.total_cost * 1.3)

    def test_explicit_margin(self, calculator, catalog, unit_cost):
        breakdown = calculator.price_sale_detail(
            unit_cost, 1, catalog, margin=MarginSelection.custom(0)
        )
        assert breakdown.final_value == breakdown.total_cost == pytest.approx(5.15)
