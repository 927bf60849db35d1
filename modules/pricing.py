"""
Tax, margin and per-unit projections.

Every margin (standard tier, custom percent, configured default) goes
through :func:`apply_margin`, so a tier card and a custom margin of the same
percent always show the same price.
"""

from __future__ import annotations

from typing import List, Tuple

from models.breakdown import CostAggregate, PricingResult, TierPrice
from models.job import MARGIN_TIERS, MarginSelection
from modules.numeric import safe_number


def per_unit(value: float, quantity: float) -> float:
    """Divide by quantity; zero, blank or negative quantity gives 0."""
    quantity = safe_number(quantity)
    if quantity > 0:
        return safe_number(safe_number(value) / quantity)
    return 0.0


def apply_margin(total_cost: float, margin_percent: float) -> Tuple[float, float]:
    """
    Return ``(margin_amount, final_value)``.

    The final value is ``total_cost * (1 + percent / 100)`` and the margin
    is the difference, which keeps the final value identical across tier
    and custom paths and never negative for non-negative inputs. A result
    that overflows the float range is reported as 0.
    """
    total_cost = safe_number(total_cost)
    final_value = safe_number(total_cost * (1 + safe_number(margin_percent) / 100))
    return safe_number(final_value - total_cost), final_value


def apply_tax_and_margin(
    aggregate: CostAggregate,
    quantity: int,
    tax_rate_percent: float,
    margin: MarginSelection,
) -> PricingResult:
    """
    Turn an aggregate into a priced result.

    Labor is job-level: it is added once after material and energy are
    multiplied by quantity. Out-of-range inputs are not rejected, but every
    step is kept finite: an intermediate that overflows counts as 0, so NaN
    or Infinity never reaches a response.
    """
    tax_rate = safe_number(tax_rate_percent)
    cost_per_unit = safe_number(aggregate.cost_per_unit)
    subtotal_cost = safe_number(
        cost_per_unit * safe_number(quantity) + safe_number(aggregate.total_labor_cost)
    )
    tax_amount = safe_number(subtotal_cost * (tax_rate / 100))
    total_cost = safe_number(subtotal_cost + tax_amount)

    margin_percent = safe_number(margin.percent)
    margin_amount, final_value = apply_margin(total_cost, margin_percent)

    return PricingResult(
        cost_per_unit=cost_per_unit,
        subtotal_cost=subtotal_cost,
        tax_rate=tax_rate,
        tax_amount=tax_amount,
        total_cost=total_cost,
        margin_percent=margin_percent,
        margin_amount=margin_amount,
        final_value=final_value,
    )


def tier_prices(total_cost: float, quantity: int) -> List[TierPrice]:
    """Project the standard margin tiers for display."""
    prices = []
    for label, percent in MARGIN_TIERS:
        _, final_value = apply_margin(total_cost, percent)
        prices.append(TierPrice(
            label=label,
            percent=percent,
            final_value=final_value,
            price_per_unit=per_unit(final_value, quantity),
        ))
    return prices
