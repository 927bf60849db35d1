"""
Sale detail pricing route.

Handles:
- POST /api/sales/detail-price - Price one sale line from a recorded print

A sale line reuses a product's recorded production cost (a printing history
record) instead of re-entering grams and hours. The configured default
profit margin applies unless the request picks another one.
"""

from flask import Blueprint, current_app, jsonify

from models.breakdown import HistoricalCost
from models.job import MarginSelection, parse_quantity
from modules.numeric import safe_number
from .utils import current_catalog, default_margin_percent, get_json_payload


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


def _unit_cost_from_payload(data) -> HistoricalCost:
    filament = safe_number(data.get("totalFilamentCost"))
    energy = safe_number(data.get("totalEnergyCost"))
    return HistoricalCost(
        total_grams_used=safe_number(data.get("totalGramsUsed")),
        total_filament_cost=filament,
        total_energy_cost=energy,
        total_cost=filament + energy,
    )


@sales_bp.route("/detail-price", methods=["POST"])
def price_sale_detail():
    """
    Price a sale detail.

    Body::

        {
            "printingHistoryId": "...",          # or "unitCost": {...}
            "quantity": 2,
            "workPackageId": "assembly",
            "workPackageHours": 1.5,
            "margin": {"kind": "custom", "percent": 35}   # optional
        }

    Raises:
        RecordNotFoundError: unknown printingHistoryId (HTTP 404)
        InvalidRequestError: quantity above MAX_QUANTITY (HTTP 400)
    """
    payload = get_json_payload()

    history_id = payload.get("printingHistoryId")
    if history_id:
        unit_cost = current_app.config["RECORD_STORE"].get_printing_history(str(history_id)).cost
    else:
        unit_cost_data = payload.get("unitCost")
        unit_cost = _unit_cost_from_payload(unit_cost_data if isinstance(unit_cost_data, dict) else {})

    hours = payload.get("workPackageHours", payload.get("workPackagePerHour"))
    quantity = parse_quantity(payload.get("quantity", 1))

    calculator = current_app.config["CALCULATOR"]
    breakdown = calculator.price_sale_detail(
        unit_cost,
        quantity,
        current_catalog(),
        work_package_id=str(payload.get("workPackageId") or ""),
        work_package_hours=safe_number(hours),
        margin=MarginSelection.from_dict(payload.get("margin"), default_margin_percent()),
    )

    result = calculator.describe(breakdown)
    result["currency"] = current_app.config["CURRENCY_CODE"]
    return jsonify(result)
