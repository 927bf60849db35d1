"""
Printing history routes.

Handles:
- POST /api/printing-history/calculate - Preview production cost of a print
- POST /api/printing-history           - Record a completed print
- GET  /api/printing-history           - List records (newest first)
- GET  /api/printing-history/<id>      - One record

Production cost is material plus energy only, computed with the same
formulas as the live calculator.
"""

from typing import Any, Dict, Tuple

from flask import Blueprint, current_app, jsonify

from models.breakdown import HistoricalCost
from models.job import FilamentConsumption, parse_consumptions
from models.records import PrintingHistory, PrintingType
from modules.numeric import safe_number
from .utils import current_catalog, default_electricity_cost, get_json_payload


printing_history_bp = Blueprint(
    "printing_history", __name__, url_prefix="/api/printing-history"
)


def _calculate(payload: Dict[str, Any]) -> Tuple[HistoricalCost, Tuple[FilamentConsumption, ...], float, float]:
    consumptions = parse_consumptions(payload.get("filamentConsumptions"))
    hours = safe_number(payload.get("printTimeHours"))
    hours += safe_number(payload.get("printTimeMinutes")) / 60.0

    electricity = payload.get("electricityCostPerKwh")
    electricity = safe_number(default_electricity_cost() if electricity is None else electricity)

    cost = current_app.config["CALCULATOR"].historical(
        consumptions,
        current_catalog(),
        str(payload.get("printerId") or ""),
        hours,
        electricity,
    )
    return cost, consumptions, hours, electricity


@printing_history_bp.route("/calculate", methods=["POST"])
def calculate_printing_cost():
    """Production cost for a print without storing it."""
    cost, _, _, _ = _calculate(get_json_payload())
    result = cost.to_dict()
    result["currency"] = current_app.config["CURRENCY_CODE"]
    return jsonify(result)


@printing_history_bp.route("", methods=["POST"])
def create_printing_history():
    """
    Record a completed print.

    Body: ``printerId``, ``printTimeHours``/``printTimeMinutes``,
    ``filamentConsumptions``, optional ``electricityCostPerKwh``, ``type``,
    ``productId`` and ``saleDetailId``.
    """
    payload = get_json_payload()
    cost, consumptions, hours, electricity = _calculate(payload)

    record = PrintingHistory(
        cost=cost,
        printer_id=str(payload.get("printerId") or ""),
        print_time_hours=hours,
        electricity_cost_per_kwh=electricity,
        filament_consumptions=list(consumptions),
        type=PrintingType.parse(payload.get("type")),
        product_id=payload.get("productId") or None,
        sale_detail_id=payload.get("saleDetailId") or None,
    )
    current_app.config["RECORD_STORE"].save_printing_history(record)
    return jsonify(record.to_dict()), 201


@printing_history_bp.route("", methods=["GET"])
def list_printing_history():
    store = current_app.config["RECORD_STORE"]
    return jsonify({"printingHistory": [r.to_dict() for r in store.list_printing_history()]})


@printing_history_bp.route("/<record_id>", methods=["GET"])
def get_printing_history(record_id: str):
    store = current_app.config["RECORD_STORE"]
    return jsonify(store.get_printing_history(record_id).to_dict())
