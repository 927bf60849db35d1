"""
Calculator routes.

Handles:
- POST /api/calculate    - Live cost breakdown for a job draft
- GET  /api/margin-tiers - Standard tiers and the configured default margin

The calculator is recomputed on every form change, so these endpoints hold
no state and store nothing.
"""

from flask import Blueprint, current_app, jsonify

from models.job import MARGIN_TIERS, CalculationRequest
from .utils import current_catalog, default_electricity_cost, default_margin_percent, get_json_payload

calculator_bp = Blueprint("calculator", __name__, url_prefix="/api")


@calculator_bp.route("/calculate", methods=["POST"])
def calculate():
    """
    Price a job draft.

    Body (all numeric fields optional, blank counts as zero)::

        {
            "printerId": "mk4",
            "printTimeHours": 5,
            "filamentConsumptions": [{"filamentId": "pla-black", "gramsUsed": 100}],
            "workPackageId": "none",
            "workPackageHours": 0,
            "quantity": 1,
            "taxRate": 19,
            "packagingCost": 0,
            "additionalCosts": 0,
            "margin": {"kind": "tier", "percent": 40}
        }
    """
    payload = get_json_payload()
    calc_request = CalculationRequest.from_dict(
        payload, default_electricity_cost(), default_margin_percent()
    )

    calculator = current_app.config["CALCULATOR"]
    breakdown = calculator.calculate_request(calc_request, current_catalog())

    result = calculator.describe(breakdown)
    result["margin"] = calc_request.margin.to_dict()
    result["currency"] = current_app.config["CURRENCY_CODE"]
    return jsonify(result)


@calculator_bp.route("/margin-tiers", methods=["GET"])
def margin_tiers():
    """List standard margin tiers and the default margin."""
    return jsonify({
        "tiers": [{"label": label, "percent": percent} for label, percent in MARGIN_TIERS],
        "defaultMargin": default_margin_percent(),
    })
