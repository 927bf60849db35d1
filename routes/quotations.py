"""
Quotation routes.

Handles:
- POST   /api/quotations       - Price a draft server-side and store the snapshot
- GET    /api/quotations       - List stored quotations (newest first)
- GET    /api/quotations/<id>  - One quotation
- DELETE /api/quotations/<id>  - Remove a quotation

Client-supplied totals are ignored: the stored breakdown is always the one
the engine computes from the submitted inputs.
"""

from typing import Optional

from flask import Blueprint, current_app, jsonify

from core.exceptions import InvalidRequestError
from models.job import CalculationRequest
from models.records import PrintingHistory, PrintingType, Quotation
from logging_config import get_logger
from .utils import (
    current_catalog,
    default_electricity_cost,
    default_margin_percent,
    get_json_payload,
    sanitize_text,
)


# Module logger
logger = get_logger(__name__)

quotations_bp = Blueprint("quotations", __name__, url_prefix="/api/quotations")


def _optional_id(value) -> Optional[str]:
    return str(value).strip() if value else None


@quotations_bp.route("", methods=["POST"])
def create_quotation():
    """
    Create a quotation.

    Body: everything /api/calculate accepts, plus ``title`` (required),
    ``notes``, ``clientId``, ``productId``, ``createPrintingHistory`` and
    ``printingType``.
    """
    payload = get_json_payload()

    title = sanitize_text(payload.get("title"), max_length=current_app.config["MAX_TITLE_LENGTH"])
    if not title:
        raise InvalidRequestError("Quotation title is required", field="title")
    notes = sanitize_text(payload.get("notes"), max_length=current_app.config["MAX_NOTES_LENGTH"])

    calc_request = CalculationRequest.from_dict(
        payload, default_electricity_cost(), default_margin_percent()
    )
    catalog = current_catalog()
    calculator = current_app.config["CALCULATOR"]
    store = current_app.config["RECORD_STORE"]

    breakdown = calculator.calculate_request(calc_request, catalog)

    quotation = Quotation(
        title=title,
        notes=notes,
        draft=calc_request.draft,
        breakdown=breakdown,
        margin=calc_request.margin,
        printer_id=calc_request.printer_id,
        work_package_id=calc_request.work_package_id,
        client_id=_optional_id(payload.get("clientId")),
        product_id=_optional_id(payload.get("productId")),
    )

    if payload.get("createPrintingHistory"):
        draft = calc_request.draft
        cost = calculator.historical(
            draft.filament_consumptions,
            catalog,
            calc_request.printer_id,
            draft.print_time_hours,
            draft.electricity_cost_per_kwh,
        )
        history = store.save_printing_history(PrintingHistory(
            cost=cost,
            printer_id=calc_request.printer_id,
            print_time_hours=draft.print_time_hours,
            electricity_cost_per_kwh=draft.electricity_cost_per_kwh,
            filament_consumptions=list(draft.filament_consumptions),
            type=PrintingType.parse(payload.get("printingType")),
            product_id=quotation.product_id,
            quotation_id=quotation.id,
        ))
        quotation.printing_history_id = history.id

    store.save_quotation(quotation)
    return jsonify(quotation.to_dict()), 201


@quotations_bp.route("", methods=["GET"])
def list_quotations():
    store = current_app.config["RECORD_STORE"]
    return jsonify({"quotations": [q.to_dict() for q in store.list_quotations()]})


@quotations_bp.route("/<quotation_id>", methods=["GET"])
def get_quotation(quotation_id: str):
    store = current_app.config["RECORD_STORE"]
    return jsonify(store.get_quotation(quotation_id).to_dict())


@quotations_bp.route("/<quotation_id>", methods=["DELETE"])
def delete_quotation(quotation_id: str):
    current_app.config["RECORD_STORE"].delete_quotation(quotation_id)
    logger.debug(f"Quotation {quotation_id[:8]} deleted via API")
    return "", 204
