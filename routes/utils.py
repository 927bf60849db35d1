"""Request helpers shared by the API blueprints."""

from typing import Any, Dict, Optional

import bleach
from flask import current_app, request

from core.exceptions import InvalidRequestError
from models.catalog import CatalogSnapshot


def sanitize_text(text: Any, max_length: Optional[int] = None) -> str:
    """Strip tags and surrounding whitespace from user text, then truncate."""
    if not text:
        return ""
    text = str(text).strip()
    text = bleach.clean(text, tags=[], strip=True)
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def get_json_payload() -> Dict[str, Any]:
    """
    Request body as a dict.

    Raises:
        InvalidRequestError: body missing or not a JSON object
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return payload


def current_catalog() -> CatalogSnapshot:
    """Catalog snapshot for this request (CatalogNotReadyError if none loaded)."""
    return current_app.config["CATALOG_SERVICE"].get_snapshot_or_raise()


def default_electricity_cost() -> float:
    return current_app.config["ELECTRICITY_COST_PER_KWH"]


def default_margin_percent() -> float:
    return current_app.config["DEFAULT_PROFIT_MARGIN"]
