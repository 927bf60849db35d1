"""
Catalog routes.

Handles:
- GET  /api/catalog        - Current filament, printer and work package rates
- POST /api/catalog/reload - Re-read the catalog file now
"""

from flask import Blueprint, current_app, jsonify

from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api/catalog")


@catalog_bp.route("", methods=["GET"])
def get_catalog():
    snapshot = current_app.config["CATALOG_SERVICE"].get_snapshot()
    data = snapshot.to_dict()
    data["ageSeconds"] = snapshot.age_seconds
    return jsonify(data)


@catalog_bp.route("/reload", methods=["POST"])
def reload_catalog():
    """
    Force a reload.

    A broken file raises CatalogLoadError (HTTP 503) and the previous
    snapshot stays active.
    """
    logger.info("Catalog reload requested")
    snapshot = current_app.config["CATALOG_SERVICE"].load()
    return jsonify(snapshot.to_dict())
