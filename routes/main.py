"""
Main routes (index, health).
"""

from flask import Blueprint, current_app, jsonify

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def index():
    """List the API entry points."""
    return jsonify({
        "service": "print-cost-web",
        "endpoints": [
            "/api/calculate",
            "/api/margin-tiers",
            "/api/quotations",
            "/api/printing-history",
            "/api/sales/detail-price",
            "/api/catalog",
            "/health",
        ],
    })


@main_bp.route("/health", methods=["GET"])
def health():
    """Health check: process is up and whether a catalog is loaded."""
    snapshot = current_app.config["CATALOG_SERVICE"].get_snapshot()
    return jsonify({
        "status": "ok",
        "catalogLoaded": bool(snapshot.source),
        "catalogAgeSeconds": snapshot.age_seconds,
    })
