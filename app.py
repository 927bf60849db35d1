"""
PrintCostWeb - Flask Application Entry Point.

This is a slim app factory that:
1. Loads the rate catalog (fail-fast if it cannot be read)
2. Starts the optional catalog refresh thread
3. Creates the cost calculator and the record store
4. Registers route blueprints
5. Sets up JSON error handlers

ARCHITECTURE:
    Main Thread
    ├── Catalog load (fail-fast)
    ├── Flask request handling (cost engine is pure, no shared state)
    └── Cleanup on shutdown

    Catalog Thread (optional, background)
    └── Reloads the catalog file when it changes
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from logging_config import setup_logging, get_logger
from core.exceptions import CatalogLoadError, PrintCostError
from modules.calculator import CostCalculator
from services.catalog_service import CatalogService
from services.record_store import RecordStore
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In PyInstaller bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(config_object: str = "config.Config") -> Flask:
    """
    Application factory - creates and configures Flask app.

    FAIL-FAST: If the catalog cannot be loaded, the app will not start.

    Args:
        config_object: Import path of the configuration class

    Returns:
        Configured Flask application

    Raises:
        CatalogLoadError: If the catalog file is missing or malformed
    """
    # Use override=True so .env file always takes precedence over shell environment
    env_file = _get_base_path() / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting PrintCostWeb in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # CORE INITIALIZATION (FAIL-FAST)
    # =========================================================================

    catalog_service = CatalogService(
        app.config["CATALOG_PATH"],
        refresh_interval_seconds=app.config.get("CATALOG_REFRESH_SECONDS", 0.0),
    )

    try:
        catalog_service.load()
    except CatalogLoadError as e:
        logger.error(f"FATAL: Cannot start application - {e}")
        raise

    catalog_service.start()
    app.config["CATALOG_SERVICE"] = catalog_service

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    app.config["CALCULATOR"] = CostCalculator(
        default_margin_percent=app.config["DEFAULT_PROFIT_MARGIN"]
    )
    app.config["RECORD_STORE"] = RecordStore()
    logger.info(
        f"Calculator ready (default margin {app.config['DEFAULT_PROFIT_MARGIN']}%, "
        f"electricity {app.config['ELECTRICITY_COST_PER_KWH']}/kWh)"
    )

    # =========================================================================
    # CLEANUP REGISTRATION
    # =========================================================================

    def cleanup():
        """Cleanup on application shutdown."""
        logger.info("Shutting down...")
        catalog_service.stop()
        logger.info("Shutdown complete")

    atexit.register(cleanup)

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(PrintCostError)
    def handle_app_error(e: PrintCostError):
        if e.status_code >= 500:
            logger.error(f"{type(e).__name__}: {e}")
        else:
            logger.warning(f"{type(e).__name__}: {e}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.name, "details": {"description": e.description}}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        logger.error(f"500 error: {e}", exc_info=True)
        return jsonify({"error": "An unexpected error occurred", "details": {}}), 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
