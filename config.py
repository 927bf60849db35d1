"""
Configuration for PrintCostWeb.

Values are read from the environment (a .env file is loaded first), so the
same code runs in development, tests and production without edits.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # ==========================================================================
    # Catalog Configuration
    # ==========================================================================
    # CATALOG_PATH: JSON file holding filament, printer and work package rates
    # CATALOG_REFRESH_SECONDS: reload interval for the background thread
    #   0 disables the thread (catalog is loaded once at startup)
    # ==========================================================================
    CATALOG_PATH = os.environ.get(
        "CATALOG_PATH", str(BASE_DIR / "data" / "catalog.json")
    )
    CATALOG_REFRESH_SECONDS = float(
        os.environ.get("CATALOG_REFRESH_SECONDS", "0")
    )

    # ==========================================================================
    # Cost Calculation Defaults
    # ==========================================================================
    # ELECTRICITY_COST_PER_KWH: price of one kWh, used when a request omits it
    # DEFAULT_PROFIT_MARGIN: margin percent for sale details and for
    #   calculations that do not pick a tier or custom margin
    # CURRENCY_CODE: echoed back in responses, never converted
    # ==========================================================================
    ELECTRICITY_COST_PER_KWH = float(
        os.environ.get("ELECTRICITY_COST_PER_KWH", "600")
    )
    DEFAULT_PROFIT_MARGIN = float(
        os.environ.get("DEFAULT_PROFIT_MARGIN", "20")
    )
    CURRENCY_CODE = os.environ.get("CURRENCY_CODE", "COP")

    # Input limits for free text stored with quotations
    MAX_TITLE_LENGTH = 200
    MAX_NOTES_LENGTH = 1000


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    CATALOG_PATH = str(BASE_DIR / "data" / "catalog.json")
    CATALOG_REFRESH_SECONDS = 0.0
    ELECTRICITY_COST_PER_KWH = 0.15
    DEFAULT_PROFIT_MARGIN = 30.0
