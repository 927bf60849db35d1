"""Shared fixtures for the cost engine and API tests."""

import pytest

from models.catalog import CatalogSnapshot
from models.job import FilamentConsumption, JobDraft
from modules.calculator import CostCalculator


CATALOG_DOCUMENT = {
    "filaments": [
        {"id": "pla-black", "name": "PLA Black", "material": "PLA", "costPerGram": 0.05},
        {"id": "petg-clear", "name": "PETG Clear", "material": "PETG", "costPerGram": 0.08},
        {"id": "free-sample", "name": "Sample spool", "costPerGram": 0},
    ],
    "printers": [
        {"id": "mk4", "name": "MK4", "kwhPerHour": 0.2},
        {"id": "x1c", "name": "X1C", "kwhPerHour": 0.35},
    ],
    "workPackages": [
        {"id": "setup", "calculationType": "Fixed", "value": 10},
        {"id": "painting", "calculationType": "Multiply", "value": 8},
    ],
}


@pytest.fixture
def catalog_document():
    """Plain catalog document (as stored in the JSON file)."""
    return CATALOG_DOCUMENT


@pytest.fixture
def catalog():
    """Catalog snapshot with two printers, three filaments and two work packages."""
    return CatalogSnapshot.from_dict(CATALOG_DOCUMENT, source="tests")


@pytest.fixture
def calculator():
    """Calculator with a 30% default margin."""
    return CostCalculator(default_margin_percent=30.0)


@pytest.fixture
def basic_draft():
    """100 g of PLA, 5 hours at 0.15/kWh, one unit, no tax or extras."""
    return JobDraft(
        filament_consumptions=(FilamentConsumption("pla-black", 100.0),),
        print_time_hours=5.0,
        quantity=1,
        electricity_cost_per_kwh=0.15,
    )


@pytest.fixture
def app():
    """Flask app with the testing configuration and the bundled catalog."""
    from app import create_app

    flask_app = create_app("config.TestingConfig")
    yield flask_app
    flask_app.config["CATALOG_SERVICE"].stop()


@pytest.fixture
def client(app):
    return app.test_client()
