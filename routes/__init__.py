"""
Flask route blueprints for PrintCostWeb.

This module contains all route handlers organized by call site:
- main: Index and health check
- calculator: Live cost breakdown and margin tiers
- quotations: Stored pricing snapshots
- printing_history: Production cost of completed prints
- sales: Sale detail pricing from recorded prints
- catalog: Rate catalog view and reload

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .calculator import calculator_bp
from .quotations import quotations_bp
from .printing_history import printing_history_bp
from .sales import sales_bp
from .catalog import catalog_bp

__all__ = [
    "main_bp",
    "calculator_bp",
    "quotations_bp",
    "printing_history_bp",
    "sales_bp",
    "catalog_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(calculator_bp)
    app.register_blueprint(quotations_bp)
    app.register_blueprint(printing_history_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(catalog_bp)
