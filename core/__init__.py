"""
Core module for PrintCostWeb.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
"""

from .exceptions import (
    PrintCostError,
    CatalogLoadError,
    CatalogNotReadyError,
    InvalidRequestError,
    InvalidMarginError,
    RecordNotFoundError,
)

__all__ = [
    "PrintCostError",
    "CatalogLoadError",
    "CatalogNotReadyError",
    "InvalidRequestError",
    "InvalidMarginError",
    "RecordNotFoundError",
]
