"""
Custom exceptions for PrintCostWeb.

Exception Hierarchy:
    PrintCostError (base)
    ├── CatalogLoadError       - Catalog file missing or malformed (startup failure)
    ├── CatalogNotReadyError   - No catalog loaded yet (runtime, graceful)
    ├── InvalidRequestError    - Malformed request payload (HTTP 400)
    │   └── InvalidMarginError - Unknown margin kind or non-standard tier
    └── RecordNotFoundError    - Unknown quotation / printing history id (HTTP 404)

The cost engine itself raises none of these: blank or unknown inputs inside
a calculation contribute zero. These errors belong to the application layer
around it.
"""

from typing import Optional, Dict, Any


class PrintCostError(Exception):
    """
    Base exception for all PrintCostWeb errors.

    Carries a human-readable message plus a details dictionary that the
    HTTP error handlers return to the client.
    """

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}


# =============================================================================
# STARTUP ERRORS - Application will not start if these occur
# =============================================================================

class CatalogLoadError(PrintCostError):
    """
    The rate catalog could not be loaded.

    At startup this is FATAL. During a background refresh it is logged and
    the previous snapshot stays in use.

    Typical causes:
    - CATALOG_PATH points to a file that does not exist
    - The file is not valid JSON or not a JSON object
    - A record is missing its id
    """

    status_code = 503

    def __init__(self, path: str, reason: str):
        message = f"Could not load catalog from {path}: {reason}"
        details = {
            "catalog_path": path,
            "resolution": "Check CATALOG_PATH in .env and the catalog file contents"
        }
        super().__init__(message, details)
        self.path = path
        self.reason = reason


# =============================================================================
# RUNTIME ERRORS - Application continues, the request fails gracefully
# =============================================================================

class CatalogNotReadyError(PrintCostError):
    """No catalog snapshot has been loaded yet."""

    status_code = 503

    def __init__(self, message: str = "Catalog not yet loaded"):
        details = {
            "resolution": "Wait for the catalog to load or trigger /api/catalog/reload"
        }
        super().__init__(message, details)


class InvalidRequestError(PrintCostError):
    """
    A request payload could not be interpreted.

    Raised at the HTTP boundary only, for structural problems (wrong JSON
    type, missing required text). Numeric fields are never rejected here:
    blank or unparseable numbers are treated as zero.
    """

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message, error_details)
        self.field = field


class InvalidMarginError(InvalidRequestError):
    """Margin selection uses an unknown kind or a tier outside the standard set."""

    def __init__(self, kind: str, percent: Any = None,
                 allowed_tiers: Optional[list] = None):
        if allowed_tiers is not None:
            message = f"Margin tier {percent} is not one of {allowed_tiers}"
        else:
            message = f"Unknown margin kind: {kind}"
        details = {"kind": kind, "percent": percent}
        if allowed_tiers is not None:
            details["allowed_tiers"] = allowed_tiers
        super().__init__(message, field="margin", details=details)
        self.kind = kind
        self.percent = percent


class RecordNotFoundError(PrintCostError):
    """A stored quotation or printing history record does not exist."""

    status_code = 404

    def __init__(self, record_type: str, record_id: str):
        message = f"{record_type} {record_id} not found"
        super().__init__(message, {"record_type": record_type, "record_id": record_id})
        self.record_type = record_type
        self.record_id = record_id
