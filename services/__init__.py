"""
Services layer for PrintCostWeb.

This module contains the collaborators around the cost engine:
- CatalogService: loads rate catalogs, optional background refresh thread
- RecordStore: thread-safe store of quotations and printing history

Thread Model:
    Main Thread (Flask)
    └── CatalogService thread (optional refresh loop)
"""

from .catalog_service import CatalogService
from .record_store import RecordStore

__all__ = [
    "CatalogService",
    "RecordStore",
]
