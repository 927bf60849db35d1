"""
In-memory persistence for quotations and printing history records.

The cost engine never writes storage; routes hand finished snapshots to
this store. Records live for the lifetime of the process.

Thread Safety:
    - Uses threading.Lock for all operations
    - Stored records are never recalculated; readers get the same objects
"""

from __future__ import annotations

import threading
from typing import Dict, List

from core.exceptions import RecordNotFoundError
from models.records import PrintingHistory, Quotation
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class RecordStore:
    """
    Thread-safe storage for Quotation and PrintingHistory snapshots.

    Usage:
        store = RecordStore()
        store.save_quotation(quotation)
        quotation = store.get_quotation(quotation_id)   # RecordNotFoundError if unknown
    """

    def __init__(self):
        self._quotations: Dict[str, Quotation] = {}
        self._printing_history: Dict[str, PrintingHistory] = {}
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Quotations
    # -------------------------------------------------------------------------

    def save_quotation(self, quotation: Quotation) -> Quotation:
        with self._lock:
            self._quotations[quotation.id] = quotation
        logger.info(
            f"Saved quotation {quotation.id[:8]} '{quotation.title}' "
            f"(final value {quotation.breakdown.final_value})"
        )
        return quotation

    def get_quotation(self, quotation_id: str) -> Quotation:
        with self._lock:
            quotation = self._quotations.get(quotation_id)
        if quotation is None:
            raise RecordNotFoundError("Quotation", quotation_id)
        return quotation

    def list_quotations(self) -> List[Quotation]:
        """All quotations, newest first."""
        with self._lock:
            quotations = list(self._quotations.values())
        return sorted(quotations, key=lambda q: q.created_at, reverse=True)

    def delete_quotation(self, quotation_id: str) -> None:
        with self._lock:
            if self._quotations.pop(quotation_id, None) is None:
                raise RecordNotFoundError("Quotation", quotation_id)
        logger.info(f"Deleted quotation {quotation_id[:8]}")

    # -------------------------------------------------------------------------
    # Printing history
    # -------------------------------------------------------------------------

    def save_printing_history(self, record: PrintingHistory) -> PrintingHistory:
        with self._lock:
            self._printing_history[record.id] = record
        logger.info(
            f"Saved printing history {record.id[:8]} ({record.type.value}, "
            f"total cost {record.cost.total_cost})"
        )
        return record

    def get_printing_history(self, record_id: str) -> PrintingHistory:
        with self._lock:
            record = self._printing_history.get(record_id)
        if record is None:
            raise RecordNotFoundError("PrintingHistory", record_id)
        return record

    def list_printing_history(self) -> List[PrintingHistory]:
        """All printing history records, newest first."""
        with self._lock:
            records = list(self._printing_history.values())
        return sorted(records, key=lambda r: r.created_at, reverse=True)
