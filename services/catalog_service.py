"""
Catalog service with optional background refresh thread.

Loads filament, printer and work package rates from a JSON file into an
immutable CatalogSnapshot. Routes read the current snapshot; the cost engine
receives it as plain in-memory lookup tables.

Thread Safety:
    - Each (re)load builds a new CatalogSnapshot
    - Readers get the current snapshot via an atomic reference swap
    - A lock serializes loads so a forced reload and the refresh thread
      never interleave

Usage:
    # At app startup
    catalog_service = CatalogService(path, refresh_interval_seconds=60)
    catalog_service.load()          # raises CatalogLoadError (fail-fast)
    catalog_service.start()         # optional background refresh

    # In routes
    snapshot = catalog_service.get_snapshot_or_raise()

    # At app shutdown
    catalog_service.stop()
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from core.exceptions import CatalogLoadError, CatalogNotReadyError
from models.catalog import CatalogSnapshot
from logging_config import get_logger, set_thread_name


# Module logger
logger = get_logger(__name__)


class CatalogService:
    """
    Provider of rate catalogs for the cost engine.

    The file is re-read only when its modification time changes, so a
    short refresh interval is cheap.

    Attributes:
        path: Catalog JSON file
        refresh_interval_seconds: Time between refresh checks (0 = no thread)
        is_running: Whether the background thread is active
    """

    def __init__(self, path: str, refresh_interval_seconds: float = 0.0):
        self.path = Path(path)
        self._refresh_interval = refresh_interval_seconds

        # Thread control
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._is_running = False
        self._load_lock = threading.Lock()

        # Start with empty snapshot so get_snapshot() never returns None
        self._current_snapshot: CatalogSnapshot = CatalogSnapshot.create_empty()
        self._loaded_mtime: Optional[float] = None
        self._consecutive_failures = 0

        logger.info(
            f"CatalogService initialized (path: {self.path}, "
            f"refresh interval: {refresh_interval_seconds}s)"
        )

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def refresh_interval_seconds(self) -> float:
        return self._refresh_interval

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self) -> CatalogSnapshot:
        """
        Read the catalog file and swap in a new snapshot.

        Returns:
            The new snapshot

        Raises:
            CatalogLoadError: file missing, unreadable or malformed
        """
        with self._load_lock:
            document = self._read_document()
            try:
                snapshot = CatalogSnapshot.from_dict(document, source=str(self.path))
            except (KeyError, TypeError, AttributeError) as e:
                raise CatalogLoadError(str(self.path), f"invalid record: {e}") from e

            self._current_snapshot = snapshot
            self._loaded_mtime = self._mtime()

        logger.info(
            f"Catalog loaded: {len(snapshot.filaments)} filaments, "
            f"{len(snapshot.printers)} printers, "
            f"{len(snapshot.work_packages)} work packages"
        )
        return snapshot

    def _read_document(self) -> Dict[str, Any]:
        if not self.path.exists():
            raise CatalogLoadError(str(self.path), "file not found")
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogLoadError(str(self.path), str(e)) from e
        if not isinstance(document, dict):
            raise CatalogLoadError(str(self.path), "top level must be a JSON object")
        return document

    def _mtime(self) -> Optional[float]:
        try:
            return self.path.stat().st_mtime
        except OSError:
            return None

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def get_snapshot(self) -> CatalogSnapshot:
        """Current snapshot (never None, may be empty)."""
        return self._current_snapshot

    def get_snapshot_or_raise(self) -> CatalogSnapshot:
        """
        Current snapshot, raising if nothing was ever loaded.

        Raises:
            CatalogNotReadyError: no catalog loaded yet
        """
        snapshot = self._current_snapshot
        if snapshot.is_empty and not snapshot.source:
            raise CatalogNotReadyError()
        return snapshot

    # -------------------------------------------------------------------------
    # Background refresh
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """
        Start the background refresh thread.

        Does nothing when the refresh interval is 0 or the thread already runs.
        """
        if self._refresh_interval <= 0:
            logger.info("Catalog refresh disabled (interval is 0)")
            return
        if self._is_running:
            logger.warning("CatalogService already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._refresh_loop,
            name="Catalog",
            daemon=True
        )
        self._is_running = True
        self._thread.start()

        logger.info("Catalog refresh thread started")

    def stop(self) -> None:
        """Stop the background refresh thread. Safe to call multiple times."""
        if not self._is_running:
            return

        logger.info("Stopping catalog refresh thread...")
        self._stop_event.set()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
            if self._thread.is_alive():
                logger.warning("Catalog thread did not stop cleanly")

        self._is_running = False
        self._thread = None
        logger.info("Catalog refresh thread stopped")

    def refresh_if_changed(self) -> bool:
        """
        Reload when the file's modification time changed.

        Failures are logged and the previous snapshot stays in use.

        Returns:
            True if a new snapshot was loaded
        """
        mtime = self._mtime()
        if mtime is not None and mtime == self._loaded_mtime:
            return False

        try:
            self.load()
        except CatalogLoadError as e:
            self._consecutive_failures += 1
            if self._consecutive_failures == 1:
                logger.warning(f"Catalog refresh failed, keeping previous snapshot: {e}")
            elif self._consecutive_failures % 5 == 0:
                logger.error(
                    f"Catalog refresh still failing ({self._consecutive_failures} consecutive): {e}"
                )
            return False

        if self._consecutive_failures > 0:
            logger.info(f"Catalog refresh recovered after {self._consecutive_failures} failures")
        self._consecutive_failures = 0
        return True

    def _refresh_loop(self) -> None:
        set_thread_name("Catalog")
        logger.info("Catalog refresh loop starting")

        while not self._stop_event.wait(timeout=self._refresh_interval):
            self.refresh_if_changed()

        logger.info("Catalog refresh loop exiting")
