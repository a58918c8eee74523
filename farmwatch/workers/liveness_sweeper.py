"""
Liveness Sweeper
================

Background thread that runs ``ThresholdService.sweep_all`` at a fixed
interval. A failing sweep is logged and the next one runs on schedule.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from farmwatch.services.application.threshold_service import ThresholdService

logger = logging.getLogger(__name__)


class LivenessSweeper:
    def __init__(self, threshold_service: "ThresholdService", interval_seconds: float = 300.0):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._service = threshold_service
        self._interval = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run_loop, name="LivenessSweeper", daemon=True)
        self._thread.start()
        logger.info("Liveness sweeper started (every %ss)", self._interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Liveness sweeper stopped")

    def run_once(self) -> int:
        """Run one sweep and return the number of events it produced."""
        return len(self._service.sweep_all())

    def _run_loop(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self.run_once()
            except Exception as e:
                logger.error("Liveness sweep failed: %s", e, exc_info=True)
