"""Periodic telemetry refresh with stale-response protection."""

import logging

from PySide6.QtCore import QObject, QThreadPool, QTimer, Signal

from dpipmon.config import DEFAULT_REFRESH_MS
from dpipmon.source import TelemetrySource
from dpipmon.workers import IspListWorker, StatusWorker

logger = logging.getLogger(__name__)

# Status requests use generation ids starting at 1
ISP_LIST_REQUEST_ID = 0


class RefreshScheduler(QObject):
    """Issues telemetry requests for the current ISP/range selection.

    Key features:
    - One-shot ISP list request
    - Status requests on demand and from a periodic timer
    - Every status request gets a new generation id; results from older
      generations are dropped, so a superseded request never reaches the UI
    - Timer is cancelled on stop, on empty selection, and on shutdown

    Thread-safe: All state access on Qt main thread via signals/slots.
    """

    # Signals
    isp_list_ready = Signal(object)  # list[str]
    isp_list_failed = Signal(str)
    fetch_started = Signal(int)  # generation_id
    status_ready = Signal(object, int)  # (StatusSnapshot, generation_id)
    status_failed = Signal(str, int)  # (error_msg, generation_id)

    def __init__(
        self,
        source: TelemetrySource,
        interval_ms: int = DEFAULT_REFRESH_MS,
        parent=None,
    ):
        """Initialize refresh scheduler.

        Args:
            source: Telemetry source used by the workers
            interval_ms: Auto-refresh interval in milliseconds
            parent: Qt parent object
        """
        super().__init__(parent)

        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")

        self.source = source
        self.interval_ms = interval_ms

        # Current selection
        self._isp = ""
        self._range_minutes = 0

        # Generation ID for invalidating stale results
        self._generation_id = 0

        # Keep workers referenced until they finish so their signals stay alive
        self._workers = {}

        # Threading
        self.thread_pool = QThreadPool.globalInstance()

        # Timer for periodic refresh
        self.timer = QTimer(self)
        self.timer.timeout.connect(self._on_timer_tick)

        self.is_auto_refreshing = False

    @property
    def generation_id(self) -> int:
        return self._generation_id

    def set_target(self, isp: str, range_minutes: int):
        """Change the selection. In-flight results for the old one become stale.

        Args:
            isp: ISP identifier ("" means nothing selected)
            range_minutes: Display range in minutes
        """
        if isp == self._isp and range_minutes == self._range_minutes:
            return

        self._isp = isp
        self._range_minutes = range_minutes
        self._generation_id += 1
        logger.debug(
            "Target changed: isp=%s, range=%d (generation_id=%d)",
            isp,
            range_minutes,
            self._generation_id,
        )

        if not isp:
            self.stop_auto_refresh()

    def load_isp_list(self):
        """Request the ISP list once."""
        worker = IspListWorker(self.source, request_id=ISP_LIST_REQUEST_ID)
        worker.signals.result.connect(self._on_isp_list_ready)
        worker.signals.error.connect(self._on_isp_list_error)
        worker.signals.finished.connect(self._on_worker_finished)
        self._workers[ISP_LIST_REQUEST_ID] = worker
        self.thread_pool.start(worker)

    def refresh_now(self) -> int | None:
        """Request the status series for the current target.

        Returns:
            The generation id of the new request, or None if nothing is selected
        """
        if not self._isp:
            return None

        self._generation_id += 1
        generation_id = self._generation_id

        worker = StatusWorker(self.source, self._isp, self._range_minutes, generation_id)
        worker.signals.result.connect(self._on_status_ready)
        worker.signals.error.connect(self._on_status_error)
        worker.signals.finished.connect(self._on_worker_finished)
        self._workers[generation_id] = worker

        self.fetch_started.emit(generation_id)
        self.thread_pool.start(worker)

        logger.debug(
            "Status requested: isp=%s, range=%d, generation_id=%d",
            self._isp,
            self._range_minutes,
            generation_id,
        )
        return generation_id

    def start_auto_refresh(self):
        """Start the periodic refresh timer."""
        if self.is_auto_refreshing:
            return
        if not self._isp:
            logger.debug("Auto-refresh not started: no ISP selected")
            return

        self.is_auto_refreshing = True
        self.timer.start(self.interval_ms)
        logger.info("Auto-refresh started: interval=%dms", self.interval_ms)

    def stop_auto_refresh(self):
        """Cancel the periodic refresh timer."""
        if not self.is_auto_refreshing:
            return

        self.is_auto_refreshing = False
        self.timer.stop()
        logger.info("Auto-refresh stopped")

    def shutdown(self, wait_ms: int = 1000):
        """Stop the timer, invalidate in-flight work and wait briefly for the pool."""
        self.stop_auto_refresh()
        self._generation_id += 1
        logger.info("Scheduler shut down: %s", self.get_stats())
        self.thread_pool.waitForDone(wait_ms)

    def _on_timer_tick(self):
        if not self.is_auto_refreshing:
            return
        self.refresh_now()

    def _on_isp_list_ready(self, isps, _request_id):
        self.isp_list_ready.emit(list(isps))

    def _on_isp_list_error(self, error_msg, _request_id):
        logger.error("ISP list request failed: %s", error_msg)
        self.isp_list_failed.emit(error_msg)

    def _on_status_ready(self, snapshot, generation_id):
        """Forward a status result unless a newer request has been issued since."""
        if generation_id != self._generation_id:
            logger.debug(
                "Ignoring stale result: generation_id=%d (current=%d)",
                generation_id,
                self._generation_id,
            )
            return
        self.status_ready.emit(snapshot, generation_id)

    def _on_status_error(self, error_msg, generation_id):
        if generation_id != self._generation_id:
            logger.debug(
                "Ignoring stale error: generation_id=%d (current=%d)",
                generation_id,
                self._generation_id,
            )
            return
        logger.error("Status request failed: %s", error_msg)
        self.status_failed.emit(error_msg, generation_id)

    def _on_worker_finished(self, request_id):
        self._workers.pop(request_id, None)

    def get_stats(self):
        """Get scheduler statistics.

        Returns:
            Dict with scheduler state info
        """
        return {
            "isp": self._isp,
            "range_minutes": self._range_minutes,
            "in_flight": len(self._workers),
            "auto_refresh": self.is_auto_refreshing,
            "generation_id": self._generation_id,
        }
