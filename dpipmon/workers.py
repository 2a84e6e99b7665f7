"""Worker classes for background telemetry requests."""

import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from dpipmon.source import TelemetrySource

logger = logging.getLogger(__name__)


class WorkerSignals(QObject):
    """Signals for communicating between worker threads and main thread."""

    result = Signal(object, int)  # Emits (payload, request_id)
    error = Signal(str, int)  # Emits (error message, request_id)
    finished = Signal(int)  # Emits request_id when worker completes


class _TelemetryWorker(QRunnable):
    """Runs one blocking source call in a pool thread and reports via signals."""

    description = "request"

    def __init__(self, source: TelemetrySource, request_id: int):
        super().__init__()
        self.source = source
        self.request_id = request_id
        self.signals = WorkerSignals()

    def call(self):
        raise NotImplementedError

    def run(self):
        """Execute the request in background thread."""
        try:
            logger.debug("Worker starting: %s, request_id=%d", self.description, self.request_id)

            payload = self.call()

            self.signals.result.emit(payload, self.request_id)

            logger.debug("Worker completed: %s, request_id=%d", self.description, self.request_id)

        except Exception as e:
            logger.exception(
                "Worker exception: %s, request_id=%d, error=%s",
                self.description,
                self.request_id,
                str(e),
            )
            self.signals.error.emit(str(e), self.request_id)

        finally:
            self.signals.finished.emit(self.request_id)


class IspListWorker(_TelemetryWorker):
    """Fetches the ISP list."""

    description = "isp list"

    def call(self):
        return self.source.fetch_isp_list()


class StatusWorker(_TelemetryWorker):
    """Fetches the sample series for one ISP and range."""

    def __init__(self, source: TelemetrySource, isp: str, range_minutes: int, request_id: int):
        super().__init__(source, request_id)
        self.isp = isp
        self.range_minutes = range_minutes
        self.description = f"status isp={isp} range={range_minutes}"

    def call(self):
        return self.source.fetch_status(self.isp, self.range_minutes)
