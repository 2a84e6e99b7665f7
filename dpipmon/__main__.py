"""Entry point for DPIP Monitor."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from dpipmon.config import SOURCE_FAKE, Settings, load_settings
from dpipmon.logging_config import configure_logging
from dpipmon.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def create_source(settings: Settings):
    """Build the telemetry source the settings ask for.

    Returns:
        (source, user_message) where user_message is set when the dashboard
        is not showing live data
    """
    if settings.source == SOURCE_FAKE:
        from dpipmon.fake_source import FakeTelemetrySource

        logger.info("Using FakeTelemetrySource (DPIPMON_SOURCE=fake)")
        return FakeTelemetrySource(), "Using simulated data (DPIPMON_SOURCE=fake)"

    from dpipmon.api_client import TelemetryClient

    client = TelemetryClient(base_url=settings.api_base, timeout_s=settings.request_timeout_s)
    logger.info("Using TelemetryClient: %s", settings.api_base)
    return client, None


def main():
    """Main entry point for the DPIP Monitor application."""
    configure_logging()
    settings = load_settings()

    app = QApplication(sys.argv)

    source, user_message = create_source(settings)

    window = MainWindow(source=source, settings=settings)
    if user_message:
        window.setWindowTitle(f"{window.windowTitle()} - {user_message}")

    window.show()
    window.start()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
