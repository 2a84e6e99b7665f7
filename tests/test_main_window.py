"""Tests for MainWindow rendering driven by view-state events."""

import pytest
from PySide6.QtCore import QCoreApplication

from dpipmon.config import Settings
from dpipmon.fake_source import DEFAULT_ISPS, FakeTelemetrySource
from dpipmon.models import NO_DATA, Sample, Target, TimeRange
from dpipmon.ui.main_window import PAGE_DATA, PAGE_MESSAGE, MainWindow
from dpipmon.view_state import (
    NETWORK_DATA_ERROR,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    IspListFailed,
    IspListLoaded,
)

ISP = DEFAULT_ISPS[0]
NOW_MS = 1_700_000_000_000


@pytest.fixture
def window(qapp):
    """Create MainWindow with a simulated source and a 1 hour default range."""
    settings = Settings(default_isp=ISP, default_range=TimeRange.HOUR_1, refresh_interval_ms=60_000)
    win = MainWindow(FakeTelemetrySource(seed=3), settings)
    yield win
    win.close()
    win.scheduler.thread_pool.waitForDone(1000)
    win.deleteLater()
    QCoreApplication.processEvents()


def deliver(window, samples, request_id=None):
    """Feed a started+succeeded pair through dispatch, as the scheduler would."""
    if request_id is None:
        request_id = window.state.request_id + 1
    window.dispatch(FetchStarted(request_id=request_id))
    window.dispatch(FetchSucceeded(request_id=request_id, samples=tuple(samples), now_ms=NOW_MS))


class TestInitialRender:
    """Test the window before any data arrives."""

    def test_defaults_from_settings(self, window):
        assert window.state.selected_isp == ISP
        assert window.state.selected_range is TimeRange.HOUR_1
        assert window.range_combo.currentData() == 60
        assert window.isp_combo.currentData() == ISP

    def test_isp_selector_disabled_until_list_loads(self, window):
        assert not window.isp_combo.isEnabled()

        window.dispatch(IspListLoaded(isps=DEFAULT_ISPS))

        assert window.isp_combo.isEnabled()
        # Placeholder plus every ISP
        assert window.isp_combo.count() == len(DEFAULT_ISPS) + 1

    def test_message_page_shown_without_data(self, window):
        assert window.content_stack.currentIndex() == PAGE_MESSAGE

    def test_no_isp_selected(self, qapp):
        win = MainWindow(FakeTelemetrySource(), Settings(default_isp=""))
        try:
            assert "Select an ISP" in win.message_label.text()
            assert not win.range_combo.isEnabled()
            assert not win.refresh_button.isEnabled()
        finally:
            win.close()


class TestDataRender:
    """Test charts, stats and table after a successful fetch."""

    def test_healthy_series(self, window):
        deliver(window, [Sample(ping=10, loss=0, ping_dev=20, loss_dev=0)] * 120)

        assert window.content_stack.currentIndex() == PAGE_DATA
        assert window.point_model.rowCount() == 120
        assert window.charts[Target.EDGE].point_count() == 120

        labels = window.stats_panels[Target.EDGE].value_labels
        assert labels["avg_latency"].text() == "10ms"
        assert labels["avg_loss"].text() == "0%"
        assert labels["completeness"].text() == "100%"
        assert window.stats_panels[Target.ORIGIN].value_labels["avg_latency"].text() == "20ms"

    def test_sparse_series_pads_timeline(self, window):
        deliver(window, [Sample(ping=10, loss=0, ping_dev=NO_DATA, loss_dev=NO_DATA)] * 30)

        assert window.point_model.rowCount() == 120
        assert window.charts[Target.EDGE].point_count() == 30
        assert window.charts[Target.ORIGIN].point_count() == 0
        assert not window.stats_panels[Target.ORIGIN].empty_label.isHidden()
        assert window.stats_panels[Target.EDGE].empty_label.isHidden()

    def test_empty_response_shows_no_data_message(self, window):
        deliver(window, [])

        assert window.content_stack.currentIndex() == PAGE_MESSAGE
        assert "No network data" in window.message_label.text()

    def test_loading_disables_selectors(self, window):
        window.dispatch(IspListLoaded(isps=DEFAULT_ISPS))
        window.dispatch(FetchStarted(request_id=window.state.request_id + 1))

        assert not window.isp_combo.isEnabled()
        assert not window.range_combo.isEnabled()
        assert "Loading" in window.status_label.text()


class TestErrors:
    """Test user-visible error states."""

    def test_isp_list_failure(self, window):
        window.dispatch(IspListFailed(reason="boom"))

        assert not window.error_label.isHidden()
        assert "ISP list" in window.error_label.text()
        assert not window.isp_combo.isEnabled()

    def test_fetch_failure_clears_charts(self, window):
        deliver(window, [Sample(ping=10, loss=0)] * 120)
        request_id = window.state.request_id + 1
        window.dispatch(FetchStarted(request_id=request_id))
        window.dispatch(FetchFailed(request_id=request_id, reason="timeout"))

        assert window.error_label.text() == NETWORK_DATA_ERROR
        assert window.content_stack.currentIndex() == PAGE_MESSAGE
        assert window.point_model.rowCount() == 0
        assert all(chart.point_count() == 0 for chart in window.charts.values())

    def test_selection_change_clears_charts(self, window):
        deliver(window, [Sample(ping=10, loss=0)] * 120)
        assert window.charts[Target.EDGE].point_count() == 120

        window.select(range_minutes=180)

        assert window.charts[Target.EDGE].point_count() == 0
        assert "Loading" in window.message_label.text()


class TestControls:
    """Test selection and refresh wiring."""

    def test_range_change_updates_scheduler(self, window):
        window.select(range_minutes=180)

        assert window.state.selected_range is TimeRange.HOUR_3
        assert window.scheduler.get_stats()["range_minutes"] == 180
        assert window.state.loading

    def test_auto_refresh_toggle(self, window):
        window.scheduler.set_target(ISP, 60)
        window.on_auto_refresh_toggled(True)
        assert window.scheduler.is_auto_refreshing

        window.on_auto_refresh_toggled(False)

        assert not window.state.auto_refresh
        assert not window.scheduler.is_auto_refreshing
        assert window.auto_refresh_button.text() == "Auto Refresh: Off"

    def test_close_stops_timer(self, window):
        window.show()
        window.scheduler.set_target(ISP, 60)
        window.scheduler.start_auto_refresh()

        window.close()

        assert not window.scheduler.timer.isActive()
