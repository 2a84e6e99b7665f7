"""Main window for DPIP Monitor."""

import logging
from datetime import datetime

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QComboBox,
    QFrame,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QStackedWidget,
    QTableView,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from dpipmon.config import Settings
from dpipmon.models import Target, TimeRange
from dpipmon.scheduler import RefreshScheduler
from dpipmon.severity import Severity
from dpipmon.source import TelemetrySource
from dpipmon.ui.point_model import DisplayPointModel
from dpipmon.ui.scatter_chart import ScatterChartView
from dpipmon.ui.stats_panel import StatsPanel
from dpipmon.view_state import (
    AutoRefreshToggled,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    IspListFailed,
    IspListLoaded,
    SelectionChanged,
    ViewState,
    display_points,
    reduce,
    summary,
)

logger = logging.getLogger(__name__)

ISP_PLACEHOLDER = "Select an ISP to monitor"

# Pages of the content stack
PAGE_MESSAGE = 0
PAGE_DATA = 1


class MainWindow(QMainWindow):
    """Main application window.

    All rendering is driven by ``self.state``. Widgets and scheduler signals
    feed events through ``dispatch``; ``render`` then redraws from the new
    snapshot.
    """

    def __init__(self, source: TelemetrySource, settings: Settings | None = None):
        super().__init__()
        self.setWindowTitle("DPIP Network Monitor")
        self.setGeometry(100, 100, 1200, 850)

        self.settings = settings if settings is not None else Settings()

        self.state = ViewState(
            selected_isp=self.settings.default_isp,
            selected_range=self.settings.default_range,
        )

        self.scheduler = RefreshScheduler(source, interval_ms=self.settings.refresh_interval_ms, parent=self)
        self.scheduler.isp_list_ready.connect(self._on_isp_list_ready)
        self.scheduler.isp_list_failed.connect(self._on_isp_list_failed)
        self.scheduler.fetch_started.connect(self._on_fetch_started)
        self.scheduler.status_ready.connect(self._on_status_ready)
        self.scheduler.status_failed.connect(self._on_status_failed)

        self.point_model = DisplayPointModel(self)
        self.point_model.set_target_names(Target.EDGE.display_name, Target.ORIGIN.display_name)

        # ISP list currently shown in the combo, to avoid rebuilding it every render
        self._rendered_isps = None

        self.setup_ui()
        self.render()

    def start(self):
        """Load the ISP list and begin monitoring the default selection."""
        self.scheduler.set_target(self.state.selected_isp, int(self.state.selected_range))
        self.scheduler.load_isp_list()
        self.scheduler.refresh_now()
        self._sync_auto_refresh()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Handle application close event - stop the timer and drop in-flight work."""
        self.scheduler.shutdown(wait_ms=1000)
        super().closeEvent(event)

    # UI construction

    def setup_ui(self):
        """Set up the main user interface."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QHBoxLayout(central_widget)

        control_panel = self.create_control_panel()
        main_layout.addWidget(control_panel, 0)

        content_area = self.create_content_area()
        main_layout.addWidget(content_area, 1)

    def create_control_panel(self):
        """Create the left control panel."""
        panel = QFrame()
        panel.setFrameStyle(QFrame.Box)
        panel.setFixedWidth(280)

        layout = QVBoxLayout(panel)

        title = QLabel("DPIP Network Monitor")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-weight: bold; font-size: 14px; margin: 10px;")
        layout.addWidget(title)

        # ISP selection
        isp_group = QGroupBox("ISP")
        isp_layout = QVBoxLayout(isp_group)
        self.isp_combo = QComboBox()
        self.isp_combo.currentIndexChanged.connect(self.on_isp_changed)
        isp_layout.addWidget(self.isp_combo)
        layout.addWidget(isp_group)

        # Range selection
        range_group = QGroupBox("Time Range")
        range_layout = QVBoxLayout(range_group)
        self.range_combo = QComboBox()
        for time_range in TimeRange:
            self.range_combo.addItem(time_range.label, int(time_range))
        self.range_combo.currentIndexChanged.connect(self.on_range_changed)
        range_layout.addWidget(self.range_combo)
        layout.addWidget(range_group)

        # Refresh controls
        refresh_group = QGroupBox("Refresh")
        refresh_layout = QVBoxLayout(refresh_group)

        self.auto_refresh_button = QPushButton()
        self.auto_refresh_button.setCheckable(True)
        self.auto_refresh_button.toggled.connect(self.on_auto_refresh_toggled)
        refresh_layout.addWidget(self.auto_refresh_button)

        self.refresh_button = QPushButton("Refresh Now")
        self.refresh_button.clicked.connect(self.refresh_now)
        refresh_layout.addWidget(self.refresh_button)

        layout.addWidget(refresh_group)

        # Legend
        legend_group = QGroupBox("Legend")
        legend_layout = QVBoxLayout(legend_group)
        for severity in Severity:
            swatch = QLabel(f"● {severity.label}")
            swatch.setStyleSheet(f"color: {severity.color};")
            legend_layout.addWidget(swatch)
        layout.addWidget(legend_group)

        layout.addStretch()

        self.error_label = QLabel()
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet(
            "color: #B91C1C; background: #FEE2E2; border: 1px solid #F87171; padding: 6px;"
        )
        self.error_label.hide()
        layout.addWidget(self.error_label)

        self.status_label = QLabel("Status: Ready")
        self.status_label.setAlignment(Qt.AlignCenter)
        self.status_label.setWordWrap(True)
        self.status_label.setStyleSheet("font-weight: bold;")
        layout.addWidget(self.status_label)

        return panel

    def create_content_area(self):
        """Create the right area: a message page and the data page."""
        area = QFrame()
        area.setFrameStyle(QFrame.Box)
        layout = QVBoxLayout(area)

        self.content_stack = QStackedWidget()

        self.message_label = QLabel()
        self.message_label.setAlignment(Qt.AlignCenter)
        self.message_label.setWordWrap(True)
        self.message_label.setStyleSheet("font-size: 16px; color: gray;")
        self.content_stack.addWidget(self.message_label)

        tabs = QTabWidget()
        tabs.addTab(self.create_charts_tab(), "Charts")
        tabs.addTab(self.create_table_tab(), "Data")
        self.content_stack.addWidget(tabs)

        layout.addWidget(self.content_stack)
        return area

    def create_charts_tab(self):
        page = QWidget()
        layout = QVBoxLayout(page)

        stats_row = QHBoxLayout()
        self.stats_panels = {}
        for target in Target:
            panel = StatsPanel()
            self.stats_panels[target] = panel
            stats_row.addWidget(panel)
        layout.addLayout(stats_row)

        self.charts = {}
        for target in Target:
            chart = ScatterChartView()
            self.charts[target] = chart
            layout.addWidget(chart)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(page)
        return scroll

    def create_table_tab(self):
        self.table = QTableView()
        self.table.setModel(self.point_model)
        self.table.setAlternatingRowColors(True)
        self.table.setSelectionBehavior(QTableView.SelectRows)
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(QHeaderView.Stretch)
        return self.table

    # Event handling

    def dispatch(self, event):
        """Advance the view state and redraw."""
        self.state = reduce(self.state, event)
        self.render()

    def select(self, isp: str | None = None, range_minutes: int | None = None):
        """Apply a new ISP and/or range selection and fetch for it."""
        time_range = TimeRange(range_minutes) if range_minutes is not None else None
        previous = self.state
        self.dispatch(SelectionChanged(isp=isp, range_minutes=time_range))
        if self.state is previous:
            return

        logger.info(
            "Selection changed: isp=%s, range=%d",
            self.state.selected_isp,
            self.state.selected_range,
        )
        self.scheduler.set_target(self.state.selected_isp, int(self.state.selected_range))
        self.scheduler.refresh_now()
        self._sync_auto_refresh()

    def refresh_now(self):
        """Handle manual refresh."""
        self.scheduler.refresh_now()

    def on_isp_changed(self, index: int):
        isp = self.isp_combo.itemData(index)
        self.select(isp=isp or "")

    def on_range_changed(self, index: int):
        range_minutes = self.range_combo.itemData(index)
        if range_minutes is not None:
            self.select(range_minutes=range_minutes)

    def on_auto_refresh_toggled(self, checked: bool):
        self.dispatch(AutoRefreshToggled(enabled=checked))
        self._sync_auto_refresh()

    def _sync_auto_refresh(self):
        if self.state.should_auto_refresh:
            self.scheduler.start_auto_refresh()
        else:
            self.scheduler.stop_auto_refresh()

    def _on_isp_list_ready(self, isps):
        logger.info("ISP list loaded: %d entries", len(isps))
        self.dispatch(IspListLoaded(isps=tuple(isps)))

    def _on_isp_list_failed(self, error_msg):
        self.dispatch(IspListFailed(reason=error_msg))

    def _on_fetch_started(self, request_id):
        self.dispatch(FetchStarted(request_id=request_id))

    def _on_status_ready(self, snapshot, request_id):
        self.dispatch(
            FetchSucceeded(
                request_id=request_id,
                samples=snapshot.samples,
                now_ms=snapshot.now_ms,
                legacy=snapshot.legacy,
            )
        )

    def _on_status_failed(self, error_msg, request_id):
        self.dispatch(FetchFailed(request_id=request_id, reason=error_msg))

    # Rendering

    def render(self):
        """Redraw every widget from ``self.state``."""
        state = self.state

        self._render_controls(state)
        self._render_status(state)

        if state.error:
            self.error_label.setText(state.error)
            self.error_label.show()
        else:
            self.error_label.hide()

        if not state.selected_isp:
            self._show_message("Select an ISP above to view its latency and packet loss")
            return

        if not state.has_samples:
            if state.loading:
                self._show_message("Loading...")
            elif state.error:
                self._show_message(state.error)
            else:
                self._show_message(f"No network data for {state.selected_isp}. Please try again later.")
            return

        self._render_data(state)
        self.content_stack.setCurrentIndex(PAGE_DATA)

    def _render_controls(self, state: ViewState):
        # Programmatic updates must not feed back into dispatch
        for widget in (self.isp_combo, self.range_combo, self.auto_refresh_button):
            widget.blockSignals(True)
        try:
            if self._rendered_isps != state.isp_list:
                self.isp_combo.clear()
                self.isp_combo.addItem(ISP_PLACEHOLDER, "")
                for isp in state.isp_list:
                    self.isp_combo.addItem(isp, isp)
                self._rendered_isps = state.isp_list

            index = self.isp_combo.findData(state.selected_isp)
            if index < 0 and state.selected_isp:
                # Default selection not (yet) in the server's list
                self.isp_combo.addItem(state.selected_isp, state.selected_isp)
                index = self.isp_combo.count() - 1
            self.isp_combo.setCurrentIndex(max(index, 0))

            self.range_combo.setCurrentIndex(self.range_combo.findData(int(state.selected_range)))
            self.auto_refresh_button.setChecked(state.auto_refresh)
        finally:
            for widget in (self.isp_combo, self.range_combo, self.auto_refresh_button):
                widget.blockSignals(False)

        self.auto_refresh_button.setText("Auto Refresh: On" if state.auto_refresh else "Auto Refresh: Off")

        self.isp_combo.setEnabled(state.isp_selector_enabled)
        self.range_combo.setEnabled(state.range_selector_enabled)
        self.refresh_button.setEnabled(bool(state.selected_isp) and not state.loading)

    def _render_status(self, state: ViewState):
        if not state.selected_isp:
            self.status_label.setText("Status: No ISP selected")
            return

        text = f"Monitoring {state.selected_isp} ({state.selected_range.label})"
        if state.loading:
            text += "\nLoading..."
        elif state.last_updated_ms is not None:
            updated = datetime.fromtimestamp(state.last_updated_ms / 1000).strftime("%H:%M:%S")
            text += f"\nLast updated: {updated}"
        if state.legacy_response:
            text += "\n(server time unavailable, using local clock)"
        self.status_label.setText(text)

    def _render_data(self, state: ViewState):
        points = {target: display_points(state, target) for target in Target}

        for target in Target:
            heading = f"{state.selected_isp} to {target.display_name}"
            self.stats_panels[target].setTitle(f"{heading} statistics")
            self.stats_panels[target].show_stats(summary(state, target))
            self.charts[target].set_title(f"{heading} latency")
            self.charts[target].set_points(points[target], int(state.selected_range))

        self.point_model.set_points(points[Target.EDGE], points[Target.ORIGIN], int(state.selected_range))

    def _show_message(self, text: str):
        # Nothing from a previous series stays behind the message page
        self.point_model.clear()
        for chart in self.charts.values():
            chart.clear()
        self.message_label.setText(text)
        self.content_stack.setCurrentIndex(PAGE_MESSAGE)
