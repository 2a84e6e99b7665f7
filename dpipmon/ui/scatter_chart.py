"""Latency scatter chart colored by packet-loss severity."""

from PySide6.QtCharts import QChart, QChartView, QDateTimeAxis, QScatterSeries, QValueAxis
from PySide6.QtCore import QDateTime, Qt
from PySide6.QtGui import QColor, QCursor, QPainter
from PySide6.QtWidgets import QToolTip

from dpipmon.models import DisplayPoint
from dpipmon.severity import Severity
from dpipmon.timeline import axis_ticks, format_time_label

# Severities that can carry a plotted latency value
PLOTTED_SEVERITIES = (Severity.HEALTHY, Severity.MINOR, Severity.MAJOR, Severity.SEVERE)

MIN_Y_MAX = 10.0


def group_by_severity(points: list[DisplayPoint]) -> dict[Severity, list[DisplayPoint]]:
    """Split data-bearing points into one list per severity band."""
    groups = {severity: [] for severity in PLOTTED_SEVERITIES}
    for point in points:
        if point.has_data:
            groups[point.severity].append(point)
    return groups


def axis_format(range_minutes: int) -> str:
    """Qt date format for the time axis."""
    if range_minutes <= 1440:
        return "HH:mm"
    return "d HH:00"


def tooltip_text(point: DisplayPoint, range_minutes: int) -> str:
    latency = "No data" if point.value is None else f"{point.value:g}ms"
    loss = "No data" if point.loss_percent == -1 else f"{point.loss_percent:g}%"
    return (
        f"Time: {format_time_label(point.timestamp_ms, range_minutes)}\n"
        f"Latency: {latency}\n"
        f"Loss: {loss}"
    )


class ScatterChartView(QChartView):
    """Chart view with one scatter series per severity band.

    Buckets without data are left unplotted; the time axis always spans the
    whole timeline, so gaps show as empty space.
    """

    def __init__(self, title: str = "", parent=None):
        super().__init__(parent)
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setMinimumHeight(280)

        self._range_minutes = 60
        self._points_by_ts: dict[int, DisplayPoint] = {}

        chart = QChart()
        chart.setTitle(title)
        chart.legend().setAlignment(Qt.AlignBottom)
        self.setChart(chart)

        self.x_axis = QDateTimeAxis()
        self.x_axis.setFormat("HH:mm")
        chart.addAxis(self.x_axis, Qt.AlignBottom)

        self.y_axis = QValueAxis()
        self.y_axis.setTitleText("Latency (ms)")
        self.y_axis.setLabelFormat("%d")
        self.y_axis.setRange(0, MIN_Y_MAX)
        chart.addAxis(self.y_axis, Qt.AlignLeft)

        self.series: dict[Severity, QScatterSeries] = {}
        for severity in PLOTTED_SEVERITIES:
            series = QScatterSeries()
            series.setName(severity.label)
            series.setColor(QColor(severity.color))
            series.setBorderColor(QColor(severity.color))
            series.setMarkerSize(7.0)
            series.hovered.connect(self._on_hovered)
            chart.addSeries(series)
            series.attachAxis(self.x_axis)
            series.attachAxis(self.y_axis)
            self.series[severity] = series

    def set_title(self, title: str):
        self.chart().setTitle(title)

    def set_points(self, points: list[DisplayPoint], range_minutes: int):
        """Redraw the chart from a full timeline."""
        self._range_minutes = range_minutes
        self._points_by_ts = {point.timestamp_ms: point for point in points}

        groups = group_by_severity(points)
        for severity, series in self.series.items():
            series.clear()
            for point in groups[severity]:
                series.append(float(point.timestamp_ms), float(point.value))

        if points:
            timestamps = [point.timestamp_ms for point in points]
            self.x_axis.setRange(
                QDateTime.fromMSecsSinceEpoch(timestamps[0]),
                QDateTime.fromMSecsSinceEpoch(timestamps[-1]),
            )
            self.x_axis.setTickCount(max(2, len(axis_ticks(timestamps))))
            self.x_axis.setFormat(axis_format(range_minutes))

        values = [point.value for point in points if point.has_data]
        y_max = max(values) * 1.1 if values else MIN_Y_MAX
        self.y_axis.setRange(0, max(MIN_Y_MAX, y_max))

    def clear(self):
        self.set_points([], self._range_minutes)

    def point_count(self) -> int:
        """Number of plotted markers across all series."""
        return sum(series.count() for series in self.series.values())

    def _on_hovered(self, position, state):
        if not state:
            QToolTip.hideText()
            return

        point = self._points_by_ts.get(int(round(position.x())))
        if point is not None:
            QToolTip.showText(QCursor.pos(), tooltip_text(point, self._range_minutes), self)
