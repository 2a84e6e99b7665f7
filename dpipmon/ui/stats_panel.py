"""Summary statistics panel for one measurement target."""

from PySide6.QtWidgets import QGridLayout, QGroupBox, QLabel

from dpipmon.models import SummaryStats

NO_STATS_TEXT = "No data available"


def format_stats(stats: SummaryStats) -> dict[str, str]:
    """Render SummaryStats as display strings keyed by field."""
    return {
        "avg_latency": f"{stats.avg_value}ms",
        "avg_loss": f"{stats.avg_loss_percent:g}%",
        "latency_range": f"{stats.min_value:g}-{stats.max_value:g}ms",
        "completeness": f"{stats.completeness_percent}%",
    }


class StatsPanel(QGroupBox):
    """Group box with average latency, average loss, latency range and completeness."""

    _CAPTIONS = {
        "avg_latency": "Average latency",
        "avg_loss": "Average loss",
        "latency_range": "Latency range",
        "completeness": "Data completeness",
    }

    def __init__(self, title: str = "", parent=None):
        super().__init__(title, parent)

        layout = QGridLayout(self)

        self.value_labels: dict[str, QLabel] = {}
        for position, (key, caption) in enumerate(self._CAPTIONS.items()):
            row, col = divmod(position, 2)
            caption_label = QLabel(caption)
            caption_label.setStyleSheet("color: gray;")
            value_label = QLabel("--")
            value_label.setStyleSheet("font-weight: bold; font-size: 16px;")
            layout.addWidget(caption_label, row * 2, col)
            layout.addWidget(value_label, row * 2 + 1, col)
            self.value_labels[key] = value_label

        self.empty_label = QLabel(NO_STATS_TEXT)
        layout.addWidget(self.empty_label, 4, 0, 1, 2)
        self.empty_label.hide()

    def show_stats(self, stats: SummaryStats | None):
        """Show figures, or the no-data message when stats is None."""
        if stats is None:
            for label in self.value_labels.values():
                label.setText("--")
            self.empty_label.show()
            return

        self.empty_label.hide()
        for key, text in format_stats(stats).items():
            self.value_labels[key].setText(text)
