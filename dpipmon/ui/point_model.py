"""Qt model for reindexed timeline points using model/view pattern."""

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt
from PySide6.QtGui import QColor

from dpipmon.models import DisplayPoint
from dpipmon.timeline import format_time_label


class DisplayPointModel(QAbstractTableModel):
    """Table model showing both targets side by side, one row per bucket.

    The point lists are replaced wholesale on every refresh; rows are never
    edited in place.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._edge_points: list[DisplayPoint] = []
        self._origin_points: list[DisplayPoint] = []
        self._range_minutes = 60

        self._columns = ["Time", "Edge (ms)", "Edge loss", "Origin (ms)", "Origin loss"]

        # Cached strings to reduce allocations
        self._no_data = "--"

    def set_target_names(self, edge: str, origin: str):
        self._columns = ["Time", f"{edge} (ms)", f"{edge} loss", f"{origin} (ms)", f"{origin} loss"]
        self.headerDataChanged.emit(Qt.Horizontal, 0, len(self._columns) - 1)

    def rowCount(self, parent=QModelIndex()):
        """Return the number of rows (timeline buckets)."""
        if parent.isValid():
            return 0
        return len(self._edge_points)

    def columnCount(self, parent=QModelIndex()):
        """Return the number of columns."""
        if parent.isValid():
            return 0
        return len(self._columns)

    def data(self, index, role=Qt.DisplayRole):
        """Return data for a given cell."""
        if not index.isValid():
            return None

        row = index.row()
        if row < 0 or row >= len(self._edge_points):
            return None

        col = index.column()
        point = self._origin_points[row] if col >= 3 else self._edge_points[row]

        if role == Qt.DisplayRole:
            if col == 0:
                return format_time_label(point.timestamp_ms, self._range_minutes)
            if col in (1, 3):
                return self._format_value(point)
            return self._format_loss(point)

        elif role == Qt.ForegroundRole:
            if col in (1, 3) and point.has_data:
                return QColor(point.color)

        elif role == Qt.TextAlignmentRole:
            if col == 0:
                return Qt.AlignLeft | Qt.AlignVCenter
            return Qt.AlignRight | Qt.AlignVCenter

        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        """Return header data."""
        if role == Qt.DisplayRole and orientation == Qt.Horizontal:
            if 0 <= section < len(self._columns):
                return self._columns[section]
        return None

    def flags(self, index):
        """Return item flags (read-only)."""
        if not index.isValid():
            return Qt.NoItemFlags
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable

    def set_points(
        self,
        edge_points: list[DisplayPoint],
        origin_points: list[DisplayPoint],
        range_minutes: int,
    ):
        """Replace all rows. Both lists come from the same timeline."""
        if len(edge_points) != len(origin_points):
            raise ValueError("edge and origin timelines differ in length")

        self.beginResetModel()
        self._edge_points = list(edge_points)
        self._origin_points = list(origin_points)
        self._range_minutes = range_minutes
        self.endResetModel()

    def clear(self):
        """Remove all rows."""
        if not self._edge_points:
            return
        self.set_points([], [], self._range_minutes)

    def get_points(self):
        """Get (edge, origin) point lists."""
        return list(self._edge_points), list(self._origin_points)

    def _format_value(self, point: DisplayPoint) -> str:
        if not point.has_data:
            return self._no_data
        return f"{point.value:g}"

    def _format_loss(self, point: DisplayPoint) -> str:
        if point.loss_percent == -1:
            return self._no_data
        return f"{point.loss_percent:g}%"
