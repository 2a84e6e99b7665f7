"""Tests for DisplayPointModel (Qt model/view pattern)."""

import pytest
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor

from dpipmon.models import NO_DATA, Sample, Target
from dpipmon.severity import Severity
from dpipmon.timeline import reindex
from dpipmon.ui.point_model import DisplayPointModel

NOW_MS = 1_700_000_000_000


def points_for(samples, range_minutes=5):
    return (
        reindex(samples, range_minutes, NOW_MS, Target.EDGE),
        reindex(samples, range_minutes, NOW_MS, Target.ORIGIN),
    )


class TestDisplayPointModel:
    """Test DisplayPointModel behavior."""

    def test_initial_state(self):
        model = DisplayPointModel()
        assert model.rowCount() == 0
        assert model.columnCount() == 5

    def test_column_headers(self):
        model = DisplayPointModel()
        model.set_target_names("Cloudflare", "ExpTech")

        headers = [model.headerData(i, Qt.Horizontal, Qt.DisplayRole) for i in range(5)]

        assert headers == [
            "Time",
            "Cloudflare (ms)",
            "Cloudflare loss",
            "ExpTech (ms)",
            "ExpTech loss",
        ]

    def test_one_row_per_bucket(self):
        model = DisplayPointModel()
        edge, origin = points_for([Sample(ping=10, loss=0)] * 3)

        model.set_points(edge, origin, 5)

        assert model.rowCount() == 10

    def test_cell_text(self):
        model = DisplayPointModel()
        edge, origin = points_for([Sample(ping=12.5, loss=25, ping_dev=30, loss_dev=0)])

        model.set_points(edge, origin, 5)

        assert model.data(model.index(0, 1), Qt.DisplayRole) == "12.5"
        assert model.data(model.index(0, 2), Qt.DisplayRole) == "25%"
        assert model.data(model.index(0, 3), Qt.DisplayRole) == "30"
        assert model.data(model.index(0, 4), Qt.DisplayRole) == "0%"

    def test_empty_bucket_text(self):
        model = DisplayPointModel()
        edge, origin = points_for([Sample(ping=NO_DATA, loss=NO_DATA)])

        model.set_points(edge, origin, 5)

        for col in range(1, 5):
            assert model.data(model.index(0, col), Qt.DisplayRole) == "--"
        # Padding rows after the returned samples are empty too
        assert model.data(model.index(9, 1), Qt.DisplayRole) == "--"

    def test_latency_colored_by_severity(self):
        model = DisplayPointModel()
        edge, origin = points_for([Sample(ping=10, loss=50, ping_dev=10, loss_dev=0)])

        model.set_points(edge, origin, 5)

        assert model.data(model.index(0, 1), Qt.ForegroundRole) == QColor(Severity.MAJOR.color)
        assert model.data(model.index(0, 3), Qt.ForegroundRole) == QColor(Severity.HEALTHY.color)
        assert model.data(model.index(5, 1), Qt.ForegroundRole) is None

    def test_set_points_replaces_rows(self):
        model = DisplayPointModel()
        model.set_points(*points_for([]), 5)
        model.set_points(*points_for([], range_minutes=60), 60)

        assert model.rowCount() == 120

    def test_mismatched_lengths_rejected(self):
        model = DisplayPointModel()
        edge, _ = points_for([])
        with pytest.raises(ValueError):
            model.set_points(edge, edge[:3], 5)

    def test_clear(self):
        model = DisplayPointModel()
        model.set_points(*points_for([Sample(ping=10, loss=0)]), 5)

        model.clear()

        assert model.rowCount() == 0
        assert model.get_points() == ([], [])

    def test_invalid_index(self):
        model = DisplayPointModel()
        assert model.data(model.index(0, 0), Qt.DisplayRole) is None
