"""Tests for dpipmon.models."""

import dataclasses

import pytest

from dpipmon.models import NO_DATA, DisplayPoint, Sample, Target, TimeRange
from dpipmon.severity import Severity


class TestSample:
    """Test Sample construction from API payloads."""

    def test_from_dict_full(self):
        sample = Sample.from_dict({"ping": 12, "loss": 0, "ping_dev": 30.5, "loss_dev": 10})

        assert sample == Sample(ping=12, loss=0, ping_dev=30.5, loss_dev=10)

    def test_from_dict_missing_fields_become_sentinel(self):
        sample = Sample.from_dict({"ping": 12})

        assert sample.ping == 12
        assert sample.loss == NO_DATA
        assert sample.ping_dev == NO_DATA
        assert sample.loss_dev == NO_DATA

    def test_from_dict_null_becomes_sentinel(self):
        assert Sample.from_dict({"ping": None}).ping == NO_DATA

    def test_from_dict_ignores_unknown_fields(self):
        sample = Sample.from_dict({"ping": 5, "loss": 0, "extra": "x"})
        assert sample.ping == 5

    @pytest.mark.parametrize("bad", ["12", True, [1], {"v": 1}])
    def test_from_dict_rejects_non_numeric(self, bad):
        with pytest.raises(ValueError):
            Sample.from_dict({"ping": bad})

    @pytest.mark.parametrize("bad", [float("nan"), float("inf")])
    def test_from_dict_rejects_non_finite(self, bad):
        with pytest.raises(ValueError):
            Sample.from_dict({"ping": 10, "loss": bad})

    def test_from_dict_rejects_non_object(self):
        with pytest.raises(ValueError):
            Sample.from_dict([1, 2, 3])

    def test_target_accessors(self):
        sample = Sample(ping=1, loss=2, ping_dev=3, loss_dev=4)

        assert sample.value_for(Target.EDGE) == 1
        assert sample.loss_for(Target.EDGE) == 2
        assert sample.value_for(Target.ORIGIN) == 3
        assert sample.loss_for(Target.ORIGIN) == 4

    def test_sample_is_immutable(self):
        sample = Sample(ping=1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample.ping = 2


class TestTimeRange:
    """Test the selectable ranges."""

    def test_values(self):
        assert [int(r) for r in TimeRange] == [5, 15, 30, 60, 180, 360, 1440]

    def test_labels(self):
        assert TimeRange.HOUR_1.label == "1 hour"
        assert TimeRange.HOUR_24.label == "24 hours"
        assert all(r.label for r in TimeRange)


class TestDisplayPoint:
    """Test DisplayPoint derived fields."""

    def test_color_follows_severity(self):
        point = DisplayPoint(
            timestamp_ms=0, value=10, loss_percent=50, severity=Severity.MAJOR, has_data=True
        )
        assert point.color == Severity.MAJOR.color

    def test_target_display_names(self):
        assert Target.EDGE.display_name == "Cloudflare"
        assert Target.ORIGIN.display_name == "ExpTech"
