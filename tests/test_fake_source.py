"""Tests for the simulated telemetry source."""

import pytest

from dpipmon.fake_source import DEFAULT_ISPS, FakeTelemetrySource
from dpipmon.models import NO_DATA, Sample, StatusSnapshot
from dpipmon.timeline import bucket_spec, reindex


class TestFakeTelemetrySource:
    """Test FakeTelemetrySource behavior and contracts."""

    def test_isp_list(self):
        source = FakeTelemetrySource()
        assert source.fetch_isp_list() == list(DEFAULT_ISPS)

    def test_custom_isps(self):
        source = FakeTelemetrySource(isps=("Only ISP",))
        assert source.fetch_isp_list() == ["Only ISP"]

    def test_status_shape(self):
        source = FakeTelemetrySource(seed=1)

        snapshot = source.fetch_status(DEFAULT_ISPS[0], 60)

        assert isinstance(snapshot, StatusSnapshot)
        assert snapshot.legacy is False
        assert snapshot.now_ms > 0
        assert all(isinstance(sample, Sample) for sample in snapshot.samples)

    def test_series_is_sparse(self):
        """The fake server leaves the newest buckets empty, like a real lagging feed."""
        source = FakeTelemetrySource(seed=2)
        _, count = bucket_spec(60)

        snapshot = source.fetch_status(DEFAULT_ISPS[0], 60)

        assert 0 < len(snapshot.samples) < count
        points = reindex(snapshot.samples, 60, snapshot.now_ms)
        assert len(points) == count
        assert points[-1].has_data is False

    def test_deterministic_with_seed(self):
        first = FakeTelemetrySource(seed=42).fetch_status(DEFAULT_ISPS[0], 30)
        second = FakeTelemetrySource(seed=42).fetch_status(DEFAULT_ISPS[0], 30)

        assert first.samples == second.samples

    def test_values_are_valid(self):
        """Every field is either the sentinel or in its expected range."""
        snapshot = FakeTelemetrySource(seed=7).fetch_status(DEFAULT_ISPS[1], 1440)

        for sample in snapshot.samples:
            for ping in (sample.ping, sample.ping_dev):
                assert ping == NO_DATA or ping >= 1
            for loss in (sample.loss, sample.loss_dev):
                assert loss == NO_DATA or 0 <= loss <= 100

    def test_unknown_isp_rejected(self):
        with pytest.raises(ValueError):
            FakeTelemetrySource().fetch_status("Nobody Telecom", 60)
