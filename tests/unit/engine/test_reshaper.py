"""
Unit tests for the Series Reshaper
"""

import math
from datetime import datetime, timedelta, timezone

from kepler_dashboard.engine.reshaper import (
    node_series_name,
    pod_series_name,
    reshape,
    zone_series_name,
)
from kepler_dashboard.models import LabelSet, RangeSeries

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _series(values, **labels):
    points = [(T0 + timedelta(seconds=10 * i), value) for i, value in enumerate(values)]
    return RangeSeries(labels=LabelSet(**labels), points=points)


class TestNameFunctions:
    """Test series name derivation"""

    def test_pod_series_name(self):
        assert pod_series_name(LabelSet(zone="package", pod="podX")) == "package - podX"
        assert pod_series_name(LabelSet()) == "unknown - unknown"

    def test_node_series_name_prefers_instance(self):
        labels = LabelSet(zone="dram", instance="10.0.0.1:9102", node="node-1")
        assert node_series_name(labels) == "dram - 10.0.0.1:9102"
        assert node_series_name(LabelSet(zone="dram", node="node-1")) == "dram - node-1"
        assert node_series_name(LabelSet(zone="dram")) == "dram - unknown"

    def test_zone_series_name(self):
        assert zone_series_name(LabelSet(zone="psys")) == "Zone - psys"


class TestReshape:
    """Test reshaping range series"""

    def test_points_pass_through_in_order(self):
        """Test points are kept unchanged and in order"""
        series = _series([1.0, 2.0, 3.0], zone="package", pod="p")
        named = reshape([series], pod_series_name)

        assert len(named) == 1
        assert named[0].name == "package - p"
        assert named[0].points == series.points

    def test_duplicate_names_not_merged(self):
        """Test two series with the same derived name stay distinct"""
        first = _series([1.0, 2.0], zone="package", pod="podX", namespace="ns-a")
        second = _series([7.0, 8.0], zone="package", pod="podX", namespace="ns-b")

        named = reshape([first, second], pod_series_name)

        assert [s.name for s in named] == ["package - podX", "package - podX"]
        assert [value for _, value in named[0].points] == [1.0, 2.0]
        assert [value for _, value in named[1].points] == [7.0, 8.0]

    def test_non_finite_points_dropped_individually(self):
        """Test NaN/Inf points are dropped without losing the series"""
        series = _series([1.0, math.nan, 3.0, math.inf], zone="psys")
        named = reshape([series], zone_series_name)

        assert [value for _, value in named[0].points] == [1.0, 3.0]

    def test_cap_keeps_first_series_in_input_order(self):
        """Test the display cap keeps the first N series regardless of magnitude"""
        series = [_series([float(100 - i)], zone="package", pod=f"pod-{i}") for i in range(15)]
        series.reverse()

        named = reshape(series, pod_series_name, cap=10)

        assert len(named) == 10
        assert [s.name for s in named] == [f"package - pod-{i}" for i in range(14, 4, -1)]

    def test_cap_larger_than_input(self):
        """Test a cap above the series count keeps everything"""
        assert len(reshape([_series([1.0])], zone_series_name, cap=10)) == 1

    def test_empty_series_kept(self):
        """Test a series without points is kept as an empty series"""
        named = reshape([RangeSeries(labels=LabelSet(zone="dram"))], zone_series_name)
        assert named[0].points == []

    def test_empty_input(self):
        """Test reshaping nothing"""
        assert reshape([], zone_series_name) == []
