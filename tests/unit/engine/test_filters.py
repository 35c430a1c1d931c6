"""
Unit tests for FilterState and label vocabularies
"""

import pytest

from kepler_dashboard.engine.filters import (
    ALL,
    FilterState,
    InvalidFilterTransition,
    label_options,
    namespace_options,
    node_options,
    pod_options,
    zone_options,
)
from kepler_dashboard.models.enums import FilterField
from kepler_dashboard.utils.prometheus_validation import PromQLValidationError


class TestFilterState:
    """Test filter transitions"""

    def test_defaults(self):
        """Test that every filter starts at All"""
        state = FilterState()

        assert state.snapshot() == {"zone": ALL, "namespace": ALL, "pod": ALL, "node": ALL}
        assert state.generation == 0

    def test_namespace_change_resets_pod(self):
        """Test that switching namespace resets the pod to All"""
        state = FilterState(namespace="ns-a", pod="p1")

        state.set_namespace("ns-b")

        assert state.namespace == "ns-b"
        assert state.pod == ALL

    def test_same_namespace_still_resets_pod(self):
        """Test that re-selecting the current namespace resets the pod as well"""
        state = FilterState(namespace="ns-a", pod="p1")

        state.set_namespace("ns-a")

        assert state.pod == ALL

    def test_pod_rejected_without_namespace(self):
        """Test that a pod cannot be picked while namespace is All"""
        state = FilterState()

        with pytest.raises(InvalidFilterTransition):
            state.set_pod("p1")

        assert state.pod == ALL
        assert state.generation == 0

    def test_pod_rejected_in_constructor(self):
        """Test the constructor applies the same rule"""
        with pytest.raises(InvalidFilterTransition):
            FilterState(pod="p1")

    def test_pod_all_allowed_without_namespace(self):
        """Test that resetting the pod to All is always allowed"""
        state = FilterState()
        state.set_pod(ALL)
        assert state.pod == ALL

    def test_generation_counts_effective_changes(self):
        """Test generation only moves when the selection changes"""
        state = FilterState()

        state.set_zone("package")
        state.set_zone("package")
        assert state.generation == 1

        state.set_namespace("ns-a")
        state.set_pod("p1")
        state.set_node("10.0.0.1:9102")
        assert state.generation == 4

    def test_invalid_value_rejected(self):
        """Test that values unsafe for a selector are rejected"""
        state = FilterState()

        with pytest.raises(PromQLValidationError):
            state.set_zone('psys"} or vector(1) #')

        assert state.zone == ALL

    def test_get_by_field_or_name(self):
        state = FilterState(zone="dram")
        assert state.get(FilterField.ZONE) == "dram"
        assert state.get("zone") == "dram"


class TestSelectorFragments:
    """Test label matcher fragments"""

    def test_all_yields_empty_fragment(self):
        state = FilterState()
        for field in FilterField:
            assert state.to_selector_fragment(field) == ""

    def test_fragments(self):
        """Test label names and operators of each filter"""
        state = FilterState(zone="package", namespace="monitoring", pod="prom-0", node="10.0.0.1:9102")

        assert state.to_selector_fragment(FilterField.ZONE) == ',zone="package"'
        assert state.to_selector_fragment(FilterField.NAMESPACE) == ',pod_namespace="monitoring"'
        assert state.to_selector_fragment(FilterField.POD) == ',pod_name=~"prom-0"'
        assert state.to_selector_fragment(FilterField.NODE) == ',instance=~"10.0.0.1:9102"'


class TestLabelOptions:
    """Test filter vocabularies"""

    def test_all_first_then_sorted(self, sample):
        samples = [
            sample(1.0, zone="psys"),
            sample(1.0, zone="dram"),
            sample(1.0, zone="package"),
            sample(1.0, zone="dram"),
        ]
        assert zone_options(samples) == [ALL, "dram", "package", "psys"]

    def test_empty_and_missing_values_skipped(self, sample):
        samples = [sample(1.0, namespace=""), sample(1.0), sample(1.0, namespace="ns-a")]
        assert namespace_options(samples) == [ALL, "ns-a"]

    def test_no_samples(self):
        assert label_options([], "zone") == [ALL]

    def test_pod_and_node_options(self, sample):
        samples = [
            sample(1.0, pod="p2", instance="10.0.0.2:9102"),
            sample(1.0, pod="p1", instance="10.0.0.1:9102"),
        ]
        assert pod_options(samples) == [ALL, "p1", "p2"]
        assert node_options(samples) == [ALL, "10.0.0.1:9102", "10.0.0.2:9102"]
