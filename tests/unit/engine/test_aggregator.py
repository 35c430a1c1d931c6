"""
Unit tests for the Aggregator
"""

from kepler_dashboard.engine.aggregator import aggregate, cluster_total, group_key, sum_samples
from kepler_dashboard.models import AggregateRow, LabelSet, ResolvedNodePower


def _resolved(node, soc=0.0, dram=0.0, **labels):
    return ResolvedNodePower(node=node, labels=LabelSet(node=node, **labels), soc_watts=soc, dram_watts=dram)


class TestAggregate:
    """Test aggregation of resolved power"""

    def test_cluster_total_single_row(self):
        """Test that an empty grouping yields one cluster row"""
        rows = aggregate([_resolved("n1", 50.0, 10.0), _resolved("n2", 30.0, 5.0)], [])
        assert rows == [AggregateRow(group_key=(), watts=95.0)]

    def test_empty_input_yields_zero_row(self):
        """Test that aggregating nothing gives 0 W, not a missing row"""
        assert aggregate([], []) == [AggregateRow(group_key=(), watts=0.0)]
        assert cluster_total([]) == 0.0

    def test_empty_input_with_grouping(self):
        """Test that a grouped aggregation of nothing has no rows"""
        assert aggregate([], ["node"]) == []

    def test_group_by_node(self):
        """Test per-node sums of soc and dram"""
        rows = aggregate([_resolved("n1", 50.0, 10.0), _resolved("n2", 30.0, 5.0)], ["node"])

        assert rows == [
            AggregateRow(group_key=("n1",), watts=60.0),
            AggregateRow(group_key=("n2",), watts=35.0),
        ]

    def test_group_by_namespace_and_node(self):
        """Test multi-label grouping sums pods of the same namespace and node"""
        rows = aggregate(
            [
                _resolved("n1", 2.0, 1.0, namespace="ns-a", pod="p1"),
                _resolved("n1", 3.0, 0.0, namespace="ns-a", pod="p2"),
                _resolved("n2", 4.0, 0.0, namespace="ns-a", pod="p3"),
            ],
            ["namespace", "node"],
        )

        assert rows == [
            AggregateRow(group_key=("ns-a", "n1"), watts=6.0),
            AggregateRow(group_key=("ns-a", "n2"), watts=4.0),
        ]

    def test_missing_label_is_unknown(self):
        """Test that a missing grouping label falls back to 'unknown'"""
        rows = aggregate([_resolved("n1", 1.0)], ["namespace"])
        assert rows[0].group_key == ("unknown",)

    def test_zero_rows_retained(self):
        """Test that zero-watt groups are kept by the aggregator"""
        rows = aggregate([_resolved("n1")], ["node"])
        assert rows == [AggregateRow(group_key=("n1",), watts=0.0)]


class TestGroupKey:
    """Test group key derivation"""

    def test_empty_string_is_not_unknown(self):
        """Test that an empty label value is kept as an empty string"""
        assert group_key(LabelSet(zone=""), ["zone"]) == ("",)
        assert group_key(LabelSet(), ["zone"]) == ("unknown",)


class TestSumSamples:
    """Test raw sample sums for the per-zone tables"""

    def test_zone_and_node_rows(self, sample):
        """Test each zone keeps its own row, including psys and package of one node"""
        rows = sum_samples(
            [
                sample(50.0, node="n1", zone="psys"),
                sample(80.0, node="n1", zone="package"),
                sample(0.0, node="n2", zone="dram"),
            ],
            ["zone", "node"],
        )

        assert rows == [
            AggregateRow(group_key=("psys", "n1"), watts=50.0),
            AggregateRow(group_key=("package", "n1"), watts=80.0),
            AggregateRow(group_key=("dram", "n2"), watts=0.0),
        ]

    def test_empty_samples(self):
        """Test empty input"""
        assert sum_samples([], ["zone", "node"]) == []
        assert sum_samples([], []) == [AggregateRow(group_key=(), watts=0.0)]
