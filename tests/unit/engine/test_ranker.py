"""
Unit tests for the Ranker
"""

import pytest

from kepler_dashboard.engine.ranker import top_k
from kepler_dashboard.models import AggregateRow


def _row(key, watts):
    return AggregateRow(group_key=(key,), watts=watts)


@pytest.fixture
def rows():
    return [
        _row("n1", 60.0),
        _row("n2", 35.0),
        _row("n3", 0.0),
        _row("n4", 90.0),
        _row("n5", -1.0),
        _row("n6", 35.0),
    ]


class TestTopK:
    """Test top-K ranking"""

    def test_descending_order(self, rows):
        """Test rows are sorted by watts, highest first"""
        ranked = top_k(rows, 2)
        assert [row.group_key for row in ranked] == [("n4",), ("n1",)]

    def test_ties_broken_by_group_key(self, rows):
        """Test equal watts are ordered by ascending group key"""
        ranked = top_k(rows, 4)
        assert [row.group_key for row in ranked] == [("n4",), ("n1",), ("n2",), ("n6",)]

    def test_tie_order_independent_of_input_order(self, rows):
        """Test the output does not depend on the input order"""
        assert top_k(list(reversed(rows)), 10) == top_k(rows, 10)

    def test_non_positive_rows_excluded(self, rows):
        """Test that rows with watts <= 0 never rank"""
        ranked = top_k(rows, 10)

        assert len(ranked) == 4
        assert all(row.watts > 0 for row in ranked)

    def test_k_larger_than_rows(self):
        """Test that a large k returns every ranking row"""
        assert top_k([_row("a", 1.0)], 5) == [_row("a", 1.0)]

    def test_idempotent(self, rows):
        """Test re-ranking the output with the same or a larger k is a no-op"""
        ranked = top_k(rows, 3)

        assert top_k(ranked, 3) == ranked
        assert top_k(ranked, 10) == ranked

    def test_empty_rows(self):
        """Test ranking nothing"""
        assert top_k([], 5) == []

    @pytest.mark.parametrize("k", [0, -1, 1.5, True, "3"])
    def test_invalid_k(self, rows, k):
        """Test that k must be a positive integer"""
        with pytest.raises(ValueError, match="positive integer"):
            top_k(rows, k)
