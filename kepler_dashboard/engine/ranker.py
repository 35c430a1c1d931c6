"""
Ranker - Top-K entities by power.
"""

from typing import Iterable, List

from kepler_dashboard.models.power import AggregateRow


def top_k(rows: Iterable[AggregateRow], k: int) -> List[AggregateRow]:
    """
    The ``k`` highest rows by watts, highest first.

    Rows with ``watts <= 0`` never rank. Ties are broken by ascending group
    key so that the output is reproducible. ``k`` above the number of rows
    returns every ranking row.

    Raises:
        ValueError: If ``k`` is not a positive integer
    """
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise ValueError(f"k must be a positive integer, got {k!r}")

    ranked = sorted(
        (row for row in rows if row.watts > 0),
        key=lambda row: (-row.watts, row.group_key),
    )
    return ranked[:k]
