"""
Aggregator - Group sums over resolved power and raw samples.
"""

from typing import Dict, Iterable, List, Sequence, Tuple

from kepler_dashboard.models.power import AggregateRow, ResolvedNodePower
from kepler_dashboard.models.samples import LabelSet, ScalarSample


def group_key(labels: LabelSet, group_by: Sequence[str]) -> Tuple[str, ...]:
    """Tuple of the requested label values, ``unknown`` for absent labels."""
    return tuple(labels.value_or_unknown(name) for name in group_by)


def _rows(totals: Dict[Tuple[str, ...], float]) -> List[AggregateRow]:
    return [AggregateRow(group_key=key, watts=watts) for key, watts in totals.items()]


def aggregate(resolved: Iterable[ResolvedNodePower], group_by: Sequence[str]) -> List[AggregateRow]:
    """
    Sum ``soc_watts + dram_watts`` per group.

    An empty ``group_by`` is the cluster-wide total and always yields exactly
    one row, with ``watts = 0`` when there is nothing to sum. Otherwise groups
    come out in order of first appearance.
    """
    group_by = list(group_by)
    totals: Dict[Tuple[str, ...], float] = {}
    if not group_by:
        totals[()] = 0.0
    for entry in resolved:
        key = group_key(entry.labels, group_by)
        totals[key] = totals.get(key, 0.0) + entry.total_watts
    return _rows(totals)


def cluster_total(resolved: Iterable[ResolvedNodePower]) -> float:
    return aggregate(resolved, [])[0].watts


def sum_samples(samples: Iterable[ScalarSample], group_by: Sequence[str]) -> List[AggregateRow]:
    """
    Plain per-group sum of raw samples, no power-domain resolution.

    Used for the exhaustive per-zone tables, where every zone is shown on its
    own row. Rows with zero or negative watts are kept.
    """
    group_by = list(group_by)
    totals: Dict[Tuple[str, ...], float] = {}
    if not group_by:
        totals[()] = 0.0
    for sample in samples:
        key = group_key(sample.labels, group_by)
        totals[key] = totals.get(key, 0.0) + sample.value
    return _rows(totals)
