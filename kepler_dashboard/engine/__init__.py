"""
Power Aggregation Engine

Pure functions over one snapshot of Prometheus samples:
- resolver: psys/package precedence per node and per pod
- aggregator: group sums
- ranker: top-K
- reshaper: chart-ready series
- inventory: CPU and RAPL tables
- filters: filter state and label vocabularies
"""

from .aggregator import aggregate, cluster_total, group_key, sum_samples
from .filters import ALL, FilterState, InvalidFilterTransition
from .inventory import cpu_info_rows, rapl_info_rows
from .ranker import top_k
from .reshaper import node_series_name, pod_series_name, reshape, zone_series_name
from .resolver import psys_nodes, resolve_node_power, resolve_pod_power

__all__ = [
    "aggregate",
    "cluster_total",
    "group_key",
    "sum_samples",
    "ALL",
    "FilterState",
    "InvalidFilterTransition",
    "cpu_info_rows",
    "rapl_info_rows",
    "top_k",
    "node_series_name",
    "pod_series_name",
    "reshape",
    "zone_series_name",
    "psys_nodes",
    "resolve_node_power",
    "resolve_pod_power",
]
