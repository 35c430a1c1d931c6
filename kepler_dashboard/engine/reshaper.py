"""
Series Reshaper - Range series to named, chart-ready series.
"""

import logging
import math
from typing import Callable, Iterable, List, Optional

from kepler_dashboard.models.power import NamedSeries
from kepler_dashboard.models.samples import LabelSet, RangeSeries

logger = logging.getLogger(__name__)

NameFn = Callable[[LabelSet], str]


def pod_series_name(labels: LabelSet) -> str:
    return f"{labels.value_or_unknown('zone')} - {labels.value_or_unknown('pod')}"


def node_series_name(labels: LabelSet) -> str:
    host = labels.instance or labels.node or "unknown"
    return f"{labels.value_or_unknown('zone')} - {host}"


def zone_series_name(labels: LabelSet) -> str:
    return f"Zone - {labels.value_or_unknown('zone')}"


def reshape(series: Iterable[RangeSeries], name_fn: NameFn, cap: Optional[int] = None) -> List[NamedSeries]:
    """
    Turn range series into named series, keeping input order.

    Series with the same derived name stay separate. Non-finite points are
    dropped individually. With ``cap``, only the first ``cap`` series are
    kept, whatever their magnitude.
    """
    if cap is not None and cap < 0:
        raise ValueError(f"cap must not be negative, got {cap!r}")

    named = []
    for item in series:
        if cap is not None and len(named) >= cap:
            break
        points = [(timestamp, value) for timestamp, value in item.points if math.isfinite(value)]
        dropped = len(item.points) - len(points)
        if dropped:
            logger.debug(f"Dropped {dropped} non-finite point(s) from series {item.labels}")
        named.append(NamedSeries(name=name_fn(item.labels), points=points))
    return named
