"""
Inventory - Static CPU and RAPL tables.
"""

import logging
from typing import Dict, Iterable, List, Set

from kepler_dashboard.models.power import CpuInfoRow, RaplInfoRow
from kepler_dashboard.models.samples import ScalarSample

logger = logging.getLogger(__name__)


def cpu_info_rows(samples: Iterable[ScalarSample]) -> List[CpuInfoRow]:
    """
    Rows of ``count by (instance, model_name)(kepler_node_cpu_info)``,
    sorted by instance.
    """
    rows = []
    for sample in samples:
        if sample.value < 0 or not float(sample.value).is_integer():
            logger.debug(f"Dropping CPU info sample with core count {sample.value}")
            continue
        rows.append(
            CpuInfoRow(
                instance=sample.labels.value_or_unknown("instance"),
                model=sample.labels.value_or_unknown("model"),
                cores=int(sample.value),
            )
        )
    return sorted(rows, key=lambda row: row.instance)


def rapl_info_rows(samples: Iterable[ScalarSample]) -> List[RaplInfoRow]:
    """
    RAPL zones seen per node, zones and nodes sorted.

    Samples missing the node or the zone label are skipped.
    """
    zones_by_node: Dict[str, Set[str]] = {}
    for sample in samples:
        node, zone = sample.labels.node, sample.labels.zone
        if not node or not zone:
            continue
        zones_by_node.setdefault(node, set()).add(zone)
    return [
        RaplInfoRow(node=node, zones=sorted(zones))
        for node, zones in sorted(zones_by_node.items())
    ]
