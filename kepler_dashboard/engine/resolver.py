"""
Domain Resolver - psys/package precedence per host.

Kepler reports CPU power per RAPL zone. On hosts exposing both ``psys`` and
``package``, psys already covers the package, so adding the two counts the
SoC twice. Resolution picks exactly one SoC reading per host:

    soc  = psys if the host has psys, else package, else 0
    dram = dram, always added on top

Every cluster, node or namespace figure is a reduction over the resolved
values returned here.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Set, Tuple

from kepler_dashboard.models.enums import PowerZone
from kepler_dashboard.models.power import ResolvedNodePower
from kepler_dashboard.models.samples import UNKNOWN, LabelSet, ScalarSample

logger = logging.getLogger(__name__)

_RESOLVED_ZONES = {zone.value for zone in PowerZone}


def _node_of(sample: ScalarSample) -> str:
    return sample.labels.value_or_unknown("node")


def _sum_by_zone(samples: Iterable[ScalarSample], key_fn) -> Dict[str, Dict[object, float]]:
    """zone -> key -> summed watts, only for psys/package/dram."""
    totals: Dict[str, Dict[object, float]] = {zone: {} for zone in _RESOLVED_ZONES}
    for sample in samples:
        zone = sample.labels.zone
        if zone not in _RESOLVED_ZONES:
            continue
        key = key_fn(sample)
        totals[zone][key] = totals[zone].get(key, 0.0) + sample.value
    return totals


def psys_nodes(node_samples: Iterable[ScalarSample]) -> Set[str]:
    """Names of the nodes reporting a node-level psys reading."""
    return {
        _node_of(sample)
        for sample in node_samples
        if sample.labels.zone == PowerZone.PSYS.value
    }


def resolve_node_power(samples: Iterable[ScalarSample]) -> List[ResolvedNodePower]:
    """
    Resolve one node-level power metric (all zones, one instant) per node.

    Samples of the same node and zone are summed. A node only reporting dram
    still gets an entry with ``soc_watts = 0``. Nodes come out in order of
    first appearance.
    """
    samples = list(samples)
    totals = _sum_by_zone(samples, _node_of)
    psys = totals[PowerZone.PSYS.value]
    package = totals[PowerZone.PACKAGE.value]
    dram = totals[PowerZone.DRAM.value]

    nodes: Dict[str, None] = {}
    for sample in samples:
        if sample.labels.zone in _RESOLVED_ZONES:
            nodes.setdefault(_node_of(sample), None)

    resolved = []
    for node in nodes:
        if node in psys:
            soc = psys[node]
            if node in package:
                logger.debug(f"Node {node} reports psys, discarding package reading {package[node]:.2f}W")
        else:
            soc = package.get(node, 0.0)
        resolved.append(
            ResolvedNodePower(
                node=node,
                labels=LabelSet(node=None if node == UNKNOWN else node),
                soc_watts=soc,
                dram_watts=dram.get(node, 0.0),
            )
        )
    return resolved


def resolve_pod_power(
    pod_samples: Iterable[ScalarSample],
    node_samples: Iterable[ScalarSample],
) -> List[ResolvedNodePower]:
    """
    Resolve pod-level power using the hosting node's psys presence.

    The discriminator is whether the *node* reports psys, not the pod:

    - pod psys counts only on nodes with node-level psys
    - pod package counts only on nodes without node-level psys, even when
      the pod itself has no psys reading
    - pod dram always counts

    One entry per (namespace, pod, node), in order of first appearance.
    """
    with_psys = psys_nodes(node_samples)

    def pod_key(sample: ScalarSample) -> Tuple:
        labels = sample.labels
        return (labels.namespace, labels.pod, labels.node)

    def host(key: Tuple) -> str:
        return UNKNOWN if key[2] is None else key[2]

    pod_samples = list(pod_samples)
    totals = _sum_by_zone(pod_samples, pod_key)

    soc: Dict[Tuple, float] = defaultdict(float)
    for key, watts in totals[PowerZone.PSYS.value].items():
        if host(key) in with_psys:
            soc[key] += watts
    for key, watts in totals[PowerZone.PACKAGE.value].items():
        if host(key) not in with_psys:
            soc[key] += watts
    dram = totals[PowerZone.DRAM.value]

    keys: Dict[Tuple, None] = {}
    for sample in pod_samples:
        if sample.labels.zone in _RESOLVED_ZONES:
            keys.setdefault(pod_key(sample), None)

    return [
        ResolvedNodePower(
            node=UNKNOWN if node is None else node,
            labels=LabelSet(namespace=namespace, pod=pod, node=node),
            soc_watts=soc.get((namespace, pod, node), 0.0),
            dram_watts=dram.get((namespace, pod, node), 0.0),
        )
        for namespace, pod, node in keys
    ]
