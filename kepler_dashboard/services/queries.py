"""
PromQL expressions for the dashboard views.

Aggregation across power domains happens in the engine, so most views read
the raw Kepler series. Only the zone trend and the CPU inventory push a
plain ``sum``/``count`` down to Prometheus; neither mixes psys and package.
"""

from kepler_dashboard.engine.filters import FilterState
from kepler_dashboard.models.enums import FilterField, PowerKind
from kepler_dashboard.utils.prometheus_validation import build_selector

KEPLER_METRICS = {
    PowerKind.TOTAL: "kepler_node_cpu_watts",
    PowerKind.ACTIVE: "kepler_node_cpu_active_watts",
    PowerKind.IDLE: "kepler_node_cpu_idle_watts",
}
KEPLER_POD_METRIC = "kepler_pod_cpu_watts"
KEPLER_CPU_INFO_METRIC = "kepler_node_cpu_info"


def _fragments(filters: FilterState, *fields: FilterField) -> str:
    return "".join(filters.to_selector_fragment(field) for field in fields)


def node_power(job: str, kind: PowerKind = PowerKind.TOTAL, fragment: str = "") -> str:
    """Every zone of one node CPU power metric, e.g. ``kepler_node_cpu_watts{job="power-monitor"}``."""
    return build_selector(KEPLER_METRICS[PowerKind(kind)], {"job": job}, fragment)


def pod_power(job: str, fragment: str = "") -> str:
    return build_selector(KEPLER_POD_METRIC, {"job": job}, fragment)


def cpu_info(job: str) -> str:
    return build_selector(KEPLER_CPU_INFO_METRIC, {"job": job})


def cpu_core_count(job: str) -> str:
    return f"count by (instance, model_name)({cpu_info(job)})"


def zone_table(job: str, kind: PowerKind, filters: FilterState) -> str:
    return node_power(job, kind, _fragments(filters, FilterField.ZONE))


def zone_trend(job: str, filters: FilterState) -> str:
    return f"sum by (zone) ({node_power(job, PowerKind.TOTAL, _fragments(filters, FilterField.ZONE))})"


def node_series(job: str, kind: PowerKind, filters: FilterState) -> str:
    return node_power(job, kind, _fragments(filters, FilterField.NODE, FilterField.ZONE))


def namespace_pods(job: str, filters: FilterState) -> str:
    return pod_power(job, _fragments(filters, FilterField.NAMESPACE))


def pod_series(job: str, filters: FilterState) -> str:
    return pod_power(job, _fragments(filters, FilterField.NAMESPACE, FilterField.POD, FilterField.ZONE))
