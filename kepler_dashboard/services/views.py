"""
Dashboard Views - One function per dashboard view.

Each view queries Prometheus, hands the samples to the engine and returns a
``ViewResult``. A failed query becomes that view's error and never raises
out of the view, so one broken panel does not take the others down. A
successful query without data is reported as ``empty``.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from kepler_dashboard.config import Settings
from kepler_dashboard.engine import (
    FilterState,
    aggregate,
    cluster_total,
    cpu_info_rows,
    node_series_name,
    pod_series_name,
    rapl_info_rows,
    reshape,
    resolve_node_power,
    resolve_pod_power,
    sum_samples,
    top_k,
    zone_series_name,
)
from kepler_dashboard.engine import filters as vocabularies
from kepler_dashboard.models import (
    NO_DATA_MESSAGE,
    ClusterPowerSummary,
    ErrorDetail,
    FilterOptions,
    PowerKind,
    RangeSeries,
    ScalarSample,
    ViewResult,
)
from kepler_dashboard.services import queries
from kepler_dashboard.services.prometheus import PrometheusClient, TransportError, parse_matrix, parse_vector

logger = logging.getLogger(__name__)

ViewFn = Callable[[], ViewResult]


def _instant(client: PrometheusClient, expression: str) -> List[ScalarSample]:
    return parse_vector(client.query(expression))


def _range(client: PrometheusClient, settings: Settings, expression: str, end: Optional[datetime]) -> List[RangeSeries]:
    response = client.query_range(
        expression,
        end or datetime.now(timezone.utc),
        timedelta(seconds=settings.RANGE_WINDOW_SECONDS),
        settings.RANGE_SAMPLES,
    )
    return parse_matrix(response)


def _error_result(view: str, exc: TransportError) -> ViewResult:
    logger.warning(f"View '{view}' failed: {exc}")
    return ViewResult(view=view, error=ErrorDetail(code="PROMETHEUS_ERROR", message=str(exc)))


def _finish(result: ViewResult) -> ViewResult:
    has_data = (
        result.rows or result.series or result.summary is not None
        or result.cpu_info or result.rapl_info or result.filter_options is not None
    )
    if not has_data:
        result.empty = True
        result.message = NO_DATA_MESSAGE
    return result


# ============================================================================
# Cluster Wide Consumption
# ============================================================================

def cluster_power(client: PrometheusClient, settings: Settings, kind: PowerKind = PowerKind.TOTAL) -> ViewResult:
    """Resolved cluster-wide power for one metric kind. Always one row, 0 W without data."""
    kind = PowerKind(kind)
    view = f"cluster_power_{kind.value}"
    try:
        samples = _instant(client, queries.node_power(settings.KEPLER_JOB, kind))
    except TransportError as e:
        return _error_result(view, e)
    return _finish(ViewResult(view=view, rows=aggregate(resolve_node_power(samples), [])))


def cluster_power_summary(client: PrometheusClient, settings: Settings) -> ViewResult:
    """Total, active and idle gauges. Any failing query fails the whole summary."""
    view = "cluster_power_summary"
    watts: Dict[PowerKind, float] = {}
    try:
        for kind in PowerKind:
            samples = _instant(client, queries.node_power(settings.KEPLER_JOB, kind))
            watts[kind] = cluster_total(resolve_node_power(samples))
    except TransportError as e:
        return _error_result(view, e)
    summary = ClusterPowerSummary(
        total_watts=watts[PowerKind.TOTAL],
        active_watts=watts[PowerKind.ACTIVE],
        idle_watts=watts[PowerKind.IDLE],
    )
    return _finish(ViewResult(view=view, summary=summary))


def power_by_zone(
    client: PrometheusClient,
    settings: Settings,
    kind: PowerKind,
    filters: FilterState,
) -> ViewResult:
    """Exhaustive (zone, node) table. No resolution: every zone has its own row."""
    kind = PowerKind(kind)
    view = f"power_by_zone_{kind.value}"
    try:
        samples = _instant(client, queries.zone_table(settings.KEPLER_JOB, kind, filters))
    except TransportError as e:
        return _error_result(view, e)
    return _finish(ViewResult(view=view, rows=sum_samples(samples, ["zone", "node"])))


# ============================================================================
# Node Consumption
# ============================================================================

def top_nodes(client: PrometheusClient, settings: Settings, k: Optional[int] = None) -> ViewResult:
    view = "top_nodes"
    try:
        samples = _instant(client, queries.node_power(settings.KEPLER_JOB))
    except TransportError as e:
        return _error_result(view, e)
    rows = aggregate(resolve_node_power(samples), ["node"])
    return _finish(ViewResult(view=view, rows=top_k(rows, settings.TOP_NODES if k is None else k)))


def zone_trend(
    client: PrometheusClient,
    settings: Settings,
    filters: FilterState,
    end: Optional[datetime] = None,
) -> ViewResult:
    view = "zone_trend"
    try:
        series = _range(client, settings, queries.zone_trend(settings.KEPLER_JOB, filters), end)
    except TransportError as e:
        return _error_result(view, e)
    return _finish(ViewResult(view=view, series=reshape(series, zone_series_name)))


def node_series(
    client: PrometheusClient,
    settings: Settings,
    kind: PowerKind,
    filters: FilterState,
    end: Optional[datetime] = None,
) -> ViewResult:
    kind = PowerKind(kind)
    view = f"node_series_{kind.value}"
    try:
        series = _range(client, settings, queries.node_series(settings.KEPLER_JOB, kind, filters), end)
    except TransportError as e:
        return _error_result(view, e)
    named = reshape(series, node_series_name, cap=settings.SERIES_DISPLAY_CAP)
    return _finish(ViewResult(view=view, series=named))


# ============================================================================
# Namespace Consumption
# ============================================================================

def top_namespaces(
    client: PrometheusClient,
    settings: Settings,
    filters: FilterState,
    k: Optional[int] = None,
) -> ViewResult:
    """Top (namespace, node) pairs by resolved pod power."""
    view = "top_namespaces"
    try:
        pod_samples = _instant(client, queries.namespace_pods(settings.KEPLER_JOB, filters))
        node_samples = _instant(client, queries.node_power(settings.KEPLER_JOB))
    except TransportError as e:
        return _error_result(view, e)
    resolved = resolve_pod_power(pod_samples, node_samples)
    rows = aggregate(resolved, ["namespace", "node"])
    return _finish(ViewResult(view=view, rows=top_k(rows, settings.TOP_NAMESPACES if k is None else k)))


def pod_series(
    client: PrometheusClient,
    settings: Settings,
    filters: FilterState,
    end: Optional[datetime] = None,
) -> ViewResult:
    view = "pod_series"
    try:
        series = _range(client, settings, queries.pod_series(settings.KEPLER_JOB, filters), end)
    except TransportError as e:
        return _error_result(view, e)
    named = reshape(series, pod_series_name, cap=settings.SERIES_DISPLAY_CAP)
    return _finish(ViewResult(view=view, series=named))


# ============================================================================
# System Information
# ============================================================================

def cpu_info(client: PrometheusClient, settings: Settings) -> ViewResult:
    view = "cpu_info"
    try:
        samples = _instant(client, queries.cpu_core_count(settings.KEPLER_JOB))
    except TransportError as e:
        return _error_result(view, e)
    return _finish(ViewResult(view=view, cpu_info=cpu_info_rows(samples)))


def rapl_info(client: PrometheusClient, settings: Settings) -> ViewResult:
    view = "rapl_info"
    try:
        samples = _instant(client, queries.node_power(settings.KEPLER_JOB))
    except TransportError as e:
        return _error_result(view, e)
    return _finish(ViewResult(view=view, rapl_info=rapl_info_rows(samples)))


def filter_options(client: PrometheusClient, settings: Settings, filters: FilterState) -> ViewResult:
    """Values offered by the filter selectors, derived from the current samples."""
    view = "filter_options"
    job = settings.KEPLER_JOB
    try:
        node_samples = _instant(client, queries.node_power(job))
        pod_samples = _instant(client, queries.pod_power(job))
        namespace_pod_samples = _instant(client, queries.namespace_pods(job, filters))
        info_samples = _instant(client, queries.cpu_info(job))
    except TransportError as e:
        return _error_result(view, e)
    options = FilterOptions(
        zones=vocabularies.zone_options(node_samples),
        namespaces=vocabularies.namespace_options(pod_samples),
        pods=vocabularies.pod_options(namespace_pod_samples),
        nodes=vocabularies.node_options(info_samples),
    )
    return ViewResult(view=view, filter_options=options)


def dashboard_views(client: PrometheusClient, settings: Settings, filters: FilterState) -> Dict[str, ViewFn]:
    """Every view of the dashboard bound to one filter selection, keyed by view name."""
    views: Dict[str, ViewFn] = {
        "cluster_power_summary": lambda: cluster_power_summary(client, settings),
        "top_nodes": lambda: top_nodes(client, settings),
        "top_namespaces": lambda: top_namespaces(client, settings, filters),
        "zone_trend": lambda: zone_trend(client, settings, filters),
        "pod_series": lambda: pod_series(client, settings, filters),
        "cpu_info": lambda: cpu_info(client, settings),
        "rapl_info": lambda: rapl_info(client, settings),
        "filter_options": lambda: filter_options(client, settings, filters),
    }
    for kind in PowerKind:
        views[f"power_by_zone_{kind.value}"] = lambda kind=kind: power_by_zone(client, settings, kind, filters)
        views[f"node_series_{kind.value}"] = lambda kind=kind: node_series(client, settings, kind, filters)
    return views
