"""
Dashboard API - JSON endpoints serving the dashboard views.

Every endpoint returns a ``ViewResult``. A Prometheus failure is reported in
the result's ``error`` field with status 200, so that a client can render the
failing panel as a warning while the other panels keep updating.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from kepler_dashboard import __version__
from kepler_dashboard.config import Settings
from kepler_dashboard.deps import get_filter_state, get_prometheus_client, get_settings
from kepler_dashboard.engine.filters import FilterState
from kepler_dashboard.models import HealthResponse, PowerKind, ViewResult
from kepler_dashboard.services import views
from kepler_dashboard.services.prometheus import PrometheusClient

router = APIRouter()
logger = logging.getLogger(__name__)

API_VERSION = __version__


# ============================================================================
# Cluster Wide Consumption
# ============================================================================

@router.get("/power/cluster",
            response_model=ViewResult,
            summary="Get total, active and idle cluster power")
def get_cluster_power(
    client: PrometheusClient = Depends(get_prometheus_client),
    settings: Settings = Depends(get_settings),
):
    return views.cluster_power_summary(client, settings)


@router.get("/power/zones/{kind}",
            response_model=ViewResult,
            summary="Get power by zone and node")
def get_power_by_zone(
    kind: PowerKind,
    filters: FilterState = Depends(get_filter_state),
    client: PrometheusClient = Depends(get_prometheus_client),
    settings: Settings = Depends(get_settings),
):
    return views.power_by_zone(client, settings, kind, filters)


# ============================================================================
# Node Consumption
# ============================================================================

@router.get("/power/nodes/top",
            response_model=ViewResult,
            summary="Get the top power consuming nodes")
def get_top_nodes(
    k: Optional[int] = Query(None, ge=1, le=100, description="Number of nodes (default from settings)"),
    client: PrometheusClient = Depends(get_prometheus_client),
    settings: Settings = Depends(get_settings),
):
    return views.top_nodes(client, settings, k)


@router.get("/power/trend/zones",
            response_model=ViewResult,
            summary="Get the power trend per zone")
def get_zone_trend(
    filters: FilterState = Depends(get_filter_state),
    client: PrometheusClient = Depends(get_prometheus_client),
    settings: Settings = Depends(get_settings),
):
    return views.zone_trend(client, settings, filters)


@router.get("/power/nodes/series/{kind}",
            response_model=ViewResult,
            summary="Get node power series by zone")
def get_node_series(
    kind: PowerKind,
    filters: FilterState = Depends(get_filter_state),
    client: PrometheusClient = Depends(get_prometheus_client),
    settings: Settings = Depends(get_settings),
):
    return views.node_series(client, settings, kind, filters)


# ============================================================================
# Namespace Consumption
# ============================================================================

@router.get("/power/namespaces/top",
            response_model=ViewResult,
            summary="Get the top power consuming namespaces")
def get_top_namespaces(
    k: Optional[int] = Query(None, ge=1, le=100, description="Number of rows (default from settings)"),
    filters: FilterState = Depends(get_filter_state),
    client: PrometheusClient = Depends(get_prometheus_client),
    settings: Settings = Depends(get_settings),
):
    return views.top_namespaces(client, settings, filters, k)


@router.get("/power/pods/series",
            response_model=ViewResult,
            summary="Get pod power series by zone")
def get_pod_series(
    filters: FilterState = Depends(get_filter_state),
    client: PrometheusClient = Depends(get_prometheus_client),
    settings: Settings = Depends(get_settings),
):
    return views.pod_series(client, settings, filters)


# ============================================================================
# System Information
# ============================================================================

@router.get("/info/cpu", response_model=ViewResult, summary="Get CPU model and cores per node")
def get_cpu_info(
    client: PrometheusClient = Depends(get_prometheus_client),
    settings: Settings = Depends(get_settings),
):
    return views.cpu_info(client, settings)


@router.get("/info/rapl", response_model=ViewResult, summary="Get RAPL zones per node")
def get_rapl_info(
    client: PrometheusClient = Depends(get_prometheus_client),
    settings: Settings = Depends(get_settings),
):
    return views.rapl_info(client, settings)


@router.get("/filters", response_model=ViewResult, summary="Get selectable filter values")
def get_filter_options(
    filters: FilterState = Depends(get_filter_state),
    client: PrometheusClient = Depends(get_prometheus_client),
    settings: Settings = Depends(get_settings),
):
    return views.filter_options(client, settings, filters)


@router.get("/system/health", response_model=HealthResponse, summary="Check API and Prometheus health")
def get_health(
    client: PrometheusClient = Depends(get_prometheus_client),
    settings: Settings = Depends(get_settings),
):
    prometheus_status = client.check_health()
    return HealthResponse(
        status="healthy" if prometheus_status == "connected" else "degraded",
        version=API_VERSION,
        prometheus=prometheus_status,
        prometheus_url=settings.PROMETHEUS_URL,
    )
