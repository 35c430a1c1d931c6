from fastapi import Depends, Query

from kepler_dashboard.config import Settings, settings
from kepler_dashboard.engine.filters import ALL, FilterState
from kepler_dashboard.services import prometheus_client
from kepler_dashboard.services.prometheus import PrometheusClient


def get_settings() -> Settings:
    return settings


def get_prometheus_client() -> PrometheusClient:
    return prometheus_client


def get_filter_state(
    zone: str = Query(ALL, description="Power zone filter (psys, package, dram, ...)"),
    namespace: str = Query(ALL, description="Pod namespace filter"),
    pod: str = Query(ALL, description="Pod name filter, requires a namespace"),
    node: str = Query(ALL, description="Node instance filter"),
) -> FilterState:
    """Request-scoped filter selection built from query parameters."""
    return FilterState(zone=zone, namespace=namespace, pod=pod, node=node)
