"""
Streaming Service - WebSocket push of dashboard views.

Each connection gets its own filter state and its own ``DashboardPoller``.
The client may send filter updates as JSON messages, for example
``{"namespace": "monitoring"}`` or ``{"pod": "prometheus-k8s-0"}``; the
poller then drops in-flight results and restarts every view.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import WebSocket, WebSocketDisconnect

from kepler_dashboard.config import Settings
from kepler_dashboard.engine.filters import FilterState
from kepler_dashboard.models import FilterField, ViewResult
from kepler_dashboard.services.poller import DashboardPoller
from kepler_dashboard.services.prometheus import PrometheusClient
from kepler_dashboard.services.views import dashboard_views

logger = logging.getLogger(__name__)

# Namespace before pod: a namespace change resets the pod
_UPDATE_ORDER = [FilterField.ZONE, FilterField.NODE, FilterField.NAMESPACE, FilterField.POD]


def apply_filter_update(filters: FilterState, update: Dict[str, Any]):
    """
    Apply a client filter update, all fields or none.

    Raises:
        ValueError: For unknown fields, invalid values or transitions
    """
    if not isinstance(update, dict):
        raise ValueError("Filter update must be a JSON object")
    unknown = set(update) -{field.value for field in FilterField}
    if unknown:
        raise ValueError(f"Unknown filter field(s): {', '.join(sorted(unknown))}")

    candidate = FilterState(**filters.snapshot())
    for field in _UPDATE_ORDER:
        if field.value not in update:
            continue
        value = update[field.value]
        if not isinstance(value, str):
            raise ValueError(f"Filter '{field.value}' must be a string")
        getattr(candidate, f"set_{field.value}")(value)

    for field in _UPDATE_ORDER:
        if field.value in update:
            getattr(filters, f"set_{field.value}")(update[field.value])


async def dashboard_stream_handler(
    websocket: WebSocket,
    client: PrometheusClient,
    settings: Settings,
    filters: FilterState,
    interval: int,
):
    """
    Handle one dashboard WebSocket connection.

    Args:
        websocket: WebSocket connection
        client: Prometheus client
        settings: Application settings
        filters: Initial filter selection of this connection
        interval: Update interval in seconds
    """
    await websocket.accept()
    logger.info(f"New dashboard stream (filters: {filters!r}, interval: {interval}s)")

    async def send_result(result: ViewResult):
        await websocket.send_json({
            'type': 'view_update',
            'data': result.model_dump(mode='json'),
        })

    poller = DashboardPoller(dashboard_views(client, settings, filters), filters, send_result, interval)
    poller.start()

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
                await poller.update_filters(lambda state: apply_filter_update(state, message))
            except ValueError as e:
                logger.warning(f"Rejected filter update {raw!r}: {e}")
                await websocket.send_json({
                    'type': 'error',
                    'timestamp': datetime.now(timezone.utc).isoformat(),
                    'error': str(e),
                    'filters': filters.snapshot(),
                })
    except WebSocketDisconnect:
        logger.info("Dashboard stream disconnected")
    finally:
        await poller.stop()
