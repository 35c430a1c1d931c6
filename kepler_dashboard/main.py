from fastapi import FastAPI, Request, status, WebSocket, Query, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
import logging

from kepler_dashboard.api import dashboard
from kepler_dashboard.api.dashboard import API_VERSION
from kepler_dashboard.config import Settings
from kepler_dashboard.deps import get_prometheus_client, get_settings
from kepler_dashboard.engine.filters import ALL, FilterState, InvalidFilterTransition
from kepler_dashboard.models import ErrorDetail, ErrorResponse
from kepler_dashboard.services.prometheus import PrometheusClient, TransportError
from kepler_dashboard.services.stream import dashboard_stream_handler
from kepler_dashboard.utils.prometheus_validation import PromQLValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Kepler Power Dashboard API {API_VERSION} - Starting up")
    yield
    logger.info("Application shutdown")

app = FastAPI(
    title="Kepler Power Dashboard API",
    description="Cluster, node and namespace CPU power from Kepler metrics",
    version=API_VERSION,
    lifespan=lifespan
)

# ============================================================================
# Middleware
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# Exception Handlers
# ============================================================================

@app.exception_handler(TransportError)
async def transport_exception_handler(request: Request, exc: TransportError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=ErrorResponse(error=ErrorDetail(code="PROMETHEUS_ERROR", message=str(exc))).model_dump(mode='json')
    )

@app.exception_handler(InvalidFilterTransition)
async def filter_transition_exception_handler(request: Request, exc: InvalidFilterTransition):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(error=ErrorDetail(code="INVALID_FILTER", message=str(exc), field="pod")).model_dump(mode='json')
    )

@app.exception_handler(PromQLValidationError)
async def promql_validation_exception_handler(request: Request, exc: PromQLValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(error=ErrorDetail(code="INVALID_FILTER", message=str(exc))).model_dump(mode='json')
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(error=ErrorDetail(code="VALIDATION_ERROR", message=str(exc))).model_dump(mode='json')
    )

# ============================================================================
# Routers
# ============================================================================

app.include_router(dashboard.router, prefix="/api/v1", tags=["Dashboard"])

# ============================================================================
# WebSocket Endpoints
# ============================================================================

@app.websocket("/api/v1/stream")
async def websocket_dashboard_stream(
    websocket: WebSocket,
    zone: str = Query(ALL),
    namespace: str = Query(ALL),
    interval: int = Query(0, ge=0, le=300),
    settings: Settings = Depends(get_settings),
    client: PrometheusClient = Depends(get_prometheus_client),
):
    """
    WebSocket endpoint pushing every dashboard view as it refreshes.

    Query Parameters:
    - zone, namespace: Initial filters (pod and node can be sent as messages)
    - interval: Update interval in seconds (0 uses POLL_INTERVAL_SECONDS)

    Connection Example:
    ```javascript
    const ws = new WebSocket('ws://localhost:8000/api/v1/stream?zone=package');
    ws.onmessage = (event) => console.log(JSON.parse(event.data));
    ws.send(JSON.stringify({namespace: 'monitoring'}));
    ```
    """
    try:
        filters = FilterState(zone=zone, namespace=namespace)
    except ValueError as e:
        await websocket.close(code=1008, reason=str(e))
        return
    await dashboard_stream_handler(websocket, client, settings, filters, interval or settings.POLL_INTERVAL_SECONDS)


# ============================================================================
# Root Endpoint
# ============================================================================

@app.get("/")
def read_root():
    return {
        "message": "Kepler Power Dashboard API",
        "version": API_VERSION,
        "docs": "/docs",
        "views": {
            "cluster": "/api/v1/power/cluster",
            "zones": "/api/v1/power/zones/{total|active|idle}",
            "top_nodes": "/api/v1/power/nodes/top",
            "zone_trend": "/api/v1/power/trend/zones",
            "node_series": "/api/v1/power/nodes/series/{total|active|idle}",
            "top_namespaces": "/api/v1/power/namespaces/top",
            "pod_series": "/api/v1/power/pods/series",
            "cpu_info": "/api/v1/info/cpu",
            "rapl_info": "/api/v1/info/rapl",
            "filters": "/api/v1/filters",
            "health": "/api/v1/system/health",
            "stream": "ws /api/v1/stream"
        }
    }
