import logging
import requests
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, List, Tuple, Union

from kepler_dashboard.config import Settings
from kepler_dashboard.models.samples import MalformedValueError, RangeSeries, ScalarSample

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when a Prometheus query fails, times out or returns an error status."""
    pass


class PrometheusClient:
    """A client for querying a Prometheus server."""

    def __init__(self, settings: Settings):
        self.base_url = settings.PROMETHEUS_URL.rstrip('/')
        self.timeout = settings.PROMETHEUS_TIMEOUT

        self.auth: Optional[Tuple[str, str]] = None
        if settings.PROMETHEUS_USERNAME and settings.PROMETHEUS_PASSWORD:
            self.auth = (settings.PROMETHEUS_USERNAME, settings.PROMETHEUS_PASSWORD)

        self.verify: Union[str, bool] = True
        if settings.PROMETHEUS_CA_BUNDLE:
            self.verify = settings.PROMETHEUS_CA_BUNDLE

    def _request(self, method: str, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = requests.request(
                method,
                url,
                params=params,
                auth=self.auth,
                timeout=self.timeout,
                verify=self.verify
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout as e:
            raise TransportError(f"Request to Prometheus timed out: {e}") from e
        except requests.exceptions.HTTPError as e:
            raise TransportError(f"HTTP error occurred: {e} - {e.response.text}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"An error occurred while querying Prometheus: {e}") from e
        except ValueError as e:
            raise TransportError(f"Prometheus returned a non-JSON response: {e}") from e

    def _api(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        body = self._request("get", f"{self.base_url}{path}", params=params)
        if not isinstance(body, dict):
            raise TransportError(f"Prometheus returned an unexpected response body: {type(body).__name__}")
        if body.get("status") != "success":
            error = body.get("error") or "unknown error"
            raise TransportError(f"Prometheus query failed ({body.get('errorType', 'error')}): {error}")
        return body

    def query(self, query: str) -> Dict[str, Any]:
        """Performs an instant query."""
        logger.debug(f"Instant query: {query}")
        return self._api("/api/v1/query", {"query": query})

    def query_range(self, query: str, end: datetime, window: timedelta, sample_count: int) -> Dict[str, Any]:
        """
        Performs a range query over ``[end - window, end]``.

        The step is always ``window / sample_count`` so that every series
        rendered side by side shares the same timestamp grid.
        """
        if sample_count < 1:
            raise ValueError(f"sample_count must be at least 1, got {sample_count}")
        if window.total_seconds() <= 0:
            raise ValueError(f"window must be positive, got {window}")

        if end.tzinfo is None:
            end = end.replace(tzinfo=timezone.utc)
        start = end - window
        step = window.total_seconds() / sample_count
        logger.debug(f"Range query: {query} (window={window}, step={step:g}s)")
        return self._api("/api/v1/query_range", {
            "query": query,
            "start": f"{start.timestamp():.3f}",
            "end": f"{end.timestamp():.3f}",
            "step": f"{step:g}",
        })

    def get_label_values(self, label_name: str) -> list[str]:
        """Gets all values for a given label from Prometheus."""
        url = f"{self.base_url}/api/v1/label/{label_name}/values"
        try:
            response_json = self._request("get", url)
            if isinstance(response_json, dict) and response_json.get("status") == "success":
                return response_json.get("data", [])
            return []
        except TransportError:
            return []

    def check_health(self) -> str:
        """Checks the health of the Prometheus server."""
        url = f"{self.base_url}/-/healthy"
        try:
            self._request("get", url)
            return "connected"
        except TransportError:
            try:
                self.query("up")
                return "connected"
            except TransportError:
                return "disconnected"


def parse_vector(response: Dict[str, Any]) -> List[ScalarSample]:
    """
    Turn an instant query response into samples.

    Samples with a malformed or non-finite value are dropped one by one. A
    ``scalar`` result becomes a single sample without labels.
    """
    data = response.get("data") or {}
    if data.get("resultType") == "scalar":
        results = [{"metric": {}, "value": data.get("result")}]
    else:
        results = data.get("result") or []

    samples = []
    for result in results:
        try:
            samples.append(ScalarSample.from_result(result))
        except MalformedValueError as e:
            logger.debug(f"Dropping sample {result.get('metric')}: {e}")
    return samples


def parse_matrix(response: Dict[str, Any]) -> List[RangeSeries]:
    """Turn a range query response into series, keeping Prometheus order."""
    data = response.get("data") or {}
    return [RangeSeries.from_result(result) for result in data.get("result") or []]
