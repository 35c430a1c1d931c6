"""
Pytest configuration and fixtures for all tests
"""
import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient
from unittest.mock import Mock

from kepler_dashboard.config import Settings
from kepler_dashboard.deps import get_prometheus_client, get_settings
from kepler_dashboard.main import app
from kepler_dashboard.models import LabelSet, ScalarSample
from kepler_dashboard.services.prometheus import PrometheusClient

SAMPLE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_settings():
    """Override settings for testing"""
    return Settings(
        PROMETHEUS_URL="http://test-prometheus:9090",
        PROMETHEUS_TIMEOUT=5,
        KEPLER_JOB="power-monitor",
        POLL_INTERVAL_SECONDS=1,
        RANGE_WINDOW_SECONDS=300,
        RANGE_SAMPLES=30,
    )


@pytest.fixture
def mock_prometheus():
    """PrometheusClient double; tests set query/query_range behaviour."""
    return Mock(spec=PrometheusClient)


@pytest.fixture
def client(test_settings, mock_prometheus):
    """Create test client with overridden settings and Prometheus client"""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_prometheus_client] = lambda: mock_prometheus
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def sample():
    """Build a ScalarSample from label keywords and a value."""
    def _sample(value, **labels):
        return ScalarSample(labels=LabelSet(**labels), value=value, timestamp=SAMPLE_TIME)
    return _sample


@pytest.fixture
def vector_response():
    """Build a Prometheus instant query response from (labels, value) pairs."""
    def _vector(*results):
        return {
            "status": "success",
            "data": {
                "resultType": "vector",
                "result": [
                    {"metric": dict(metric), "value": [1704110400, str(value)]}
                    for metric, value in results
                ]
            }
        }
    return _vector


@pytest.fixture
def matrix_response():
    """Build a Prometheus range query response from (labels, [(ts, value), ...]) pairs."""
    def _matrix(*results):
        return {
            "status": "success",
            "data": {
                "resultType": "matrix",
                "result": [
                    {"metric": dict(metric), "values": [[ts, str(value)] for ts, value in points]}
                    for metric, points in results
                ]
            }
        }
    return _matrix


@pytest.fixture
def kepler_node_samples():
    """
    Node CPU watts of a three node cluster:
    - node-1 reports psys, package and dram
    - node-2 reports package and dram only
    - node-3 reports an extra core zone
    """
    return [
        ({"node_name": "node-1", "zone": "psys", "instance": "10.0.0.1:9102"}, 50.0),
        ({"node_name": "node-1", "zone": "package", "instance": "10.0.0.1:9102"}, 80.0),
        ({"node_name": "node-1", "zone": "dram", "instance": "10.0.0.1:9102"}, 10.0),
        ({"node_name": "node-2", "zone": "package", "instance": "10.0.0.2:9102"}, 30.0),
        ({"node_name": "node-2", "zone": "dram", "instance": "10.0.0.2:9102"}, 5.0),
        ({"node_name": "node-3", "zone": "package", "instance": "10.0.0.3:9102"}, 20.0),
        ({"node_name": "node-3", "zone": "core", "instance": "10.0.0.3:9102"}, 12.0),
    ]
