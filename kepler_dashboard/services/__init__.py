from .prometheus import PrometheusClient
from kepler_dashboard.config import settings

# Create singleton instances of the services
prometheus_client = PrometheusClient(settings)
