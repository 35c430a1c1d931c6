from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    # Prometheus
    PROMETHEUS_URL: str = Field("http://localhost:9090", description="URL of the Prometheus server")
    PROMETHEUS_TIMEOUT: int = Field(30, description="Timeout in seconds for Prometheus queries")
    PROMETHEUS_USERNAME: Optional[str] = Field(None, description="Username for Prometheus basic auth")
    PROMETHEUS_PASSWORD: Optional[str] = Field(None, description="Password for Prometheus basic auth")
    PROMETHEUS_CA_BUNDLE: Optional[str] = Field(None, description="Path to a CA bundle for verifying Prometheus TLS")

    # Kepler
    KEPLER_JOB: str = Field("power-monitor", description="Scrape job name of the Kepler exporter")

    # Polling and range queries
    POLL_INTERVAL_SECONDS: int = Field(15, ge=1, description="Interval between two polls of the same view")
    RANGE_WINDOW_SECONDS: int = Field(300, ge=1, description="Look-back window of range queries")
    RANGE_SAMPLES: int = Field(30, ge=1, description="Number of evenly spaced samples per range query")

    # View sizes
    TOP_NODES: int = Field(5, ge=1, description="Number of nodes in the top nodes view")
    TOP_NAMESPACES: int = Field(10, ge=1, description="Number of rows in the top namespaces view")
    SERIES_DISPLAY_CAP: int = Field(10, ge=1, description="Maximum number of series in a chart view")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Logging level")


settings = Settings()
