"""Kepler power dashboard: cluster, node and namespace CPU power from Kepler metrics."""

__version__ = "0.1.0"
