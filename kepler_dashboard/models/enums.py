"""
Dashboard Enumerations - Power zones, power kinds and filter fields.
"""

from enum import Enum


class PowerZone(str, Enum):
    """
    RAPL power domain reported by Kepler in the ``zone`` label.

    Only the three members below take part in power-domain resolution.
    Any other zone (``core``, ``uncore``, ...) is kept as an opaque string.
    """
    PSYS = "psys"
    PACKAGE = "package"
    DRAM = "dram"


class PowerKind(str, Enum):
    """Which Kepler node CPU power metric a view reads."""
    TOTAL = "total"
    ACTIVE = "active"
    IDLE = "idle"


class FilterField(str, Enum):
    """Selectable dashboard filters."""
    ZONE = "zone"
    NAMESPACE = "namespace"
    POD = "pod"
    NODE = "node"
