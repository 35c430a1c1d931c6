"""
Power Models - Resolved power, aggregate rows, chart series and view results.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .common import BaseResponse, ErrorDetail
from .samples import LabelSet

NO_DATA_MESSAGE = "No data available"


# ============================================================================
# Engine Values
# ============================================================================

class ResolvedNodePower(BaseModel):
    """
    Power of one entity on one node after psys/package resolution.

    For node-level resolution ``labels`` only carry the node. For pod-level
    resolution they also carry the pod's namespace and name.
    """
    model_config = ConfigDict(frozen=True)

    node: str
    labels: LabelSet = Field(default_factory=LabelSet)
    soc_watts: float = 0.0
    dram_watts: float = 0.0

    @property
    def total_watts(self) -> float:
        return self.soc_watts + self.dram_watts


class AggregateRow(BaseModel):
    """One output row of a grouped aggregation."""
    model_config = ConfigDict(frozen=True)

    group_key: Tuple[str, ...] = ()
    watts: float = 0.0


class NamedSeries(BaseModel):
    """A chart-ready series."""
    name: str
    points: List[Tuple[datetime, float]] = Field(default_factory=list)


# ============================================================================
# Inventory Rows
# ============================================================================

class CpuInfoRow(BaseModel):
    """CPU model and core count of one node."""
    instance: str
    model: str
    cores: int = Field(..., ge=0)


class RaplInfoRow(BaseModel):
    """RAPL zones exposed by one node."""
    node: str
    zones: List[str] = Field(default_factory=list)

    @property
    def zones_label(self) -> str:
        return ", ".join(self.zones)


class ClusterPowerSummary(BaseModel):
    """Total, active and idle cluster power in watts."""
    total_watts: float = 0.0
    active_watts: float = 0.0
    idle_watts: float = 0.0


class FilterOptions(BaseModel):
    """Selectable values for every dashboard filter, ``All`` first."""
    zones: List[str] = Field(default_factory=lambda: ["All"])
    namespaces: List[str] = Field(default_factory=lambda: ["All"])
    pods: List[str] = Field(default_factory=lambda: ["All"])
    nodes: List[str] = Field(default_factory=lambda: ["All"])


# ============================================================================
# View Results
# ============================================================================

class ViewResult(BaseResponse):
    """
    Result of one dashboard view.

    A successful query with no data sets ``empty`` and leaves ``error`` unset.
    A failed query sets ``error``; the other fields are then meaningless.
    """
    view: str
    rows: List[AggregateRow] = Field(default_factory=list)
    series: List[NamedSeries] = Field(default_factory=list)
    summary: Optional[ClusterPowerSummary] = None
    cpu_info: List[CpuInfoRow] = Field(default_factory=list)
    rapl_info: List[RaplInfoRow] = Field(default_factory=list)
    filter_options: Optional[FilterOptions] = None
    empty: bool = False
    message: Optional[str] = None
    error: Optional[ErrorDetail] = None
    generation: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None
