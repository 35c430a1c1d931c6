"""
Dashboard Models

- samples: LabelSet, ScalarSample, RangeSeries
- power: resolved power, aggregate rows, chart series, view results
- enums: PowerZone, PowerKind, FilterField
- common: response and error envelopes
"""

from .common import BaseResponse, ErrorDetail, ErrorResponse, HealthResponse
from .enums import FilterField, PowerKind, PowerZone
from .power import (
    NO_DATA_MESSAGE,
    AggregateRow,
    ClusterPowerSummary,
    CpuInfoRow,
    FilterOptions,
    NamedSeries,
    RaplInfoRow,
    ResolvedNodePower,
    ViewResult,
)
from .samples import (
    UNKNOWN,
    LabelSet,
    MalformedValueError,
    RangeSeries,
    ScalarSample,
    parse_timestamp,
    parse_value,
)

__all__ = [
    "BaseResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "FilterField",
    "PowerKind",
    "PowerZone",
    "NO_DATA_MESSAGE",
    "AggregateRow",
    "ClusterPowerSummary",
    "CpuInfoRow",
    "FilterOptions",
    "NamedSeries",
    "RaplInfoRow",
    "ResolvedNodePower",
    "ViewResult",
    "UNKNOWN",
    "LabelSet",
    "MalformedValueError",
    "RangeSeries",
    "ScalarSample",
    "parse_timestamp",
    "parse_value",
]
