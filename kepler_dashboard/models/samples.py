"""
Sample Models - Typed Prometheus samples and series.

This module defines:
- LabelSet: the small fixed set of labels the dashboard cares about
- ScalarSample: one instant-vector sample
- RangeSeries: one range-vector series
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

# Kepler label names first, short names as fallback
_LABEL_CANDIDATES: Dict[str, List[str]] = {
    "node": ["node_name", "node"],
    "zone": ["zone"],
    "namespace": ["pod_namespace", "namespace"],
    "pod": ["pod_name", "pod"],
    "instance": ["instance"],
    "model": ["model_name", "model"],
}


class MalformedValueError(ValueError):
    """Raised when a sample value or timestamp cannot be parsed."""
    pass


def parse_value(raw: Any) -> float:
    """
    Parse a Prometheus sample value.

    Prometheus encodes sample values as strings ("1.5", "NaN", "+Inf").
    Non-finite values are rejected as well: a NaN reading is missing data,
    not zero.

    Raises:
        MalformedValueError: If the value is not a finite number
    """
    if isinstance(raw, bool):
        raise MalformedValueError(f"Boolean is not a sample value: {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise MalformedValueError(f"Unparseable sample value: {raw!r}") from e
    if not math.isfinite(value):
        raise MalformedValueError(f"Non-finite sample value: {raw!r}")
    return value


def parse_timestamp(raw: Any) -> datetime:
    """Parse a Prometheus unix timestamp (seconds, possibly fractional) to an aware UTC datetime."""
    if isinstance(raw, bool):
        raise MalformedValueError(f"Boolean is not a timestamp: {raw!r}")
    try:
        seconds = float(raw)
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise MalformedValueError(f"Unparseable timestamp: {raw!r}") from e


class LabelSet(BaseModel):
    """
    Labels of a sample or series.

    ``None`` means the label is absent, which is not the same as an empty
    string value.
    """
    model_config = ConfigDict(frozen=True)

    node: Optional[str] = None
    zone: Optional[str] = None
    namespace: Optional[str] = None
    pod: Optional[str] = None
    instance: Optional[str] = None
    model: Optional[str] = None

    @classmethod
    def from_metric(cls, metric: Dict[str, Any]) -> "LabelSet":
        """Build a LabelSet from the ``metric`` dict of a Prometheus result."""
        values: Dict[str, Optional[str]] = {}
        for name, candidates in _LABEL_CANDIDATES.items():
            for key in candidates:
                if key in metric and metric[key] is not None:
                    values[name] = str(metric[key])
                    break
        return cls(**values)

    def get(self, name: str) -> Optional[str]:
        """Return a label value by name, ``None`` if absent or not a known label."""
        if name not in _LABEL_CANDIDATES:
            return None
        return getattr(self, name)

    def value_or_unknown(self, name: str) -> str:
        value = self.get(name)
        return UNKNOWN if value is None else value


class ScalarSample(BaseModel):
    """A single instant-vector sample. ``value`` is always finite."""
    model_config = ConfigDict(frozen=True)

    labels: LabelSet = Field(default_factory=LabelSet)
    value: float = Field(..., allow_inf_nan=False)
    timestamp: datetime

    @classmethod
    def from_result(cls, result: Dict[str, Any]) -> "ScalarSample":
        """
        Build a sample from one entry of an instant query ``result`` list.

        Raises:
            MalformedValueError: If the value pair is missing or not finite
        """
        pair = result.get("value")
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise MalformedValueError(f"Sample has no value pair: {pair!r}")
        return cls(
            labels=LabelSet.from_metric(result.get("metric") or {}),
            value=parse_value(pair[1]),
            timestamp=parse_timestamp(pair[0]),
        )


class RangeSeries(BaseModel):
    """
    A range-vector series.

    Points are strictly increasing in time. An empty ``points`` list means
    "no data in the window", which differs from the series being absent.
    Values may be non-finite here; the reshaper drops those points.
    """
    model_config = ConfigDict(frozen=True)

    labels: LabelSet = Field(default_factory=LabelSet)
    points: List[Tuple[datetime, float]] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: Dict[str, Any]) -> "RangeSeries":
        """
        Build a series from one entry of a range query ``result`` list.

        Points whose value is not a number, or whose timestamp does not move
        forward, are dropped one by one.
        """
        points: List[Tuple[datetime, float]] = []
        for pair in result.get("values") or []:
            try:
                if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                    raise MalformedValueError(f"Point is not a (timestamp, value) pair: {pair!r}")
                timestamp = parse_timestamp(pair[0])
                try:
                    value = float(pair[1])
                except (TypeError, ValueError) as e:
                    raise MalformedValueError(f"Unparseable point value: {pair[1]!r}") from e
            except MalformedValueError as e:
                logger.debug(f"Dropping point: {e}")
                continue
            if points and timestamp <= points[-1][0]:
                logger.debug(f"Dropping out-of-order point at {timestamp.isoformat()}")
                continue
            points.append((timestamp, value))
        return cls(labels=LabelSet.from_metric(result.get("metric") or {}), points=points)
