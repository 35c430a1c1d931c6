"""
PromQL Label Validation

Filter values end up spliced into PromQL expressions, so every label name
and value is checked here before it is quoted into a matcher.
"""

import re
from typing import Dict, Optional

_LABEL_VALUE_PATTERN = re.compile(r'^[a-zA-Z0-9\-_.:/]+$')
_LABEL_NAME_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')
_MATCHER_OPERATORS = {"=", "!=", "=~", "!~"}


class PromQLValidationError(ValueError):
    """Exception raised when PromQL input validation fails."""
    pass


def sanitize_label_value(value: str, max_length: int = 255) -> str:
    """
    Validate a label value used in a matcher.

    Allowed characters are the ones found in node names, namespaces, pod
    names, zones and ``host:port`` instances: alphanumerics, hyphen,
    underscore, period, colon and forward slash.

    Raises:
        PromQLValidationError: If the value is empty, too long or contains
            any other character

    Examples:
        >>> sanitize_label_value("worker-1")
        'worker-1'
        >>> sanitize_label_value("10.0.0.7:9102")
        '10.0.0.7:9102'
    """
    if not value:
        raise PromQLValidationError("Label value cannot be empty")

    if len(value) > max_length:
        raise PromQLValidationError(
            f"Label value exceeds maximum length of {max_length}: {value[:50]}..."
        )

    if not _LABEL_VALUE_PATTERN.match(value):
        raise PromQLValidationError(
            f"Label value contains invalid characters. "
            f"Allowed: alphanumeric, hyphen, underscore, period, colon, slash. "
            f"Got: {value}"
        )

    return value


def sanitize_label_name(label_name: str) -> str:
    """
    Validate a label name against ``[a-zA-Z_][a-zA-Z0-9_]*``.

    Names starting with ``__`` are reserved by Prometheus and rejected.
    """
    if not label_name:
        raise PromQLValidationError("Label name cannot be empty")

    if not _LABEL_NAME_PATTERN.match(label_name):
        raise PromQLValidationError(
            f"Invalid label name format. Must match [a-zA-Z_][a-zA-Z0-9_]*. "
            f"Got: {label_name}"
        )

    if label_name.startswith('__'):
        raise PromQLValidationError(
            f"Label names starting with '__' are reserved for internal use: {label_name}"
        )

    return label_name


def build_label_matcher(label_name: str, label_value: str, operator: str = "=") -> str:
    """
    Build one label matcher.

    Examples:
        >>> build_label_matcher("zone", "psys")
        'zone="psys"'
        >>> build_label_matcher("pod_name", "api-7d9", "=~")
        'pod_name=~"api-7d9"'
    """
    label_name = sanitize_label_name(label_name)
    label_value = sanitize_label_value(label_value)

    if operator not in _MATCHER_OPERATORS:
        raise PromQLValidationError(
            f"Invalid operator. Must be one of {sorted(_MATCHER_OPERATORS)}. Got: {operator}"
        )

    return f'{label_name}{operator}"{label_value}"'


def build_selector(metric_name: str, matchers: Dict[str, str], fragment: Optional[str] = None) -> str:
    """
    Build ``metric{a="x",b="y"<fragment>}``.

    ``fragment`` is a pre-built, already validated string of leading-comma
    matchers (see ``FilterState.to_selector_fragment``). An empty selector
    renders as the bare metric name.

    Examples:
        >>> build_selector("kepler_node_cpu_watts", {"job": "power-monitor"}, ',zone="psys"')
        'kepler_node_cpu_watts{job="power-monitor",zone="psys"}'
    """
    body = ",".join(build_label_matcher(name, value) for name, value in matchers.items())
    if fragment:
        body = f"{body}{fragment}" if body else fragment.lstrip(",")
    if not body:
        return metric_name
    return f"{metric_name}{{{body}}}"
