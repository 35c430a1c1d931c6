"""
Filter State - Dashboard filter selection and label-selector fragments.

Also holds the label vocabularies offered by the filter selectors. Those are
pure functions over the latest samples; nothing is cached between polls.
"""

import logging
from typing import Dict, Iterable, List, Tuple, Union

from kepler_dashboard.models.enums import FilterField
from kepler_dashboard.models.samples import ScalarSample
from kepler_dashboard.utils.prometheus_validation import build_label_matcher, sanitize_label_value

logger = logging.getLogger(__name__)

ALL = "All"

# Prometheus label and matcher operator per filter
_SELECTOR_LABELS: Dict[FilterField, Tuple[str, str]] = {
    FilterField.ZONE: ("zone", "="),
    FilterField.NAMESPACE: ("pod_namespace", "="),
    FilterField.POD: ("pod_name", "=~"),
    FilterField.NODE: ("instance", "=~"),
}


class InvalidFilterTransition(ValueError):
    """Raised when a filter change would leave the state inconsistent."""
    pass


class FilterState:
    """
    Current zone/namespace/pod/node selection.

    Each field is a concrete label value or ``ALL``. A pod selection only
    makes sense inside a namespace: changing the namespace resets the pod,
    and picking a pod while the namespace is ``ALL`` is rejected.

    ``generation`` increases on every effective change so that results
    computed for an older selection can be recognized and dropped.
    """

    def __init__(self, zone: str = ALL, namespace: str = ALL, pod: str = ALL, node: str = ALL):
        self.zone = ALL
        self.namespace = ALL
        self.pod = ALL
        self.node = ALL
        self.generation = 0
        self.set_zone(zone)
        self.set_namespace(namespace)
        self.set_pod(pod)
        self.set_node(node)
        self.generation = 0

    def __repr__(self) -> str:
        return (
            f"FilterState(zone={self.zone!r}, namespace={self.namespace!r}, "
            f"pod={self.pod!r}, node={self.node!r}, generation={self.generation})"
        )

    @staticmethod
    def _validate(value: str) -> str:
        if value == ALL:
            return value
        return sanitize_label_value(value)

    def _assign(self, name: str, value: str) -> bool:
        if getattr(self, name) == value:
            return False
        setattr(self, name, value)
        return True

    def set_zone(self, value: str) -> None:
        if self._assign("zone", self._validate(value)):
            self.generation += 1

    def set_node(self, value: str) -> None:
        if self._assign("node", self._validate(value)):
            self.generation += 1

    def set_namespace(self, value: str) -> None:
        """Select a namespace. The pod selection is always reset to ``ALL``."""
        value = self._validate(value)
        changed = self._assign("namespace", value)
        changed = self._assign("pod", ALL) or changed
        if changed:
            self.generation += 1

    def set_pod(self, value: str) -> None:
        """
        Select a pod within the current namespace.

        Raises:
            InvalidFilterTransition: If a concrete pod is picked while the
                namespace is ``ALL``; the state is left unchanged
        """
        value = self._validate(value)
        if value != ALL and self.namespace == ALL:
            logger.debug(f"Rejected pod filter '{value}': namespace is {ALL}")
            raise InvalidFilterTransition(
                f"Cannot select pod '{value}' without selecting a namespace first"
            )
        if self._assign("pod", value):
            self.generation += 1

    def get(self, field: Union[FilterField, str]) -> str:
        return getattr(self, FilterField(field).value)

    def to_selector_fragment(self, field: Union[FilterField, str]) -> str:
        """
        Label matcher fragment for ``field``, ready to be appended after the
        ``job`` matcher of a selector, e.g. ``,zone="psys"``.

        ``ALL`` means no restriction and yields an empty string.
        """
        field = FilterField(field)
        value = self.get(field)
        if value == ALL:
            return ""
        label, operator = _SELECTOR_LABELS[field]
        return "," + build_label_matcher(label, value, operator)

    def snapshot(self) -> Dict[str, str]:
        return {field.value: self.get(field) for field in FilterField}


# ============================================================================
# Label Vocabularies
# ============================================================================

def label_options(samples: Iterable[ScalarSample], label: str) -> List[str]:
    """``ALL`` followed by the sorted distinct non-empty values of ``label``."""
    values = set()
    for sample in samples:
        value = sample.labels.get(label)
        if value:
            values.add(value)
    return [ALL] + sorted(values)


def zone_options(node_samples: Iterable[ScalarSample]) -> List[str]:
    return label_options(node_samples, "zone")


def namespace_options(pod_samples: Iterable[ScalarSample]) -> List[str]:
    return label_options(pod_samples, "namespace")


def pod_options(pod_samples: Iterable[ScalarSample]) -> List[str]:
    return label_options(pod_samples, "pod")


def node_options(info_samples: Iterable[ScalarSample]) -> List[str]:
    return label_options(info_samples, "instance")
