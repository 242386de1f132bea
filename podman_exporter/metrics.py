"""
Prometheus metric definitions for Podman container statistics.

This module defines every metric the exporter can expose. The registry is
built once at startup and only read afterwards, so scrapes running in
parallel can share it freely.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

GAUGE = "gauge"
COUNTER = "counter"

NAMESPACE = "podman"

CONTAINER_LABELS = ("container_id", "name")


@dataclass(frozen=True)
class MetricDescriptor:
    """Name, help text, kind and label schema of one exposed metric."""

    name: str
    help_text: str
    kind: str
    label_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MetricSample:
    """A descriptor paired with a value and one label value per label name."""

    descriptor: MetricDescriptor
    value: float
    label_values: Tuple[str, ...] = ()

    @property
    def labels(self) -> Dict[str, str]:
        return dict(zip(self.descriptor.label_names, self.label_values))


# Short key -> (help text, ContainerStatSample field). Order is emission order.
CONTAINER_METRICS: Dict[str, Tuple[str, str]] = {
    'container_cpu': (
        'Percentage of CPU used by the container since the last sample.',
        'cpu_percent',
    ),
    'container_cpu_average': (
        'Average percentage of CPU used by the container over its lifetime.',
        'cpu_average_percent',
    ),
    'container_cpu_usage_total': (
        'Total CPU time consumed by the container in nanoseconds.',
        'cpu_usage_nanos',
    ),
    'container_cpu_usage_kernel': (
        'CPU time consumed by the container in kernel mode in nanoseconds.',
        'cpu_kernel_usage_nanos',
    ),
    'container_mem_usage': (
        'Current memory usage of the container in bytes.',
        'mem_usage_bytes',
    ),
    'container_mem_limit': (
        'Memory limit of the container in bytes.',
        'mem_limit_bytes',
    ),
    'container_mem_percent': (
        'Percentage of the memory limit used by the container.',
        'mem_percent',
    ),
    'container_net_input': (
        'Total bytes received by the container over the network.',
        'net_input_bytes',
    ),
    'container_net_output': (
        'Total bytes sent by the container over the network.',
        'net_output_bytes',
    ),
    'container_block_input': (
        'Total bytes read by the container from block devices.',
        'block_input_bytes',
    ),
    'container_block_output': (
        'Total bytes written by the container to block devices.',
        'block_output_bytes',
    ),
    'container_pids': (
        'Number of processes running in the container.',
        'pid_count',
    ),
}


def _base_descriptors(namespace: str) -> Iterable[Tuple[str, MetricDescriptor]]:
    yield 'up', MetricDescriptor(
        f'{namespace}_up',
        'Was the last scrape of podman successful.',
        GAUGE,
    )
    yield 'exporter_scrapes_total', MetricDescriptor(
        f'{namespace}_exporter_scrapes_total',
        'Current total podman scrapes.',
        COUNTER,
    )
    yield 'exporter_scrape_failures_total', MetricDescriptor(
        f'{namespace}_exporter_scrape_failures_total',
        'Current total podman scrape failures.',
        COUNTER,
    )
    yield 'version_info', MetricDescriptor(
        f'{namespace}_version_info',
        'Podman version info.',
        GAUGE,
        ('version',),
    )


class MetricRegistry:
    """
    Immutable table of every metric descriptor the exporter emits.

    Descriptors are looked up by their short key, the metric name without the
    namespace prefix (e.g. ``container_cpu`` for ``podman_container_cpu``).
    """

    def __init__(self, namespace: str = NAMESPACE):
        entries = list(_base_descriptors(namespace))
        for key, (help_text, _field) in CONTAINER_METRICS.items():
            entries.append(
                (key, MetricDescriptor(f'{namespace}_{key}', help_text, GAUGE, CONTAINER_LABELS))
            )

        self.namespace = namespace
        self._by_key: Dict[str, MetricDescriptor] = dict(entries)
        self._descriptors: Tuple[MetricDescriptor, ...] = tuple(d for _, d in entries)

    def describe(self) -> Tuple[MetricDescriptor, ...]:
        """Return all descriptors in a stable order."""
        return self._descriptors

    def get(self, key: str) -> MetricDescriptor:
        """Look up a descriptor by short key. Raises KeyError if unknown."""
        return self._by_key[key]

    def sample(self, key: str, value: float, *label_values: str) -> MetricSample:
        """
        Build a sample for the descriptor registered under key.

        Args:
            key: Short metric key.
            value: Sample value, widened to float.
            *label_values: One value per label name, passed through unmodified.

        Raises:
            KeyError: If key is not registered.
            ValueError: If the number of label values does not match the schema.
        """
        descriptor = self._by_key[key]
        if len(label_values) != len(descriptor.label_names):
            raise ValueError(
                f"{descriptor.name} expects labels {descriptor.label_names}, "
                f"got {len(label_values)} values"
            )
        return MetricSample(descriptor, float(value), tuple(label_values))

    def __len__(self) -> int:
        return len(self._descriptors)
