"""
Bridge between PodmanCollector and prometheus_client.

prometheus_client pulls metrics from custom collectors through ``describe()``
and ``collect()``. The adapter runs one scrape per ``collect()`` call and
converts the samples into metric families.
"""

import platform
from typing import Dict, Iterator, List

from prometheus_client import CollectorRegistry, Info, PlatformCollector, ProcessCollector
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric

from podman_exporter import __version__
from podman_exporter.collector import PodmanCollector
from podman_exporter.metrics import COUNTER, MetricDescriptor


def _family_for(descriptor: MetricDescriptor) -> Metric:
    """Create an empty metric family matching a descriptor."""
    if descriptor.kind == COUNTER:
        # CounterMetricFamily strips and re-appends the _total suffix
        return CounterMetricFamily(descriptor.name, descriptor.help_text, labels=descriptor.label_names)
    return GaugeMetricFamily(descriptor.name, descriptor.help_text, labels=descriptor.label_names)


class PrometheusCollectorAdapter:
    """prometheus_client custom collector backed by a PodmanCollector."""

    def __init__(self, collector: PodmanCollector):
        self.collector = collector

    def describe(self) -> Iterator[Metric]:
        """Advertise every metric the collector can emit, without scraping."""
        for descriptor in self.collector.registry.describe():
            yield _family_for(descriptor)

    def collect(self) -> Iterator[Metric]:
        """Run one scrape and yield its samples grouped into metric families."""
        outcome = self.collector.scrape()

        families: Dict[str, Metric] = {}
        order: List[str] = []
        for sample in outcome.samples:
            descriptor = sample.descriptor
            family = families.get(descriptor.name)
            if family is None:
                family = _family_for(descriptor)
                families[descriptor.name] = family
                order.append(descriptor.name)
            family.add_metric(list(sample.label_values), sample.value)

        for name in order:
            yield families[name]


def build_registry(collector: PodmanCollector, include_process_metrics: bool = True) -> CollectorRegistry:
    """
    Build the registry served on the metrics endpoint.

    Args:
        collector: Collector to expose.
        include_process_metrics: Also register the process and platform
            collectors for the exporter itself.

    Returns:
        A new CollectorRegistry.
    """
    registry = CollectorRegistry()
    registry.register(PrometheusCollectorAdapter(collector))

    build_info = Info(
        'podman_exporter_build',
        'A metric with a constant 1 value labeled by the version of the podman exporter.',
        registry=registry,
    )
    build_info.info({
        'version': __version__,
        'pythonversion': platform.python_version(),
    })

    if include_process_metrics:
        ProcessCollector(registry=registry)
        PlatformCollector(registry=registry)

    return registry
