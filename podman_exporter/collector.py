"""
Scrape cycle for the Podman exporter.

A scrape fetches the Podman version, then a stats snapshot for every running
container, and turns both into metric samples. Any failed fetch ends the cycle
with podman_up 0 and only the exporter's own health samples.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from podman_exporter.errors import FetchError
from podman_exporter.metrics import CONTAINER_METRICS, MetricRegistry, MetricSample
from podman_exporter.models import ContainerStatSample
from podman_exporter.podman_client import PodmanAPIClient
from podman_exporter.transport import SocketTransport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class ScrapeOutcome:
    """Result of one scrape cycle."""

    up: int
    samples: Tuple[MetricSample, ...]


@dataclass(frozen=True)
class ScrapeCounters:
    """Snapshot of the cumulative scrape counters."""

    total_scrapes: int
    scrape_failures: int


class PodmanCollector:
    """Runs scrape cycles against a Podman socket and tracks scrape counters."""

    def __init__(
        self,
        socket_path: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[PodmanAPIClient] = None,
        registry: Optional[MetricRegistry] = None,
    ):
        """
        Initialize the collector.

        Args:
            socket_path: Path to the Podman API socket. Required unless a
                client is given.
            timeout: Per-request timeout in seconds.
            client: Pre-built API client, used instead of socket_path.
            registry: Metric registry to emit into. A default one is built
                when omitted.

        Raises:
            SocketUnavailable: If socket_path does not exist.
        """
        if client is None:
            if socket_path is None:
                raise ValueError("socket_path is required when no client is given")
            client = PodmanAPIClient(SocketTransport(socket_path, timeout))

        self.client = client
        self.registry = registry or MetricRegistry()
        self._total_scrapes = 0
        self._scrape_failures = 0
        self._lock = threading.Lock()

    def counters(self) -> ScrapeCounters:
        """Return the current cumulative counters."""
        with self._lock:
            return ScrapeCounters(self._total_scrapes, self._scrape_failures)

    def scrape(self) -> ScrapeOutcome:
        """
        Run one scrape cycle.

        Fetch errors never propagate; they are reported through podman_up
        and the scrape failure counter.

        Returns:
            ScrapeOutcome with the emitted samples.
        """
        start_time = time.time()
        with self._lock:
            self._total_scrapes += 1

        samples: List[MetricSample] = []
        up = 1
        try:
            samples.extend(self._collect())
        except FetchError as e:
            logger.warning(f"Scrape of podman failed at {e.url or 'unknown url'}: {type(e).__name__}: {e}")
            samples = []
            up = 0

        with self._lock:
            if not up:
                self._scrape_failures += 1
            counters = ScrapeCounters(self._total_scrapes, self._scrape_failures)

        samples.append(self.registry.sample('up', up))
        samples.append(self.registry.sample('exporter_scrapes_total', counters.total_scrapes))
        samples.append(self.registry.sample('exporter_scrape_failures_total', counters.scrape_failures))

        duration = time.time() - start_time
        logger.debug(f"Scrape completed in {duration:.3f} seconds with {len(samples)} samples (up={up})")
        return ScrapeOutcome(up=up, samples=tuple(samples))

    def _collect(self) -> List[MetricSample]:
        """Fetch version and container stats. Raises FetchError on any failure."""
        version = self.client.version()
        samples = [self.registry.sample('version_info', 1, version.version)]

        report = self.client.container_stats()
        for stats in report.stats:
            samples.extend(self._container_samples(stats))

        return samples

    def _container_samples(self, stats: ContainerStatSample) -> List[MetricSample]:
        return [
            self.registry.sample(key, getattr(stats, field), stats.container_id, stats.name)
            for key, (_help, field) in CONTAINER_METRICS.items()
        ]
