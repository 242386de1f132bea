"""
Podman Exporter for Prometheus

Polls the Podman REST API over its local Unix socket and republishes the
runtime version and per-container resource statistics as Prometheus metrics.
"""

__version__ = "1.0.0"
