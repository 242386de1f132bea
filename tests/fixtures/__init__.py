"""
Shared test fixtures and utilities for podman_exporter tests.

This package provides:
- sample_data: Podman API payloads modelled on a real podman 3.4 host
- podman_socket: A fake Podman REST API served over a temporary Unix socket
"""
