"""
Pytest configuration and shared fixtures
"""
import os
import tempfile
from unittest.mock import MagicMock

import pytest

from podman_exporter.collector import PodmanCollector
from podman_exporter.models import ContainerStatsReport, RuntimeVersionInfo
from podman_exporter.podman_client import CONTAINER_STATS_PATH, VERSION_PATH
from tests.fixtures.podman_socket import FakePodmanServer
from tests.fixtures.sample_data import stats_payload, version_payload


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as talking HTTP to a fake podman socket"
    )


@pytest.fixture
def podman_server():
    """Fake Podman API listening on a temporary Unix socket, preloaded with one container."""
    server = FakePodmanServer()
    server.set_json(VERSION_PATH, version_payload())
    server.set_json(CONTAINER_STATS_PATH, stats_payload())
    server.start()
    yield server
    server.stop()


@pytest.fixture
def dead_socket_path():
    """Path to a regular file standing in for a socket nobody listens on."""
    tmpdir = tempfile.mkdtemp(prefix="podman-", dir="/tmp")
    path = os.path.join(tmpdir, "badsocket.sock")
    open(path, "w").close()
    yield path
    os.remove(path)
    os.rmdir(tmpdir)


@pytest.fixture
def mock_client():
    """API client mock answering with the sample version and one container."""
    client = MagicMock()
    client.version.return_value = RuntimeVersionInfo.model_validate(version_payload())
    client.container_stats.return_value = ContainerStatsReport.model_validate(stats_payload())
    return client


@pytest.fixture
def collector(mock_client):
    """Collector wired to the mock client."""
    return PodmanCollector(client=mock_client)
