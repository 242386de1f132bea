"""
Unix socket transport for the Podman REST API.

Requests are addressed to the synthetic host ``http://unix`` and routed to the
Podman socket through the Docker SDK's Unix socket adapter. Every call to
``SocketTransport.open`` builds a fresh adapter, so each exchange gets its own
connection and nothing is shared between concurrent scrapes.
"""

import logging
import os
from contextlib import contextmanager
from typing import Iterator

import requests
from docker.transport import UnixHTTPAdapter

from podman_exporter.errors import SocketUnavailable

logger = logging.getLogger(__name__)

BASE_URL = "http://unix"

# Podman is local, compression only costs CPU on both ends
DEFAULT_HEADERS = {
    "Accept-Encoding": "identity",
}


class SocketTransport:
    """Connection factory bound to a single Podman socket path."""

    def __init__(self, socket_path: str, timeout: float):
        """
        Validate the socket path and remember the connection settings.

        Args:
            socket_path: Filesystem path of the Podman API socket.
            timeout: Seconds to wait when connecting and reading.

        Raises:
            SocketUnavailable: If nothing exists at socket_path.
        """
        if not os.path.exists(socket_path):
            logger.error(f"Podman socket {socket_path} does not exist")
            raise SocketUnavailable(socket_path)

        self.socket_path = socket_path
        self.timeout = timeout

    @contextmanager
    def open(self) -> Iterator[requests.Session]:
        """
        Open a session whose ``http://unix/`` requests go to the Podman socket.

        The underlying adapter, and with it the connection, is closed when the
        context exits.
        """
        adapter = UnixHTTPAdapter(
            "http+unix://" + self.socket_path,
            timeout=self.timeout,
            pool_connections=1,
            max_pool_size=1,
        )
        session = requests.Session()
        session.trust_env = False
        session.headers.update(DEFAULT_HEADERS)
        session.mount(BASE_URL + "/", adapter)
        try:
            yield session
        finally:
            session.close()
