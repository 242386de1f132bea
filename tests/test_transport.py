"""
Tests for the Unix socket transport
"""
import pytest
from docker.transport import UnixHTTPAdapter

from podman_exporter.errors import SocketUnavailable
from podman_exporter.transport import BASE_URL, SocketTransport


class TestSocketTransport:
    """Test SocketTransport construction and sessions"""

    def test_missing_socket_raises(self):
        """Test that a nonexistent socket path is rejected up front"""
        with pytest.raises(SocketUnavailable) as exc_info:
            SocketTransport("/tmp/doesnt_exist.sock", timeout=5)

        assert exc_info.value.socket_path == "/tmp/doesnt_exist.sock"
        assert "/tmp/doesnt_exist.sock" in str(exc_info.value)

    def test_existing_path_accepted(self, dead_socket_path):
        """Test that construction only checks the path exists"""
        transport = SocketTransport(dead_socket_path, timeout=2.5)

        assert transport.socket_path == dead_socket_path
        assert transport.timeout == 2.5

    def test_open_routes_unix_host_to_socket(self, dead_socket_path):
        """Test that the session sends http://unix requests to the socket"""
        transport = SocketTransport(dead_socket_path, timeout=2.5)

        with transport.open() as session:
            adapter = session.get_adapter(BASE_URL + "/v3.0.0/libpod/version")

            assert isinstance(adapter, UnixHTTPAdapter)
            assert adapter.socket_path == dead_socket_path
            assert adapter.timeout == 2.5

    def test_open_disables_compression_and_env(self, dead_socket_path):
        """Test session defaults"""
        transport = SocketTransport(dead_socket_path, timeout=1)

        with transport.open() as session:
            assert session.headers["Accept-Encoding"] == "identity"
            assert session.trust_env is False

    def test_each_open_uses_fresh_adapter(self, dead_socket_path):
        """Test that no connection state is shared between sessions"""
        transport = SocketTransport(dead_socket_path, timeout=1)

        with transport.open() as first, transport.open() as second:
            first_adapter = first.get_adapter(BASE_URL + "/")
            second_adapter = second.get_adapter(BASE_URL + "/")

        assert first_adapter is not second_adapter

    @pytest.mark.integration
    def test_request_reaches_socket(self, podman_server):
        """Test a real HTTP exchange over the socket"""
        transport = SocketTransport(podman_server.socket_path, timeout=5)

        with transport.open() as session:
            response = session.get(BASE_URL + "/v3.0.0/libpod/version", timeout=5)
            payload = response.json()

        assert response.status_code == 200
        assert payload["Version"] == "3.4.2"

        path, headers = podman_server.requests[-1]
        assert path == "/v3.0.0/libpod/version"
        assert headers["Accept-Encoding"] == "identity"
