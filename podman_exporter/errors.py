"""
Exceptions raised by the Podman exporter.

Only SocketUnavailable is meant to reach the process boundary. Every
FetchError subclass is a scrape-time failure that the collector turns into
podman_up 0.
"""

from typing import Optional


class PodmanExporterError(Exception):
    """Base class for all exporter errors."""


class SocketUnavailable(PodmanExporterError):
    """The configured Podman socket path does not exist."""

    def __init__(self, socket_path: str):
        self.socket_path = socket_path
        super().__init__(f"podman socket not found at {socket_path}")


class FetchError(PodmanExporterError):
    """A single request against the Podman API failed."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class ConnectError(FetchError):
    """The socket could not be reached while making a request."""


class FetchTimeout(FetchError):
    """The socket did not answer within the configured timeout."""


class HTTPStatusError(FetchError):
    """Podman answered with anything other than 200 OK."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        self.status_code = status_code
        super().__init__(
            f"did not get successful response from podman socket: {status_code}",
            url=url,
        )


class BodyReadError(FetchError):
    """The response body could not be read to completion."""


class DecodeError(FetchError):
    """The response body is not valid JSON or does not match the expected schema."""
