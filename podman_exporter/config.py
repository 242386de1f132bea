"""
Configuration for the Podman exporter
"""
import os
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVELS = ('debug', 'info', 'warn', 'error')


class ExporterConfig(BaseModel):
    """Exporter settings, defaulting to environment variables"""

    # Defaults come from the environment, so they are validated like inputs
    model_config = ConfigDict(validate_default=True)

    # Podman API
    podman_socket: str = Field(
        default_factory=lambda: os.getenv('PODMAN_SOCKET', '/var/run/podman/podman.sock')
    )
    podman_timeout: float = Field(
        default_factory=lambda: os.getenv('PODMAN_TIMEOUT', '10')
    )

    # HTTP server
    web_listen_address: str = Field(
        default_factory=lambda: os.getenv('WEB_LISTEN_ADDRESS', ':9101')
    )
    web_metrics_path: str = Field(
        default_factory=lambda: os.getenv('WEB_METRICS_PATH', '/metrics')
    )

    # Logging
    log_level: str = Field(
        default_factory=lambda: os.getenv('LOG_LEVEL', 'info')
    )

    @field_validator('podman_timeout')
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError('podman_timeout must be greater than zero')
        return v

    @field_validator('web_metrics_path')
    @classmethod
    def absolute_metrics_path(cls, v: str) -> str:
        if not v.startswith('/'):
            raise ValueError('web_metrics_path must start with /')
        return v

    @field_validator('log_level')
    @classmethod
    def known_log_level(cls, v: str) -> str:
        v = v.lower()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v

    def listen_host_port(self) -> Tuple[str, int]:
        """
        Split the listen address into host and port.

        An empty host (``:9101``) means all interfaces.

        Returns:
            (host, port) tuple
        """
        host, sep, port = self.web_listen_address.rpartition(':')
        if not sep or not port.isdigit():
            raise ValueError(f"invalid listen address: {self.web_listen_address}")
        host = host.strip('[]') or '0.0.0.0'
        return host, int(port)
