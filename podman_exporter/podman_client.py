"""
Podman API client for collecting container statistics.

This module issues the two requests a scrape needs against the Podman v3
REST API and turns the JSON bodies into typed records.
"""

import json
import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError
from urllib3.exceptions import ReadTimeoutError

from podman_exporter.errors import (
    BodyReadError,
    ConnectError,
    DecodeError,
    FetchTimeout,
    HTTPStatusError,
)
from podman_exporter.models import ContainerStatsReport, RuntimeVersionInfo
from podman_exporter.transport import BASE_URL, SocketTransport

logger = logging.getLogger(__name__)

VERSION_PATH = "/v3.0.0/libpod/version"
CONTAINER_STATS_PATH = "/v3.0.0/libpod/containers/stats"


def _is_read_timeout(error: requests.exceptions.RequestException) -> bool:
    if isinstance(error, requests.exceptions.Timeout):
        return True
    return any(isinstance(arg, ReadTimeoutError) for arg in error.args)


class PodmanAPIClient:
    """Reads version and container stats from the Podman socket."""

    def __init__(self, transport: SocketTransport):
        self.transport = transport

    def fetch(self, path: str, query: Optional[Dict[str, str]] = None) -> Any:
        """
        GET a Podman API path and return the decoded JSON body.

        Args:
            path: API path, e.g. ``/v3.0.0/libpod/version``.
            query: Optional query string parameters.

        Returns:
            The parsed JSON document.

        Raises:
            FetchTimeout: The socket did not answer in time.
            ConnectError: The socket could not be reached.
            HTTPStatusError: Podman answered with a status other than 200.
            BodyReadError: The body could not be read.
            DecodeError: The body is not valid JSON.
        """
        url = BASE_URL + path
        headers = {"Content-Type": "application/json"}

        with self.transport.open() as session:
            try:
                response = session.get(
                    url,
                    params=query,
                    headers=headers,
                    timeout=self.transport.timeout,
                    stream=True,
                )
            except requests.exceptions.Timeout as e:
                logger.error(f"Timed out making request to podman socket: url={url} err={e}")
                raise FetchTimeout(str(e), url=url) from e
            except requests.exceptions.RequestException as e:
                logger.error(f"Failed to make request to podman socket: url={url} err={e}")
                raise ConnectError(str(e), url=url) from e

            with response:
                logger.debug(f"Podman socket request done: url={url} status_code={response.status_code}")
                if response.status_code != 200:
                    logger.error(
                        f"Did not get successful response from podman socket: "
                        f"url={url} status_code={response.status_code}"
                    )
                    raise HTTPStatusError(response.status_code, url=url)

                try:
                    body = response.content
                except requests.exceptions.RequestException as e:
                    # A stalled body surfaces as ConnectionError wrapping urllib3's ReadTimeoutError
                    if _is_read_timeout(e):
                        logger.error(f"Timed out reading response from podman socket: url={url} err={e}")
                        raise FetchTimeout(str(e), url=url) from e
                    logger.error(f"Failed to read response from podman socket: url={url} err={e}")
                    raise BodyReadError(str(e), url=url) from e

        try:
            return json.loads(body)
        except ValueError as e:
            logger.error(f"Failed to unmarshal json from podman response: url={url} err={e}")
            raise DecodeError(str(e), url=url) from e

    def version(self) -> RuntimeVersionInfo:
        """Fetch the Podman version report."""
        payload = self.fetch(VERSION_PATH)
        return self._validate(RuntimeVersionInfo, payload, VERSION_PATH)

    def container_stats(self) -> ContainerStatsReport:
        """Fetch a single, non-streaming stats snapshot for all running containers."""
        payload = self.fetch(CONTAINER_STATS_PATH, {"stream": "false"})
        report = self._validate(ContainerStatsReport, payload, CONTAINER_STATS_PATH)
        if report.error:
            logger.warning(f"Podman reported a stats error: {report.error}")
        logger.debug(f"Received stats for {len(report.stats)} containers")
        return report

    def _validate(self, model, payload: Any, path: str):
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Unexpected response schema from podman socket: path={path} err={e}")
            raise DecodeError(str(e), url=BASE_URL + path) from e
