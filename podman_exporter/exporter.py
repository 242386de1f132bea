"""
Main Podman Exporter application.

This module implements the HTTP server that exposes Podman container
statistics in Prometheus format. Every request to the metrics endpoint runs
a fresh scrape against the Podman socket.
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from dotenv import load_dotenv
from flask import Flask, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import ValidationError

from podman_exporter import __version__
from podman_exporter.collector import PodmanCollector
from podman_exporter.config import LOG_LEVELS, ExporterConfig
from podman_exporter.errors import SocketUnavailable
from podman_exporter.exposition import build_registry

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

SPLASH_PAGE = """<html>
<head><title>Podman Exporter</title></head>
<body>
<h1>Podman Exporter</h1>
<p><a href='{metrics_path}'>Metrics</a></p>
</body>
</html>
"""


def configure_logging(level: str = 'info'):
    """Configure root logging to stdout at the given level name."""
    numeric_level = logging.WARNING if level == 'warn' else getattr(logging, level.upper())
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ],
        force=True,
    )


def create_app(collector: PodmanCollector, metrics_path: str = '/metrics') -> Flask:
    """
    Create the Flask application serving the exporter endpoints.

    Args:
        collector: Collector scraped on every metrics request
        metrics_path: Path of the metrics endpoint

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    registry = build_registry(collector)

    @app.route(metrics_path)
    def metrics_endpoint():
        """Prometheus metrics endpoint."""
        return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)

    @app.route('/')
    def root():
        """Splash page pointing at the metrics endpoint."""
        return Response(SPLASH_PAGE.format(metrics_path=metrics_path), mimetype='text/html')

    return app


class PodmanMetricsExporter:
    """Main exporter class that wires the collector into the HTTP server."""

    def __init__(self, config: ExporterConfig):
        """
        Initialize the Podman metrics exporter.

        Args:
            config: Exporter configuration

        Raises:
            SocketUnavailable: If the configured Podman socket does not exist
        """
        self.config = config
        self.collector = PodmanCollector(config.podman_socket, timeout=config.podman_timeout)
        self.app = create_app(self.collector, config.web_metrics_path)

        # Register signal handlers for graceful shutdown
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals."""
        logger.info(f"Received signal {signum}, shutting down gracefully...")
        sys.exit(0)

    def start(self):
        """Start the HTTP server. Blocks until the server stops."""
        host, port = self.config.listen_host_port()
        logger.info(f"Listening on address {host}:{port}")
        self.app.run(host=host, port=port, threaded=True)


def parse_args(argv: Optional[List[str]] = None) -> ExporterConfig:
    """
    Parse command line flags on top of the environment defaults.

    Args:
        argv: Argument list, defaults to sys.argv[1:]

    Returns:
        Validated ExporterConfig
    """
    # Raw environment values; argparse converts them and validation runs once
    # flags are merged in, so bad values surface as usage errors
    defaults = ExporterConfig.model_construct()

    parser = argparse.ArgumentParser(
        prog='podman_exporter',
        description='Prometheus exporter for Podman container statistics'
    )
    parser.add_argument(
        '--web.listen-address',
        dest='web_listen_address',
        default=defaults.web_listen_address,
        help='Address to listen on for web interface and telemetry (default: %(default)s)'
    )
    parser.add_argument(
        '--web.metrics-path',
        dest='web_metrics_path',
        default=defaults.web_metrics_path,
        help='Path under which to expose metrics (default: %(default)s)'
    )
    parser.add_argument(
        '--podman.socket',
        dest='podman_socket',
        default=defaults.podman_socket,
        help='Path to the podman socket to scrape (default: %(default)s)'
    )
    parser.add_argument(
        '--podman.timeout',
        dest='podman_timeout',
        type=float,
        default=defaults.podman_timeout,
        help='Timeout in seconds for each request to the podman socket (default: %(default)s)'
    )
    parser.add_argument(
        '--log.level',
        dest='log_level',
        choices=LOG_LEVELS,
        default=defaults.log_level,
        help='Only log messages with the given severity or above (default: %(default)s)'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'podman_exporter {__version__}'
    )

    args = parser.parse_args(argv)
    try:
        return ExporterConfig(**vars(args))
    except ValidationError as e:
        parser.error(str(e))


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    load_dotenv()
    config = parse_args(argv)
    configure_logging(config.log_level)

    logger.info(f"Starting podman_exporter v{__version__}")
    logger.info(
        f"Configuration: podman_socket={config.podman_socket}, "
        f"timeout={config.podman_timeout}s, metrics_path={config.web_metrics_path}"
    )

    try:
        exporter = PodmanMetricsExporter(config)
    except SocketUnavailable as e:
        logger.error(f"Failed to initialize podman collector: {e}")
        logger.error("Make sure the podman socket is enabled and mounted")
        sys.exit(1)

    try:
        exporter.start()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except Exception as e:
        logger.error(f"Error starting HTTP server: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
