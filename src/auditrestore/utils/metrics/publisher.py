"""
Prometheus HTTP endpoint for restore metrics.
"""

import logging

from prometheus_client import REGISTRY, CollectorRegistry, start_http_server

logger = logging.getLogger(__name__)


class MetricsPublisher:
    """
    Exposes a registry on /metrics while a restore runs

    Args:
        port: Port to expose metrics on
        registry: Prometheus registry (default: global REGISTRY)
    """

    def __init__(self, port: int = 9091, registry: CollectorRegistry | None = None):
        self.port = port
        self.registry = registry or REGISTRY
        self._server_started = False

    def start(self) -> None:
        """
        Start the metrics HTTP server

        A second call is a no-op.

        Raises:
            RuntimeError: If the port cannot be bound
        """
        if self._server_started:
            logger.warning(f"Metrics server already running on port {self.port}")
            return

        try:
            start_http_server(self.port, registry=self.registry)
        except OSError as e:
            raise RuntimeError(
                f"Metrics server port {self.port} is unavailable: {e}"
            ) from e

        self._server_started = True
        logger.info(f"Metrics server started on port {self.port}")

    def is_started(self) -> bool:
        """Check if the metrics server is running"""
        return self._server_started
