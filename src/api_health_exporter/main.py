"""
Main entry point for the API health exporter.

This module wires the metrics registry, the reconciler and the HTTP server
together and serves until interrupted.
"""

from __future__ import annotations

from typing import Optional

import uvicorn

from api_health_exporter import config
from api_health_exporter.api.app import create_app
from api_health_exporter.metrics.registry import HealthMetrics
from api_health_exporter.monitoring.reconciler import Reconciler
from api_health_exporter.utils.logger import logger


def build_app():
    """Create the application with a fresh registry and reconciler."""
    metrics = HealthMetrics()
    reconciler = Reconciler(metrics)
    return create_app(metrics, reconciler)


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """
    Serve ``/metrics`` and run the reconciler until SIGINT/SIGTERM.

    uvicorn exits the process if the port cannot be bound.
    """
    if host is None:
        host = config.METRICS_HOST
    if port is None:
        port = config.METRICS_PORT

    logger.info(
        f"Exporter is running on {host}:{port} "
        f"(namespace={config.NAMESPACE}, reconcile={config.RECONCILE_INTERVAL_SEC}s, "
        f"probe={config.PROBE_INTERVAL_SEC}s)"
    )
    uvicorn.run(build_app(), host=host, port=port, log_level="info", access_log=False)


if __name__ == "__main__":
    run()
