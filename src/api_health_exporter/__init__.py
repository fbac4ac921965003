"""
API Health Exporter - Prometheus exporter for cluster API endpoint reachability.

This package provides:
- Endpoint discovery from ``kubectl get service``
- One prober thread per endpoint, started and stopped by a reconciliation loop
- An ``api_health_status`` gauge served over HTTP on ``/metrics``
"""

from __future__ import annotations

__version__ = "1.0.0"

from api_health_exporter.errors import ExporterError, InventoryUnavailable, ProbeFailure
from api_health_exporter.metrics.registry import HealthMetrics
from api_health_exporter.monitoring.reconciler import Reconciler
from api_health_exporter.utils.logger import get_logger

__all__ = [
    "ExporterError",
    "HealthMetrics",
    "InventoryUnavailable",
    "ProbeFailure",
    "Reconciler",
    "get_logger",
    "__version__",
]
