"""
Metrics module for the API health exporter.

This module holds the Prometheus gauge published on ``/metrics``.
"""

from __future__ import annotations

from api_health_exporter.metrics.registry import HEALTHY, METRIC_NAME, UNHEALTHY, HealthMetrics

__all__ = ["HEALTHY", "METRIC_NAME", "UNHEALTHY", "HealthMetrics"]
