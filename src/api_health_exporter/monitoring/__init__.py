"""
Monitoring module for the API health exporter.

This module runs the per-endpoint probers and the reconciliation loop that
starts and stops them.
"""

from __future__ import annotations

from api_health_exporter.monitoring.prober import EndpointProber, ProbeResult
from api_health_exporter.monitoring.reconciler import ProberHandle, ReconcileResult, Reconciler

__all__ = ["EndpointProber", "ProbeResult", "ProberHandle", "ReconcileResult", "Reconciler"]
