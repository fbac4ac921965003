"""
Runtime constants for the API health exporter.

Polling and reconciliation cadence are fixed. Only deployment details
(namespace, kubectl binary, bind address) can be overridden from the
environment.
"""

from __future__ import annotations

import os

# Probing
PROBE_INTERVAL_SEC = 30
PROBE_TIMEOUT_SEC = 5.0
PROBE_PORT = 6443

# Reconciliation
RECONCILE_INTERVAL_SEC = 60

# Inventory
NAMESPACE = os.getenv("EXPORTER_NAMESPACE", "kamaji-tcp")
KUBECTL_BIN = os.getenv("EXPORTER_KUBECTL", "kubectl")
INVENTORY_TIMEOUT_SEC = float(os.getenv("EXPORTER_INVENTORY_TIMEOUT_SECONDS", "30"))

# Metrics server
METRICS_HOST = os.getenv("EXPORTER_HOST", "0.0.0.0")
METRICS_PORT = int(os.getenv("EXPORTER_PORT", "8080"))
