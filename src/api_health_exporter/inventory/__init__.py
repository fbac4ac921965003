"""
Inventory module for the API health exporter.

This module discovers the endpoints to monitor from the cluster.
"""

from __future__ import annotations

from api_health_exporter.errors import InventoryUnavailable
from api_health_exporter.inventory.kubectl import list_endpoints, parse_service_table

__all__ = ["InventoryUnavailable", "list_endpoints", "parse_service_table"]
