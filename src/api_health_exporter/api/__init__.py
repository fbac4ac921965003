"""
API module for the API health exporter.

This module provides the FastAPI application serving ``/metrics``.
"""

from __future__ import annotations

from api_health_exporter.api.app import create_app

__all__ = ["create_app", "run_server"]


def run_server(host: str | None = None, port: int | None = None) -> None:
    """Run the exporter server."""
    from api_health_exporter.main import run

    run(host=host, port=port)
