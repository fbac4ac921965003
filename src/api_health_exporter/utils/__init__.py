"""
Utilities module for the API health exporter.

This module provides common utilities like logging configuration.
"""

from __future__ import annotations

from api_health_exporter.utils.logger import get_logger, logger

__all__ = ["get_logger", "logger"]
