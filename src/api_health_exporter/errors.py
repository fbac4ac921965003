from __future__ import annotations

from typing import Optional


class ExporterError(Exception):
    """Base class for errors raised by the exporter."""


class InventoryUnavailable(ExporterError):
    """The inventory command could not be run or exited abnormally."""


class ProbeFailure(ExporterError):
    """A single health probe could not reach its endpoint."""

    def __init__(self, name: str, address: str, cause: Optional[BaseException] = None) -> None:
        self.name = name
        self.address = address
        self.cause = cause
        detail = f"{type(cause).__name__}: {cause}" if cause is not None else "unreachable"
        super().__init__(f"{name} ({address}): {detail}")
