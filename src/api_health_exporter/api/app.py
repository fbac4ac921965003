from __future__ import annotations

from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from pydantic import BaseModel, Field

from api_health_exporter import __version__
from api_health_exporter.metrics.registry import HealthMetrics
from api_health_exporter.monitoring.reconciler import Reconciler
from api_health_exporter.utils.logger import logger

SHUTDOWN_TIMEOUT_SEC = 10.0


class Target(BaseModel):
    name: str = Field(..., description="Service name from the inventory")
    ip: str = Field(..., description="Address being probed")


def create_app(metrics: HealthMetrics, reconciler: Optional[Reconciler] = None) -> FastAPI:
    """
    Build the exporter's HTTP application.

    When a reconciler is given it is started with the server and stopped
    (cancelling every prober) when the server shuts down.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if reconciler is not None:
            reconciler.start()
        try:
            yield
        finally:
            if reconciler is not None:
                logger.info("Shutting down, cancelling all probers...")
                await run_in_threadpool(reconciler.stop, timeout=SHUTDOWN_TIMEOUT_SEC)

    app = FastAPI(title="API Health Exporter", version=__version__, lifespan=lifespan)

    @app.get("/health")
    def health():
        """Basic health check - just returns OK if the service is running"""
        return {"status": "OK"}

    @app.get("/metrics")
    def scrape():
        return Response(content=metrics.render(), media_type=metrics.content_type)

    @app.get("/targets", response_model=List[Target])
    def targets():
        """Endpoints currently being probed."""
        if reconciler is None:
            return []
        return [Target(name=name, ip=ip) for name, ip in sorted(reconciler.snapshot().items())]

    return app
