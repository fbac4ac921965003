from __future__ import annotations

import ipaddress
import threading
from dataclasses import dataclass
from typing import Optional

import httpx

from api_health_exporter import config
from api_health_exporter.errors import ProbeFailure
from api_health_exporter.metrics.registry import HEALTHY, UNHEALTHY, HealthMetrics
from api_health_exporter.utils.logger import logger


def probe_url(address: str, port: int = config.PROBE_PORT) -> str:
    host = address
    try:
        if ipaddress.ip_address(address).version == 6:
            host = f"[{address}]"
    except ValueError:
        pass  # hostname or malformed, left to httpx
    return f"https://{host}:{port}"


def build_client(timeout: float = config.PROBE_TIMEOUT_SEC) -> httpx.Client:
    """
    HTTP client used for probes.

    Certificate verification is disabled: the targets are tenant control
    planes serving self-signed certificates, and the probe only measures
    reachability.
    """
    return httpx.Client(verify=False, timeout=timeout, follow_redirects=False)


@dataclass(frozen=True)
class ProbeResult:
    healthy: bool
    status_code: Optional[int] = None
    error: Optional[ProbeFailure] = None

    @property
    def value(self) -> int:
        return HEALTHY if self.healthy else UNHEALTHY


class EndpointProber:
    """
    Polls one endpoint until its cancel event is set.

    Any HTTP response counts as healthy whatever its status code; transport
    errors count as unhealthy. The prober thread is the only writer of its
    ``(name, address)`` series and removes it on the way out, so nothing is
    written for the pair after cancellation has been acknowledged.
    """

    def __init__(
        self,
        name: str,
        address: str,
        metrics: HealthMetrics,
        cancel: threading.Event,
        interval: float = config.PROBE_INTERVAL_SEC,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.name = name
        self.address = address
        self.metrics = metrics
        self.cancel = cancel
        self.interval = interval
        self.url = probe_url(address)
        self._client = client if client is not None else build_client()

    def probe_once(self) -> ProbeResult:
        """Issue a single request against the endpoint; no retries."""
        try:
            resp = self._client.get(self.url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return ProbeResult(healthy=False, error=ProbeFailure(self.name, self.address, e))
        return ProbeResult(healthy=True, status_code=resp.status_code)

    def _record(self, result: ProbeResult) -> None:
        self.metrics.set_status(self.name, self.address, result.value)
        if result.healthy:
            logger.info(f"Successfully connected to {self.name} ({self.address}), status code: {result.status_code}")
        else:
            logger.warning(f"Error connecting to {result.error}")

    def run(self) -> None:
        logger.info(f"Starting monitoring for {self.name} ({self.address})")
        try:
            # wait() returns True once cancelled, which beats a due tick
            while not self.cancel.wait(self.interval):
                result = self.probe_once()
                if self.cancel.is_set():
                    break
                self._record(result)
        finally:
            self.metrics.remove_status(self.name, self.address)
            self._client.close()
            logger.info(f"Stopping monitoring for {self.name} ({self.address})")
