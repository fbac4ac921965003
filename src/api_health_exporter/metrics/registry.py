from __future__ import annotations

from typing import Dict, Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Gauge, generate_latest

from api_health_exporter.utils.logger import logger

METRIC_NAME = "api_health_status"
METRIC_HELP = "Status of the API (1 for healthy, 0 for unhealthy)"

HEALTHY = 1
UNHEALTHY = 0


class HealthMetrics:
    """
    Gauge of endpoint reachability keyed by ``(name, ip)``.

    Each instance owns its own ``CollectorRegistry`` so tests and embedded
    servers do not share state through the global default registry. The
    underlying prometheus_client gauge is safe for concurrent writers and a
    concurrent scrape.

    Example:
        metrics = HealthMetrics()
        metrics.set_status("svc1", "1.2.3.4", HEALTHY)
        body = metrics.render()
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self.status = Gauge(
            METRIC_NAME,
            METRIC_HELP,
            ["name", "ip"],
            registry=self.registry,
        )

    def set_status(self, name: str, address: str, value: int) -> None:
        """Record the latest probe outcome, overwriting the previous one."""
        if value not in (HEALTHY, UNHEALTHY):
            raise ValueError(f"health status must be 0 or 1, got {value!r}")
        self.status.labels(name=name, ip=address).set(value)

    def remove_status(self, name: str, address: str) -> None:
        """Drop the series for ``(name, address)``; unknown pairs are ignored."""
        try:
            self.status.remove(name, address)
        except KeyError:
            logger.debug(f"No metric to remove for {name} ({address})")

    def get_status(self, name: str, address: str) -> Optional[float]:
        """Current value for ``(name, address)`` or None when absent."""
        return self.registry.get_sample_value(METRIC_NAME, {"name": name, "ip": address})

    def snapshot(self) -> Dict[tuple, float]:
        """All current samples as ``{(name, ip): value}``."""
        out: Dict[tuple, float] = {}
        for family in self.registry.collect():
            if family.name != METRIC_NAME:
                continue
            for sample in family.samples:
                out[(sample.labels["name"], sample.labels["ip"])] = sample.value
        return out

    def render(self) -> bytes:
        """Prometheus text exposition of every current sample."""
        return generate_latest(self.registry)
