from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional

from api_health_exporter import config
from api_health_exporter.errors import InventoryUnavailable
from api_health_exporter.inventory.kubectl import list_endpoints as kubectl_list_endpoints
from api_health_exporter.metrics.registry import HealthMetrics
from api_health_exporter.monitoring.prober import EndpointProber
from api_health_exporter.utils.logger import logger

ProberFactory = Callable[[str, str, HealthMetrics, threading.Event], EndpointProber]


@dataclass
class ProberHandle:
    """Cancellation handle and thread of one running prober."""

    name: str
    address: str
    cancel: threading.Event
    thread: threading.Thread

    def stop(self) -> None:
        self.cancel.set()


@dataclass
class ReconcileResult:
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


class Reconciler:
    """
    Keeps one prober running per endpoint reported by the inventory.

    The monitored set (name -> ProberHandle) is owned here and only mutated
    under ``self._lock``. Probers only ever see their own cancel event.
    """

    def __init__(
        self,
        metrics: HealthMetrics,
        list_endpoints: Callable[[], Mapping[str, str]] = kubectl_list_endpoints,
        prober_factory: ProberFactory = EndpointProber,
        interval: float = config.RECONCILE_INTERVAL_SEC,
    ) -> None:
        self.metrics = metrics
        self.interval = interval
        self._list_endpoints = list_endpoints
        self._prober_factory = prober_factory
        self._lock = threading.Lock()
        self._monitored: Dict[str, ProberHandle] = {}
        self._stop = threading.Event()
        self._thr: Optional[threading.Thread] = None

    def snapshot(self) -> Dict[str, str]:
        """Currently monitored endpoints as name -> address."""
        with self._lock:
            return {name: h.address for name, h in self._monitored.items()}

    def handle(self, name: str) -> Optional[ProberHandle]:
        with self._lock:
            return self._monitored.get(name)

    def _spawn(self, name: str, address: str) -> ProberHandle:
        cancel = threading.Event()
        prober = self._prober_factory(name, address, self.metrics, cancel)
        thr = threading.Thread(target=prober.run, name=f"prober-{name}", daemon=True)
        handle = ProberHandle(name=name, address=address, cancel=cancel, thread=thr)
        thr.start()
        return handle

    def apply(self, endpoints: Mapping[str, str]) -> ReconcileResult:
        """Diff ``endpoints`` against the monitored set and start/stop probers."""
        result = ReconcileResult()
        with self._lock:
            if self._stop.is_set():
                logger.info("Reconciler stopping; ignoring inventory snapshot")
                return result
            for name in list(self._monitored):
                if name not in endpoints:
                    self._monitored.pop(name).stop()
                    result.removed.append(name)

            for name, address in endpoints.items():
                current = self._monitored.get(name)
                if current is None:
                    self._monitored[name] = self._spawn(name, address)
                    result.added.append(name)
                elif current.address != address:
                    logger.warning(
                        f"Address of {name} changed from {current.address} to {address}; "
                        f"still probing {current.address}"
                    )

        if result.changed:
            logger.info(f"Reconciled endpoints: added={sorted(result.added)} removed={sorted(result.removed)}")
        return result

    def reconcile_once(self) -> Optional[ReconcileResult]:
        """One cycle: read the inventory and apply it. Returns None on inventory failure."""
        try:
            endpoints = self._list_endpoints()
        except InventoryUnavailable as e:
            logger.warning(f"Error getting service IPs: {e}")
            return None
        return self.apply(endpoints)

    def run_forever(self) -> None:
        logger.info(f"Reconciler starting: interval={self.interval}s")
        while not self._stop.is_set():
            try:
                self.reconcile_once()
            except Exception as e:
                logger.exception(f"Reconciler loop error: {e}")
            self._stop.wait(self.interval)
        logger.info("Reconciler stopped")

    def start(self) -> None:
        if self._thr and self._thr.is_alive():
            return
        self._stop.clear()
        self._thr = threading.Thread(target=self.run_forever, name="reconciler", daemon=True)
        self._thr.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the loop, cancel every prober and wait for their cleanup."""
        self._stop.set()
        if self._thr and self._thr is not threading.current_thread():
            self._thr.join(timeout)

        with self._lock:
            handles = list(self._monitored.values())
            self._monitored.clear()

        for h in handles:
            h.stop()
        for h in handles:
            h.thread.join(timeout)
        logger.info(f"Stopped {len(handles)} probers")
